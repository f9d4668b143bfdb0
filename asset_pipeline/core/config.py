"""Pipeline configuration loaded from environment variables."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """
    Immutable runtime configuration.

    Built once at process start and passed into every component. Values
    come from `PIPELINE_*` environment variables or a `.env` file.
    """

    # Storage
    storage_backend: Literal["memory", "postgres"] = "memory"
    data_dir: str = "data/imports"
    rules_file: str | None = "config/pipeline_rules.yaml"
    max_file_size_mb: int = Field(default=10, ge=1)

    # PostgreSQL (used when storage_backend == "postgres")
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "assets"
    db_user: str = "pipeline"
    db_password: str | None = None
    db_min_pool: int = 2
    db_max_pool: int = 10

    # Preview and staging limits
    preview_rows: int = Field(default=10, ge=1)
    preview_value_length: int = Field(default=100, ge=1)
    raw_value_max_length: int = Field(default=200, ge=1)
    staged_preview_limit: int = Field(default=100, ge=1)

    # Validation summaries
    validation_sample_size: int = Field(default=5, ge=0)
    max_error_display: int = Field(default=20, ge=0)
    max_warning_display: int = Field(default=10, ge=0)

    # Matching
    alias_coverage_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    fuzzy_match_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    # Load
    approval_batch_size: int = Field(default=100, ge=1)
    progress_batch_size: int = Field(default=100, ge=1)
    job_retention_hours: int = Field(default=24, ge=1)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    metrics_port: int = 9108

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @property
    def rules_path(self) -> Path | None:
        return Path(self.rules_file) if self.rules_file else None
