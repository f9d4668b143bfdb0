"""
Unit tests for settings and input validation helpers.
"""

import pytest
from pydantic import ValidationError as ModelValidationError

from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.utils.validation import InputValidationError, validate_identifier, validate_limit


@pytest.mark.unit
class TestPipelineSettings:
    """Tests for PipelineSettings"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PIPELINE_STORAGE_BACKEND", raising=False)
        settings = PipelineSettings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.fuzzy_match_threshold == 0.8
        assert settings.alias_coverage_threshold == 0.5
        assert settings.max_file_size_bytes == 10 * 1024 * 1024

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PIPELINE_DATA_DIR", "/srv/imports")
        monkeypatch.setenv("PIPELINE_APPROVAL_BATCH_SIZE", "25")
        monkeypatch.setenv("PIPELINE_LOG_FORMAT", "text")
        settings = PipelineSettings(_env_file=None)
        assert settings.data_dir == "/srv/imports"
        assert str(settings.data_path) == "/srv/imports"
        assert settings.approval_batch_size == 25
        assert settings.log_format == "text"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PIPELINE_PREVIEW_ROWS=3\nPIPELINE_DB_PASSWORD=secret\n")
        settings = PipelineSettings(_env_file=str(env_file))
        assert settings.preview_rows == 3
        assert settings.db_password == "secret"

    def test_settings_are_frozen(self):
        settings = PipelineSettings(_env_file=None)
        with pytest.raises(ModelValidationError):
            settings.preview_rows = 50

    @pytest.mark.parametrize("field,value", [
        ("storage_backend", "redis"),
        ("fuzzy_match_threshold", 1.5),
        ("approval_batch_size", 0),
        ("log_format", "xml"),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ModelValidationError):
            PipelineSettings(_env_file=None, **{field: value})

    def test_rules_path_optional(self):
        assert PipelineSettings(_env_file=None, rules_file=None).rules_path is None


@pytest.mark.unit
class TestInputValidation:
    """Tests for identifier and limit validation"""

    @pytest.mark.parametrize("identifier", ["assets", "assets-2024_q1", "job_0123abcd", "v1.2"])
    def test_valid_identifiers(self, identifier):
        assert validate_identifier(f" {identifier} ") == identifier

    @pytest.mark.parametrize("identifier", ["", "   ", "../etc/passwd", "a/b", "a b", "x" * 256, "a..b"])
    def test_invalid_identifiers(self, identifier):
        with pytest.raises(InputValidationError):
            validate_identifier(identifier, "file_id")

    def test_limits(self):
        assert validate_limit(50, max_limit=500) == 50
        with pytest.raises(InputValidationError, match="positive"):
            validate_limit(0)
        with pytest.raises(InputValidationError, match="maximum of 500"):
            validate_limit(501, max_limit=500)
        with pytest.raises(InputValidationError, match="integer"):
            validate_limit(True)
