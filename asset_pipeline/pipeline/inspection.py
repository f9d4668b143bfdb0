"""
Read-only inspection of importable files: listing, raw preview,
field-mapping summary and dry-run validation.

None of these touch jobs or staging. The blocking work runs in a worker
thread so a cancelled request does not stall the event loop.
"""

import asyncio
import logging

from pydantic import Field

from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.core.models import FileInfo, MappingSummary, ValidationSummary
from asset_pipeline.core.models.base import CamelModel
from asset_pipeline.observability.logger import log_operation
from asset_pipeline.store.files import FileStore

from .clean import CleanPhase
from .transform import TransformPhase, ValidationSummaryBuilder, truncate

logger = logging.getLogger(__name__)


class FilePreview(CamelModel):
    file_id: str
    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, str]] = Field(default_factory=list)
    total_rows: int = 0
    parse_errors: list[str] = Field(default_factory=list)


class PipelineInspector:
    def __init__(
        self,
        file_store: FileStore,
        clean_phase: CleanPhase,
        transform_phase: TransformPhase,
        settings: PipelineSettings,
    ):
        self.file_store = file_store
        self.clean_phase = clean_phase
        self.transform_phase = transform_phase
        self.settings = settings

    async def list_files(self) -> list[FileInfo]:
        return await asyncio.to_thread(self.file_store.list_files)

    async def preview(self, file_id: str) -> FilePreview:
        """
        First rows of a file exactly as read, values truncated for display.

        Raises:
            NotFoundError: If the file does not exist
        """
        content = await asyncio.to_thread(self.file_store.read_csv, file_id)
        limit = self.settings.preview_value_length
        rows = [
            {header: truncate(value, limit) for header, value in row.values.items()}
            for row in content.rows[: self.settings.preview_rows]
        ]
        return FilePreview(
            file_id=file_id,
            columns=list(content.headers),
            rows=rows,
            total_rows=content.total_rows,
            parse_errors=list(content.errors),
        )

    async def field_mappings(self, file_id: str) -> MappingSummary:
        """Resolve a file's headers against the alias table."""
        content = await asyncio.to_thread(self.file_store.read_csv, file_id)
        return self.transform_phase.resolver.summarize(content.headers)

    async def validate(self, file_id: str) -> ValidationSummary:
        """
        Dry run of CLEAN and TRANSFORM over the whole file.

        Raises:
            NotFoundError: If the file does not exist
        """
        return await asyncio.to_thread(self._validate, file_id)

    def _validate(self, file_id: str) -> ValidationSummary:
        with log_operation("dry-run validation", logger=logger, file_id=file_id):
            content = self.file_store.read_csv(file_id)
            cleaned = self.clean_phase.run(content.headers, content.rows)
            builder = ValidationSummaryBuilder(
                max_errors=self.settings.max_error_display,
                max_warnings=self.settings.max_warning_display,
                sample_size=self.settings.validation_sample_size,
            )
            result = self.transform_phase.run(
                job_id=f"dry-run:{file_id}",
                headers=content.headers,
                rows=cleaned,
                summary_builder=builder,
                parse_errors=content.errors,
            )
            return result.summary
