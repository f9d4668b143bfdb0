"""
Import orchestrator: owns jobs and drives them through the phases.

start_import() returns as soon as the job is RUNNING; the phases run on
a background asyncio task and callers poll get_status() until the job is
STAGED or FAILED.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.core.csv_parser import CsvContent
from asset_pipeline.core.errors import NotFoundError, PhaseFailure, PipelineError
from asset_pipeline.core.models import (
    CleanedRow,
    FieldMapping,
    ImportJob,
    JobStatus,
    PipelinePhase,
    StagedRow,
    ValidationError,
)
from asset_pipeline.observability import metrics
from asset_pipeline.observability.logger import log_operation
from asset_pipeline.store.files import FileStore
from asset_pipeline.store.jobs import JobStore
from asset_pipeline.store.staging import StagingStore

from .clean import CleanPhase
from .extract import ExtractPhase
from .transform import TransformPhase, ValidationSummaryBuilder

logger = logging.getLogger(__name__)


class ImportOrchestrator:
    """
    Runs EXTRACT -> CLEAN -> TRANSFORM -> stage for each job.

    Jobs run concurrently on their own tasks; the phases of one job run
    in sequence. Blocking work (file reads, cleaning, transform batches)
    runs in worker threads. Any exception escaping a phase is recorded on
    the job, which then moves to FAILED.
    """

    def __init__(
        self,
        file_store: FileStore,
        job_store: JobStore,
        staging_store: StagingStore,
        extract_phase: ExtractPhase,
        clean_phase: CleanPhase,
        transform_phase: TransformPhase,
        settings: PipelineSettings,
    ):
        self.file_store = file_store
        self.job_store = job_store
        self.staging_store = staging_store
        self.extract_phase = extract_phase
        self.clean_phase = clean_phase
        self.transform_phase = transform_phase
        self.settings = settings
        self._tasks: dict[str, asyncio.Task] = {}

    async def start_import(self, file_id: str) -> ImportJob:
        """
        Create a job for `file_id` and start it in the background.

        Raises:
            NotFoundError: If the file store cannot resolve `file_id`
        """
        info = await asyncio.to_thread(self.file_store.describe, file_id)

        job = ImportJob(source_file_id=info.id)
        await self.job_store.save(job)
        job.transition(JobStatus.RUNNING, PipelinePhase.EXTRACT)
        await self.job_store.save(job)
        metrics.increment_counter(metrics.jobs_started_total)
        logger.info("Import started", extra={"job_id": job.id, "file_id": info.id})

        task = asyncio.create_task(self._run(job), name=f"import-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda _, job_id=job.id: self._tasks.pop(job_id, None))
        return job.snapshot()

    async def get_status(self, job_id: str) -> ImportJob:
        """
        Raises:
            NotFoundError: If no job has this id
        """
        job = await self.job_store.get(job_id)
        if job is None:
            raise NotFoundError("Import job", job_id)
        return job

    async def list_jobs(self, limit: int = 50) -> list[ImportJob]:
        return await self.job_store.list_recent(limit)

    async def wait_for(self, job_id: str, timeout: float | None = None) -> ImportJob:
        """Wait until the job's background task finishes, then return its status."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.wait_for(asyncio.shield(task), timeout)
        return await self.get_status(job_id)

    async def shutdown(self) -> None:
        """Cancel running imports; interrupted jobs are marked FAILED."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def cleanup_finished_jobs(self, older_than_hours: int | None = None) -> list[str]:
        """
        Delete COMPLETED/FAILED jobs (and their staged rows) older than the cutoff.

        Returns:
            Ids of the deleted jobs
        """
        hours = self.settings.job_retention_hours if older_than_hours is None else older_than_hours
        cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)
        deleted = await self.job_store.delete_finished_before(cutoff)
        for job_id in deleted:
            await self.staging_store.clear(job_id)
        logger.info("Finished jobs cleaned up", extra={"deleted": len(deleted), "older_than_hours": hours})
        return deleted

    async def _run(self, job: ImportJob) -> None:
        try:
            content: CsvContent = await self._run_phase(
                job, self.extract_phase.phase, self.extract_phase.run, job.source_file_id
            )
            job.progress.total_rows = content.total_rows
            for message in content.errors:
                job.record_error(message)

            cleaned: list[CleanedRow] = await self._run_phase(
                job, self.clean_phase.phase, self.clean_phase.run, content.headers, content.rows
            )

            staged = await self._transform(job, content, cleaned)
            staged_count = await self.staging_store.stage(job, staged)
            metrics.set_gauge(metrics.staged_rows, staged_count)

            job.transition(JobStatus.STAGED)
            await self.job_store.save(job)
            metrics.increment_counter(metrics.jobs_finished_total, status=JobStatus.STAGED.value)
            logger.info(
                "Import staged",
                extra={"job_id": job.id, "valid_rows": job.valid_rows, "invalid_rows": job.invalid_rows},
            )
        except asyncio.CancelledError:
            await self._fail(job, "Import interrupted before staging completed")
            raise
        except PipelineError as e:
            await self._fail(job, str(e))
        except Exception as e:
            logger.exception("Unexpected import failure", extra={"job_id": job.id})
            await self._fail(job, f"{job.phase.value} phase failed: {e}")

    async def _run_phase(
        self,
        job: ImportJob,
        phase: PipelinePhase,
        func: Callable[..., Any],
        *args: Any,
    ) -> Any:
        job.enter_phase(phase)
        await self.job_store.save(job)
        with log_operation(f"{phase.value} phase", logger=logger, job_id=job.id), \
                metrics.track_duration(metrics.phase_duration_seconds, phase=phase.value):
            try:
                return await asyncio.to_thread(func, *args)
            except PipelineError as e:
                if isinstance(e, PhaseFailure):
                    raise
                raise PhaseFailure(phase, str(e)) from e

    async def _transform(
        self,
        job: ImportJob,
        content: CsvContent,
        cleaned: list[CleanedRow],
    ) -> list[StagedRow]:
        phase = self.transform_phase.phase
        job.enter_phase(phase)

        summary = self.transform_phase.resolver.summarize(content.headers)
        if summary.advisory:
            job.advisories.append(summary.advisory)
            logger.warning("Low header coverage", extra={"job_id": job.id, "coverage": summary.coverage})
        await self.job_store.save(job)

        builder = ValidationSummaryBuilder(
            max_errors=self.settings.max_error_display,
            max_warnings=self.settings.max_warning_display,
            sample_size=self.settings.validation_sample_size,
        )
        mappings = self.transform_phase.resolve(content.headers)
        batch_size = self.settings.progress_batch_size
        staged: list[StagedRow] = []

        with log_operation(f"{phase.value} phase", logger=logger, job_id=job.id), \
                metrics.track_duration(metrics.phase_duration_seconds, phase=phase.value):
            for start in range(0, len(cleaned), batch_size):
                batch = cleaned[start:start + batch_size]
                results = await asyncio.to_thread(self._transform_batch, job.id, batch, mappings)
                for row_staged, issues in results:
                    builder.add(row_staged, issues)
                    staged.append(row_staged)
                    for issue in issues:
                        metrics.record_issue(issue.field, issue.severity.value)
                job.valid_rows = builder.valid_count
                job.invalid_rows = builder.invalid_count
                job.advance(start + len(batch))
                await self.job_store.save(job)

        metrics.record_transform_outcome(builder.valid_count, builder.invalid_count)
        return staged

    def _transform_batch(
        self,
        job_id: str,
        rows: list[CleanedRow],
        mappings: list[FieldMapping],
    ) -> list[tuple[StagedRow, list[ValidationError]]]:
        return [self.transform_phase.transform_row(job_id, row, mappings) for row in rows]

    async def _fail(self, job: ImportJob, message: str) -> None:
        job.record_error(message)
        if job.status.can_transition_to(JobStatus.FAILED):
            job.transition(JobStatus.FAILED)
        await self.job_store.save(job)
        metrics.increment_counter(metrics.jobs_finished_total, status=JobStatus.FAILED.value)
        logger.error("Import failed", extra={"job_id": job.id, "phase": job.phase.value, "error_message": message})
