"""
Approval gate: the operator's single load decision for a staged job.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from pydantic import ValidationError as ModelValidationError

from asset_pipeline.core.errors import ConflictError, NotFoundError, PhaseFailure
from asset_pipeline.core.models import Asset, ImportJob, JobStatus, PipelinePhase, StagedRow
from asset_pipeline.observability import metrics
from asset_pipeline.observability.logger import log_operation
from asset_pipeline.store.assets import AssetStore
from asset_pipeline.store.jobs import JobStore
from asset_pipeline.store.staging import StagingStore

logger = logging.getLogger(__name__)

REJECTION_MESSAGE = "Import rejected by operator"


@dataclass
class ApprovalResult:
    job_id: str
    imported_count: int
    failed_count: int
    errors: list[str] = field(default_factory=list)


@dataclass
class RejectionResult:
    job_id: str
    cleared_count: int


@dataclass
class _JobLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class ApprovalGate:
    """
    Commits or discards a STAGED job's rows.

    approve() upserts every importable row by asset tag in bounded
    batches; a row that fails is recorded on the job and the rest carry
    on. reject() clears staging and fails the job. Decisions for the
    same job are serialized, and only the first one takes effect.
    """

    def __init__(
        self,
        job_store: JobStore,
        staging_store: StagingStore,
        asset_store: AssetStore,
        batch_size: int = 100,
    ):
        self.job_store = job_store
        self.staging_store = staging_store
        self.asset_store = asset_store
        self.batch_size = batch_size
        self._locks: dict[str, _JobLock] = {}

    @asynccontextmanager
    async def _decision(self, job_id: str):
        """Serialize decisions for one job; the lock is dropped once nobody holds or awaits it."""
        entry = self._locks.setdefault(job_id, _JobLock())
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[job_id]

    async def _load_job(self, job_id: str) -> ImportJob:
        job = await self.job_store.get(job_id)
        if job is None:
            raise NotFoundError("Import job", job_id)
        return job

    async def approve(self, job_id: str) -> ApprovalResult:
        """
        Import the job's valid staged rows into the asset store.

        Raises:
            NotFoundError: If the job does not exist
            ConflictError: If the job is not STAGED (nothing is written)
            PhaseFailure: If the asset store fails as a whole; the job is FAILED
        """
        async with self._decision(job_id):
            job = await self._load_job(job_id)
            if job.status != JobStatus.STAGED:
                raise ConflictError(
                    f"Job {job_id} is {job.status.value}; only STAGED jobs can be approved"
                )

            job.transition(JobStatus.APPROVED, PipelinePhase.LOAD)
            job.load_decision = "approved"
            await self.job_store.save(job)
            metrics.increment_counter(metrics.load_decisions_total, decision="approved")

            try:
                with log_operation("LOAD phase", logger=logger, job_id=job_id), \
                        metrics.track_duration(metrics.phase_duration_seconds, phase=PipelinePhase.LOAD.value):
                    rows = await self.staging_store.get_importable_rows(job_id)
                    imported, failures = await self._load_rows(rows)
            except Exception as e:
                job.record_error(f"LOAD phase failed: {e}")
                job.transition(JobStatus.FAILED)
                await self.job_store.save(job)
                metrics.increment_counter(metrics.jobs_finished_total, status=JobStatus.FAILED.value)
                raise PhaseFailure(PipelinePhase.LOAD, str(e)) from e

            for message in failures:
                job.record_error(message)
            job.imported_rows = imported
            job.transition(JobStatus.COMPLETED)
            await self.job_store.save(job)
            metrics.increment_counter(metrics.jobs_finished_total, status=JobStatus.COMPLETED.value)
            logger.info(
                "Import approved",
                extra={"job_id": job_id, "imported": imported, "failed": len(failures)},
            )
            return ApprovalResult(
                job_id=job_id,
                imported_count=imported,
                failed_count=len(failures),
                errors=failures,
            )

    async def _load_rows(self, rows: list[StagedRow]) -> tuple[int, list[str]]:
        imported = 0
        failures: list[str] = []
        for start in range(0, len(rows), self.batch_size):
            batch = []
            for row in rows[start:start + self.batch_size]:
                try:
                    batch.append((row.row_number, Asset.from_mapped_data(row.mapped_data)))
                except ModelValidationError as e:
                    failures.append(f"Row {row.row_number}: {_first_error(e)}")

            result = await self.asset_store.upsert_batch(batch)
            imported += len(result.succeeded)
            failures.extend(f"Row {row_number}: {message}" for row_number, message in result.failed)

        metrics.increment_counter(metrics.assets_upserted_total, imported, result="success")
        metrics.increment_counter(metrics.assets_upserted_total, len(failures), result="failure")
        return imported, failures

    async def reject(self, job_id: str) -> RejectionResult:
        """
        Discard the job's staged rows and fail the job.

        Rejecting an already rejected job clears nothing and returns 0.

        Raises:
            NotFoundError: If the job does not exist
            ConflictError: If the job is neither STAGED nor already rejected
        """
        async with self._decision(job_id):
            job = await self._load_job(job_id)
            if job.load_decision == "rejected":
                return RejectionResult(job_id=job_id, cleared_count=0)
            if job.status != JobStatus.STAGED:
                raise ConflictError(
                    f"Job {job_id} is {job.status.value}; only STAGED jobs can be rejected"
                )

            cleared = await self.staging_store.clear(job_id)
            job.load_decision = "rejected"
            job.record_error(REJECTION_MESSAGE)
            job.transition(JobStatus.FAILED)
            await self.job_store.save(job)
            metrics.increment_counter(metrics.load_decisions_total, decision="rejected")
            metrics.increment_counter(metrics.jobs_finished_total, status=JobStatus.FAILED.value)
            logger.info("Import rejected", extra={"job_id": job_id, "cleared": cleared})
            return RejectionResult(job_id=job_id, cleared_count=cleared)


def _first_error(error: ModelValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "invalid value")
