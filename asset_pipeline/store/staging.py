"""
Staging store: transformed rows held per job until the load decision.
"""

import asyncio
from collections.abc import Sequence
from typing import Protocol

from asset_pipeline.core.errors import ConflictError
from asset_pipeline.core.models import ImportJob, JobStatus, PipelinePhase, StagedRow, StagedRowsPage


class StagingStore(Protocol):
    async def stage(self, job: ImportJob, rows: Sequence[StagedRow]) -> int: ...

    async def get_staged_rows(self, job_id: str, limit: int = 100) -> StagedRowsPage: ...

    async def get_importable_rows(self, job_id: str) -> list[StagedRow]: ...

    async def count(self, job_id: str) -> int: ...

    async def clear(self, job_id: str) -> int: ...


def ensure_stageable(job: ImportJob, rows: Sequence[StagedRow]) -> None:
    """
    Check a staging write is allowed.

    Raises:
        ConflictError: If the job is not RUNNING in TRANSFORM, or a row
            belongs to another job
    """
    if job.status != JobStatus.RUNNING or job.phase != PipelinePhase.TRANSFORM:
        raise ConflictError(
            f"Job {job.id} cannot stage rows while {job.status.value}/{job.phase.value}"
        )
    foreign = {row.job_id for row in rows if row.job_id != job.id}
    if foreign:
        raise ConflictError(f"Rows for jobs {sorted(foreign)} cannot be staged under {job.id}")


def page_of(rows: Sequence[StagedRow], limit: int) -> StagedRowsPage:
    valid = sum(1 for row in rows if row.is_valid)
    return StagedRowsPage(
        rows=[row.model_copy() for row in rows[:limit]],
        valid_count=valid,
        invalid_count=len(rows) - valid,
    )


class InMemoryStagingStore:
    """
    Process-local staging keyed by job id.

    Each stage() call replaces the job's rows wholesale under a lock, so
    readers see either the old set or the new one.
    """

    def __init__(self):
        self._rows: dict[str, list[StagedRow]] = {}
        self._lock = asyncio.Lock()

    async def stage(self, job: ImportJob, rows: Sequence[StagedRow]) -> int:
        ensure_stageable(job, rows)
        snapshot = sorted((row.model_copy() for row in rows), key=lambda r: r.row_number)
        async with self._lock:
            self._rows[job.id] = snapshot
        return len(snapshot)

    async def get_staged_rows(self, job_id: str, limit: int = 100) -> StagedRowsPage:
        async with self._lock:
            rows = list(self._rows.get(job_id, []))
        return page_of(rows, limit)

    async def get_importable_rows(self, job_id: str) -> list[StagedRow]:
        async with self._lock:
            rows = list(self._rows.get(job_id, []))
        return [row.model_copy() for row in rows if row.will_import]

    async def count(self, job_id: str) -> int:
        async with self._lock:
            return len(self._rows.get(job_id, []))

    async def clear(self, job_id: str) -> int:
        async with self._lock:
            return len(self._rows.pop(job_id, []))
