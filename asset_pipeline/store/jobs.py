"""
Job store: persistence for ImportJob records.
"""

import asyncio
from datetime import datetime
from typing import Protocol

from asset_pipeline.core.models import ImportJob


class JobStore(Protocol):
    async def save(self, job: ImportJob) -> None: ...

    async def get(self, job_id: str) -> ImportJob | None: ...

    async def list_recent(self, limit: int = 50) -> list[ImportJob]: ...

    async def delete_finished_before(self, cutoff: datetime) -> list[str]: ...


class InMemoryJobStore:
    """Stores independent copies so callers never share mutable job state."""

    def __init__(self):
        self._jobs: dict[str, ImportJob] = {}
        self._lock = asyncio.Lock()

    async def save(self, job: ImportJob) -> None:
        async with self._lock:
            self._jobs[job.id] = job.snapshot()

    async def get(self, job_id: str) -> ImportJob | None:
        async with self._lock:
            job = self._jobs.get(job_id)
        return job.snapshot() if job else None

    async def list_recent(self, limit: int = 50) -> list[ImportJob]:
        """Most recently created first."""
        async with self._lock:
            jobs = sorted(self._jobs.values(), key=lambda j: j.created_at, reverse=True)
        return [job.snapshot() for job in jobs[:limit]]

    async def delete_finished_before(self, cutoff: datetime) -> list[str]:
        """Delete COMPLETED/FAILED jobs last updated before `cutoff`."""
        async with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.status.is_terminal and job.updated_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return expired
