"""
PostgreSQL job store.
"""

import asyncio
from datetime import datetime

from psycopg.types.json import Jsonb

from asset_pipeline.core.models import ImportJob, JobStatus

from .connection import DatabaseConnectionPool

TERMINAL_STATUSES = [JobStatus.COMPLETED.value, JobStatus.FAILED.value]


class PostgresJobStore:
    """
    Jobs persisted as a JSONB payload with indexed status columns.

    Deleting a job cascades to its staged rows.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    async def save(self, job: ImportJob) -> None:
        await asyncio.to_thread(self._save, job.snapshot())

    def _save(self, job: ImportJob) -> None:
        self.pool.execute_command(
            """
            INSERT INTO import_job (id, source_file_id, status, phase, payload, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE SET
                status = EXCLUDED.status,
                phase = EXCLUDED.phase,
                payload = EXCLUDED.payload,
                updated_at = EXCLUDED.updated_at
            """,
            (
                job.id,
                job.source_file_id,
                job.status.value,
                job.phase.value,
                Jsonb(job.model_dump(mode="json")),
                job.created_at,
                job.updated_at,
            ),
        )

    async def get(self, job_id: str) -> ImportJob | None:
        rows = await asyncio.to_thread(
            self.pool.execute_query, "SELECT payload FROM import_job WHERE id = %s", (job_id,)
        )
        return ImportJob.model_validate(rows[0]["payload"]) if rows else None

    async def list_recent(self, limit: int = 50) -> list[ImportJob]:
        rows = await asyncio.to_thread(
            self.pool.execute_query,
            "SELECT payload FROM import_job ORDER BY created_at DESC LIMIT %s",
            (limit,),
        )
        return [ImportJob.model_validate(row["payload"]) for row in rows]

    async def delete_finished_before(self, cutoff: datetime) -> list[str]:
        return await asyncio.to_thread(self._delete_finished_before, cutoff)

    def _delete_finished_before(self, cutoff: datetime) -> list[str]:
        with self.pool.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    DELETE FROM import_job
                    WHERE status = ANY(%s) AND updated_at < %s
                    RETURNING id
                    """,
                    (TERMINAL_STATUSES, cutoff),
                )
                deleted = [row["id"] for row in cur.fetchall()]
            conn.commit()
        return deleted
