"""
PostgreSQL staging store.
"""

import asyncio
from collections.abc import Sequence

from psycopg.types.json import Jsonb

from asset_pipeline.core.models import ImportJob, StagedRow, StagedRowsPage
from asset_pipeline.store.staging import ensure_stageable

from .connection import DatabaseConnectionPool

_COLUMNS = "job_id, row_number, raw_data, mapped_data, is_valid, will_import, errors"


def _row_from_record(record: dict) -> StagedRow:
    return StagedRow(
        job_id=record["job_id"],
        row_number=record["row_number"],
        raw_data=record["raw_data"],
        mapped_data=record["mapped_data"],
        is_valid=record["is_valid"],
        will_import=record["will_import"],
        errors=record["errors"],
    )


class PostgresStagingStore:
    """
    Staged rows in the staging_asset table.

    stage() deletes and re-inserts a job's rows in one transaction, so
    a failed write leaves the previous set untouched.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    async def stage(self, job: ImportJob, rows: Sequence[StagedRow]) -> int:
        ensure_stageable(job, rows)
        return await asyncio.to_thread(self._replace, job.id, list(rows))

    def _replace(self, job_id: str, rows: list[StagedRow]) -> int:
        params = [
            (
                row.job_id,
                row.row_number,
                Jsonb(row.raw_data),
                Jsonb(row.mapped_data),
                row.is_valid,
                row.will_import,
                Jsonb(row.errors) if row.errors is not None else None,
            )
            for row in rows
        ]
        with self.pool.get_connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    cur.execute("DELETE FROM staging_asset WHERE job_id = %s", (job_id,))
                    if params:
                        cur.executemany(
                            f"INSERT INTO staging_asset ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
                            params,
                        )
        return len(rows)

    async def get_staged_rows(self, job_id: str, limit: int = 100) -> StagedRowsPage:
        return await asyncio.to_thread(self._page, job_id, limit)

    def _page(self, job_id: str, limit: int) -> StagedRowsPage:
        with self.pool.get_cursor() as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM staging_asset WHERE job_id = %s ORDER BY row_number LIMIT %s",
                (job_id, limit),
            )
            rows = [_row_from_record(record) for record in cur.fetchall()]
            cur.execute(
                """
                SELECT count(*) FILTER (WHERE is_valid) AS valid_count,
                       count(*) FILTER (WHERE NOT is_valid) AS invalid_count
                FROM staging_asset WHERE job_id = %s
                """,
                (job_id,),
            )
            counts = cur.fetchone()
        return StagedRowsPage(
            rows=rows,
            valid_count=counts["valid_count"],
            invalid_count=counts["invalid_count"],
        )

    async def get_importable_rows(self, job_id: str) -> list[StagedRow]:
        records = await asyncio.to_thread(
            self.pool.execute_query,
            f"SELECT {_COLUMNS} FROM staging_asset WHERE job_id = %s AND will_import ORDER BY row_number",
            (job_id,),
        )
        return [_row_from_record(record) for record in records]

    async def count(self, job_id: str) -> int:
        rows = await asyncio.to_thread(
            self.pool.execute_query,
            "SELECT count(*) AS n FROM staging_asset WHERE job_id = %s",
            (job_id,),
        )
        return rows[0]["n"]

    async def clear(self, job_id: str) -> int:
        return await asyncio.to_thread(
            self.pool.execute_command, "DELETE FROM staging_asset WHERE job_id = %s", (job_id,)
        )
