"""
Idempotent asset upserts keyed by asset tag.

Implements INSERT ... ON CONFLICT (asset_tag) DO UPDATE so re-approving
the same file updates assets instead of duplicating them.
"""

import asyncio
import logging
from collections.abc import Sequence
from uuid import uuid4

import psycopg

from asset_pipeline.core.models import Asset
from asset_pipeline.store.assets import BatchUpsertResult

from .connection import DatabaseConnectionPool

logger = logging.getLogger(__name__)

_ASSET_COLUMNS = (
    "asset_tag",
    "name",
    "description",
    "manufacturer",
    "model_number",
    "serial_number",
    "status",
    "condition",
    "building_name",
    "floor",
    "room",
    "location",
    "purchase_date",
    "purchase_price",
    "warranty_expiration",
    "notes",
)

UPSERT_ASSET_SQL = f"""
    INSERT INTO asset (id, {", ".join(_ASSET_COLUMNS)})
    VALUES (%s, {", ".join(["%s"] * len(_ASSET_COLUMNS))})
    ON CONFLICT (asset_tag) DO UPDATE SET
        {", ".join(f"{col} = EXCLUDED.{col}" for col in _ASSET_COLUMNS[1:])},
        updated_at = now()
    RETURNING id
"""


def _params(asset: Asset) -> tuple:
    return (str(uuid4()), *(getattr(asset, col) for col in _ASSET_COLUMNS))


class PostgresAssetStore:
    """
    Writes approved assets to the asset table.

    upsert_batch() runs one transaction per batch with a savepoint per
    row, so a constraint violation on one row does not undo the others.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    async def upsert_by_asset_tag(self, asset: Asset) -> str:
        return await asyncio.to_thread(self._upsert_one, asset)

    def _upsert_one(self, asset: Asset) -> str:
        rows = self.pool.execute_query(UPSERT_ASSET_SQL, _params(asset))
        return str(rows[0]["id"])

    async def upsert_batch(self, assets: Sequence[tuple[int, Asset]]) -> BatchUpsertResult:
        return await asyncio.to_thread(self._upsert_batch, list(assets))

    def _upsert_batch(self, assets: list[tuple[int, Asset]]) -> BatchUpsertResult:
        result = BatchUpsertResult()
        if not assets:
            return result

        with self.pool.get_connection() as conn:
            with conn.transaction():
                for row_number, asset in assets:
                    try:
                        with conn.transaction():
                            with conn.cursor() as cur:
                                cur.execute(UPSERT_ASSET_SQL, _params(asset))
                                asset_id = str(cur.fetchone()["id"])
                    except psycopg.Error as e:
                        logger.warning(
                            "Asset upsert failed",
                            extra={"row_number": row_number, "asset_tag": asset.asset_tag, "error_message": str(e)},
                        )
                        result.failed.append((row_number, str(e).strip()))
                    else:
                        result.succeeded.append((row_number, asset_id))
        return result

    async def get_by_tag(self, asset_tag: str) -> Asset | None:
        rows = await asyncio.to_thread(
            self.pool.execute_query, "SELECT * FROM asset WHERE asset_tag = %s", (asset_tag,)
        )
        return Asset.model_validate(rows[0]) if rows else None

    async def count(self) -> int:
        rows = await asyncio.to_thread(self.pool.execute_query, "SELECT count(*) AS n FROM asset")
        return rows[0]["n"]
