"""
Asset store: destination of approved rows.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

from asset_pipeline.core.models import Asset


@dataclass
class BatchUpsertResult:
    """Per-row outcome of one upsert batch."""

    # (row_number, asset_id)
    succeeded: list[tuple[int, str]] = field(default_factory=list)
    # (row_number, message)
    failed: list[tuple[int, str]] = field(default_factory=list)


class AssetStore(Protocol):
    async def upsert_by_asset_tag(self, asset: Asset) -> str: ...

    async def upsert_batch(self, assets: Sequence[tuple[int, Asset]]) -> BatchUpsertResult: ...

    async def get_by_tag(self, asset_tag: str) -> Asset | None: ...

    async def count(self) -> int: ...


class InMemoryAssetStore:
    """Assets in a dict keyed by asset tag; ids are stable across updates."""

    def __init__(self):
        self._assets: dict[str, tuple[str, Asset]] = {}
        self._lock = asyncio.Lock()

    async def upsert_by_asset_tag(self, asset: Asset) -> str:
        async with self._lock:
            return self._upsert(asset)

    def _upsert(self, asset: Asset) -> str:
        existing = self._assets.get(asset.asset_tag)
        asset_id = existing[0] if existing else str(uuid4())
        self._assets[asset.asset_tag] = (asset_id, asset.model_copy())
        return asset_id

    async def upsert_batch(self, assets: Sequence[tuple[int, Asset]]) -> BatchUpsertResult:
        result = BatchUpsertResult()
        async with self._lock:
            for row_number, asset in assets:
                try:
                    result.succeeded.append((row_number, self._upsert(asset)))
                except Exception as e:
                    result.failed.append((row_number, str(e)))
        return result

    async def get_by_tag(self, asset_tag: str) -> Asset | None:
        async with self._lock:
            entry = self._assets.get(asset_tag)
        return entry[1].model_copy() if entry else None

    async def count(self) -> int:
        async with self._lock:
            return len(self._assets)
