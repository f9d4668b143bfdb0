"""
Storage protocols and in-process implementations.

PostgreSQL implementations of the same protocols live in
asset_pipeline.warehouse.
"""

from .assets import AssetStore, BatchUpsertResult, InMemoryAssetStore
from .config import InMemoryRuleConfigStore, RuleConfigStore, YamlRuleConfigStore
from .files import FileStore, LocalFileStore
from .jobs import InMemoryJobStore, JobStore
from .staging import InMemoryStagingStore, StagingStore

__all__ = [
    "AssetStore",
    "BatchUpsertResult",
    "InMemoryAssetStore",
    "RuleConfigStore",
    "InMemoryRuleConfigStore",
    "YamlRuleConfigStore",
    "FileStore",
    "LocalFileStore",
    "JobStore",
    "InMemoryJobStore",
    "StagingStore",
    "InMemoryStagingStore",
]
