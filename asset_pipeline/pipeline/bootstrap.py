"""
Wiring: build the pipeline's components from settings.
"""

import logging
from dataclasses import dataclass

from asset_pipeline.core.aliases import FieldAliasResolver
from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.core.models import PipelinePhase
from asset_pipeline.core.rules import CleaningRuleEngine
from asset_pipeline.core.validators import RowValidator
from asset_pipeline.store import (
    AssetStore,
    FileStore,
    InMemoryAssetStore,
    InMemoryJobStore,
    InMemoryStagingStore,
    JobStore,
    LocalFileStore,
    RuleConfigStore,
    StagingStore,
    YamlRuleConfigStore,
)
from asset_pipeline.warehouse.assets import PostgresAssetStore
from asset_pipeline.warehouse.connection import DatabaseConnectionPool
from asset_pipeline.warehouse.ddl import ensure_schema
from asset_pipeline.warehouse.jobs import PostgresJobStore
from asset_pipeline.warehouse.staging import PostgresStagingStore

from .approval import ApprovalGate
from .clean import CleanPhase
from .extract import ExtractPhase
from .inspection import PipelineInspector
from .orchestrator import ImportOrchestrator
from .transform import TransformPhase

logger = logging.getLogger(__name__)


@dataclass
class PipelineServices:
    settings: PipelineSettings
    file_store: FileStore
    rule_store: RuleConfigStore
    job_store: JobStore
    staging_store: StagingStore
    asset_store: AssetStore
    orchestrator: ImportOrchestrator
    approval_gate: ApprovalGate
    inspector: PipelineInspector
    pool: DatabaseConnectionPool | None = None

    async def close(self) -> None:
        await self.orchestrator.shutdown()
        if self.pool is not None:
            self.pool.close()
            self.pool = None


def build_services(
    settings: PipelineSettings,
    file_store: FileStore | None = None,
    rule_store: RuleConfigStore | None = None,
) -> PipelineServices:
    """
    Build every component for the configured storage backend.

    With storage_backend="postgres" the connection pool is opened and the
    schema created before anything else is built.

    Args:
        settings: Runtime configuration
        file_store: Overrides the LocalFileStore over settings.data_dir
        rule_store: Overrides the YAML rule store over settings.rules_file
    """
    file_store = file_store or LocalFileStore(settings.data_path, settings.max_file_size_bytes)
    rule_store = rule_store or YamlRuleConfigStore(settings.rules_path)

    pool = None
    if settings.storage_backend == "postgres":
        pool = DatabaseConnectionPool.from_settings(settings)
        pool.open()
        ensure_schema(pool)
        job_store = PostgresJobStore(pool)
        staging_store = PostgresStagingStore(pool)
        asset_store = PostgresAssetStore(pool)
    else:
        job_store = InMemoryJobStore()
        staging_store = InMemoryStagingStore()
        asset_store = InMemoryAssetStore()

    resolver = FieldAliasResolver(rule_store.list_aliases(), settings.alias_coverage_threshold)
    engine = CleaningRuleEngine(
        rule_store.list_rules(PipelinePhase.CLEAN),
        fuzzy_threshold=settings.fuzzy_match_threshold,
    )
    clean_phase = CleanPhase(engine, resolver)
    transform_phase = TransformPhase(resolver, RowValidator.default(), settings.raw_value_max_length)

    orchestrator = ImportOrchestrator(
        file_store=file_store,
        job_store=job_store,
        staging_store=staging_store,
        extract_phase=ExtractPhase(file_store),
        clean_phase=clean_phase,
        transform_phase=transform_phase,
        settings=settings,
    )
    approval_gate = ApprovalGate(job_store, staging_store, asset_store, settings.approval_batch_size)
    inspector = PipelineInspector(file_store, clean_phase, transform_phase, settings)

    logger.info(
        "Pipeline services built",
        extra={"storage_backend": settings.storage_backend, "rules": len(engine.rules)},
    )
    return PipelineServices(
        settings=settings,
        file_store=file_store,
        rule_store=rule_store,
        job_store=job_store,
        staging_store=staging_store,
        asset_store=asset_store,
        orchestrator=orchestrator,
        approval_gate=approval_gate,
        inspector=inspector,
        pool=pool,
    )
