"""
CLEAN phase: apply cleaning rules to every extracted row.
"""

from collections.abc import Sequence

from asset_pipeline.core.aliases import FieldAliasResolver
from asset_pipeline.core.models import CleanedRow, PipelinePhase, RawRow
from asset_pipeline.core.rules import CleaningRuleEngine


class CleanPhase:
    """
    Runs the cleaning rule engine over raw rows.

    Headers are resolved first so rules can target either a canonical
    field or the CSV header text.
    """

    phase = PipelinePhase.CLEAN

    def __init__(self, engine: CleaningRuleEngine, resolver: FieldAliasResolver):
        self.engine = engine
        self.resolver = resolver

    def run(self, headers: Sequence[str], rows: Sequence[RawRow]) -> list[CleanedRow]:
        header_fields = self.resolver.header_fields(headers)
        return [self.engine.clean_row(row, header_fields) for row in rows]
