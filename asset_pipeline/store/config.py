"""
Rule configuration store: read-only source of cleaning rules and aliases.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from asset_pipeline.core.models import CleaningRule, FieldMapping, PipelinePhase
from asset_pipeline.core.rules import RuleConfigLoader, default_aliases

logger = logging.getLogger(__name__)


class RuleConfigStore(Protocol):
    def list_rules(self, phase: PipelinePhase | None = None) -> list[CleaningRule]: ...

    def list_aliases(self) -> list[FieldMapping]: ...


class InMemoryRuleConfigStore:
    """Rules and aliases supplied directly (tests, programmatic setups)."""

    def __init__(
        self,
        rules: Iterable[CleaningRule] = (),
        aliases: Iterable[FieldMapping] | None = None,
    ):
        self._rules = list(rules)
        self._aliases = list(aliases) if aliases is not None else default_aliases()

    def list_rules(self, phase: PipelinePhase | None = None) -> list[CleaningRule]:
        """All configured rules (inactive included), optionally for one phase."""
        return [r.model_copy() for r in self._rules if phase is None or r.phase == phase]

    def list_aliases(self) -> list[FieldMapping]:
        return [a.model_copy() for a in self._aliases]


class YamlRuleConfigStore(InMemoryRuleConfigStore):
    """
    Rules and aliases loaded once from a YAML file.

    A missing file means no cleaning rules and the built-in alias table;
    a file without an `aliases:` section also keeps the built-in table.
    """

    def __init__(self, path: str | Path | None):
        self.path = Path(path) if path else None
        rules: list[CleaningRule] = []
        aliases = None
        if self.path is not None and self.path.exists():
            loader = RuleConfigLoader(self.path)
            rules = loader.load_rules()
            aliases = loader.load_aliases()
            logger.info(
                "Rule configuration loaded",
                extra={"path": str(self.path), "rules": len(rules), "aliases": len(aliases or [])},
            )
        else:
            logger.info("No rule configuration file; using built-in aliases", extra={"path": str(self.path)})
        super().__init__(rules, aliases)
