"""
Cleaning rule and column alias configuration.

Loads cleaning rules and the column alias table from YAML files and
provides a builder for programmatic configuration.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as ModelValidationError

from asset_pipeline.core.constants import CANONICAL_ASSET_FIELDS, DEFAULT_COLUMN_ALIASES
from asset_pipeline.core.models import CleaningRule, FieldMapping, PipelinePhase, RuleType


def default_aliases() -> list[FieldMapping]:
    """The built-in alias table for common asset spreadsheet headers."""
    return [
        FieldMapping(csv_alias=alias, asset_field=field, confidence=confidence)
        for alias, field, confidence in DEFAULT_COLUMN_ALIASES
    ]


class RuleConfigLoader:
    """
    Loads cleaning rules and aliases from a YAML configuration file.

    Expected YAML format:
    ```yaml
    aliases:
      - csv_alias: "Tag #"
        asset_field: assetTag
        confidence: 90

    rules:
      assetTag:
        - type: trim
        - type: regex_replace
          pattern: "\\s+"
          replacement: "-"
          priority: 20

      status:
        - type: fuzzy_match
          params:
            terms: [ACTIVE, INACTIVE, MAINTENANCE]
            threshold: 0.8
    ```

    Both sections are optional. Field "*" targets every column.
    """

    def __init__(self, config_path: str | Path):
        """
        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")
        self._config: dict[str, Any] | None = None

    @property
    def config(self) -> dict[str, Any]:
        if self._config is None:
            with open(self.config_path) as f:
                config = yaml.safe_load(f) or {}
            if not isinstance(config, dict):
                raise ValueError("Configuration file must be a mapping")
            self._config = config
        return self._config

    def load_rules(self) -> list[CleaningRule]:
        """
        Parse the `rules:` section.

        Returns:
            Cleaning rules in file order (empty if the section is absent)

        Raises:
            ValueError: If a rule definition is invalid
        """
        field_rules = self.config.get("rules") or {}
        if not isinstance(field_rules, dict):
            raise ValueError("'rules' section must map field names to rule lists")

        rules = []
        for field_name, field_rule_list in field_rules.items():
            if not isinstance(field_rule_list, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")
            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(str(field_name), rule_def, idx))
        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> CleaningRule:
        if not isinstance(rule_def, dict) or "type" not in rule_def:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        safe_field = "all" if field_name == "*" else field_name
        rule_name = rule_def.get("name", f"{safe_field}_{rule_type}_{idx}")
        try:
            return CleaningRule(
                id=rule_def.get("id"),
                name=rule_name,
                field=field_name,
                rule_type=rule_type,
                phase=rule_def.get("phase", PipelinePhase.CLEAN),
                pattern=rule_def.get("pattern"),
                replacement=rule_def.get("replacement", ""),
                parameters=rule_def.get("params", rule_def.get("parameters", {})) or {},
                priority=rule_def.get("priority", 100),
                is_active=rule_def.get("enabled", rule_def.get("is_active", True)),
            )
        except ModelValidationError as e:
            raise ValueError(f"Invalid rule '{rule_name}': {e}") from e

    def load_aliases(self) -> list[FieldMapping] | None:
        """
        Parse the `aliases:` section.

        Returns:
            Configured aliases, or None when the section is absent

        Raises:
            ValueError: If an alias targets an unknown asset field
        """
        entries = self.config.get("aliases")
        if entries is None:
            return None
        if not isinstance(entries, list):
            raise ValueError("'aliases' section must be a list")

        aliases = []
        for entry in entries:
            asset_field = entry.get("asset_field")
            if asset_field not in CANONICAL_ASSET_FIELDS:
                raise ValueError(f"Alias '{entry.get('csv_alias')}' targets unknown field '{asset_field}'")
            aliases.append(FieldMapping(
                csv_alias=str(entry["csv_alias"]).strip(),
                asset_field=asset_field,
                confidence=entry.get("confidence", 100),
            ))
        return aliases


class RuleConfigBuilder:
    """
    Programmatically build cleaning rules (for tests or dynamic configuration).
    """

    def __init__(self):
        self.rules: list[CleaningRule] = []

    def _add(self, field_name: str, rule_type: RuleType, priority: int, **kwargs: Any) -> "RuleConfigBuilder":
        safe_field = "all" if field_name == "*" else field_name
        self.rules.append(CleaningRule(
            name=kwargs.pop("name", None) or f"{safe_field}_{rule_type.value}_{len(self.rules)}",
            field=field_name,
            rule_type=rule_type,
            priority=priority,
            **kwargs,
        ))
        return self

    def add_trim(self, field_name: str, sides: str = "both", priority: int = 10) -> "RuleConfigBuilder":
        return self._add(field_name, RuleType.TRIM, priority, parameters={"sides": sides})

    def add_regex_replace(
        self,
        field_name: str,
        pattern: str,
        replacement: str = "",
        priority: int = 20,
    ) -> "RuleConfigBuilder":
        return self._add(
            field_name, RuleType.REGEX_REPLACE, priority, pattern=pattern, replacement=replacement
        )

    def add_exact_match(
        self,
        field_name: str,
        replacements: dict[str, str] | None = None,
        terms: list[str] | None = None,
        priority: int = 30,
    ) -> "RuleConfigBuilder":
        params = {"replacements": replacements or {}, "terms": terms or []}
        return self._add(field_name, RuleType.EXACT_MATCH, priority, parameters=params)

    def add_fuzzy_match(
        self,
        field_name: str,
        terms: list[str],
        threshold: float | None = None,
        priority: int = 40,
    ) -> "RuleConfigBuilder":
        params: dict[str, Any] = {"terms": terms}
        if threshold is not None:
            params["threshold"] = threshold
        return self._add(field_name, RuleType.FUZZY_MATCH, priority, parameters=params)

    def add_required_field(self, field_name: str, priority: int = 50) -> "RuleConfigBuilder":
        return self._add(field_name, RuleType.REQUIRED_FIELD, priority)

    def add_type_check(
        self,
        field_name: str,
        expected_type: str,
        severity: str = "error",
        priority: int = 60,
    ) -> "RuleConfigBuilder":
        params = {"expected_type": expected_type, "severity": severity}
        return self._add(field_name, RuleType.DATA_TYPE_CHECK, priority, parameters=params)

    def add_rule(self, rule: CleaningRule) -> "RuleConfigBuilder":
        self.rules.append(rule)
        return self

    def build(self) -> list[CleaningRule]:
        return list(self.rules)
