"""
Cleaning rule engine.

Applies the active cleaning rules targeting a field, in ascending
priority, to turn raw CSV values into cleaned values plus flagged issues.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from asset_pipeline.core.cleaners import (
    BaseCleaner,
    CleaningOutcome,
    DataTypeCheckCleaner,
    ExactMatchCleaner,
    FuzzyMatchCleaner,
    RegexReplaceCleaner,
    RequiredFieldCleaner,
    TrimCleaner,
)
from asset_pipeline.core.cleaners.match_cleaner import DEFAULT_FUZZY_THRESHOLD
from asset_pipeline.core.models import CleanedRow, CleaningRule, RawRow, RuleType, Severity, ValidationError

logger = logging.getLogger(__name__)


class CleaningRuleEngine:
    """
    Orchestrates cleaning rules over row values.

    Rules never raise: a malformed rule (bad regex, unsupported type,
    broken parameters) passes the value through and flags a warning.
    """

    CLEANER_REGISTRY = {
        RuleType.TRIM: TrimCleaner,
        RuleType.REGEX_REPLACE: RegexReplaceCleaner,
        RuleType.EXACT_MATCH: ExactMatchCleaner,
        RuleType.FUZZY_MATCH: FuzzyMatchCleaner,
        RuleType.REQUIRED_FIELD: RequiredFieldCleaner,
        RuleType.DATA_TYPE_CHECK: DataTypeCheckCleaner,
    }

    def __init__(
        self,
        rules: Iterable[CleaningRule] = (),
        fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
    ):
        """
        Initialize the engine.

        Args:
            rules: Cleaning rules (active and inactive, any order)
            fuzzy_threshold: Default ratio for fuzzy_match rules without one
        """
        self.rules = list(rules)
        self.fuzzy_threshold = fuzzy_threshold
        self._cleaners: dict[int, BaseCleaner | str] = {
            id(rule): self._build_cleaner(rule) for rule in self.rules
        }

    def _build_cleaner(self, rule: CleaningRule) -> BaseCleaner | str:
        """Cleaner for `rule`, or the reason it could not be built."""
        cleaner_class = self.CLEANER_REGISTRY.get(rule.rule_type)
        if cleaner_class is None:
            return f"unknown rule type '{rule.rule_type}'"
        try:
            if cleaner_class is FuzzyMatchCleaner:
                return FuzzyMatchCleaner(rule, default_threshold=self.fuzzy_threshold)
            return cleaner_class(rule)
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(
                "Cleaning rule could not be built",
                extra={"rule_name": rule.name, "error_message": str(e)},
            )
            return f"invalid configuration ({e})"

    def _cleaner_for(self, rule: CleaningRule) -> BaseCleaner | str:
        cleaner = self._cleaners.get(id(rule))
        return cleaner if cleaner is not None else self._build_cleaner(rule)

    def rules_for(self, *names: str, rules: Iterable[CleaningRule] | None = None) -> list[CleaningRule]:
        """
        Active rules targeting any of `names` (or "*"), by ascending priority.

        sorted() is stable, so equal priorities keep configuration order.
        """
        candidates = self.rules if rules is None else rules
        matching = [r for r in candidates if r.is_active and r.targets(*names)]
        return sorted(matching, key=lambda r: r.priority)

    def apply_rules(
        self,
        field: str,
        raw_value: str,
        rules: Iterable[CleaningRule] | None = None,
        aliases: tuple[str, ...] = (),
    ) -> CleaningOutcome:
        """
        Clean one value.

        Args:
            field: Field name issues are reported under (canonical when mapped)
            raw_value: Value as extracted
            rules: Rules to consider (defaults to the engine's rules)
            aliases: Other names the field goes by (e.g. its CSV header)

        Returns:
            CleaningOutcome with the final value and every issue flagged
        """
        value = raw_value
        issues: list[ValidationError] = []
        for rule in self.rules_for(field, *aliases, rules=rules):
            cleaner = self._cleaner_for(rule)
            if isinstance(cleaner, str):
                issues.append(ValidationError(
                    field=field,
                    value=value,
                    error=f"Rule '{rule.name}' skipped: {cleaner}",
                    severity=Severity.WARNING,
                ))
                continue
            try:
                outcome = cleaner.clean(field, value)
            except Exception as e:
                logger.warning(
                    "Cleaning rule raised; value passed through",
                    extra={"rule_name": rule.name, "field": field, "error_message": str(e)},
                )
                issues.append(ValidationError(
                    field=field,
                    value=value,
                    error=f"Rule '{rule.name}' skipped: {e}",
                    severity=Severity.WARNING,
                ))
                continue
            value = outcome.value
            issues.extend(outcome.issues)
        return CleaningOutcome(value=value, issues=tuple(issues))

    def clean_row(
        self,
        row: RawRow,
        header_fields: Mapping[str, str | None] | None = None,
        rules: Iterable[CleaningRule] | None = None,
    ) -> CleanedRow:
        """
        Clean every column of one row.

        Args:
            row: Extracted row
            header_fields: CSV header -> canonical field (None when unmapped);
                rules may target either name
            rules: Rules to consider (defaults to the engine's rules)

        Returns:
            CleanedRow keyed by the original headers
        """
        header_fields = header_fields or {}
        values: dict[str, str] = {}
        issues: list[ValidationError] = []
        for header, raw_value in row.values.items():
            canonical = header_fields.get(header)
            if canonical:
                outcome = self.apply_rules(canonical, raw_value, rules, aliases=(header,))
            else:
                outcome = self.apply_rules(header, raw_value, rules)
            values[header] = outcome.value
            issues.extend(outcome.issues)
        return CleanedRow(
            row_number=row.row_number,
            raw=row.values,
            values=values,
            issues=tuple(issues),
        )

    def get_rule_summary(self) -> dict[str, Any]:
        active = [r for r in self.rules if r.is_active]
        by_type: dict[str, int] = {}
        for rule in active:
            by_type[rule.rule_type.value] = by_type.get(rule.rule_type.value, 0) + 1
        return {
            "total_rules": len(self.rules),
            "active_rules": len(active),
            "rules_by_type": by_type,
        }
