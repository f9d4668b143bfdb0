"""
Base cleaner interface for cleaning rules.

A cleaner turns one CleaningRule into a value transformation. Cleaners
never raise on bad data: problems come back as issues on the outcome.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from asset_pipeline.core.models import CleaningRule, Severity, ValidationError


@dataclass(frozen=True)
class CleaningOutcome:
    """Cleaned value plus any issues flagged while cleaning."""

    value: str
    issues: tuple[ValidationError, ...] = ()


class BaseCleaner(ABC):
    """
    Abstract base class for all cleaners.

    Each cleaner implements one RuleType.
    """

    def __init__(self, rule: CleaningRule):
        self.rule = rule
        self.parameters = rule.parameters

    @abstractmethod
    def clean(self, field: str, value: str) -> CleaningOutcome:
        """
        Apply the rule to one value.

        Args:
            field: Name the issue should be reported under
            value: Current value of the field

        Returns:
            CleaningOutcome with the (possibly unchanged) value
        """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""

    def flag(
        self,
        field: str,
        value: str,
        message: str,
        severity: Severity = Severity.ERROR,
    ) -> CleaningOutcome:
        """Outcome that keeps `value` unchanged and carries one issue."""
        return CleaningOutcome(
            value=value,
            issues=(ValidationError(field=field, value=value, error=message, severity=severity),),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule={self.rule.name}, field={self.rule.field})"
