"""
DataTypeCheckCleaner - coerces values to a canonical typed representation.
"""

from asset_pipeline.core.coercion import COERCERS, coerce
from asset_pipeline.core.models import CleaningRule, Severity

from .base_cleaner import BaseCleaner, CleaningOutcome


class DataTypeCheckCleaner(BaseCleaner):
    """
    Coerces to the canonical string of `expected_type`.

    number -> "12.5", integer -> "12", boolean -> "true"/"false",
    date -> "YYYY-MM-DD". Blank values pass through. On failure the value
    is kept and an issue is flagged.

    Parameters:
    - expected_type: number, integer, boolean or date
    - severity: Severity of the flagged issue (default "error")
    """

    def __init__(self, rule: CleaningRule):
        super().__init__(rule)
        self.expected_type = str(self.parameters.get("expected_type", "")).lower()
        self.severity = Severity(self.parameters.get("severity", "error"))

    def clean(self, field: str, value: str) -> CleaningOutcome:
        if not value.strip():
            return CleaningOutcome(value)
        if self.expected_type not in COERCERS:
            return self.flag(
                field,
                value,
                f"Rule '{self.rule.name}' skipped: unsupported type '{self.expected_type}'",
                Severity.WARNING,
            )
        try:
            return CleaningOutcome(coerce(value, self.expected_type))
        except ValueError as e:
            return self.flag(field, value, str(e), self.severity)

    @property
    def rule_type(self) -> str:
        return "data_type_check"
