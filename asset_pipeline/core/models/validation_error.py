"""
ValidationError model: one row-level issue flagged by cleaning or validation.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationError(BaseModel):
    """
    A single field-level issue on a row.

    Issues are data, never exceptions. A row carrying any issue with
    severity ERROR is invalid and will not be imported; warnings are
    informational only.

    Attributes:
        field: Canonical field (or CSV header when unmapped)
        value: Offending value as seen by the rule, if any
        error: Human-readable message
        severity: error or warning
    """

    model_config = ConfigDict(frozen=True)

    field: str
    value: str | None = None
    error: str
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def format(self) -> str:
        """Render as the message stored on staged rows."""
        if self.is_error:
            return f"{self.field}: {self.error}"
        return f"{self.field}: {self.error} (warning)"
