"""
Base validator interface for row validation rules.

Validators inspect one canonical field of a mapped row and raise
RuleViolation when the rule is broken. The RowValidator turns each
violation into a ValidationError model with the rule's severity.
"""

from abc import ABC, abstractmethod
from typing import Any


class RuleViolation(Exception):
    """Raised when a validation rule fails for a value."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements one rule type (required_field, enum,
    length, type_check, range, custom).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Canonical field to validate (e.g. "assetTag")
            parameters: Rule-specific parameters (e.g. max_length)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: str | None, record: dict[str, str]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value, or None when the column is absent
            record: The whole mapped row (for cross-field checks)

        Raises:
            RuleViolation: If validation fails
        """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""

    def violation(self, message: str) -> RuleViolation:
        return RuleViolation(self.rule_type, self.field_name, message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"


def is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""
