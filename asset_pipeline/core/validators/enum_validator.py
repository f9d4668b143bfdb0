"""
EnumValidator - checks a value against a closed set of allowed values.
"""

from typing import Any

from .base_validator import BaseValidator, is_blank


class EnumValidator(BaseValidator):
    """
    Validates membership in `allowed_values`.

    Values are upper-cased by TRANSFORM normalization before validation,
    so the membership check itself is exact. Blank values are skipped
    (defaults apply downstream).
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        allowed = self.parameters.get("allowed_values")
        if not allowed:
            raise ValueError("EnumValidator requires 'allowed_values' parameter")
        self.allowed_values = tuple(allowed)

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        if is_blank(value):
            return
        if value not in self.allowed_values:
            raise self.violation(
                f"Invalid value '{value}'. Must be one of: {', '.join(self.allowed_values)}"
            )

    @property
    def rule_type(self) -> str:
        return "enum"
