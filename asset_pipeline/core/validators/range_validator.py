"""
RangeValidator - validates numeric values are within a specified range.
"""

from typing import Any

from asset_pipeline.core.coercion import parse_decimal
from asset_pipeline.core.constants import field_label

from .base_validator import BaseValidator, is_blank


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)

    Blank or unparseable values are skipped; TypeValidator reports those.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")
        if self.min_value is None and self.max_value is None:
            raise ValueError("RangeValidator requires at least one of: min, max")

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        if is_blank(value):
            return
        try:
            number = parse_decimal(value)
        except ValueError:
            return

        label = field_label(self.field_name)
        if self.min_value is not None and number < self.min_value:
            raise self.violation(f"{label} {value} is less than minimum {self.min_value}")
        if self.max_value is not None and number > self.max_value:
            raise self.violation(f"{label} {value} exceeds maximum {self.max_value}")

    @property
    def rule_type(self) -> str:
        return "range"
