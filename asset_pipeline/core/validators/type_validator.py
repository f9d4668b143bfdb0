"""
TypeValidator - checks that a text value parses as the expected type.
"""

from typing import Any

from asset_pipeline.core.coercion import COERCERS, coerce

from .base_validator import BaseValidator, is_blank


class TypeValidator(BaseValidator):
    """
    Validates that a field parses as `expected_type`.

    Supported types: number (decimal, float), integer (int), boolean
    (bool), date. Blank values are skipped.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        expected_type = self.parameters.get("expected_type")
        if not expected_type:
            raise ValueError("TypeValidator requires 'expected_type' parameter")
        if expected_type.lower() not in COERCERS:
            raise ValueError(f"Unsupported type: {expected_type}")
        self.expected_type = expected_type.lower()

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        if is_blank(value):
            return
        try:
            coerce(value, self.expected_type)
        except ValueError as e:
            raise self.violation(str(e)) from e

    @property
    def rule_type(self) -> str:
        return "type_check"
