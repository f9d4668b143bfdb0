"""
LengthValidator - bounds the length of a text field.
"""

from typing import Any

from asset_pipeline.core.constants import field_label

from .base_validator import BaseValidator, is_blank


class LengthValidator(BaseValidator):
    """
    Parameters:
    - max_length: Maximum number of characters (inclusive)
    - min_length: Minimum number of characters (inclusive, default 0)

    Blank values are left to RequiredFieldValidator.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.max_length = self.parameters.get("max_length")
        self.min_length = self.parameters.get("min_length", 0)
        if self.max_length is None and not self.min_length:
            raise ValueError("LengthValidator requires 'max_length' or 'min_length'")

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        if is_blank(value):
            return
        length = len(value)
        if self.max_length is not None and length > self.max_length:
            raise self.violation(
                f"{field_label(self.field_name)} must be {self.max_length} characters or less"
            )
        if length < self.min_length:
            raise self.violation(
                f"{field_label(self.field_name)} must be at least {self.min_length} characters"
            )

    @property
    def rule_type(self) -> str:
        return "length"
