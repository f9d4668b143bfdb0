"""
CustomValidator - validates using a plain Python function.
"""

from typing import Any

from .base_validator import BaseValidator


class CustomValidator(BaseValidator):
    """
    Validates using a custom function, typically for cross-field checks.

    Parameters:
    - validator_func: callable(value, record) that raises ValueError on failure
    - error_message: Optional fixed message used instead of the raised text
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.validator_func = self.parameters.get("validator_func")
        if not callable(self.validator_func):
            raise ValueError("CustomValidator requires a callable 'validator_func' parameter")
        self.error_message = self.parameters.get("error_message")

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        try:
            self.validator_func(value, record)
        except ValueError as e:
            raise self.violation(self.error_message or str(e)) from e

    @property
    def rule_type(self) -> str:
        return "custom"
