"""
RequiredFieldValidator - ensures a canonical field is present and non-blank.
"""

from asset_pipeline.core.constants import missing_field_message

from .base_validator import BaseValidator, is_blank


class RequiredFieldValidator(BaseValidator):
    """
    Fails if the column is not mapped at all or its value is blank.

    Both cases produce the same message so the same issue flagged by a
    required_field cleaning rule collapses into one entry.
    """

    def validate(self, value: str | None, record: dict[str, str]) -> None:
        if self.field_name not in record or is_blank(value):
            raise self.violation(missing_field_message(self.field_name))

    @property
    def rule_type(self) -> str:
        return "required_field"
