"""
RequiredFieldCleaner - flags blank values without changing them.
"""

from asset_pipeline.core.constants import missing_field_message

from .base_cleaner import BaseCleaner, CleaningOutcome


class RequiredFieldCleaner(BaseCleaner):

    def clean(self, field: str, value: str) -> CleaningOutcome:
        if value.strip():
            return CleaningOutcome(value)
        return self.flag(field, value, missing_field_message(field))

    @property
    def rule_type(self) -> str:
        return "required_field"
