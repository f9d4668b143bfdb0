"""
Row validation rules.

Provides validators for required fields, enumerations, length bounds,
type checks, numeric ranges and custom cross-field logic, plus the
RowValidator that applies them to mapped rows.
"""

from .base_validator import BaseValidator, RuleViolation
from .custom_validator import CustomValidator
from .enum_validator import EnumValidator
from .length_validator import LengthValidator
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .row_validator import AssetRuleBuilder, RowValidator, default_asset_rules
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "RuleViolation",
    "RequiredFieldValidator",
    "EnumValidator",
    "LengthValidator",
    "TypeValidator",
    "RangeValidator",
    "CustomValidator",
    "RowValidator",
    "AssetRuleBuilder",
    "default_asset_rules",
]
