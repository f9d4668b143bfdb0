"""
CleaningRule model representing an operator-configured value transformation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field

from .base import CamelModel
from .import_job import PipelinePhase

WILDCARD_FIELD = "*"


class RuleType(str, Enum):
    TRIM = "trim"
    REGEX_REPLACE = "regex_replace"
    EXACT_MATCH = "exact_match"
    FUZZY_MATCH = "fuzzy_match"
    REQUIRED_FIELD = "required_field"
    DATA_TYPE_CHECK = "data_type_check"


class CleaningRule(CamelModel):
    """
    A configurable cleaning step applied to one field's value.

    Attributes:
        id: Optional identifier from the configuration store
        name: Human-readable name ("trim_asset_tag")
        field: Canonical field or CSV header this rule targets; "*" for all
        rule_type: One of RuleType (serialized as "type")
        phase: Phase that loads the rule (the pipeline loads CLEAN)
        pattern: Regex pattern for regex_replace
        replacement: Replacement text for regex_replace
        parameters: Rule-specific params (terms, expected_type, threshold, ...)
        priority: Lower runs first; ties keep configuration order
        is_active: Inactive rules are retained but skipped
    """

    id: str | None = None
    name: str = Field(..., min_length=1)
    field: str = Field(..., min_length=1)
    rule_type: RuleType = Field(..., alias="type")
    phase: PipelinePhase = PipelinePhase.CLEAN
    pattern: str | None = None
    replacement: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    priority: int = 100
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def targets(self, *names: str) -> bool:
        """Whether this rule applies to any of the given field names."""
        return self.field == WILDCARD_FIELD or self.field in names
