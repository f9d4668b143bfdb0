"""
Aggregated validation outcome for a file or job.
"""

from pydantic import Field

from .base import CamelModel
from .field_mapping import MappingSummary


class RowSample(CamelModel):
    row_number: int
    raw_data: dict[str, str]
    mapped_data: dict[str, str] | None = None
    errors: list[str] = Field(default_factory=list)


class ValidationSummary(CamelModel):
    """
    Counts plus capped samples of errors, warnings and rows.

    valid_count + invalid_count always equals total_rows.
    """

    total_rows: int = 0
    valid_count: int = 0
    invalid_count: int = 0
    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    sample_valid_rows: list[RowSample] = Field(default_factory=list)
    sample_invalid_rows: list[RowSample] = Field(default_factory=list)
    parse_errors: list[str] = Field(default_factory=list)
    mapping: MappingSummary | None = None
