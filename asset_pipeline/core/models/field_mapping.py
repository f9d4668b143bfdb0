"""
Column alias and header resolution models.
"""

from pydantic import Field

from .base import CamelModel


class FieldMapping(CamelModel):
    """
    Association between a CSV header and a canonical asset field.

    Used both for configured aliases and for resolution results. An
    unresolved header carries asset_field="", confidence=0 and
    is_mapped=False.
    """

    csv_alias: str
    asset_field: str = ""
    confidence: float = Field(default=0, ge=0, le=100)
    is_mapped: bool = True

    @classmethod
    def unmapped(cls, header: str) -> "FieldMapping":
        return cls(csv_alias=header, asset_field="", confidence=0, is_mapped=False)


class MappingSummary(CamelModel):
    """Outcome of resolving one file's headers against the alias table."""

    mapped_fields: list[FieldMapping] = Field(default_factory=list)
    unmapped_fields: list[str] = Field(default_factory=list)
    total_csv_columns: int = 0
    mapped_count: int = 0
    coverage: float = 0.0
    advisory: str | None = None
