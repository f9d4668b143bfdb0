"""
Per-phase row types.

Each phase hands the next one a distinct, immutable row type so a row's
stage in the pipeline is visible in the type itself:
RawRow (EXTRACT) -> CleanedRow (CLEAN) -> MappedRow (TRANSFORM).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from asset_pipeline.core.constants import CANONICAL_ASSET_FIELDS

from .validation_error import ValidationError


class RawRow(BaseModel):
    """A CSV data row exactly as parsed, keyed by trimmed header."""

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(..., ge=1)
    values: dict[str, str]


class CleanedRow(BaseModel):
    """A row after cleaning rules ran over every column."""

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(..., ge=1)
    raw: dict[str, str]
    values: dict[str, str]
    issues: tuple[ValidationError, ...] = ()


class MappedRow(BaseModel):
    """A row keyed by canonical asset field after alias resolution."""

    model_config = ConfigDict(frozen=True)

    row_number: int = Field(..., ge=1)
    raw: dict[str, str]
    mapped: dict[str, str]
    issues: tuple[ValidationError, ...] = ()

    @field_validator("mapped")
    @classmethod
    def check_canonical_keys(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = set(v) - set(CANONICAL_ASSET_FIELDS)
        if unknown:
            raise ValueError(f"Unknown asset fields: {sorted(unknown)}")
        return v
