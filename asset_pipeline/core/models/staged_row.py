"""
StagedRow model: a transformed row awaiting the operator's decision.
"""

from pydantic import Field, model_validator

from .base import CamelModel


class StagedRow(CamelModel):
    """
    One transformed row held in staging for a job.

    will_import defaults to is_valid and may never be true for an
    invalid row.
    """

    job_id: str
    row_number: int = Field(..., ge=1)
    raw_data: dict[str, str]
    mapped_data: dict[str, str]
    is_valid: bool
    will_import: bool | None = None
    errors: list[str] | None = None

    @model_validator(mode="after")
    def check_import_eligibility(self) -> "StagedRow":
        if self.will_import is None:
            self.will_import = self.is_valid
        elif self.will_import and not self.is_valid:
            raise ValueError("An invalid row cannot be marked for import")
        return self


class StagedRowsPage(CamelModel):
    """A bounded page of staged rows with counts over the full set."""

    rows: list[StagedRow] = Field(default_factory=list, alias="data")
    valid_count: int = 0
    invalid_count: int = 0
