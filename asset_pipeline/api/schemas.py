"""Request and response bodies for the pipeline HTTP API."""

from pydantic import Field

from asset_pipeline.core.models.base import CamelModel


class ImportStartedResponse(CamelModel):
    job_id: str
    message: str


class ApprovalResponse(CamelModel):
    message: str
    imported_count: int
    failed_count: int = 0
    errors: list[str] = Field(default_factory=list)


class RejectionResponse(CamelModel):
    message: str
    cleared_count: int


class ErrorResponse(CamelModel):
    detail: str
