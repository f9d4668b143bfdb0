"""FastAPI dependencies resolving pipeline services from application state."""

from fastapi import HTTPException, Path, Request

from asset_pipeline.pipeline import ApprovalGate, ImportOrchestrator, PipelineInspector, PipelineServices
from asset_pipeline.utils.validation import InputValidationError, validate_identifier


def get_services(request: Request) -> PipelineServices:
    return request.app.state.services


def get_orchestrator(request: Request) -> ImportOrchestrator:
    return get_services(request).orchestrator


def get_approval_gate(request: Request) -> ApprovalGate:
    return get_services(request).approval_gate


def get_inspector(request: Request) -> PipelineInspector:
    return get_services(request).inspector


async def get_file_id(file_id: str = Path(..., min_length=1, max_length=255)) -> str:
    """
    Validate a file id from the URL path.

    Raises 400 if it could escape the data directory.
    """
    try:
        return validate_identifier(file_id, "file_id")
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


async def get_job_id(job_id: str = Path(..., min_length=1, max_length=255)) -> str:
    try:
        return validate_identifier(job_id, "job_id")
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
