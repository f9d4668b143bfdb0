"""
Pipeline endpoints under /pipeline.

Imports run in the background: POST /import/{file_id} returns a job id
immediately and clients poll GET /status/{job_id} until the job is
STAGED or FAILED, then approve or reject it.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from asset_pipeline.core.models import (
    CleaningRule,
    FieldMapping,
    FileInfo,
    ImportJob,
    MappingSummary,
    StagedRowsPage,
    ValidationSummary,
)
from asset_pipeline.pipeline import (
    ApprovalGate,
    FilePreview,
    ImportOrchestrator,
    PipelineInspector,
    PipelineServices,
)
from asset_pipeline.utils.validation import InputValidationError, validate_limit

from .deps import (
    get_approval_gate,
    get_file_id,
    get_inspector,
    get_job_id,
    get_orchestrator,
    get_services,
)
from .schemas import ApprovalResponse, ImportStartedResponse, RejectionResponse

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


@router.post("/import/{file_id}", response_model=ImportStartedResponse)
async def start_import(
    file_id: str = Depends(get_file_id),
    orchestrator: ImportOrchestrator = Depends(get_orchestrator),
):
    """Start importing a CSV file; poll /status/{jobId} for progress."""
    job = await orchestrator.start_import(file_id)
    return ImportStartedResponse(
        job_id=job.id,
        message=f"Import started for {file_id}. Poll /pipeline/status/{job.id} for progress.",
    )


@router.get("/status/{job_id}", response_model=ImportJob)
async def get_status(
    job_id: str = Depends(get_job_id),
    orchestrator: ImportOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.get_status(job_id)


@router.get("/jobs", response_model=list[ImportJob])
async def list_jobs(
    limit: int = Query(50),
    orchestrator: ImportOrchestrator = Depends(get_orchestrator),
):
    """Most recently created jobs first."""
    try:
        limit = validate_limit(limit, max_limit=500)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return await orchestrator.list_jobs(limit)


@router.get("/files", response_model=list[FileInfo])
async def list_files(inspector: PipelineInspector = Depends(get_inspector)):
    return await inspector.list_files()


@router.get("/preview/{file_id}", response_model=FilePreview)
async def preview_file(
    file_id: str = Depends(get_file_id),
    inspector: PipelineInspector = Depends(get_inspector),
):
    """First rows of the file as read, long values truncated."""
    return await inspector.preview(file_id)


@router.get("/field-mappings/{file_id}", response_model=MappingSummary)
async def field_mappings(
    file_id: str = Depends(get_file_id),
    inspector: PipelineInspector = Depends(get_inspector),
):
    return await inspector.field_mappings(file_id)


@router.get("/validate/{file_id}", response_model=ValidationSummary)
async def validate_file(
    file_id: str = Depends(get_file_id),
    inspector: PipelineInspector = Depends(get_inspector),
):
    """Dry-run validation of the whole file; nothing is staged."""
    return await inspector.validate(file_id)


@router.get("/staged/{job_id}", response_model=StagedRowsPage)
async def staged_rows(
    job_id: str = Depends(get_job_id),
    services: PipelineServices = Depends(get_services),
):
    await services.orchestrator.get_status(job_id)
    return await services.staging_store.get_staged_rows(
        job_id, limit=services.settings.staged_preview_limit
    )


@router.post("/approve/{job_id}", response_model=ApprovalResponse)
async def approve(
    job_id: str = Depends(get_job_id),
    gate: ApprovalGate = Depends(get_approval_gate),
):
    result = await gate.approve(job_id)
    message = f"Imported {result.imported_count} assets"
    if result.failed_count:
        message += f"; {result.failed_count} rows failed"
    return ApprovalResponse(
        message=message,
        imported_count=result.imported_count,
        failed_count=result.failed_count,
        errors=result.errors,
    )


@router.post("/reject/{job_id}", response_model=RejectionResponse)
async def reject(
    job_id: str = Depends(get_job_id),
    gate: ApprovalGate = Depends(get_approval_gate),
):
    result = await gate.reject(job_id)
    return RejectionResponse(
        message=f"Import rejected; {result.cleared_count} staged rows cleared",
        cleared_count=result.cleared_count,
    )


@router.get("/rules", response_model=list[CleaningRule])
async def list_rules(services: PipelineServices = Depends(get_services)):
    return services.rule_store.list_rules()


@router.get("/aliases", response_model=list[FieldMapping])
async def list_aliases(services: PipelineServices = Depends(get_services)):
    return services.rule_store.list_aliases()
