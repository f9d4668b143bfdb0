"""
The import pipeline: EXTRACT, CLEAN and TRANSFORM phases, the job
orchestrator and the approval gate that runs LOAD.
"""

from .approval import ApprovalGate, ApprovalResult, RejectionResult
from .bootstrap import PipelineServices, build_services
from .clean import CleanPhase
from .extract import ExtractPhase
from .inspection import FilePreview, PipelineInspector
from .orchestrator import ImportOrchestrator
from .transform import TransformPhase, TransformResult, ValidationSummaryBuilder

__all__ = [
    "ApprovalGate",
    "ApprovalResult",
    "RejectionResult",
    "PipelineServices",
    "build_services",
    "CleanPhase",
    "ExtractPhase",
    "FilePreview",
    "PipelineInspector",
    "ImportOrchestrator",
    "TransformPhase",
    "TransformResult",
    "ValidationSummaryBuilder",
]
