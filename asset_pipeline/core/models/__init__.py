"""
Core data models for the asset import pipeline.

All models use Pydantic for runtime validation; models exposed over the
HTTP API serialize with camelCase keys.
"""

from .asset import Asset
from .cleaning_rule import CleaningRule, RuleType
from .field_mapping import FieldMapping, MappingSummary
from .file_info import FileInfo
from .import_job import ImportJob, JobProgress, JobStatus, PipelinePhase
from .rows import CleanedRow, MappedRow, RawRow
from .staged_row import StagedRow, StagedRowsPage
from .validation_error import Severity, ValidationError
from .validation_summary import RowSample, ValidationSummary

__all__ = [
    "Asset",
    "CleaningRule",
    "RuleType",
    "FieldMapping",
    "MappingSummary",
    "FileInfo",
    "ImportJob",
    "JobProgress",
    "JobStatus",
    "PipelinePhase",
    "RawRow",
    "CleanedRow",
    "MappedRow",
    "StagedRow",
    "StagedRowsPage",
    "Severity",
    "ValidationError",
    "RowSample",
    "ValidationSummary",
]
