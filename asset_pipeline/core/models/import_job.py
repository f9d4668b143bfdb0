"""
ImportJob model and the job status state machine.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import Field

from asset_pipeline.core.errors import InvalidTransitionError

from .base import CamelModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    STAGED = "STAGED"
    APPROVED = "APPROVED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Whether moving from this status to `target` is a legal forward step."""
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.RUNNING, JobStatus.FAILED}),
    JobStatus.RUNNING: frozenset({JobStatus.STAGED, JobStatus.FAILED}),
    JobStatus.STAGED: frozenset({JobStatus.APPROVED, JobStatus.FAILED}),
    JobStatus.APPROVED: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


class PipelinePhase(str, Enum):
    EXTRACT = "EXTRACT"
    CLEAN = "CLEAN"
    TRANSFORM = "TRANSFORM"
    LOAD = "LOAD"


class JobProgress(CamelModel):
    total_rows: int = Field(default=0, ge=0)
    processed_rows: int = Field(default=0, ge=0)


class ImportJob(CamelModel):
    """
    One execution of the pipeline over a single source file.

    Status only ever moves forward (see JobStatus.can_transition_to);
    COMPLETED and FAILED are terminal. Jobs are retained after they
    finish so operators can inspect what happened.

    Attributes:
        id: Job identifier
        source_file_id: File store id of the CSV being imported
        status: Current JobStatus
        phase: Phase currently (or last) executing
        progress: total_rows from EXTRACT, processed_rows during TRANSFORM
        valid_rows: Rows that passed validation
        invalid_rows: Rows with at least one error
        imported_rows: Rows written to the asset store on approval
        errors: Top-level job errors plus per-row commit failures
        advisories: Non-blocking notes (e.g. low header coverage)
        load_decision: "approved" or "rejected" once an operator decided
    """

    id: str = Field(default_factory=lambda: f"job_{uuid4().hex[:16]}")
    source_file_id: str
    status: JobStatus = JobStatus.PENDING
    phase: PipelinePhase = PipelinePhase.EXTRACT
    progress: JobProgress = Field(default_factory=JobProgress)
    valid_rows: int = 0
    invalid_rows: int = 0
    imported_rows: int = 0
    errors: list[str] = Field(default_factory=list)
    advisories: list[str] = Field(default_factory=list)
    load_decision: Literal["approved", "rejected"] | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None

    def transition(self, target: JobStatus, phase: PipelinePhase | None = None) -> None:
        """
        Move the job to `target`.

        Raises:
            InvalidTransitionError: If the state machine forbids the move
        """
        if not self.status.can_transition_to(target):
            raise InvalidTransitionError(self.id, self.status, target)
        self.status = target
        if phase is not None:
            self.phase = phase
        self.touch()
        if target.is_terminal:
            self.completed_at = self.updated_at

    def enter_phase(self, phase: PipelinePhase) -> None:
        self.phase = phase
        self.touch()

    def advance(self, processed_rows: int) -> None:
        """Record TRANSFORM progress; never moves backwards."""
        self.progress.processed_rows = max(self.progress.processed_rows, processed_rows)
        self.touch()

    def record_error(self, message: str) -> None:
        self.errors.append(message)
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()

    def snapshot(self) -> "ImportJob":
        """Independent copy safe to hand to callers."""
        return self.model_copy(deep=True)
