"""
Exception hierarchy for the import pipeline.

Row-level data problems are never raised; they travel as
ValidationError models. These exceptions cover lookups, illegal state
changes and unrecoverable phase failures.
"""

from typing import Any


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class NotFoundError(PipelineError):
    """Raised when a job, file or other resource cannot be resolved."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(PipelineError):
    """Raised when an operation is not allowed in the current job state."""


class InvalidTransitionError(ConflictError):
    """Raised when a job status change would violate the state machine."""

    def __init__(self, job_id: str, current: Any, target: Any):
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(
            f"Job {job_id} cannot move from {getattr(current, 'value', current)} "
            f"to {getattr(target, 'value', target)}"
        )


class PhaseFailure(PipelineError):
    """Raised when a pipeline phase cannot complete for the whole job."""

    def __init__(self, phase: Any, message: str):
        self.phase = phase
        self.message = message
        super().__init__(f"{getattr(phase, 'value', phase)} phase failed: {message}")
