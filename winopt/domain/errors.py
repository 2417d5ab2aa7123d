"""Domain-level error types for use-case and view-model mapping.

These errors cross layer boundaries without leaking adapter-specific
exception details; the view-model turns them into status text.
"""

from __future__ import annotations

from typing import Optional

from .ports import UseCaseError


class OperationCancelled(UseCaseError):
    """Raised at a suspension point once the active cancel token fired."""

    def __init__(self, message: str = "Operation cancelled.") -> None:
        super().__init__("CANCELLED", message)


class WorkflowStepError(UseCaseError):
    """A composite step failed; carries the step name and the underlying cause."""

    def __init__(self, step: str, cause: BaseException, message: Optional[str] = None) -> None:
        text = message or str(cause) or cause.__class__.__name__
        super().__init__("STEP_FAILED", text)
        self.step = step
        self.cause = cause


__all__ = ["OperationCancelled", "WorkflowStepError"]
