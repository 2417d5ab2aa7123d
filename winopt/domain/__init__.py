"""Domain package exports for value objects and collaborator ports."""

from .entities import (
    IMPACT_LEVELS,
    RECOMMEND_DISABLE,
    RECOMMEND_NONE,
    AuditEntry,
    CleaningTarget,
    Impact,
    ScanFinding,
    StartupItem,
    SystemSnapshot,
    WorkflowStep,
)
from .errors import OperationCancelled, WorkflowStepError
from .ports import CancelToken, UseCaseError

__all__ = [
    "IMPACT_LEVELS",
    "RECOMMEND_DISABLE",
    "RECOMMEND_NONE",
    "AuditEntry",
    "CancelToken",
    "CleaningTarget",
    "Impact",
    "OperationCancelled",
    "ScanFinding",
    "StartupItem",
    "SystemSnapshot",
    "UseCaseError",
    "WorkflowStep",
    "WorkflowStepError",
]
