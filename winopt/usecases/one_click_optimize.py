from __future__ import annotations

"""Sequential runner for the One-Click composite workflow, without UI concerns."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from winopt.domain.entities import StepAction, WorkflowStep
from winopt.domain.errors import OperationCancelled, WorkflowStepError
from winopt.domain.ports import CancelToken
from winopt.usecases.error_mapping import describe_error

LOGGER = logging.getLogger(__name__)

STEP_RESTORE_POINT = "CreateRestorePoint"
STEP_ANALYZE = "Analyze"
STEP_CLEAN = "Clean"
STEP_BROWSER_CLEAN = "BrowserClean"
STEP_PRIVACY_FIXES = "ApplyPrivacyFixes"
STEP_SCHEDULE = "ConfigureSchedule"
STEP_BOOST = "ApplyBoost"

ONE_CLICK_ORDER: Tuple[str, ...] = (
    STEP_RESTORE_POINT,
    STEP_ANALYZE,
    STEP_CLEAN,
    STEP_BROWSER_CLEAN,
    STEP_PRIVACY_FIXES,
    STEP_SCHEDULE,
    STEP_BOOST,
)


def _noop(*_: object, **__: object) -> None:
    """Default no-op callback used for hooks."""


@dataclass
class WorkflowHooks:
    """Optional callbacks fired as the runner moves through its steps."""

    on_step_started: Callable[[WorkflowStep, int, int], None] = _noop
    on_step_finished: Callable[[WorkflowStep, Any], None] = _noop
    on_step_skipped: Callable[[WorkflowStep, str], None] = _noop

    def __post_init__(self) -> None:
        self.on_step_started = self.on_step_started or _noop
        self.on_step_finished = self.on_step_finished or _noop
        self.on_step_skipped = self.on_step_skipped or _noop


@dataclass(frozen=True)
class WorkflowRun:
    """Outcome of a run that reached the end of its step list."""

    completed: Tuple[str, ...]
    skipped: Tuple[str, ...] = ()
    results: Dict[str, Any] = field(default_factory=dict)

    def result_of(self, step_name: str, default: Any = None) -> Any:
        return self.results.get(step_name, default)


class WorkflowRunner:
    """Run ``WorkflowStep`` items strictly in order with one shared cancel token.

    A failing step stops the run with ``WorkflowStepError`` unless the step is
    marked best-effort. Nothing is rolled back; already applied steps stay
    applied.
    """

    def __init__(self, steps: Sequence[WorkflowStep], hooks: Optional[WorkflowHooks] = None) -> None:
        names = [step.name for step in steps]
        if len(set(names)) != len(names):
            raise ValueError("Workflow step names must be unique.")
        self.steps: Tuple[WorkflowStep, ...] = tuple(steps)
        self.hooks = hooks or WorkflowHooks()

    async def __call__(self, cancel: Optional[CancelToken] = None) -> WorkflowRun:
        token = cancel or CancelToken()
        total = len(self.steps)
        completed: List[str] = []
        skipped: List[str] = []
        results: Dict[str, Any] = {}

        for index, step in enumerate(self.steps):
            token.raise_if_cancelled()
            LOGGER.info("Workflow step %d/%d: %s", index + 1, total, step.name)
            self.hooks.on_step_started(step, index, total)
            try:
                result = await step.action(token)
            except OperationCancelled:
                raise
            except Exception as exc:
                message = describe_error(exc)
                if step.best_effort:
                    LOGGER.warning("Best-effort step %s failed: %s", step.name, message)
                    skipped.append(step.name)
                    self.hooks.on_step_skipped(step, message)
                    continue
                LOGGER.error("Workflow halted at %s: %s", step.name, message)
                raise WorkflowStepError(step.name, exc, message) from exc
            results[step.name] = result
            completed.append(step.name)
            self.hooks.on_step_finished(step, result)

        token.raise_if_cancelled()
        return WorkflowRun(completed=tuple(completed), skipped=tuple(skipped), results=results)


def build_one_click_steps(
    *,
    create_restore_point: StepAction,
    analyze: StepAction,
    clean: StepAction,
    browser_clean: StepAction,
    apply_privacy_fixes: StepAction,
    configure_schedule: StepAction,
    apply_boost: StepAction,
) -> List[WorkflowStep]:
    """Return the One-Click step list in its fixed order.

    Only the configuration backup inside ``clean`` is best-effort; every step
    listed here halts the workflow when it fails.
    """
    return [
        WorkflowStep(STEP_RESTORE_POINT, create_restore_point, "Creating restore point..."),
        WorkflowStep(STEP_ANALYZE, analyze, "Analyzing system..."),
        WorkflowStep(STEP_CLEAN, clean, "Removing temporary files..."),
        WorkflowStep(STEP_BROWSER_CLEAN, browser_clean, "Cleaning browser data..."),
        WorkflowStep(STEP_PRIVACY_FIXES, apply_privacy_fixes, "Applying privacy fixes..."),
        WorkflowStep(STEP_SCHEDULE, configure_schedule, "Scheduling weekly cleaning..."),
        WorkflowStep(STEP_BOOST, apply_boost, "Applying performance boost..."),
    ]


__all__ = [
    "ONE_CLICK_ORDER",
    "STEP_ANALYZE",
    "STEP_BOOST",
    "STEP_BROWSER_CLEAN",
    "STEP_CLEAN",
    "STEP_PRIVACY_FIXES",
    "STEP_RESTORE_POINT",
    "STEP_SCHEDULE",
    "WorkflowHooks",
    "WorkflowRun",
    "WorkflowRunner",
    "build_one_click_steps",
]
