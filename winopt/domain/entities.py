from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Literal, Sequence, Tuple

Impact = Literal["Low", "Medium", "High"]
IMPACT_LEVELS: Tuple[str, ...] = ("Low", "Medium", "High")

RECOMMEND_DISABLE = "disable"
RECOMMEND_NONE = "none"

_RECOMMENDATION_LABELS = {
    RECOMMEND_DISABLE: "Disable to improve boot speed",
    RECOMMEND_NONE: "No action required",
}


def _check_percent(name: str, value: float) -> float:
    if not isinstance(value, (int, float)):
        raise TypeError(f"{name} expects a numeric percent value.")
    numeric = float(value)
    if numeric < 0.0 or numeric > 100.0:
        raise ValueError(f"{name} must be within the inclusive range [0, 100].")
    return numeric


@dataclass(frozen=True)
class SystemSnapshot:
    """Wholesale capture of machine health produced by one analysis pass."""

    cpu_usage_pct: float
    """CPU load in percent, inclusive range [0, 100]."""
    ram_usage_pct: float
    """Physical memory usage in percent, inclusive range [0, 100]."""
    disk_usage_pct: float
    """System drive usage in percent, inclusive range [0, 100]."""
    startup_time: timedelta
    """Duration of the last boot, or time since boot where unknown."""
    health_score: int
    """Aggregated health score, inclusive range [0, 100]."""
    running_processes: Tuple[str, ...] = ()
    """Process names in the order reported by the analysis collaborator."""
    background_services: Tuple[str, ...] = ()
    """Running background service names in reported order."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "cpu_usage_pct", _check_percent("cpu_usage_pct", self.cpu_usage_pct))
        object.__setattr__(self, "ram_usage_pct", _check_percent("ram_usage_pct", self.ram_usage_pct))
        object.__setattr__(self, "disk_usage_pct", _check_percent("disk_usage_pct", self.disk_usage_pct))
        if not isinstance(self.startup_time, timedelta):
            raise TypeError("startup_time requires a timedelta instance.")
        if self.startup_time.total_seconds() < 0:
            raise ValueError("startup_time must not be negative.")
        if isinstance(self.health_score, bool) or not isinstance(self.health_score, int):
            raise TypeError("health_score expects an integer.")
        if self.health_score < 0 or self.health_score > 100:
            raise ValueError("health_score must be within the inclusive range [0, 100].")
        object.__setattr__(self, "running_processes", tuple(str(p) for p in self.running_processes))
        object.__setattr__(self, "background_services", tuple(str(s) for s in self.background_services))

    @property
    def startup_time_label(self) -> str:
        return f"{self.startup_time.total_seconds():,.0f}s"


@dataclass
class CleaningTarget:
    """Filesystem location offered for cleanup; selection is user-mutable."""

    name: str
    path: str
    estimated_bytes: int = 0
    is_selected: bool = True


@dataclass(frozen=True)
class StartupItem:
    """Autostart entry with a recommendation derived from impact and state."""

    name: str
    source: str
    impact: Impact
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.impact not in IMPACT_LEVELS:
            raise ValueError(f"Unknown startup impact {self.impact!r}.")

    @property
    def recommendation(self) -> str:
        if self.impact == "High" and self.enabled:
            return RECOMMEND_DISABLE
        return RECOMMEND_NONE

    @property
    def recommendation_label(self) -> str:
        return _RECOMMENDATION_LABELS[self.recommendation]


@dataclass(frozen=True)
class ScanFinding:
    """Single file matched by the quick scan."""

    file_path: str
    signature_name: str
    risk_level: str


@dataclass(frozen=True)
class AuditEntry:
    """Timestamped, append-only audit record."""

    timestamp: datetime
    message: str

    def __post_init__(self) -> None:
        if not isinstance(self.timestamp, datetime):
            raise TypeError("AuditEntry requires a datetime timestamp.")

    def format_line(self) -> str:
        return f"[{self.timestamp.isoformat()}] {self.message}"

    @property
    def day_key(self) -> str:
        """Calendar-day key used to pick the audit file (YYYYMMDD)."""
        return self.timestamp.strftime("%Y%m%d")


StepAction = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class WorkflowStep:
    """Named position in a composite workflow.

    ``action`` receives the workflow cancel token. ``status_message`` is the
    progress text published while the step runs. ``best_effort`` steps log
    their failure and let the workflow continue.
    """

    name: str
    action: StepAction = field(compare=False)
    status_message: str = ""
    best_effort: bool = False


def step_names(steps: Sequence[WorkflowStep]) -> Tuple[str, ...]:
    return tuple(step.name for step in steps)
