from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Protocol, Sequence

from .entities import CleaningTarget, ScanFinding, StartupItem, SystemSnapshot


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---- Cancellation ----
class CancelToken:
    """Cooperative cancellation signal shared by every step of one action.

    Collaborators check it at their own suspension points; the workflow runner
    checks it between steps.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register ``callback``; runs immediately when already cancelled."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            from .errors import OperationCancelled

            raise OperationCancelled()


# ---- Ports (collaborator capabilities) ----
# Every call is awaitable and accepts the active cancel token.
class SystemAnalysisPort(Protocol):
    """Health telemetry for the local machine."""

    async def analyze(self, cancel: Optional[CancelToken] = None) -> SystemSnapshot: ...


class CleanerPort(Protocol):
    """Temporary-file locations and their removal."""

    async def list_targets(self, cancel: Optional[CancelToken] = None) -> List[CleaningTarget]: ...
    async def clean(
        self, targets: Sequence[CleaningTarget], cancel: Optional[CancelToken] = None
    ) -> int: ...  # bytes reclaimed


class BrowserCleanerPort(Protocol):
    async def clean_browsers(
        self,
        include_cookies: bool,
        include_history: bool,
        include_autofill: bool,
        cancel: Optional[CancelToken] = None,
    ) -> int: ...  # bytes reclaimed


class StartupOptimizerPort(Protocol):
    async def list_items(self, cancel: Optional[CancelToken] = None) -> List[StartupItem]: ...
    async def set_enabled(
        self, item: StartupItem, enabled: bool, cancel: Optional[CancelToken] = None
    ) -> None: ...


class RegistryAnalyzerPort(Protocol):
    async def find_broken_entries(self, cancel: Optional[CancelToken] = None) -> List[str]: ...
    async def fix_entries(
        self, entries: Sequence[str], cancel: Optional[CancelToken] = None
    ) -> None: ...


class MalwareScannerPort(Protocol):
    async def quick_scan(self, cancel: Optional[CancelToken] = None) -> List[ScanFinding]: ...


class PerformanceBoosterPort(Protocol):
    async def apply_boost(
        self, gaming_mode: bool, cancel: Optional[CancelToken] = None
    ) -> str: ...  # free-text summary


class PrivacySecurityPort(Protocol):
    async def analyze_risks(self, cancel: Optional[CancelToken] = None) -> List[str]: ...
    async def apply_fixes(self, cancel: Optional[CancelToken] = None) -> None: ...


class SchedulerPort(Protocol):
    async def configure_weekly_cleaning(self, cancel: Optional[CancelToken] = None) -> None: ...


class BackupSafetyPort(Protocol):
    async def create_restore_point(
        self, reason: str, cancel: Optional[CancelToken] = None
    ) -> None: ...
    async def backup_configuration(self, cancel: Optional[CancelToken] = None) -> None: ...


class AuditLogPort(Protocol):
    """Append-only audit sink; one call per status change.

    ``timestamp`` is the moment the caller recorded the status; sinks stamp
    their own clock only when it is missing.
    """

    async def log(
        self,
        message: str,
        cancel: Optional[CancelToken] = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None: ...
