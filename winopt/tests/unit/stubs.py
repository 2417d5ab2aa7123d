from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from winopt.domain.entities import CleaningTarget, ScanFinding, StartupItem, SystemSnapshot
from winopt.domain.ports import CancelToken
from winopt.viewmodels.maintenance_vm import MaintenanceVM

BOOST_TEXT = "Standard optimization applied: temporary memory pressure reduced and idle tasks deprioritized."


def make_snapshot(**overrides: Any) -> SystemSnapshot:
    values: Dict[str, Any] = dict(
        cpu_usage_pct=20.0,
        ram_usage_pct=40.0,
        disk_usage_pct=55.0,
        startup_time=timedelta(seconds=42),
        health_score=88,
        running_processes=("explorer", "svchost"),
        background_services=("Spooler",),
    )
    values.update(overrides)
    return SystemSnapshot(**values)


class Recorder:
    """Counts calls per method and raises a configured exception on demand."""

    def __init__(self) -> None:
        self.calls: Dict[str, int] = {}
        self.fail: Dict[str, BaseException] = {}
        self.tokens: List[Optional[CancelToken]] = []

    def _hit(self, name: str, cancel: Optional[CancelToken]) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1
        self.tokens.append(cancel)
        if name in self.fail:
            raise self.fail[name]

    def count(self, name: str) -> int:
        return self.calls.get(name, 0)


class StubCollaborators(Recorder):
    """One object implementing every port; ``kwargs()`` feeds ``MaintenanceVM``."""

    def __init__(
        self,
        *,
        targets: Optional[Sequence[CleaningTarget]] = None,
        findings: Optional[Sequence[ScanFinding]] = None,
        broken: Optional[Sequence[str]] = None,
        startup_items: Optional[Sequence[StartupItem]] = None,
        reclaimed: int = 5 * 1024 * 1024,
        browser_reclaimed: int = 1024 * 1024,
    ) -> None:
        super().__init__()
        self.snapshot = make_snapshot()
        self.targets = list(targets if targets is not None else [CleaningTarget("User Temp", "/tmp/x", 1024)])
        self.findings = list(findings or [])
        self.broken = list(broken or [])
        self.startup_items = list(
            startup_items
            if startup_items is not None
            else [StartupItem(name="OneDrive", source="HKCU Run", impact="High")]
        )
        self.privacy_risks = ["Telemetry services enabled"]
        self.reclaimed = reclaimed
        self.browser_reclaimed = browser_reclaimed
        self.cleaned_with: List[List[CleaningTarget]] = []
        self.toggled: List[tuple] = []
        self.audit_messages: List[str] = []
        self.audit_timestamps: List[Optional[datetime]] = []
        self.restore_reasons: List[str] = []

    # SystemAnalysisPort
    async def analyze(self, cancel: Optional[CancelToken] = None) -> SystemSnapshot:
        self._hit("analyze", cancel)
        return self.snapshot

    # CleanerPort
    async def list_targets(self, cancel: Optional[CancelToken] = None) -> List[CleaningTarget]:
        self._hit("list_targets", cancel)
        return list(self.targets)

    async def clean(self, targets: Sequence[CleaningTarget], cancel: Optional[CancelToken] = None) -> int:
        self._hit("clean", cancel)
        self.cleaned_with.append(list(targets))
        return self.reclaimed

    # BrowserCleanerPort
    async def clean_browsers(
        self,
        include_cookies: bool,
        include_history: bool,
        include_autofill: bool,
        cancel: Optional[CancelToken] = None,
    ) -> int:
        self._hit("clean_browsers", cancel)
        return self.browser_reclaimed

    # StartupOptimizerPort
    async def list_items(self, cancel: Optional[CancelToken] = None) -> List[StartupItem]:
        self._hit("list_items", cancel)
        return list(self.startup_items)

    async def set_enabled(self, item: StartupItem, enabled: bool, cancel: Optional[CancelToken] = None) -> None:
        self._hit("set_enabled", cancel)
        self.toggled.append((item.name, enabled))

    # RegistryAnalyzerPort
    async def find_broken_entries(self, cancel: Optional[CancelToken] = None) -> List[str]:
        self._hit("find_broken_entries", cancel)
        return list(self.broken)

    async def fix_entries(self, entries: Sequence[str], cancel: Optional[CancelToken] = None) -> None:
        self._hit("fix_entries", cancel)

    # MalwareScannerPort
    async def quick_scan(self, cancel: Optional[CancelToken] = None) -> List[ScanFinding]:
        self._hit("quick_scan", cancel)
        return list(self.findings)

    # PerformanceBoosterPort
    async def apply_boost(self, gaming_mode: bool, cancel: Optional[CancelToken] = None) -> str:
        self._hit("apply_boost", cancel)
        return BOOST_TEXT

    # PrivacySecurityPort
    async def analyze_risks(self, cancel: Optional[CancelToken] = None) -> List[str]:
        self._hit("analyze_risks", cancel)
        return list(self.privacy_risks)

    async def apply_fixes(self, cancel: Optional[CancelToken] = None) -> None:
        self._hit("apply_fixes", cancel)

    # SchedulerPort
    async def configure_weekly_cleaning(self, cancel: Optional[CancelToken] = None) -> None:
        self._hit("configure_weekly_cleaning", cancel)

    # BackupSafetyPort
    async def create_restore_point(self, reason: str, cancel: Optional[CancelToken] = None) -> None:
        self._hit("create_restore_point", cancel)
        self.restore_reasons.append(reason)

    async def backup_configuration(self, cancel: Optional[CancelToken] = None) -> None:
        self._hit("backup_configuration", cancel)

    # AuditLogPort
    async def log(
        self,
        message: str,
        cancel: Optional[CancelToken] = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        self._hit("log", cancel)
        self.audit_messages.append(message)
        self.audit_timestamps.append(timestamp)

    def kwargs(self) -> Dict[str, Any]:
        return {
            name: self
            for name in (
                "analysis",
                "cleaner",
                "browser_cleaner",
                "startup",
                "registry",
                "scanner",
                "booster",
                "privacy",
                "scheduler",
                "backup",
                "audit",
            )
        }


def make_vm(stubs: Optional[StubCollaborators] = None, **kwargs: Any) -> MaintenanceVM:
    stubs = stubs or StubCollaborators()
    return MaintenanceVM(**stubs.kwargs(), **kwargs)


__all__ = ["BOOST_TEXT", "Recorder", "StubCollaborators", "make_snapshot", "make_vm"]
