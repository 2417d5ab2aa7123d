"""Offline collaborators for ``--demo`` runs and UI smoke tests.

Every adapter here keeps its state in memory and never touches the OS.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from winopt.domain.entities import AuditEntry, CleaningTarget, ScanFinding, StartupItem, SystemSnapshot
from winopt.domain.ports import CancelToken

from .tuning_local import GAMING_SUMMARY, STANDARD_SUMMARY

_PROCESSES = ("explorer", "svchost", "chrome", "Teams", "OneDrive", "SearchIndexer", "dwm", "spoolsv")
_SERVICES = ("Windows Update", "Print Spooler", "Windows Search", "Windows Defender Antivirus Service")


def _check(cancel: Optional[CancelToken]) -> None:
    if cancel is not None:
        cancel.raise_if_cancelled()


@dataclass
class SystemAnalysisMock:
    """Random but plausible telemetry in the ranges a healthy desktop reports."""

    rng: random.Random = field(default_factory=random.Random)

    async def analyze(self, cancel: Optional[CancelToken] = None) -> SystemSnapshot:
        _check(cancel)
        return SystemSnapshot(
            cpu_usage_pct=float(self.rng.randint(8, 65)),
            ram_usage_pct=float(self.rng.randint(30, 90)),
            disk_usage_pct=float(self.rng.randint(40, 92)),
            startup_time=timedelta(seconds=self.rng.randint(20, 90)),
            health_score=self.rng.randint(68, 98),
            running_processes=tuple(sorted(_PROCESSES, key=str.lower)),
            background_services=_SERVICES,
        )


@dataclass
class CleanerMock:
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self) -> None:
        self._sizes: Dict[str, int] = {
            r"C:\Users\demo\AppData\Local\Temp": self.rng.randint(50, 900) * 1024 * 1024,
            r"C:\Windows\Temp": self.rng.randint(10, 300) * 1024 * 1024,
            r"C:\Windows\Minidump": self.rng.randint(0, 80) * 1024 * 1024,
            r"C:\ProgramData\Microsoft\Windows\WER": self.rng.randint(0, 40) * 1024 * 1024,
        }
        self._names = ("User Temp", "Windows Temp", "Memory Dumps", "Error Reports")

    async def list_targets(self, cancel: Optional[CancelToken] = None) -> List[CleaningTarget]:
        _check(cancel)
        return [
            CleaningTarget(name=name, path=path, estimated_bytes=size)
            for name, (path, size) in zip(self._names, self._sizes.items())
        ]

    async def clean(self, targets: Sequence[CleaningTarget], cancel: Optional[CancelToken] = None) -> int:
        _check(cancel)
        freed = 0
        for target in targets:
            if target.is_selected:
                freed += self._sizes.get(target.path, 0)
                self._sizes[target.path] = 0
        return freed


@dataclass
class BrowserCleanerMock:
    rng: random.Random = field(default_factory=random.Random)

    async def clean_browsers(
        self,
        include_cookies: bool,
        include_history: bool,
        include_autofill: bool,
        cancel: Optional[CancelToken] = None,
    ) -> int:
        _check(cancel)
        extra = sum(1 for flag in (include_cookies, include_history, include_autofill) if flag)
        return self.rng.randint(20, 400) * 1024 * 1024 + extra * 1024 * 1024


@dataclass
class StartupOptimizerMock:
    items: List[StartupItem] = field(
        default_factory=lambda: [
            StartupItem(name="OneDrive", source="HKCU Run", impact="High"),
            StartupItem(name="Spotify", source="HKCU Run", impact="Medium"),
            StartupItem(name="SecurityHealth", source="HKCU Run", impact="Low"),
        ]
    )

    async def list_items(self, cancel: Optional[CancelToken] = None) -> List[StartupItem]:
        _check(cancel)
        return list(self.items)

    async def set_enabled(self, item: StartupItem, enabled: bool, cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.items = [replace(entry, enabled=enabled) if entry.name == item.name else entry for entry in self.items]


@dataclass
class RegistryAnalyzerMock:
    broken: List[str] = field(
        default_factory=lambda: [
            r"HKCU\Software\Classes\.obsolete (missing file association)",
            r"HKLM\Software\LegacyApp\Path (invalid target)",
        ]
    )

    async def find_broken_entries(self, cancel: Optional[CancelToken] = None) -> List[str]:
        _check(cancel)
        return list(self.broken)

    async def fix_entries(self, entries: Sequence[str], cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.broken = [entry for entry in self.broken if entry not in entries]


@dataclass
class MalwareScannerMock:
    findings: List[ScanFinding] = field(default_factory=list)

    async def quick_scan(self, cancel: Optional[CancelToken] = None) -> List[ScanFinding]:
        _check(cancel)
        return list(self.findings)


class PerformanceBoosterMock:
    async def apply_boost(self, gaming_mode: bool, cancel: Optional[CancelToken] = None) -> str:
        _check(cancel)
        return GAMING_SUMMARY if gaming_mode else STANDARD_SUMMARY


@dataclass
class PrivacySecurityMock:
    risks: List[str] = field(
        default_factory=lambda: [
            "Telemetry services enabled",
            "Recent activity timeline not cleared",
            "Browser tracking cookies detected",
        ]
    )
    fixed: bool = False

    async def analyze_risks(self, cancel: Optional[CancelToken] = None) -> List[str]:
        _check(cancel)
        return [] if self.fixed else list(self.risks)

    async def apply_fixes(self, cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.fixed = True


@dataclass
class SchedulerMock:
    configured: int = 0

    async def configure_weekly_cleaning(self, cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.configured += 1


@dataclass
class BackupSafetyMock:
    restore_points: List[str] = field(default_factory=list)
    backups: int = 0

    async def create_restore_point(self, reason: str, cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.restore_points.append(reason)

    async def backup_configuration(self, cancel: Optional[CancelToken] = None) -> None:
        _check(cancel)
        self.backups += 1


@dataclass
class InMemoryAuditLog:
    entries: List[AuditEntry] = field(default_factory=list)

    async def log(
        self,
        message: str,
        cancel: Optional[CancelToken] = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        self.entries.append(AuditEntry(timestamp=timestamp or datetime.now().astimezone(), message=message))

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]


def demo_collaborators(seed: Optional[int] = None) -> Dict[str, object]:
    """Keyword arguments for ``MaintenanceVM`` backed entirely by the mocks above."""
    rng = random.Random(seed)
    return {
        "analysis": SystemAnalysisMock(rng=rng),
        "cleaner": CleanerMock(rng=rng),
        "browser_cleaner": BrowserCleanerMock(rng=rng),
        "startup": StartupOptimizerMock(),
        "registry": RegistryAnalyzerMock(),
        "scanner": MalwareScannerMock(),
        "booster": PerformanceBoosterMock(),
        "privacy": PrivacySecurityMock(),
        "scheduler": SchedulerMock(),
        "backup": BackupSafetyMock(),
        "audit": InMemoryAuditLog(),
    }


__all__ = [
    "BackupSafetyMock",
    "BrowserCleanerMock",
    "CleanerMock",
    "InMemoryAuditLog",
    "MalwareScannerMock",
    "PerformanceBoosterMock",
    "PrivacySecurityMock",
    "RegistryAnalyzerMock",
    "SchedulerMock",
    "StartupOptimizerMock",
    "SystemAnalysisMock",
    "demo_collaborators",
]
