"""Performance boost, privacy hardening and weekly-cleaning scheduler adapters."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

import psutil

from winopt.domain.ports import CancelToken

from .cleaner_local import chromium_profiles, firefox_profiles
from .exec_utils import run_command_async

try:  # pragma: no cover - exercised on Windows hosts only
    import winreg
except ImportError:  # pragma: no cover - non-Windows
    winreg = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

GAMING_SUMMARY = "Gaming mode enabled: background priority lowered for non-essential apps."
STANDARD_SUMMARY = "Standard optimization applied: temporary memory pressure reduced and idle tasks deprioritized."

BACKGROUND_APPS = (
    "onedrive",
    "dropbox",
    "googledrivefs",
    "teams",
    "skype",
    "spotify",
    "slack",
    "searchindexer",
)
IDLE_CPU_PERCENT = 1.0


def _low_priority() -> int:
    return getattr(psutil, "BELOW_NORMAL_PRIORITY_CLASS", 10)


class ProcessBooster:
    """Lowers scheduling priority of known background apps.

    Standard mode only touches background apps that stay below
    ``IDLE_CPU_PERCENT`` over one ``sample_interval``; gaming mode deprioritizes
    all of them.
    """

    def __init__(self, background_apps: Sequence[str] = BACKGROUND_APPS, *, sample_interval: float = 0.5) -> None:
        self.background_apps = tuple(app.lower() for app in background_apps)
        self.sample_interval = max(0.0, float(sample_interval))

    async def apply_boost(self, gaming_mode: bool, cancel: Optional[CancelToken] = None) -> str:
        if cancel is not None:
            cancel.raise_if_cancelled()
        changed = await asyncio.to_thread(self._deprioritize, gaming_mode)
        LOGGER.info("Boost (%s) lowered priority of %d process(es)", "gaming" if gaming_mode else "standard", changed)
        return GAMING_SUMMARY if gaming_mode else STANDARD_SUMMARY

    def _deprioritize(self, gaming_mode: bool) -> int:
        candidates = [
            proc
            for proc in psutil.process_iter(["name"])
            if any(app in (proc.info.get("name") or "").lower() for app in self.background_apps)
        ]
        if not gaming_mode:
            candidates = self._idle_only(candidates)
        changed = 0
        for proc in candidates:
            try:
                proc.nice(_low_priority())
            except (psutil.AccessDenied, psutil.NoSuchProcess):
                continue
            changed += 1
        return changed

    def _idle_only(self, procs: List[psutil.Process]) -> List[psutil.Process]:
        # The first cpu_percent call only primes the counter and reads 0.0.
        primed = []
        for proc in procs:
            try:
                proc.cpu_percent(None)
            except (psutil.AccessDenied, psutil.NoSuchProcess):
                continue
            primed.append(proc)
        if not primed:
            return []
        time.sleep(self.sample_interval)
        idle = []
        for proc in primed:
            try:
                if proc.cpu_percent(None) < IDLE_CPU_PERCENT:
                    idle.append(proc)
            except (psutil.AccessDenied, psutil.NoSuchProcess):
                continue
        return idle


# ---- Privacy ----
TELEMETRY_POLICY = (r"SOFTWARE\Policies\Microsoft\Windows\DataCollection", "AllowTelemetry")
ADVERTISING_ID = (r"Software\Microsoft\Windows\CurrentVersion\AdvertisingInfo", "Enabled")
TRACK_DOCS = (r"Software\Microsoft\Windows\CurrentVersion\Explorer\Advanced", "Start_TrackDocs")
ACTIVITY_FEED = (r"SOFTWARE\Policies\Microsoft\Windows\System", "PublishUserActivities")

RISK_TELEMETRY = "Telemetry services enabled"
RISK_ADVERTISING = "Advertising ID enabled"
RISK_TIMELINE = "Recent activity timeline not cleared"
RISK_COOKIES = "Browser tracking cookies detected"

Reader = Callable[[str, str, str], Optional[int]]


def _read_dword(hive: str, path: str, name: str) -> Optional[int]:
    if winreg is None:
        return None
    root = winreg.HKEY_LOCAL_MACHINE if hive == "HKLM" else winreg.HKEY_CURRENT_USER
    try:
        with winreg.OpenKey(root, path, 0, winreg.KEY_READ) as handle:
            value, _ = winreg.QueryValueEx(handle, name)
    except OSError:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _write_dword(path: str, name: str, value: int) -> None:
    if winreg is None:
        raise OSError("Registry is only available on Windows hosts.")
    with winreg.CreateKeyEx(winreg.HKEY_CURRENT_USER, path, 0, winreg.KEY_SET_VALUE) as handle:
        winreg.SetValueEx(handle, name, 0, winreg.REG_DWORD, int(value))


def _has_cookie_store(profiles: Iterable[Path]) -> bool:
    names = ("Cookies", os.path.join("Network", "Cookies"), "cookies.sqlite")
    return any((profile / name).is_file() for profile in profiles for name in names)


class PrivacyAdvisor:
    """Reads privacy-relevant settings and applies the per-user fixes.

    Machine policies (``HKLM``) are reported but never written.
    """

    def __init__(
        self,
        *,
        reader: Optional[Reader] = None,
        writer: Optional[Callable[[str, str, int], None]] = None,
        profiles: Optional[Sequence[Path]] = None,
        is_windows: Optional[bool] = None,
    ) -> None:
        self.is_windows = os.name == "nt" if is_windows is None else is_windows
        self.reader = reader or _read_dword
        self.writer = writer or _write_dword
        self._profiles = list(profiles) if profiles is not None else None

    def risks(self) -> List[str]:
        found: List[str] = []
        if self.is_windows:
            telemetry = self.reader("HKLM", *TELEMETRY_POLICY)
            if telemetry is None or telemetry > 0:
                found.append(RISK_TELEMETRY)
            if self.reader("HKCU", *ADVERTISING_ID) != 0:
                found.append(RISK_ADVERTISING)
            if self.reader("HKCU", *TRACK_DOCS) != 0 or self.reader("HKLM", *ACTIVITY_FEED) != 0:
                found.append(RISK_TIMELINE)
        profiles = self._profiles if self._profiles is not None else chromium_profiles() + firefox_profiles()
        if _has_cookie_store(profiles):
            found.append(RISK_COOKIES)
        return found

    def fix(self) -> None:
        if not self.is_windows:
            LOGGER.info("Privacy fixes skipped on non-Windows host.")
            return
        self.writer(*ADVERTISING_ID, 0)
        self.writer(*TRACK_DOCS, 0)
        LOGGER.info("Advertising ID and recent-document tracking disabled")

    async def analyze_risks(self, cancel: Optional[CancelToken] = None) -> List[str]:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(self.risks)

    async def apply_fixes(self, cancel: Optional[CancelToken] = None) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled()
        await asyncio.to_thread(self.fix)


# ---- Scheduler ----
TASK_NAME = r"WinOptimize\WeeklyCleaning"


def build_schedule_command(executable: str = sys.executable, *, day: str = "SUN", start: str = "03:00") -> List[str]:
    action = f'"{executable}" -m winopt.app.main clean'
    return [
        "schtasks.exe",
        "/Create",
        "/TN",
        TASK_NAME,
        "/TR",
        action,
        "/SC",
        "WEEKLY",
        "/D",
        day,
        "/ST",
        start,
        "/F",
    ]


class SchtasksScheduler:
    """Registers (or replaces) the weekly temp-file cleaning task."""

    def __init__(self, *, is_windows: Optional[bool] = None) -> None:
        self.is_windows = os.name == "nt" if is_windows is None else is_windows

    async def configure_weekly_cleaning(self, cancel: Optional[CancelToken] = None) -> None:
        if not self.is_windows:
            LOGGER.info("Task Scheduler unavailable; weekly cleaning not registered.")
            return
        await run_command_async(build_schedule_command(), timeout=60, cancel=cancel)
        LOGGER.info("Scheduled task %s registered", TASK_NAME)


__all__ = [
    "GAMING_SUMMARY",
    "PrivacyAdvisor",
    "ProcessBooster",
    "STANDARD_SUMMARY",
    "SchtasksScheduler",
    "build_schedule_command",
]
