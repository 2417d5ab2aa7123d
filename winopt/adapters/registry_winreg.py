"""Startup entries and broken-entry repair over the ``HKCU\\...\\Run`` key.

Enabled/disabled state lives in the ``StartupApproved\\Run`` binary values the
Task Manager writes; the ``Run`` values themselves are never deleted. Without
``winreg`` (non-Windows hosts) every query returns an empty result.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shlex
import shutil
from typing import Dict, List, Optional, Sequence

from winopt.domain.entities import StartupItem
from winopt.domain.ports import CancelToken

try:  # pragma: no cover - exercised on Windows hosts only
    import winreg
except ImportError:  # pragma: no cover - non-Windows
    winreg = None  # type: ignore[assignment]

LOGGER = logging.getLogger(__name__)

RUN_KEY = r"Software\Microsoft\Windows\CurrentVersion\Run"
APPROVED_KEY = r"Software\Microsoft\Windows\CurrentVersion\Explorer\StartupApproved\Run"
SOURCE_LABEL = "HKCU Run"

APPROVED_ENABLED = bytes([0x02]) + bytes(11)
APPROVED_DISABLED = bytes([0x03]) + bytes(11)

HEAVY_APPS = (
    "teams",
    "onedrive",
    "steam",
    "discord",
    "spotify",
    "adobe",
    "epicgames",
    "skype",
    "dropbox",
    "zoom",
)
HIGH_IMPACT_BYTES = 50 * 1024 * 1024
MEDIUM_IMPACT_BYTES = 5 * 1024 * 1024

_QUOTED = re.compile(r'^\s*"([^"]+)"')


def command_target(command: str) -> str:
    """Executable path of a ``Run`` command line, environment variables expanded."""
    text = os.path.expandvars(str(command or "").strip())
    quoted = _QUOTED.match(text)
    if quoted:
        return quoted.group(1)
    lowered = text.lower()
    marker = lowered.find(".exe")
    if marker >= 0:
        return text[: marker + 4]
    try:
        parts = shlex.split(text, posix=False)
    except ValueError:
        parts = text.split()
    return parts[0] if parts else ""


def target_exists(target: str) -> bool:
    """Whether Windows would find ``target``; bare names resolve like the shell does."""
    if os.path.exists(target):
        return True
    if os.path.dirname(target):
        return False
    if shutil.which(target):
        return True
    windir = os.environ.get("SystemRoot") or os.environ.get("windir") or r"C:\Windows"
    return any(
        os.path.exists(os.path.join(windir, folder, target)) for folder in ("System32", "SysWOW64", "")
    )


def classify_impact(name: str, target: str, size_bytes: Optional[int]) -> str:
    """Startup impact from a known heavy-app list, then executable size."""
    haystack = f"{name} {os.path.basename(target)}".lower().replace(" ", "")
    if any(app in haystack for app in HEAVY_APPS):
        return "High"
    if size_bytes is None:
        return "Medium"
    if size_bytes >= HIGH_IMPACT_BYTES:
        return "High"
    if size_bytes >= MEDIUM_IMPACT_BYTES:
        return "Medium"
    return "Low"


def approved_flag_enabled(value: Optional[bytes]) -> bool:
    """StartupApproved data: missing or an even first byte means enabled."""
    if not value:
        return True
    return not (value[0] & 0x01)


def _read_values(path: str) -> Dict[str, object]:
    if winreg is None:
        return {}
    data: Dict[str, object] = {}
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, path, 0, winreg.KEY_READ) as handle:
            _, value_count, _ = winreg.QueryInfoKey(handle)
            for index in range(value_count):
                name, value, _ = winreg.EnumValue(handle, index)
                data[name] = value
    except FileNotFoundError:
        return {}
    return data


def _write_approved(name: str, enabled: bool) -> None:
    if winreg is None:
        raise OSError("Startup state can only be changed on Windows hosts.")
    with winreg.CreateKeyEx(winreg.HKEY_CURRENT_USER, APPROVED_KEY, 0, winreg.KEY_SET_VALUE) as handle:
        winreg.SetValueEx(handle, name, 0, winreg.REG_BINARY, APPROVED_ENABLED if enabled else APPROVED_DISABLED)


def _file_size(path: str) -> Optional[int]:
    try:
        return os.path.getsize(path)
    except OSError:
        return None


class WinregStartupOptimizer:
    """Lists ``HKCU Run`` entries and toggles them through ``StartupApproved``."""

    def list_entries(self) -> List[StartupItem]:
        approved = _read_values(APPROVED_KEY)
        items: List[StartupItem] = []
        for name, command in _read_values(RUN_KEY).items():
            target = command_target(str(command))
            items.append(
                StartupItem(
                    name=name,
                    source=SOURCE_LABEL,
                    impact=classify_impact(name, target, _file_size(target)),
                    enabled=approved_flag_enabled(approved.get(name)),  # type: ignore[arg-type]
                )
            )
        return items

    async def list_items(self, cancel: Optional[CancelToken] = None) -> List[StartupItem]:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(self.list_entries)

    async def set_enabled(self, item: StartupItem, enabled: bool, cancel: Optional[CancelToken] = None) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled()
        await asyncio.to_thread(_write_approved, item.name, enabled)
        LOGGER.info("Startup item %s %s", item.name, "enabled" if enabled else "disabled")


class WinregRegistryAnalyzer:
    """Reports ``Run`` entries whose executable no longer exists.

    Fixing disables the entry through ``StartupApproved``; the command line is
    kept so the change can be reverted from Task Manager.
    """

    @staticmethod
    def describe(name: str, target: str) -> str:
        return f"HKCU\\{RUN_KEY}\\{name} (missing target: {target})"

    @staticmethod
    def entry_name(description: str) -> str:
        head = description.split(" (missing target", 1)[0]
        return head.rsplit("\\", 1)[-1]

    def broken_entries(self) -> List[str]:
        approved = _read_values(APPROVED_KEY)
        broken: List[str] = []
        for name, command in _read_values(RUN_KEY).items():
            if not approved_flag_enabled(approved.get(name)):  # type: ignore[arg-type]
                continue
            target = command_target(str(command))
            if target and not target_exists(target):
                broken.append(self.describe(name, target))
        return broken

    async def find_broken_entries(self, cancel: Optional[CancelToken] = None) -> List[str]:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(self.broken_entries)

    async def fix_entries(self, entries: Sequence[str], cancel: Optional[CancelToken] = None) -> None:
        for entry in entries:
            if cancel is not None:
                cancel.raise_if_cancelled()
            name = self.entry_name(entry)
            await asyncio.to_thread(_write_approved, name, False)
            LOGGER.info("Disabled broken startup entry %s", name)


__all__ = [
    "WinregRegistryAnalyzer",
    "WinregStartupOptimizer",
    "approved_flag_enabled",
    "classify_impact",
    "command_target",
    "target_exists",
]
