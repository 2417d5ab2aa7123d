"""Restore points (PowerShell/WMI) and ``reg export`` configuration backups."""

from __future__ import annotations

import json
import logging
import os
import textwrap
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from winopt.domain.ports import CancelToken

from .exec_utils import run_command_async

LOGGER = logging.getLogger(__name__)

POWERSHELL = "powershell.exe"
RESTORE_POINT_TIMEOUT_S = 180

BACKUP_KEYS: Sequence[str] = (
    r"HKCU\Software\Microsoft\Windows\CurrentVersion\Run",
    r"HKCU\Software\Microsoft\Windows\CurrentVersion\Explorer\StartupApproved\Run",
)


def build_restore_point_command(description: str) -> List[str]:
    """PowerShell invocation: WMI ``SystemRestore`` first, ``Checkpoint-Computer`` second."""
    script = textwrap.dedent(
        f"""
        $description = {json.dumps(description)}
        try {{
            $sr = Get-WmiObject -Class SystemRestore -Namespace "root/default" -ErrorAction Stop
            $result = $sr.CreateRestorePoint($description, 0, 100)
            exit $result.ReturnValue
        }} catch {{
            try {{
                Checkpoint-Computer -Description $description -RestorePointType 'MODIFY_SETTINGS' -ErrorAction Stop | Out-Null
                exit 0
            }} catch {{
                Write-Error $_.Exception.Message
                exit 1
            }}
        }}
        """
    ).strip()
    return [POWERSHELL, "-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-Command", script]


class LocalBackupSafety:
    """Creates restore points and exports startup registry keys to ``backup_dir``.

    Off Windows both operations log and return without doing anything.
    """

    def __init__(self, backup_dir: str, *, is_windows: Optional[bool] = None) -> None:
        self.backup_dir = backup_dir
        self.is_windows = os.name == "nt" if is_windows is None else is_windows

    async def create_restore_point(self, reason: str, cancel: Optional[CancelToken] = None) -> None:
        description = reason or "WinOptimize restore point"
        if not self.is_windows:
            LOGGER.info("Restore points are only available on Windows hosts; skipping request.")
            return
        await run_command_async(
            build_restore_point_command(description),
            timeout=RESTORE_POINT_TIMEOUT_S,
            cancel=cancel,
        )
        LOGGER.info("System restore point created: %s", description)

    async def backup_configuration(self, cancel: Optional[CancelToken] = None) -> None:
        if not self.is_windows:
            LOGGER.info("Registry export skipped on non-Windows host.")
            return
        Path(self.backup_dir).mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        for index, key in enumerate(BACKUP_KEYS):
            target = Path(self.backup_dir) / f"startup-{stamp}-{index}.reg"
            await run_command_async(["reg.exe", "export", key, str(target), "/y"], timeout=60, cancel=cancel)
            LOGGER.info("Exported %s to %s", key, target)


__all__ = ["BACKUP_KEYS", "LocalBackupSafety", "build_restore_point_command"]
