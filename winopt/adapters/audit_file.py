"""Append-only daily audit log files."""

from __future__ import annotations

import asyncio
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from winopt.domain.entities import AuditEntry
from winopt.domain.ports import CancelToken

Clock = Callable[[], datetime]


def _now() -> datetime:
    return datetime.now().astimezone()


class FileAuditLog:
    """Writes ``[timestamp] message`` lines to ``maintenance-YYYYMMDD.log``."""

    def __init__(self, directory: str, clock: Optional[Clock] = None) -> None:
        self.directory = directory
        self.clock = clock or _now

    def path_for(self, entry: AuditEntry) -> Path:
        return Path(self.directory) / f"maintenance-{entry.day_key}.log"

    async def log(
        self,
        message: str,
        cancel: Optional[CancelToken] = None,
        *,
        timestamp: Optional[datetime] = None,
    ) -> None:
        entry = AuditEntry(timestamp=timestamp or self.clock(), message=message)
        await asyncio.to_thread(self._append, entry)

    def _append(self, entry: AuditEntry) -> None:
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path_for(entry), "a", encoding="utf-8") as f:
            f.write(entry.format_line() + "\n")

    def read_day(self, day: datetime) -> List[str]:
        """Lines written on ``day`` (empty when no file exists)."""
        path = Path(self.directory) / f"maintenance-{day.strftime('%Y%m%d')}.log"
        if not path.exists():
            return []
        with open(path, "r", encoding="utf-8") as f:
            return [line.rstrip("\n") for line in f if line.strip()]


__all__ = ["FileAuditLog"]
