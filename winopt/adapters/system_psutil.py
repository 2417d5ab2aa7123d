"""System analysis adapter backed by ``psutil`` telemetry."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from datetime import timedelta
from typing import List, Optional

import psutil

from winopt.domain.entities import SystemSnapshot
from winopt.domain.ports import CancelToken

LOGGER = logging.getLogger(__name__)

_CPU_SAMPLE_S = 0.5


def compute_health_score(cpu: float, ram: float, disk: float, startup_s: float) -> int:
    """Derive a 0-100 score from load figures; 100 means nothing to improve."""
    score = 100.0
    score -= max(0.0, cpu - 50.0) * 0.4
    score -= max(0.0, ram - 60.0) * 0.5
    score -= max(0.0, disk - 70.0) * 0.8
    score -= min(15.0, max(0.0, startup_s - 60.0) / 4.0)
    return int(round(min(100.0, max(0.0, score))))


def _system_drive() -> str:
    if os.name == "nt":
        return os.environ.get("SystemDrive", "C:") + "\\"
    return "/"


class PsutilSystemAnalysis:
    """Reads CPU/RAM/disk load, boot timing, processes and services."""

    def __init__(self, *, process_limit: int = 25, disk_root: Optional[str] = None) -> None:
        self.process_limit = max(1, int(process_limit))
        self.disk_root = disk_root or _system_drive()

    async def analyze(self, cancel: Optional[CancelToken] = None) -> SystemSnapshot:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(self._collect)

    # ------------------------------------------------------------------
    def _collect(self) -> SystemSnapshot:
        cpu = float(psutil.cpu_percent(interval=_CPU_SAMPLE_S))
        ram = float(psutil.virtual_memory().percent)
        disk = float(psutil.disk_usage(self.disk_root).percent)
        startup_s = self._estimate_startup_seconds()
        snapshot = SystemSnapshot(
            cpu_usage_pct=cpu,
            ram_usage_pct=ram,
            disk_usage_pct=disk,
            startup_time=timedelta(seconds=startup_s),
            health_score=compute_health_score(cpu, ram, disk, startup_s),
            running_processes=tuple(self._process_names()),
            background_services=tuple(self._running_services()),
        )
        LOGGER.debug(
            "Telemetry cpu=%.1f ram=%.1f disk=%.1f startup=%.0fs score=%d",
            cpu,
            ram,
            disk,
            startup_s,
            snapshot.health_score,
        )
        return snapshot

    @staticmethod
    def _estimate_startup_seconds() -> float:
        """Seconds from kernel boot to the first interactive session.

        Falls back to 0 when no session start is known (headless hosts).
        """
        boot = psutil.boot_time()
        starts = [user.started for user in psutil.users() if user.started and user.started >= boot]
        if not starts:
            return 0.0
        return max(0.0, min(min(starts) - boot, time.time() - boot))

    def _process_names(self) -> List[str]:
        names = set()
        for proc in psutil.process_iter(["name"]):
            name = proc.info.get("name")
            if name:
                names.add(str(name))
        return sorted(names, key=str.lower)[: self.process_limit]

    def _running_services(self) -> List[str]:
        if not hasattr(psutil, "win_service_iter"):
            return []
        services: List[str] = []
        for service in psutil.win_service_iter():
            try:
                if service.status() != "running":
                    continue
                services.append(service.display_name())
            except psutil.Error:
                continue
            if len(services) >= self.process_limit:
                break
        return services


__all__ = ["PsutilSystemAnalysis", "compute_health_score"]
