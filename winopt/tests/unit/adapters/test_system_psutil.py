from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from winopt.adapters import system_psutil
from winopt.adapters.system_psutil import PsutilSystemAnalysis, compute_health_score


@pytest.mark.parametrize(
    ("cpu", "ram", "disk", "startup", "expected"),
    [
        (10, 30, 40, 20, 100),
        (100, 60, 70, 60, 80),
        (50, 100, 70, 60, 80),
        (50, 60, 100, 60, 76),
        (50, 60, 70, 600, 85),
        (100, 100, 100, 600, 21),
    ],
)
def test_health_score(cpu, ram, disk, startup, expected) -> None:
    assert compute_health_score(cpu, ram, disk, startup) == expected


def test_analyze_builds_snapshot_from_psutil(monkeypatch) -> None:
    fake = SimpleNamespace(
        cpu_percent=lambda interval=None: 12.5,
        virtual_memory=lambda: SimpleNamespace(percent=40.0),
        disk_usage=lambda root: SimpleNamespace(percent=55.0),
        boot_time=lambda: 1000.0,
        users=lambda: [SimpleNamespace(started=1045.0)],
        process_iter=lambda attrs=None: [
            SimpleNamespace(info={"name": "svchost"}),
            SimpleNamespace(info={"name": "Explorer"}),
            SimpleNamespace(info={"name": "svchost"}),
            SimpleNamespace(info={"name": None}),
        ],
        Error=Exception,
    )
    monkeypatch.setattr(system_psutil, "psutil", fake)

    snapshot = asyncio.run(PsutilSystemAnalysis(process_limit=5, disk_root="/").analyze())

    assert snapshot.cpu_usage_pct == 12.5
    assert snapshot.startup_time.total_seconds() == 45.0
    assert snapshot.running_processes == ("Explorer", "svchost")
    assert snapshot.background_services == ()
    assert snapshot.health_score == 100
