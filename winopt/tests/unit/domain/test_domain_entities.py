from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from winopt.domain.entities import (
    RECOMMEND_DISABLE,
    RECOMMEND_NONE,
    AuditEntry,
    CleaningTarget,
    StartupItem,
    SystemSnapshot,
)
from winopt.tests.unit.stubs import make_snapshot


@pytest.mark.parametrize(
    ("impact", "enabled", "expected"),
    [
        ("High", True, RECOMMEND_DISABLE),
        ("High", False, RECOMMEND_NONE),
        ("Medium", True, RECOMMEND_NONE),
        ("Medium", False, RECOMMEND_NONE),
        ("Low", True, RECOMMEND_NONE),
        ("Low", False, RECOMMEND_NONE),
    ],
)
def test_startup_recommendation_only_for_enabled_high_impact(impact: str, enabled: bool, expected: str) -> None:
    item = StartupItem(name="App", source="HKCU Run", impact=impact, enabled=enabled)
    assert item.recommendation == expected


def test_startup_item_rejects_unknown_impact() -> None:
    with pytest.raises(ValueError):
        StartupItem(name="App", source="HKCU Run", impact="Extreme")


def test_startup_recommendation_label_is_readable() -> None:
    item = StartupItem(name="Teams", source="HKCU Run", impact="High")
    assert item.recommendation_label == "Disable to improve boot speed"


@pytest.mark.parametrize("field", ["cpu_usage_pct", "ram_usage_pct", "disk_usage_pct"])
@pytest.mark.parametrize("value", [-0.1, 100.5])
def test_snapshot_rejects_percent_out_of_range(field: str, value: float) -> None:
    with pytest.raises(ValueError):
        make_snapshot(**{field: value})


def test_snapshot_accepts_boundaries() -> None:
    snapshot = make_snapshot(cpu_usage_pct=0, ram_usage_pct=100, disk_usage_pct=100.0, health_score=0)
    assert snapshot.cpu_usage_pct == 0.0
    assert snapshot.ram_usage_pct == 100.0


@pytest.mark.parametrize("score", [-1, 101])
def test_snapshot_rejects_health_score_out_of_range(score: int) -> None:
    with pytest.raises(ValueError):
        make_snapshot(health_score=score)


def test_snapshot_rejects_negative_startup_time() -> None:
    with pytest.raises(ValueError):
        make_snapshot(startup_time=timedelta(seconds=-1))


def test_snapshot_is_immutable_and_keeps_order() -> None:
    snapshot = make_snapshot(running_processes=["zeta", "alpha"])
    assert snapshot.running_processes == ("zeta", "alpha")
    with pytest.raises(FrozenInstanceError):
        snapshot.cpu_usage_pct = 5.0  # type: ignore[misc]


def test_snapshot_startup_label() -> None:
    assert make_snapshot(startup_time=timedelta(seconds=42)).startup_time_label == "42s"


def test_cleaning_target_selected_by_default() -> None:
    target = CleaningTarget(name="User Temp", path="/tmp")
    assert target.is_selected is True
    target.is_selected = False
    assert target.is_selected is False


def test_audit_entry_line_and_day_key() -> None:
    stamp = datetime(2024, 3, 9, 14, 5, 0, tzinfo=timezone.utc)
    entry = AuditEntry(timestamp=stamp, message="System analysis completed.")
    assert entry.format_line() == "[2024-03-09T14:05:00+00:00] System analysis completed."
    assert entry.day_key == "20240309"


def test_snapshot_type_guard_for_health_score() -> None:
    with pytest.raises(TypeError):
        SystemSnapshot(
            cpu_usage_pct=1.0,
            ram_usage_pct=1.0,
            disk_usage_pct=1.0,
            startup_time=timedelta(0),
            health_score=True,
        )
