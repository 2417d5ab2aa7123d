from __future__ import annotations

import asyncio
import subprocess

import pytest

from winopt.adapters import backup_local
from winopt.adapters.backup_local import BACKUP_KEYS, LocalBackupSafety, build_restore_point_command


def test_restore_point_command_embeds_quoted_description() -> None:
    command = build_restore_point_command('Before "tune-up"')
    assert command[0] == "powershell.exe"
    assert '$description = "Before \\"tune-up\\""' in command[-1]
    assert "Checkpoint-Computer" in command[-1]


def test_non_windows_is_a_no_op(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(backup_local, "run_command_async", pytest.fail)
    safety = LocalBackupSafety(str(tmp_path / "backups"), is_windows=False)

    asyncio.run(safety.create_restore_point("x"))
    asyncio.run(safety.backup_configuration())

    assert not (tmp_path / "backups").exists()


def test_windows_exports_each_key(monkeypatch, tmp_path) -> None:
    calls = []

    async def fake_run(command, **kwargs):
        calls.append(command)

    monkeypatch.setattr(backup_local, "run_command_async", fake_run)
    safety = LocalBackupSafety(str(tmp_path / "backups"), is_windows=True)

    asyncio.run(safety.backup_configuration())

    assert [c[2] for c in calls] == list(BACKUP_KEYS)
    assert all(c[:2] == ["reg.exe", "export"] for c in calls)
    assert (tmp_path / "backups").is_dir()


def test_restore_point_failure_propagates(monkeypatch, tmp_path) -> None:
    async def failing(command, **kwargs):
        raise subprocess.CalledProcessError(1, command)

    monkeypatch.setattr(backup_local, "run_command_async", failing)
    safety = LocalBackupSafety(str(tmp_path), is_windows=True)

    with pytest.raises(subprocess.CalledProcessError):
        asyncio.run(safety.create_restore_point("x"))
