from __future__ import annotations

import pytest

from winopt.app.main import main


@pytest.fixture(autouse=True)
def _isolated_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("WINOPT_AUDIT_DIR", str(tmp_path / "audit"))


def test_demo_analyze_prints_metrics(capsys) -> None:
    assert main(["--demo", "analyze"]) == 0
    out = capsys.readouterr().out
    assert "System analysis completed." in out
    assert "Health score" in out


def test_demo_optimize_reports_progress(capsys) -> None:
    assert main(["--demo", "optimize"]) == 0
    out = capsys.readouterr().out
    assert "[1/7] Creating restore point..." in out
    assert "One-click optimization complete." in out


def test_demo_clean_runs_analysis_first(capsys) -> None:
    assert main(["--demo", "clean"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "System analysis completed."
    assert lines[-1].startswith("Cleanup completed. Freed ")


def test_demo_scan(capsys) -> None:
    assert main(["--demo", "scan"]) == 0
    assert "Quick scan complete. No threats found." in capsys.readouterr().out


def test_startup_toggle_by_name(capsys) -> None:
    assert main(["--demo", "startup", "disable", "onedrive"]) == 0
    assert "Startup item 'OneDrive' disabled." in capsys.readouterr().out


def test_unknown_startup_item_fails(capsys) -> None:
    assert main(["--demo", "startup", "enable", "Nope"]) == 1
    assert "Startup item 'Nope' not found." in capsys.readouterr().out
