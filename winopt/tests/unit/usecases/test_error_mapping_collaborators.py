from __future__ import annotations

import subprocess

import psutil

from winopt.domain.errors import OperationCancelled
from winopt.domain.ports import UseCaseError
from winopt.usecases.error_mapping import describe_error, map_collaborator_error


def test_use_case_errors_pass_through() -> None:
    original = UseCaseError("X", "kept")
    assert map_collaborator_error(original, default_code="Y") is original


def test_permission_error_names_file() -> None:
    err = map_collaborator_error(PermissionError(13, "denied", "C:\\pagefile.sys"), default_code="CLEAN_FAILED")
    assert err.code == "ACCESS_DENIED"
    assert err.message == "Access denied: C:\\pagefile.sys"


def test_missing_file_maps_to_not_found() -> None:
    err = map_collaborator_error(FileNotFoundError(2, "missing"), default_code="SCAN_FAILED")
    assert err.code == "NOT_FOUND"
    assert err.message == "Path not found."


def test_subprocess_failures() -> None:
    timeout = map_collaborator_error(subprocess.TimeoutExpired(["schtasks"], 60), default_code="D")
    failed = map_collaborator_error(subprocess.CalledProcessError(5, ["reg"]), default_code="D")

    assert timeout.code == "COMMAND_TIMEOUT"
    assert "60s" in timeout.message
    assert failed.code == "COMMAND_FAILED"
    assert "exit code 5" in failed.message


def test_psutil_access_denied() -> None:
    err = map_collaborator_error(psutil.AccessDenied(pid=4), default_code="ANALYSIS_FAILED")
    assert err.code == "ACCESS_DENIED"


def test_fallback_uses_default_code_and_text() -> None:
    err = map_collaborator_error(RuntimeError("weird"), default_code="SCAN_FAILED")
    assert (err.code, err.message) == ("SCAN_FAILED", "weird")

    err = map_collaborator_error(RuntimeError(), default_code="SCAN_FAILED")
    assert err.message == "RuntimeError"


def test_describe_error() -> None:
    assert describe_error(OperationCancelled()) == "Operation cancelled."
    assert describe_error(ValueError("bad value")) == "bad value"
