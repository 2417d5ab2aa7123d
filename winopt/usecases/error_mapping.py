"""Translate collaborator exceptions into user-facing UseCaseError instances."""

from __future__ import annotations

import subprocess
from typing import Optional

import psutil

from winopt.domain.ports import UseCaseError


def map_collaborator_error(
    exc: BaseException,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by a collaborator call.
        default_code: Code used when no specific mapping applies.
        default_message: Optional message overriding ``str(exc)`` for the
            fallback mapping.

    Returns:
        UseCaseError: Value carrying a stable code and human-readable text.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, psutil.AccessDenied):
        return UseCaseError("ACCESS_DENIED", "Access denied while reading system telemetry.")
    if isinstance(exc, psutil.Error):
        return UseCaseError("TELEMETRY_FAILED", _compose_error_message("System telemetry unavailable", str(exc)))
    if isinstance(exc, PermissionError):
        return UseCaseError(
            "ACCESS_DENIED",
            _compose_error_message("Access denied", _filename_hint(exc)),
        )
    if isinstance(exc, FileNotFoundError):
        return UseCaseError(
            "NOT_FOUND",
            _compose_error_message("Path not found", _filename_hint(exc)),
        )
    if isinstance(exc, subprocess.TimeoutExpired):
        return UseCaseError("COMMAND_TIMEOUT", f"System command timed out after {exc.timeout:g}s.")
    if isinstance(exc, subprocess.CalledProcessError):
        return UseCaseError(
            "COMMAND_FAILED",
            f"System command failed with exit code {exc.returncode}.",
        )
    if isinstance(exc, OSError) and not default_message:
        return UseCaseError(default_code, exc.strerror or str(exc) or exc.__class__.__name__)

    message = default_message or str(exc) or exc.__class__.__name__
    return UseCaseError(default_code, message)


def describe_error(exc: BaseException) -> str:
    """Return the text that may reach the observable status surface."""
    if isinstance(exc, UseCaseError):
        return exc.message
    return map_collaborator_error(exc, default_code="UNEXPECTED").message


def _compose_error_message(base: str, hint: Optional[str]) -> str:
    hint_text = (hint or "").strip()
    if hint_text:
        return f"{base}: {hint_text}"
    if base.endswith("."):
        return base
    return f"{base}."


def _filename_hint(exc: OSError) -> Optional[str]:
    filename = getattr(exc, "filename", None)
    if filename:
        return str(filename)
    return None


__all__ = ["describe_error", "map_collaborator_error"]
