"""Status-message formatting helpers for the maintenance view-model.

Call context:
    ``MaintenanceVM`` builds every status string through these helpers so the
    CLI, the NiceGUI page and the audit trail all show identical text.
"""

from __future__ import annotations

from typing import Optional

_BYTES_PER_MB = 1024.0 * 1024.0

READY = "Ready."
ANALYSIS_DONE = "System analysis completed."
SCAN_CLEAN = "Quick scan complete. No threats found."
OPERATION_CANCELLED = "Operation cancelled."
OPTIMIZATION_CANCELLED = "Optimization cancelled."


def format_megabytes(byte_count: Optional[int]) -> str:
    """Format a byte count as megabytes with two decimals and grouping."""
    value = max(0, int(byte_count or 0)) / _BYTES_PER_MB
    return f"{value:,.2f}"


def cleanup_status(byte_count: Optional[int]) -> str:
    return f"Cleanup completed. Freed {format_megabytes(byte_count)} MB."


def browser_cleanup_status(byte_count: Optional[int]) -> str:
    return f"Browser cleanup completed. Freed {format_megabytes(byte_count)} MB."


def scan_status(finding_count: int) -> str:
    if finding_count <= 0:
        return SCAN_CLEAN
    return f"Quick scan complete. {finding_count} suspicious files found."


def registry_status(fixed: int) -> str:
    return f"Registry repair completed. Fixed {max(0, fixed)} entries."


def startup_toggle_status(name: str, enabled: bool) -> str:
    state = "enabled" if enabled else "disabled"
    return f"Startup item '{name}' {state}."


def one_click_status(boost_summary: Optional[str]) -> str:
    summary = (boost_summary or "").strip()
    if not summary:
        return "One-click optimization complete."
    return f"One-click optimization complete. {summary}"


def operation_failed(message: str) -> str:
    return f"Operation failed: {message}"


def optimization_failed(message: str) -> str:
    return f"Optimization failed: {message}"


__all__ = [
    "ANALYSIS_DONE",
    "OPERATION_CANCELLED",
    "OPTIMIZATION_CANCELLED",
    "READY",
    "SCAN_CLEAN",
    "browser_cleanup_status",
    "cleanup_status",
    "format_megabytes",
    "one_click_status",
    "operation_failed",
    "optimization_failed",
    "registry_status",
    "scan_status",
    "startup_toggle_status",
]
