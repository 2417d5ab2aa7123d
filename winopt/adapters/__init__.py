"""Adapter package for OS-facing implementations.

Purpose:
    Collect concrete implementations for domain ports (psutil telemetry,
    filesystem cleanup, registry access, PowerShell/schtasks helpers, audit
    files and demo doubles) used by use cases.

Dependencies:
    Individual submodules depend on ``psutil``, ``winreg`` (Windows only),
    filesystem APIs, subprocess and domain protocol definitions.

Call context:
    Imported by app composition modules (for runtime wiring) and by tests (for
    mocks and filesystem-level behavior verification).
"""
