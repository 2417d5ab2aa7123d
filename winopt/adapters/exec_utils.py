"""Subprocess helper shared by the PowerShell, ``reg`` and ``schtasks`` adapters."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Optional, Sequence

from winopt.domain.ports import CancelToken

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 120


def run_command(
    command: Sequence[str],
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run ``command`` capturing text output.

    Non-zero exit codes raise :class:`subprocess.CalledProcessError` when
    ``check`` is set; a missing executable raises ``FileNotFoundError``.
    """
    args = [str(part) for part in command]
    LOGGER.debug("Running %s", " ".join(args))
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        timeout=max(1, int(timeout)),
        check=False,
    )
    if result.returncode != 0:
        LOGGER.debug(
            "%s exited with %s: %s",
            args[0],
            result.returncode,
            (result.stderr or result.stdout or "").strip(),
        )
        if check:
            raise subprocess.CalledProcessError(result.returncode, args, result.stdout, result.stderr)
    return result


async def run_command_async(
    command: Sequence[str],
    *,
    timeout: float = DEFAULT_TIMEOUT_S,
    check: bool = True,
    cancel: Optional[CancelToken] = None,
) -> subprocess.CompletedProcess:
    if cancel is not None:
        cancel.raise_if_cancelled()
    return await asyncio.to_thread(run_command, command, timeout=timeout, check=check)


__all__ = ["DEFAULT_TIMEOUT_S", "run_command", "run_command_async"]
