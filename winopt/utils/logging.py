"""Diagnostic logging setup shared by the CLI and the web entry point.

Only the Python root logger is tuned here; the maintenance audit trail goes
through ``AuditLogPort``. ``WINOPT_LOG_LEVEL`` pins a level, and a truthy
``WINOPT_DEBUG`` / ``WINOPT_DEBUG_LOGGING`` forces DEBUG. Both win over the
``--debug`` switch.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"
LEVEL_ENV = "WINOPT_LOG_LEVEL"
DEBUG_ENVS = ("WINOPT_DEBUG", "WINOPT_DEBUG_LOGGING")

# Framework loggers held at WARNING unless debugging or a level is pinned.
CHATTY_LOGGERS = ("nicegui", "uvicorn", "uvicorn.access", "watchfiles")

_TRUTHY = {"1", "true", "yes", "on"}


def env_log_level(environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Level requested by the environment, or ``None`` when nothing is set.

    Unknown level names are ignored rather than rejected.
    """
    env = os.environ if environ is None else environ
    pinned = (env.get(LEVEL_ENV) or "").strip()
    if pinned.isdigit():
        return int(pinned)
    if pinned:
        level = logging.getLevelName(pinned.upper())
        if isinstance(level, int):
            return level
    if any((env.get(name) or "").strip().lower() in _TRUTHY for name in DEBUG_ENVS):
        return logging.DEBUG
    return None


def env_forces_debug(environ: Optional[Mapping[str, str]] = None) -> bool:
    level = env_log_level(environ)
    return level is not None and level <= logging.DEBUG


def apply_debug_preference(debug: bool, *, quiet_level: int = logging.WARNING) -> int:
    """Install the root handler once and set this run's level.

    ``quiet_level`` applies when neither ``debug`` nor the environment asks
    for more. Returns the effective root level.
    """
    pinned = env_log_level()
    if pinned is not None:
        level = pinned
    else:
        level = logging.DEBUG if debug else quiet_level

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    root.setLevel(level)

    verbose = debug or pinned is not None
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else max(level, logging.WARNING))
    return level
