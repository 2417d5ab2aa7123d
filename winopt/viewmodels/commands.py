"""Command objects bound by views to view-model actions.

``GuardedCommand`` wraps an async body with a re-entrancy guard. The guard is
a plain ``busy`` flag: every caller drives commands from one asyncio event
loop, so the check and the set in :meth:`GuardedCommand.run` cannot
interleave. Driving a command from several threads needs an atomic
test-and-set (for example a non-blocking ``threading.Lock.acquire``) in place
of the flag to keep at most one body in flight.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from .observable import Listener, ListenerList, PropertyChanged, Unsubscribe

R = TypeVar("R")

LOGGER = logging.getLogger(__name__)

CAN_RUN_CHANGED = "can_run"


def _always(_param: Any) -> bool:
    return True


class GuardedCommand(Generic[R]):
    """Async command with exclusive execution and can-run notifications."""

    def __init__(
        self,
        execute: Callable[[Any], Awaitable[R]],
        can_execute: Optional[Callable[[Any], bool]] = None,
        *,
        name: str = "",
    ) -> None:
        self._execute = execute
        self._can_execute = can_execute or _always
        self._busy = False
        self._listeners = ListenerList()
        self.name = name or getattr(execute, "__name__", "command")

    @property
    def busy(self) -> bool:
        return self._busy

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register for ``can_run`` change events (entry and exit of ``run``)."""
        return self._listeners.add(listener)

    def can_run(self, param: Any = None) -> bool:
        if self._busy:
            return False
        return bool(self._can_execute(param))

    async def run(self, param: Any = None) -> Optional[R]:
        """Execute the body unless already running.

        Returns ``None`` without side effects when the command cannot run.
        The busy flag is cleared and a second notification fires on every
        exit path, including a raising body.
        """
        if not self.can_run(param):
            LOGGER.debug("Command %s rejected: busy or not runnable", self.name)
            return None
        self._busy = True
        self.raise_can_run_changed()
        try:
            return await self._execute(param)
        finally:
            self._busy = False
            self.raise_can_run_changed()

    async def invoke(self, param: Any = None) -> R:
        """Call the body directly, bypassing the guard and notifications."""
        return await self._execute(param)

    def raise_can_run_changed(self) -> None:
        self._listeners.notify(PropertyChanged(name=CAN_RUN_CHANGED, value=not self._busy))

    def __repr__(self) -> str:
        return f"GuardedCommand({self.name!r}, busy={self._busy})"


class RelayCommand(Generic[R]):
    """Synchronous command for instant actions such as the theme toggle."""

    def __init__(
        self,
        execute: Callable[[Any], R],
        can_execute: Optional[Callable[[Any], bool]] = None,
        *,
        name: str = "",
    ) -> None:
        self._execute = execute
        self._can_execute = can_execute or _always
        self._listeners = ListenerList()
        self.name = name or getattr(execute, "__name__", "command")

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._listeners.add(listener)

    def can_run(self, param: Any = None) -> bool:
        return bool(self._can_execute(param))

    def run(self, param: Any = None) -> Optional[R]:
        if not self.can_run(param):
            return None
        return self._execute(param)

    def raise_can_run_changed(self) -> None:
        self._listeners.notify(PropertyChanged(name=CAN_RUN_CHANGED, value=True))


__all__ = ["CAN_RUN_CHANGED", "GuardedCommand", "RelayCommand"]
