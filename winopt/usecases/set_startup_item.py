from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from winopt.domain.entities import StartupItem
from winopt.domain.ports import CancelToken, StartupOptimizerPort, UseCaseError
from winopt.usecases.error_mapping import map_collaborator_error


@dataclass
class SetStartupItemEnabled:
    """Use-case callable toggling one autostart entry.

    Returns the updated item so the caller can swap it into its collection.
    """

    startup: StartupOptimizerPort

    async def __call__(
        self,
        item: StartupItem,
        enabled: bool,
        cancel: Optional[CancelToken] = None,
    ) -> StartupItem:
        token = cancel or CancelToken()
        token.raise_if_cancelled()
        if item.enabled == enabled:
            return item
        try:
            await self.startup.set_enabled(item, enabled, token)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="STARTUP_TOGGLE_FAILED") from exc
        return replace(item, enabled=enabled)
