"""Use case locating and fixing broken registry entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from winopt.domain.ports import CancelToken, RegistryAnalyzerPort, UseCaseError
from winopt.usecases.error_mapping import map_collaborator_error

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryRepairResult:
    found: Tuple[str, ...]
    fixed: int


@dataclass
class RepairRegistry:
    registry: RegistryAnalyzerPort

    async def __call__(self, cancel: Optional[CancelToken] = None) -> RegistryRepairResult:
        """Find broken entries and hand all of them to the fixer.

        The fixer is not called when nothing was found.

        Raises:
            UseCaseError: If either registry call fails.
        """
        token = cancel or CancelToken()
        try:
            token.raise_if_cancelled()
            found = tuple(await self.registry.find_broken_entries(token))
            token.raise_if_cancelled()
            if found:
                await self.registry.fix_entries(found, token)
            token.raise_if_cancelled()
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="REGISTRY_REPAIR_FAILED") from exc
        LOGGER.info("Registry repair handled %d entries", len(found))
        return RegistryRepairResult(found=found, fixed=len(found))
