"""Use case removing the selected cleaning targets.

The configuration backup that precedes cleaning is best-effort: a failing
backup is logged and cleaning proceeds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from winopt.domain.entities import CleaningTarget
from winopt.domain.ports import BackupSafetyPort, CancelToken, CleanerPort, UseCaseError
from winopt.usecases.error_mapping import map_collaborator_error

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanResult:
    bytes_reclaimed: int
    cleaned: int
    backup_ok: bool


@dataclass
class CleanTargets:
    """Use-case callable: best-effort backup, then delete selected targets."""

    cleaner: CleanerPort
    backup: BackupSafetyPort

    async def __call__(
        self,
        targets: Sequence[CleaningTarget],
        cancel: Optional[CancelToken] = None,
    ) -> CleanResult:
        token = cancel or CancelToken()
        # Selection is read exactly once; later toggles do not affect this run.
        selected: List[CleaningTarget] = [t for t in targets if t.is_selected]

        token.raise_if_cancelled()
        backup_ok = await self._backup(token)

        token.raise_if_cancelled()
        if not selected:
            LOGGER.info("No cleaning targets selected; nothing to remove")
            return CleanResult(bytes_reclaimed=0, cleaned=0, backup_ok=backup_ok)

        try:
            reclaimed = await self.cleaner.clean(selected, token)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="CLEAN_FAILED") from exc
        token.raise_if_cancelled()

        return CleanResult(
            bytes_reclaimed=max(0, int(reclaimed or 0)),
            cleaned=len(selected),
            backup_ok=backup_ok,
        )

    async def _backup(self, token: CancelToken) -> bool:
        try:
            await self.backup.backup_configuration(token)
        except Exception as exc:
            LOGGER.warning("Configuration backup failed; continuing with cleanup: %s", exc)
            return False
        return True
