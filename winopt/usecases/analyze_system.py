"""Use case gathering a full analysis pass from the collaborators.

The result is handed to ``MaintenanceVM`` which publishes it wholesale, so no
partially collected state ever reaches observers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from winopt.domain.entities import CleaningTarget, StartupItem, SystemSnapshot
from winopt.domain.ports import (
    CancelToken,
    CleanerPort,
    PrivacySecurityPort,
    StartupOptimizerPort,
    SystemAnalysisPort,
    UseCaseError,
)
from winopt.usecases.error_mapping import map_collaborator_error

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis pass produced."""

    snapshot: SystemSnapshot
    targets: Tuple[CleaningTarget, ...]
    startup_items: Tuple[StartupItem, ...]
    privacy_risks: Tuple[str, ...]


@dataclass
class AnalyzeSystem:
    """Use-case callable: telemetry, cleaning targets, startup items, risks."""

    analysis: SystemAnalysisPort
    cleaner: CleanerPort
    startup: StartupOptimizerPort
    privacy: PrivacySecurityPort

    async def __call__(self, cancel: Optional[CancelToken] = None) -> AnalysisResult:
        token = cancel or CancelToken()
        try:
            token.raise_if_cancelled()
            snapshot = await self.analysis.analyze(token)
            token.raise_if_cancelled()
            targets: List[CleaningTarget] = list(await self.cleaner.list_targets(token))
            token.raise_if_cancelled()
            items: List[StartupItem] = list(await self.startup.list_items(token))
            token.raise_if_cancelled()
            risks: List[str] = list(await self.privacy.analyze_risks(token))
            token.raise_if_cancelled()
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="ANALYSIS_FAILED") from exc

        LOGGER.debug(
            "Analysis collected %d targets, %d startup items, %d privacy risks",
            len(targets),
            len(items),
            len(risks),
        )
        return AnalysisResult(
            snapshot=snapshot,
            targets=tuple(targets),
            startup_items=tuple(items),
            privacy_risks=tuple(str(risk) for risk in risks),
        )
