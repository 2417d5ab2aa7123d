from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from winopt.domain.entities import ScanFinding
from winopt.domain.ports import CancelToken, MalwareScannerPort, UseCaseError
from winopt.usecases.error_mapping import map_collaborator_error


@dataclass
class ScanMalware:
    """Use-case callable returning the complete finding set of a quick scan."""

    scanner: MalwareScannerPort

    async def __call__(self, cancel: Optional[CancelToken] = None) -> Tuple[ScanFinding, ...]:
        token = cancel or CancelToken()
        token.raise_if_cancelled()
        try:
            findings = await self.scanner.quick_scan(token)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_collaborator_error(exc, default_code="SCAN_FAILED") from exc
        # A scanner stopped early returns a partial set; never publish it.
        token.raise_if_cancelled()
        return tuple(findings or ())
