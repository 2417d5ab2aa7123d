"""Filename signature scanner over the usual download/temp drop folders."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from winopt.domain.entities import ScanFinding
from winopt.domain.ports import CancelToken

LOGGER = logging.getLogger(__name__)

DEFAULT_SIGNATURES: Dict[str, str] = {
    "eicar": "TestMalware.EICAR",
    "keygen": "PotentialHackTool.Keygen",
    "injector": "Suspicious.Injector",
}

DEFAULT_RISK = "Medium"


def default_roots() -> List[str]:
    roots = [os.environ.get("TEMP") or os.environ.get("TMPDIR") or "/tmp"]
    roots.append(str(Path.home() / "Downloads"))
    return roots


class SignatureScanner:
    """Flags files whose name contains a known signature fragment.

    Each root is walked until ``file_limit`` files have been inspected; the
    fragment match is case-insensitive.
    """

    def __init__(
        self,
        *,
        roots: Optional[Sequence[str]] = None,
        signatures: Optional[Dict[str, str]] = None,
        file_limit: int = 2500,
    ) -> None:
        self.roots = list(roots) if roots is not None else default_roots()
        self.signatures = {key.lower(): value for key, value in (signatures or DEFAULT_SIGNATURES).items()}
        self.file_limit = max(1, int(file_limit))

    async def quick_scan(self, cancel: Optional[CancelToken] = None) -> List[ScanFinding]:
        findings: List[ScanFinding] = []
        for root in self.roots:
            if cancel is not None:
                cancel.raise_if_cancelled()
            findings.extend(await asyncio.to_thread(self._scan_root, root, cancel))
        LOGGER.info("Quick scan inspected %d root(s), %d finding(s)", len(self.roots), len(findings))
        return findings

    def matches(self, filename: str) -> List[str]:
        """Signature names whose fragment occurs in ``filename``."""
        lowered = filename.lower()
        return [signature for fragment, signature in self.signatures.items() if fragment in lowered]

    def _scan_root(self, root: str, cancel: Optional[CancelToken]) -> List[ScanFinding]:
        if not os.path.isdir(root):
            return []
        findings: List[ScanFinding] = []
        inspected = 0
        for dirpath, _dirnames, filenames in os.walk(root, onerror=lambda _err: None):
            for filename in filenames:
                if cancel is not None:
                    cancel.raise_if_cancelled()
                if inspected >= self.file_limit:
                    return findings
                inspected += 1
                for signature in self.matches(filename):
                    findings.append(
                        ScanFinding(
                            file_path=os.path.join(dirpath, filename),
                            signature_name=signature,
                            risk_level=DEFAULT_RISK,
                        )
                    )
        return findings


__all__ = ["DEFAULT_SIGNATURES", "SignatureScanner", "default_roots"]
