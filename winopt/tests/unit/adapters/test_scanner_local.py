from __future__ import annotations

import asyncio

import pytest

from winopt.adapters.scanner_local import SignatureScanner
from winopt.domain.errors import OperationCancelled
from winopt.domain.ports import CancelToken


def _touch(path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")


def test_signatures_match_case_insensitively(tmp_path) -> None:
    _touch(tmp_path / "Downloads" / "Photoshop_KeyGen.exe")
    _touch(tmp_path / "Downloads" / "nested" / "EICAR.com")
    _touch(tmp_path / "Downloads" / "readme.txt")
    scanner = SignatureScanner(roots=[str(tmp_path / "Downloads"), str(tmp_path / "missing")])

    findings = asyncio.run(scanner.quick_scan())

    assert sorted(f.signature_name for f in findings) == ["PotentialHackTool.Keygen", "TestMalware.EICAR"]
    assert {f.risk_level for f in findings} == {"Medium"}


def test_one_file_can_match_several_signatures() -> None:
    scanner = SignatureScanner(roots=[])
    assert scanner.matches("keygen-injector.exe") == ["PotentialHackTool.Keygen", "Suspicious.Injector"]


def test_file_limit_caps_each_root(tmp_path) -> None:
    for index in range(5):
        _touch(tmp_path / f"keygen{index}.exe")
    scanner = SignatureScanner(roots=[str(tmp_path)], file_limit=3)

    assert len(asyncio.run(scanner.quick_scan())) == 3


def test_cancelled_token_raises(tmp_path) -> None:
    token = CancelToken()
    token.cancel()
    with pytest.raises(OperationCancelled):
        asyncio.run(SignatureScanner(roots=[str(tmp_path)]).quick_scan(token))


def test_cancel_during_walk_raises_instead_of_partial_result(tmp_path) -> None:
    for index in range(5):
        _touch(tmp_path / f"keygen{index}.exe")
    token = CancelToken()
    scanner = SignatureScanner(roots=[str(tmp_path)])
    plain_matches = scanner.matches

    def cancelling_matches(filename):
        token.cancel()
        return plain_matches(filename)

    scanner.matches = cancelling_matches

    with pytest.raises(OperationCancelled):
        asyncio.run(scanner.quick_scan(token))
