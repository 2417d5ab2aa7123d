from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from winopt.domain.entities import ScanFinding, StartupItem
from winopt.domain.errors import OperationCancelled
from winopt.domain.ports import CancelToken, UseCaseError
from winopt.usecases.analyze_system import AnalyzeSystem
from winopt.usecases.clean_browsers import CleanBrowsers
from winopt.usecases.repair_registry import RepairRegistry
from winopt.usecases.scan_malware import ScanMalware
from winopt.usecases.set_startup_item import SetStartupItemEnabled
from winopt.tests.unit.stubs import StubCollaborators


def test_analyze_collects_every_collaborator() -> None:
    stubs = StubCollaborators()
    uc = AnalyzeSystem(analysis=stubs, cleaner=stubs, startup=stubs, privacy=stubs)

    result = asyncio.run(uc())

    assert result.snapshot is stubs.snapshot
    assert [t.name for t in result.targets] == ["User Temp"]
    assert result.startup_items[0].name == "OneDrive"
    assert result.privacy_risks == ("Telemetry services enabled",)


def test_analyze_failure_is_wrapped() -> None:
    stubs = StubCollaborators()
    stubs.fail["list_items"] = RuntimeError("registry offline")
    uc = AnalyzeSystem(analysis=stubs, cleaner=stubs, startup=stubs, privacy=stubs)

    with pytest.raises(UseCaseError) as info:
        asyncio.run(uc())

    assert info.value.code == "ANALYSIS_FAILED"
    assert stubs.count("analyze_risks") == 0


def test_browser_clean_uses_fixed_flags() -> None:
    cleaner = AsyncMock()
    cleaner.clean_browsers.return_value = 4096

    assert asyncio.run(CleanBrowsers(browser_cleaner=cleaner)()) == 4096
    kwargs = cleaner.clean_browsers.await_args.kwargs
    assert (kwargs["include_cookies"], kwargs["include_history"], kwargs["include_autofill"]) == (True, True, False)


def test_scan_returns_tuple_of_findings() -> None:
    finding = ScanFinding("/tmp/eicar.com", "TestMalware.EICAR", "Medium")
    scanner = AsyncMock()
    scanner.quick_scan.return_value = [finding]

    assert asyncio.run(ScanMalware(scanner=scanner)()) == (finding,)


def test_repair_skips_fix_when_nothing_found() -> None:
    registry = AsyncMock()
    registry.find_broken_entries.return_value = []

    result = asyncio.run(RepairRegistry(registry=registry)())

    assert result.fixed == 0
    registry.fix_entries.assert_not_awaited()


def test_repair_fixes_all_found_entries() -> None:
    registry = AsyncMock()
    registry.find_broken_entries.return_value = ["a", "b"]

    result = asyncio.run(RepairRegistry(registry=registry)())

    assert result.found == ("a", "b")
    assert result.fixed == 2
    assert tuple(registry.fix_entries.await_args.args[0]) == ("a", "b")


def test_set_startup_returns_replaced_item() -> None:
    startup = AsyncMock()
    item = StartupItem(name="Teams", source="HKCU Run", impact="High")

    updated = asyncio.run(SetStartupItemEnabled(startup=startup)(item, False))

    assert updated.enabled is False
    assert updated.recommendation == "none"
    startup.set_enabled.assert_awaited_once()


def test_set_startup_no_change_skips_collaborator() -> None:
    startup = AsyncMock()
    item = StartupItem(name="Teams", source="HKCU Run", impact="High")

    assert asyncio.run(SetStartupItemEnabled(startup=startup)(item, True)) is item
    startup.set_enabled.assert_not_awaited()


def test_scan_and_browser_clean_discard_results_once_cancelled() -> None:
    token = CancelToken()

    async def partial_scan(cancel):
        cancel.cancel()
        return [ScanFinding("/tmp/keygen.exe", "PotentialHackTool.Keygen", "Medium")]

    async def partial_browser_clean(**kwargs):
        kwargs["cancel"].cancel()
        return 2048

    scanner = AsyncMock()
    scanner.quick_scan.side_effect = partial_scan
    with pytest.raises(OperationCancelled):
        asyncio.run(ScanMalware(scanner=scanner)(token))

    browser = AsyncMock()
    browser.clean_browsers.side_effect = partial_browser_clean
    with pytest.raises(OperationCancelled):
        asyncio.run(CleanBrowsers(browser_cleaner=browser)(CancelToken()))
