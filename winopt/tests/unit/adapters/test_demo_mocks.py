from __future__ import annotations

import asyncio

from winopt.adapters.mocks import demo_collaborators
from winopt.viewmodels.maintenance_vm import MaintenanceVM


def test_demo_collaborators_drive_a_full_one_click_run() -> None:
    collaborators = demo_collaborators(seed=7)
    vm = MaintenanceVM(**collaborators)

    outcome = asyncio.run(vm.one_click_optimize_command.run())

    assert outcome.ok is True
    assert vm.status_message.startswith("One-click optimization complete. Standard optimization applied")
    assert collaborators["backup"].restore_points == ["WinOptimize One-Click"]
    assert collaborators["scheduler"].configured == 1
    assert len(collaborators["audit"].messages) == 4


def test_demo_startup_toggle_is_remembered() -> None:
    collaborators = demo_collaborators(seed=1)
    vm = MaintenanceVM(**collaborators)
    asyncio.run(vm.analyze_command.run())

    asyncio.run(vm.set_startup_item_command.run((vm.startup_items[0], False)))

    assert collaborators["startup"].items[0].enabled is False
