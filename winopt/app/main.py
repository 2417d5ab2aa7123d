"""Command-line entrypoint running maintenance actions without the web UI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from ..domain.entities import StartupItem
from ..utils import logging as logging_utils
from ..viewmodels import status_format as fmt
from ..viewmodels.maintenance_vm import ActionOutcome, MaintenanceVM
from ..viewmodels.observable import ChangeEvent, PropertyChanged
from ..viewmodels.settings_vm import SettingsVM
from .controller import AppController

LOGGER = logging.getLogger(__name__)

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="winopt", description="Windows maintenance and optimization tool.")
    parser.add_argument("--demo", action="store_true", help="use in-memory collaborators, touch nothing")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="action", required=True)
    sub.add_parser("analyze", help="collect telemetry, cleanup targets, startup items and privacy risks")
    sub.add_parser("clean", help="analyze, then clean every cleanup target")
    sub.add_parser("browser-clean", help="remove browser caches, cookies and history")
    sub.add_parser("scan", help="quick filename-signature scan of temp and download folders")
    sub.add_parser("optimize", help="run the one-click optimization workflow")
    sub.add_parser("registry", help="find and disable startup entries with missing targets")
    startup = sub.add_parser("startup", help="list or toggle startup entries")
    startup.add_argument("mode", choices=("list", "enable", "disable"), nargs="?", default="list")
    startup.add_argument("name", nargs="?")
    return parser.parse_args(argv)


def _print_snapshot(vm: MaintenanceVM) -> None:
    print(f"CPU {vm.cpu_usage:.0f}%  RAM {vm.ram_usage:.0f}%  Disk {vm.disk_usage:.0f}%")
    print(f"Startup time {vm.startup_time}  Health score {vm.health_score}")
    for target in vm.cleaning_targets:
        print(f"  [target] {target.name}: {fmt.format_megabytes(target.estimated_bytes)} MB ({target.path})")
    for risk in vm.privacy_risks:
        print(f"  [privacy] {risk}")


def _print_startup(items: Sequence[StartupItem]) -> None:
    for item in items:
        state = "enabled" if item.enabled else "disabled"
        print(f"  {item.name:<30} {item.impact:<6} {state:<8} {item.recommendation_label}")


def _find_item(vm: MaintenanceVM, name: str) -> Optional[StartupItem]:
    for item in vm.startup_items:
        if item.name.lower() == name.lower():
            return item
    return None


async def run_action(vm: MaintenanceVM, args: argparse.Namespace) -> List[ActionOutcome]:
    """Run the chosen action through the view-model commands; returns every outcome."""
    outcomes: List[ActionOutcome] = []

    async def run(command, param=None) -> ActionOutcome:
        outcome = await command.run(param)
        outcomes.append(outcome)
        print(outcome.status)
        return outcome

    action = args.action
    if action in ("analyze", "clean", "startup"):
        if not (await run(vm.analyze_command)).ok:
            return outcomes
    if action == "analyze":
        _print_snapshot(vm)
    elif action == "clean":
        await run(vm.clean_command)
    elif action == "browser-clean":
        await run(vm.browser_clean_command)
    elif action == "scan":
        await run(vm.scan_malware_command)
        for finding in vm.findings:
            print(f"  {finding.signature_name} [{finding.risk_level}] {finding.file_path}")
    elif action == "optimize":
        await run(vm.one_click_optimize_command)
    elif action == "registry":
        await run(vm.repair_registry_command)
        for entry in vm.registry_entries:
            print(f"  {entry}")
    elif action == "startup":
        if args.mode == "list":
            _print_startup(vm.startup_items.snapshot())
        else:
            item = _find_item(vm, args.name or "")
            if item is None:
                status = f"Startup item '{args.name}' not found."
                print(status)
                outcomes.append(ActionOutcome(ok=False, status=status))
            else:
                await run(vm.set_startup_item_command, (item, args.mode == "enable"))
    return outcomes


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint; exit code 1 when any action failed."""
    args = _parse_args(argv)
    settings_vm = SettingsVM.from_env()
    if args.debug:
        settings_vm.debug_logging = True
    level = logging_utils.apply_debug_preference(settings_vm.debug_logging)
    LOGGER.debug("Log level %s", logging.getLevelName(level))

    controller = AppController(settings_vm, demo=args.demo, on_notice=lambda msg: print(msg, file=sys.stderr))
    vm = controller.maintenance_vm

    def show_progress(event: ChangeEvent) -> None:
        if isinstance(event, PropertyChanged) and event.name == "workflow_step" and event.value:
            print(event.value)

    vm.subscribe(show_progress)
    outcomes = asyncio.run(run_action(vm, args))
    return 0 if outcomes and all(outcome.ok for outcome in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
