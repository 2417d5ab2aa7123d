"""NiceGUI entrypoint for the maintenance dashboard."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any

from nicegui import ui

from winopt.app.controller import AppController
from winopt.domain.entities import StartupItem
from winopt.utils import logging as logging_utils
from winopt.viewmodels import status_format as fmt
from winopt.viewmodels.commands import GuardedCommand
from winopt.viewmodels.maintenance_vm import MaintenanceVM
from winopt.viewmodels.settings_vm import SettingsVM


def _install_theme() -> None:
    """Install global CSS tokens for the dashboard."""
    ui.add_head_html(
        """
<style>
.winopt-page { max-width: 1280px; margin: 0 auto; padding: 14px; }
.winopt-card { border-radius: 14px; }
.winopt-metric { font-size: 28px; font-weight: 600; }
.winopt-mono { font-family: monospace; }
</style>
        """
    )


def _notify_error(message: str) -> None:
    """Render command failures as NiceGUI toasts."""
    ui.notify(message, color="negative", close_button="OK")


def _build_ui(controller: AppController) -> None:
    """Register the NiceGUI pages for the controller's view-model."""

    @ui.page("/")
    async def index() -> None:
        vm: MaintenanceVM = controller.maintenance_vm
        dark = ui.dark_mode(vm.is_dark_mode)

        @ui.refreshable
        def render_status() -> None:
            with ui.row().classes("w-full justify-between items-center q-mb-sm"):
                ui.label("WinOptimize").classes("text-h5")
                ui.label(vm.workflow_step or vm.status_message).classes("winopt-mono text-caption")
            if vm.is_busy:
                ui.linear_progress(show_value=False).props("indeterminate")

        @ui.refreshable
        def render_metrics() -> None:
            with ui.row().classes("w-full q-gutter-md"):
                for label, value in (
                    ("CPU", f"{vm.cpu_usage:.0f}%"),
                    ("RAM", f"{vm.ram_usage:.0f}%"),
                    ("Disk", f"{vm.disk_usage:.0f}%"),
                    ("Startup", vm.startup_time),
                    ("Health", str(vm.health_score)),
                ):
                    with ui.card().classes("winopt-card q-pa-md"):
                        ui.label(label).classes("text-caption")
                        ui.label(value).classes("winopt-metric")

        @ui.refreshable
        def render_targets() -> None:
            for target in vm.cleaning_targets:
                mb = fmt.format_megabytes(target.estimated_bytes)
                ui.checkbox(
                    f"{target.name} ({mb} MB)",
                    value=target.is_selected,
                    on_change=lambda e, t=target: setattr(t, "is_selected", bool(e.value)),
                )

        @ui.refreshable
        def render_startup() -> None:
            for item in vm.startup_items:
                with ui.row().classes("items-center q-gutter-sm"):
                    ui.switch(
                        item.name,
                        value=item.enabled,
                        on_change=lambda e, it=item: set_startup(it, bool(e.value)),
                    )
                    ui.label(f"{item.impact} impact - {item.recommendation_label}").classes("text-caption")

        @ui.refreshable
        def render_lists() -> None:
            with ui.row().classes("w-full q-gutter-md items-start"):
                for title, rows in (
                    ("Processes", list(vm.processes)),
                    ("Services", list(vm.services)),
                    ("Privacy risks", list(vm.privacy_risks)),
                    ("Registry", list(vm.registry_entries)),
                    ("Findings", [f"{f.signature_name}: {f.file_path}" for f in vm.findings]),
                ):
                    with ui.card().classes("winopt-card q-pa-sm"):
                        ui.label(title).classes("text-subtitle1")
                        for row in rows or ["-"]:
                            ui.label(row).classes("winopt-mono text-caption")

        @ui.refreshable
        def render_audit() -> None:
            for entry in list(vm.audit_trail)[-20:]:
                ui.label(entry.format_line()).classes("winopt-mono text-caption")

        def refresh_all() -> None:
            render_status.refresh()
            render_metrics.refresh()
            render_targets.refresh()
            render_startup.refresh()
            render_lists.refresh()
            render_audit.refresh()

        async def run(command: GuardedCommand, param: Any = None) -> None:
            if not command.can_run(param):
                ui.notify("Already running.", color="warning")
                return
            task = asyncio.ensure_future(command.run(param))
            render_status.refresh()
            await task
            refresh_all()

        async def set_startup(item: StartupItem, enabled: bool) -> None:
            if item.enabled != enabled:
                await run(vm.set_startup_item_command, (item, enabled))

        def toggle_theme() -> None:
            vm.toggle_theme_command.run()
            dark.value = vm.is_dark_mode

        def cancel() -> None:
            if vm.cancel_command.can_run():
                vm.cancel_command.run()

        def button(label: str, command: GuardedCommand) -> ui.button:
            return ui.button(label, on_click=lambda: run(command))

        _install_theme()
        with ui.column().classes("winopt-page w-full"):
            render_status()
            with ui.row().classes("q-gutter-sm"):
                button("Analyze", vm.analyze_command)
                button("Clean", vm.clean_command)
                button("Browser clean", vm.browser_clean_command)
                button("Quick scan", vm.scan_malware_command)
                button("Repair registry", vm.repair_registry_command)
                button("One-click optimize", vm.one_click_optimize_command).props("color=positive")
                ui.button("Cancel", on_click=cancel).props("color=negative outline")
                ui.button("Toggle theme", on_click=toggle_theme).props("flat")
            render_metrics()
            with ui.row().classes("w-full q-gutter-md items-start"):
                with ui.card().classes("winopt-card q-pa-sm"):
                    ui.label("Cleanup targets").classes("text-subtitle1")
                    render_targets()
                with ui.card().classes("winopt-card q-pa-sm"):
                    ui.label("Startup items").classes("text-subtitle1")
                    render_startup()
            render_lists()
            with ui.expansion("Audit trail").classes("w-full"):
                render_audit()

        ui.timer(0.5, lambda: render_status.refresh() if vm.is_busy else None)


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the WinOptimize NiceGUI dashboard.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--demo", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    settings_vm = SettingsVM.from_env()
    logging_utils.apply_debug_preference(settings_vm.debug_logging, quiet_level=logging.INFO)
    controller = AppController(settings_vm, demo=args.demo or args.smoke_test, on_notice=_notify_error)
    if args.smoke_test:
        vm = controller.maintenance_vm
        vm.on_notice = None
        outcome = asyncio.run(vm.analyze_command.run())
        print("web-smoke-ok", outcome.status if outcome else vm.status_message)
        return
    _build_ui(controller)
    ui.run(
        host=args.host,
        port=args.port,
        title="WinOptimize",
        reload=args.reload,
        show=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
