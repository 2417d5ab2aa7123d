"""Maintenance view-model: observable machine state plus the command surface.

Call context:
    ``winopt.app.controller.AppController`` builds one instance from concrete
    adapters. The NiceGUI page and the CLI run its commands and subscribe to
    its change events.

Layers:
    Every action exists twice. The unguarded *body* (``analyze``, ``clean``,
    ...) calls a use case, publishes the result, sets the status and writes one
    audit entry. The guarded *command* (``analyze_command``, ...) adds the
    re-entrancy guard and the failure boundary around that body. The
    One-Click workflow calls bodies, external callers run commands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Set

from ..domain.entities import (
    AuditEntry,
    CleaningTarget,
    ScanFinding,
    StartupItem,
    SystemSnapshot,
    WorkflowStep,
)
from ..domain.errors import OperationCancelled
from ..domain.ports import (
    AuditLogPort,
    BackupSafetyPort,
    BrowserCleanerPort,
    CancelToken,
    CleanerPort,
    MalwareScannerPort,
    PerformanceBoosterPort,
    PrivacySecurityPort,
    RegistryAnalyzerPort,
    SchedulerPort,
    StartupOptimizerPort,
    SystemAnalysisPort,
)
from ..usecases.analyze_system import AnalyzeSystem
from ..usecases.clean_browsers import CleanBrowsers
from ..usecases.clean_targets import CleanTargets
from ..usecases.error_mapping import describe_error
from ..usecases.one_click_optimize import (
    STEP_BOOST,
    WorkflowHooks,
    WorkflowRunner,
    build_one_click_steps,
)
from ..usecases.repair_registry import RepairRegistry
from ..usecases.scan_malware import ScanMalware
from ..usecases.set_startup_item import SetStartupItemEnabled
from . import status_format as fmt
from .commands import GuardedCommand, RelayCommand
from .observable import Observable, ObservableList

LOGGER = logging.getLogger(__name__)

DEFAULT_RESTORE_REASON = "WinOptimize One-Click"

_SNAPSHOT_FIELDS = ("cpu_usage", "ram_usage", "disk_usage", "startup_time", "health_score")


@dataclass(frozen=True)
class ActionOutcome:
    """Completion signal returned by every accepted command run."""

    ok: bool
    status: str


Body = Callable[..., Awaitable[Any]]


class MaintenanceVM(Observable):
    """Owns the observable snapshot, item collections, status and audit trail."""

    def __init__(
        self,
        *,
        analysis: SystemAnalysisPort,
        cleaner: CleanerPort,
        browser_cleaner: BrowserCleanerPort,
        startup: StartupOptimizerPort,
        registry: RegistryAnalyzerPort,
        scanner: MalwareScannerPort,
        booster: PerformanceBoosterPort,
        privacy: PrivacySecurityPort,
        scheduler: SchedulerPort,
        backup: BackupSafetyPort,
        audit: AuditLogPort,
        restore_point_reason: str = DEFAULT_RESTORE_REASON,
        on_notice: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__()
        self.privacy = privacy
        self.scheduler = scheduler
        self.booster = booster
        self.backup = backup
        self.audit = audit
        self.restore_point_reason = restore_point_reason
        self.on_notice = on_notice

        self.uc_analyze = AnalyzeSystem(analysis=analysis, cleaner=cleaner, startup=startup, privacy=privacy)
        self.uc_clean = CleanTargets(cleaner=cleaner, backup=backup)
        self.uc_browser_clean = CleanBrowsers(browser_cleaner=browser_cleaner)
        self.uc_scan = ScanMalware(scanner=scanner)
        self.uc_repair_registry = RepairRegistry(registry=registry)
        self.uc_set_startup = SetStartupItemEnabled(startup=startup)

        self._status_message = fmt.READY
        self._snapshot: Optional[SystemSnapshot] = None
        self._is_dark_mode = True
        self._workflow_step = ""
        self._active_tokens: Set[CancelToken] = set()

        self.processes: ObservableList[str] = ObservableList("processes", self._forward)
        self.services: ObservableList[str] = ObservableList("services", self._forward)
        self.cleaning_targets: ObservableList[CleaningTarget] = ObservableList("cleaning_targets", self._forward)
        self.startup_items: ObservableList[StartupItem] = ObservableList("startup_items", self._forward)
        self.findings: ObservableList[ScanFinding] = ObservableList("findings", self._forward)
        self.privacy_risks: ObservableList[str] = ObservableList("privacy_risks", self._forward)
        self.registry_entries: ObservableList[str] = ObservableList("registry_entries", self._forward)
        self.audit_trail: ObservableList[AuditEntry] = ObservableList("audit_trail", self._forward)

        self.analyze_command = GuardedCommand(lambda _p: self._run_action(self.analyze), name="analyze")
        self.clean_command = GuardedCommand(lambda _p: self._run_action(self.clean), name="clean")
        self.browser_clean_command = GuardedCommand(
            lambda _p: self._run_action(self.browser_clean), name="browser_clean"
        )
        self.scan_malware_command = GuardedCommand(
            lambda _p: self._run_action(self.scan_malware), name="scan_malware"
        )
        self.one_click_optimize_command = GuardedCommand(
            lambda _p: self._run_action(self.one_click_optimize), name="one_click_optimize"
        )
        self.repair_registry_command = GuardedCommand(
            lambda _p: self._run_action(self.repair_registry), name="repair_registry"
        )
        self.set_startup_item_command = GuardedCommand(
            self._run_set_startup_item,
            can_execute=lambda param: param is not None,
            name="set_startup_item",
        )
        self.toggle_theme_command = RelayCommand(lambda _p: self.toggle_theme(), name="toggle_theme")
        self.cancel_command = RelayCommand(
            lambda _p: self.cancel_active(),
            can_execute=lambda _p: bool(self._active_tokens),
            name="cancel",
        )

    # ------------------------------------------------------------------
    # Observable properties
    # ------------------------------------------------------------------
    @property
    def status_message(self) -> str:
        return self._status_message

    @status_message.setter
    def status_message(self, value: str) -> None:
        self._set_field("status_message", value)

    @property
    def is_dark_mode(self) -> bool:
        return self._is_dark_mode

    @is_dark_mode.setter
    def is_dark_mode(self, value: bool) -> None:
        self._set_field("is_dark_mode", bool(value))

    @property
    def workflow_step(self) -> str:
        """Progress text of the composite step in flight; empty when idle."""
        return self._workflow_step

    @workflow_step.setter
    def workflow_step(self, value: str) -> None:
        self._set_field("workflow_step", value)

    @property
    def snapshot(self) -> Optional[SystemSnapshot]:
        return self._snapshot

    @property
    def cpu_usage(self) -> float:
        return self._snapshot.cpu_usage_pct if self._snapshot else 0.0

    @property
    def ram_usage(self) -> float:
        return self._snapshot.ram_usage_pct if self._snapshot else 0.0

    @property
    def disk_usage(self) -> float:
        return self._snapshot.disk_usage_pct if self._snapshot else 0.0

    @property
    def startup_time(self) -> str:
        return self._snapshot.startup_time_label if self._snapshot else "--"

    @property
    def health_score(self) -> int:
        return self._snapshot.health_score if self._snapshot else 0

    @property
    def is_busy(self) -> bool:
        return bool(self._active_tokens)

    # ------------------------------------------------------------------
    # Action bodies (unguarded)
    # ------------------------------------------------------------------
    async def analyze(self, cancel: Optional[CancelToken] = None) -> None:
        result = await self.uc_analyze(cancel)
        self._replace_snapshot(result.snapshot)
        self.processes.reset(result.snapshot.running_processes)
        self.services.reset(result.snapshot.background_services)
        self.cleaning_targets.reset(result.targets)
        self.startup_items.reset(result.startup_items)
        self.privacy_risks.reset(result.privacy_risks)
        await self._report(fmt.ANALYSIS_DONE)

    async def clean(self, cancel: Optional[CancelToken] = None) -> None:
        result = await self.uc_clean(self.cleaning_targets.snapshot(), cancel)
        await self._report(fmt.cleanup_status(result.bytes_reclaimed))

    async def browser_clean(self, cancel: Optional[CancelToken] = None) -> None:
        reclaimed = await self.uc_browser_clean(cancel)
        await self._report(fmt.browser_cleanup_status(reclaimed))

    async def scan_malware(self, cancel: Optional[CancelToken] = None) -> None:
        findings = await self.uc_scan(cancel)
        self.findings.reset(findings)
        await self._report(fmt.scan_status(len(findings)))

    async def repair_registry(self, cancel: Optional[CancelToken] = None) -> None:
        result = await self.uc_repair_registry(cancel)
        self.registry_entries.reset(result.found)
        await self._report(fmt.registry_status(result.fixed))

    async def set_startup_item_enabled(
        self, item: StartupItem, enabled: bool, cancel: Optional[CancelToken] = None
    ) -> None:
        updated = await self.uc_set_startup(item, enabled, cancel)
        if item in self.startup_items:
            self.startup_items.replace_at(self.startup_items.index(item), updated)
        await self._report(fmt.startup_toggle_status(updated.name, updated.enabled))

    async def one_click_optimize(self, cancel: Optional[CancelToken] = None) -> bool:
        """Run the composite workflow; its failures stop here as status text.

        Returns ``True`` when every step completed.
        """
        token = cancel or CancelToken()
        runner = WorkflowRunner(self.one_click_steps(), hooks=WorkflowHooks(on_step_started=self._on_step_started))
        try:
            run = await runner(token)
        except OperationCancelled:
            await self._report(fmt.OPTIMIZATION_CANCELLED)
            return False
        except Exception as exc:
            status = fmt.optimization_failed(describe_error(exc))
            LOGGER.warning("One-click optimization stopped: %s", status)
            await self._report(status)
            self._emit_notice(status)
            return False
        finally:
            self.workflow_step = ""
        await self._report(fmt.one_click_status(run.result_of(STEP_BOOST)))
        return True

    def one_click_steps(self) -> List[WorkflowStep]:
        return build_one_click_steps(
            create_restore_point=lambda token: self.backup.create_restore_point(self.restore_point_reason, token),
            analyze=self.analyze,
            clean=self.clean,
            browser_clean=self.browser_clean,
            apply_privacy_fixes=self.privacy.apply_fixes,
            configure_schedule=self.scheduler.configure_weekly_cleaning,
            apply_boost=lambda token: self.booster.apply_boost(False, token),
        )

    # ------------------------------------------------------------------
    # Instant actions
    # ------------------------------------------------------------------
    def toggle_theme(self) -> bool:
        self.is_dark_mode = not self.is_dark_mode
        return self.is_dark_mode

    def cancel_active(self) -> int:
        """Cancel every in-flight action; returns how many were signalled."""
        tokens = list(self._active_tokens)
        for token in tokens:
            token.cancel()
        if tokens:
            LOGGER.info("Cancellation requested for %d action(s)", len(tokens))
        return len(tokens)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _run_action(self, body: Body, *args: Any) -> ActionOutcome:
        """Command boundary: nothing raised by ``body`` escapes from here."""
        token = CancelToken()
        self._active_tokens.add(token)
        try:
            result = await body(*args, token)
        except OperationCancelled:
            await self._report_safely(fmt.OPERATION_CANCELLED)
            return ActionOutcome(ok=False, status=self.status_message)
        except Exception as exc:
            status = fmt.operation_failed(describe_error(exc))
            LOGGER.error("Action %s failed: %s", getattr(body, "__name__", body), status, exc_info=exc)
            await self._report_safely(status)
            self._emit_notice(status)
            return ActionOutcome(ok=False, status=status)
        finally:
            self._active_tokens.discard(token)
        return ActionOutcome(ok=result is not False, status=self.status_message)

    async def _run_set_startup_item(self, param: Any) -> ActionOutcome:
        return await self._run_action(self._set_startup_from_param, param)

    async def _set_startup_from_param(self, param: Any, cancel: CancelToken) -> None:
        item, enabled = param
        await self.set_startup_item_enabled(item, bool(enabled), cancel)

    def _replace_snapshot(self, snapshot: SystemSnapshot) -> None:
        # Swap first, then notify: listeners only ever read a complete snapshot.
        self._snapshot = snapshot
        self._notify("snapshot", snapshot)
        for name in _SNAPSHOT_FIELDS:
            self._notify(name, getattr(self, name))

    async def _report(self, status: str) -> None:
        self.status_message = status
        entry = AuditEntry(timestamp=datetime.now().astimezone(), message=status)
        self.audit_trail.append(entry)
        await self.audit.log(status, timestamp=entry.timestamp)

    async def _report_safely(self, status: str) -> None:
        try:
            await self._report(status)
        except Exception:
            LOGGER.exception("Audit log write failed for status %r", status)

    def _emit_notice(self, message: str) -> None:
        if self.on_notice is None:
            return
        try:
            self.on_notice(message)
        except Exception:
            LOGGER.exception("Notice callback failed")

    def _on_step_started(self, step: WorkflowStep, index: int, total: int) -> None:
        self.workflow_step = f"[{index + 1}/{total}] {step.status_message or step.name}"


__all__ = ["ActionOutcome", "DEFAULT_RESTORE_REASON", "MaintenanceVM"]
