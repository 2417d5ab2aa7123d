"""Adapter and view-model wiring for the CLI and web runtimes.

This module owns lazy construction of the concrete OS adapters (or the demo
doubles) that depend on values in :class:`winopt.viewmodels.settings_vm.SettingsVM`.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from ..adapters.audit_file import FileAuditLog
from ..adapters.backup_local import LocalBackupSafety
from ..adapters.cleaner_local import BrowserCacheCleaner, LocalCleaner
from ..adapters.mocks import demo_collaborators
from ..adapters.registry_winreg import WinregRegistryAnalyzer, WinregStartupOptimizer
from ..adapters.scanner_local import SignatureScanner
from ..adapters.system_psutil import PsutilSystemAnalysis
from ..adapters.tuning_local import PrivacyAdvisor, ProcessBooster, SchtasksScheduler
from ..viewmodels.maintenance_vm import MaintenanceVM
from ..viewmodels.settings_vm import SettingsVM

LOGGER = logging.getLogger(__name__)


class AppController:
    """Create and cache the maintenance view-model from settings state.

    Call chain:
        ``winopt.app.main`` and ``winopt.web_ui.main`` create one instance and
        read ``maintenance_vm``; the first access builds every collaborator.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        demo: bool = False,
        on_notice: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Runtime settings (directories, limits, restore-point
                reason) used to build adapter instances.
            demo: Use in-memory doubles instead of touching the OS.
            on_notice: Sink for failure notices raised by commands.
        """
        self.settings_vm = settings_vm
        self.demo = demo
        self.on_notice = on_notice
        self._maintenance_vm: Optional[MaintenanceVM] = None

    @property
    def maintenance_vm(self) -> MaintenanceVM:
        if self._maintenance_vm is None:
            self._maintenance_vm = self._build()
        return self._maintenance_vm

    def reset(self) -> None:
        """Drop the cached view-model so the next access rebuilds from settings."""
        self._maintenance_vm = None

    def collaborators(self) -> Dict[str, object]:
        """Port implementations keyed by ``MaintenanceVM`` argument name."""
        if self.demo:
            return demo_collaborators()
        settings = self.settings_vm
        return {
            "analysis": PsutilSystemAnalysis(process_limit=settings.process_limit),
            "cleaner": LocalCleaner(),
            "browser_cleaner": BrowserCacheCleaner(),
            "startup": WinregStartupOptimizer(),
            "registry": WinregRegistryAnalyzer(),
            "scanner": SignatureScanner(file_limit=settings.scan_file_limit),
            "booster": ProcessBooster(),
            "privacy": PrivacyAdvisor(),
            "scheduler": SchtasksScheduler(),
            "backup": LocalBackupSafety(settings.backup_dir),
            "audit": FileAuditLog(settings.audit_dir),
        }

    def _build(self) -> MaintenanceVM:
        if not self.settings_vm.is_valid():
            raise ValueError("Settings are incomplete; check the WINOPT_* environment variables.")
        LOGGER.debug("Building maintenance view-model (demo=%s)", self.demo)
        return MaintenanceVM(
            **self.collaborators(),
            restore_point_reason=self.settings_vm.restore_point_reason,
            on_notice=self.on_notice,
        )


__all__ = ["AppController"]
