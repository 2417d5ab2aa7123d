from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..utils.logging import env_forces_debug

APP_DIR_NAME = "WinOptimize"

_ENV_KEYS: Dict[str, str] = {
    "WINOPT_AUDIT_DIR": "audit_dir",
    "WINOPT_BACKUP_DIR": "backup_dir",
    "WINOPT_RESTORE_REASON": "restore_point_reason",
    "WINOPT_SCAN_LIMIT": "scan_file_limit",
    "WINOPT_PROCESS_LIMIT": "process_limit",
}


def default_data_dir() -> str:
    """Per-user data directory: %LOCALAPPDATA% on Windows, XDG elsewhere."""
    base = os.environ.get("LOCALAPPDATA") or os.environ.get("XDG_DATA_HOME")
    if not base:
        base = str(Path.home() / ".local" / "share")
    return str(Path(base) / APP_DIR_NAME)


@dataclass
class SettingsConfig:
    """Typed runtime settings; read from the environment, never persisted."""

    audit_dir: str = ""
    # Empty means "backups" below audit_dir, resolved on read.
    backup_dir: str = ""
    restore_point_reason: str = "WinOptimize One-Click"
    scan_file_limit: int = 2500
    process_limit: int = 25

    def __post_init__(self) -> None:
        if not self.audit_dir:
            self.audit_dir = default_data_dir()

    def resolved_backup_dir(self) -> str:
        return self.backup_dir or str(Path(self.audit_dir) / "backups")


class SettingsVM:
    """Keeps runtime settings and their validation, no I/O here."""

    def __init__(self, *, config: Optional[SettingsConfig] = None) -> None:
        self.config = config or SettingsConfig()
        self.debug_logging: bool = env_forces_debug()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SettingsVM":
        """Build settings from ``WINOPT_*`` environment variables."""
        env = os.environ if environ is None else environ
        vm = cls()
        payload = {field: env[key] for key, field in _ENV_KEYS.items() if env.get(key)}
        if payload:
            vm.apply_dict(payload)
        return vm

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def audit_dir(self) -> str:
        return self.config.audit_dir

    @audit_dir.setter
    def audit_dir(self, value: str) -> None:
        self.config = replace(self.config, audit_dir=self._coerce_dir(value))

    @property
    def backup_dir(self) -> str:
        return self.config.resolved_backup_dir()

    @backup_dir.setter
    def backup_dir(self, value: str) -> None:
        self.config = replace(self.config, backup_dir=self._coerce_dir(value))

    @property
    def restore_point_reason(self) -> str:
        return self.config.restore_point_reason

    @restore_point_reason.setter
    def restore_point_reason(self, value: str) -> None:
        text = str(value or "").strip() or SettingsConfig.restore_point_reason
        self.config = replace(self.config, restore_point_reason=text)

    @property
    def scan_file_limit(self) -> int:
        return self.config.scan_file_limit

    @scan_file_limit.setter
    def scan_file_limit(self, value: int) -> None:
        self.config = replace(self.config, scan_file_limit=self._coerce_int("scan_file_limit", value))

    @property
    def process_limit(self) -> int:
        return self.config.process_limit

    @process_limit.setter
    def process_limit(self, value: int) -> None:
        self.config = replace(self.config, process_limit=self._coerce_int("process_limit", value))

    # ------------------------------------------------------------------
    def is_valid(self) -> bool:
        if self.scan_file_limit <= 0 or self.process_limit <= 0:
            return False
        return bool(self.audit_dir.strip())

    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply a flat settings mapping (environment or CLI overrides)."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        if "audit_dir" in payload:
            self.audit_dir = payload["audit_dir"]
        if "backup_dir" in payload:
            self.backup_dir = payload["backup_dir"]
        if "restore_point_reason" in payload:
            self.restore_point_reason = payload["restore_point_reason"]
        if "scan_file_limit" in payload:
            self.scan_file_limit = payload["scan_file_limit"]
        if "process_limit" in payload:
            self.process_limit = payload["process_limit"]
        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.config)
        data["backup_dir"] = self.backup_dir
        data["debug_logging"] = self.debug_logging
        return data

    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_dir(value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("Directory setting must not be empty.")
        return str(Path(text).expanduser())

    @staticmethod
    def _coerce_int(name: str, value: Any) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be an integer.") from exc
        if number <= 0:
            raise ValueError(f"{name} must be positive.")
        return number

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)


__all__ = ["APP_DIR_NAME", "SettingsConfig", "SettingsVM", "default_data_dir"]
