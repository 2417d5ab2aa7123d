"""Filesystem cleaner adapters for temp folders and browser data."""

from __future__ import annotations

import asyncio
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from winopt.domain.entities import CleaningTarget
from winopt.domain.ports import CancelToken

LOGGER = logging.getLogger(__name__)

Location = Tuple[str, str]


def default_locations() -> List[Location]:
    """Named cleanup locations for the current platform."""
    user_temp = os.environ.get("TEMP") or tempfile.gettempdir()
    if os.name == "nt":
        windir = os.environ.get("SystemRoot", r"C:\Windows")
        program_data = os.environ.get("ProgramData", r"C:\ProgramData")
        return [
            ("User Temp", user_temp),
            ("Windows Temp", os.path.join(windir, "Temp")),
            ("Memory Dumps", os.path.join(windir, "Minidump")),
            ("Error Reports", os.path.join(program_data, "Microsoft", "Windows", "WER")),
        ]
    return [
        ("User Temp", user_temp),
        ("Thumbnail Cache", str(Path.home() / ".cache" / "thumbnails")),
    ]


def _iter_files(root: Path) -> Iterable[Path]:
    for dirpath, _dirnames, filenames in os.walk(root, onerror=lambda _err: None):
        for filename in filenames:
            yield Path(dirpath) / filename


def estimate_size(path: str) -> int:
    """Sum of file sizes below ``path``; unreadable entries count as 0."""
    root = Path(path)
    if not root.is_dir():
        return 0
    total = 0
    for file_path in _iter_files(root):
        try:
            total += file_path.lstat().st_size
        except OSError:
            continue
    return total


def delete_contents(path: str, cancel: Optional[CancelToken] = None) -> int:
    """Delete every file below ``path`` that can be removed; returns bytes freed.

    Locked or protected files are skipped. Empty sub-directories are removed
    afterwards; ``path`` itself is kept. A fired ``cancel`` token raises
    ``OperationCancelled`` before the next file.
    """
    root = Path(path)
    if not root.is_dir():
        return 0
    deleted = 0
    for file_path in list(_iter_files(root)):
        if cancel is not None:
            cancel.raise_if_cancelled()
        try:
            info = file_path.lstat()
            size = info.st_size
            # Links are removed as-is; their targets keep their mode.
            if not stat.S_ISLNK(info.st_mode) and not info.st_mode & stat.S_IWRITE:
                os.chmod(file_path, stat.S_IWRITE | stat.S_IREAD)
            file_path.unlink()
        except OSError as exc:
            LOGGER.debug("Skipping %s: %s", file_path, exc)
            continue
        deleted += size
    _remove_empty_dirs(root)
    return deleted


def _remove_empty_dirs(root: Path) -> None:
    for dirpath, _dirnames, _filenames in os.walk(root, topdown=False):
        if Path(dirpath) == root:
            continue
        try:
            os.rmdir(dirpath)
        except OSError:
            continue


class LocalCleaner:
    """Cleaner over a fixed list of named directories."""

    def __init__(self, locations: Optional[Sequence[Location]] = None) -> None:
        self.locations: List[Location] = list(locations) if locations is not None else default_locations()

    async def list_targets(self, cancel: Optional[CancelToken] = None) -> List[CleaningTarget]:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(self._list_targets)

    async def clean(self, targets: Sequence[CleaningTarget], cancel: Optional[CancelToken] = None) -> int:
        selected = [target for target in targets if target.is_selected]
        total = 0
        for target in selected:
            if cancel is not None:
                cancel.raise_if_cancelled()
            freed = await asyncio.to_thread(delete_contents, target.path, cancel)
            LOGGER.info("Cleaned %s (%s): %d bytes", target.name, target.path, freed)
            total += freed
        return total

    def _list_targets(self) -> List[CleaningTarget]:
        return [
            CleaningTarget(name=name, path=path, estimated_bytes=estimate_size(path))
            for name, path in self.locations
        ]


def chromium_profiles() -> List[Path]:
    local = os.environ.get("LOCALAPPDATA")
    if local:
        roots = [
            Path(local) / "Google" / "Chrome" / "User Data" / "Default",
            Path(local) / "Microsoft" / "Edge" / "User Data" / "Default",
        ]
    else:
        config = Path.home() / ".config"
        roots = [
            config / "google-chrome" / "Default",
            config / "chromium" / "Default",
            config / "microsoft-edge" / "Default",
        ]
    return [root for root in roots if root.is_dir()]


def firefox_profiles() -> List[Path]:
    appdata = os.environ.get("APPDATA")
    base = Path(appdata) / "Mozilla" / "Firefox" / "Profiles" if appdata else Path.home() / ".mozilla" / "firefox"
    if not base.is_dir():
        return []
    return [child for child in base.iterdir() if child.is_dir()]


class BrowserCacheCleaner:
    """Removes browser caches plus optional cookie/history/autofill stores."""

    def __init__(
        self,
        *,
        chromium_profiles: Optional[Sequence[Path]] = None,
        firefox_profiles: Optional[Sequence[Path]] = None,
    ) -> None:
        self._chromium = list(chromium_profiles) if chromium_profiles is not None else None
        self._firefox = list(firefox_profiles) if firefox_profiles is not None else None

    async def clean_browsers(
        self,
        include_cookies: bool,
        include_history: bool,
        include_autofill: bool,
        cancel: Optional[CancelToken] = None,
    ) -> int:
        if cancel is not None:
            cancel.raise_if_cancelled()
        return await asyncio.to_thread(
            self._clean, include_cookies, include_history, include_autofill, cancel
        )

    def _clean(
        self,
        include_cookies: bool,
        include_history: bool,
        include_autofill: bool,
        cancel: Optional[CancelToken],
    ) -> int:
        chromium = self._chromium if self._chromium is not None else chromium_profiles()
        firefox = self._firefox if self._firefox is not None else firefox_profiles()
        deleted = 0
        for profile in chromium:
            deleted += delete_contents(str(profile / "Cache"), cancel)
            deleted += delete_contents(str(profile / "Code Cache"), cancel)
            files: List[str] = []
            if include_cookies:
                files += ["Cookies", "Network/Cookies"]
            if include_history:
                files += ["History"]
            if include_autofill:
                files += ["Web Data"]
            deleted += self._remove_files(profile, files)
        for profile in firefox:
            deleted += delete_contents(str(profile / "cache2"), cancel)
            files = []
            if include_cookies:
                files.append("cookies.sqlite")
            if include_autofill:
                files.append("formhistory.sqlite")
            # places.sqlite also stores bookmarks; history stays untouched here.
            deleted += self._remove_files(profile, files)
        return deleted

    @staticmethod
    def _remove_files(profile: Path, names: Sequence[str]) -> int:
        freed = 0
        for name in names:
            path = profile / name
            try:
                size = path.stat().st_size
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                LOGGER.debug("Browser file %s locked: %s", path, exc)
                continue
            freed += size
        return freed


__all__ = [
    "BrowserCacheCleaner",
    "LocalCleaner",
    "chromium_profiles",
    "default_locations",
    "delete_contents",
    "estimate_size",
    "firefox_profiles",
]
