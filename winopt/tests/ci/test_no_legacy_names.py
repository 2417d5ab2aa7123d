from __future__ import annotations

from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[3]
CLIENT_ROOT = PROJECT_ROOT / "winopt"
EXCLUDED_CLIENT_DIRS = {
    CLIENT_ROOT / "tests",
}


def _is_within(path: Path, target: Path) -> bool:
    try:
        path.relative_to(target)
        return True
    except ValueError:
        return False


def iter_client_python_files() -> list[Path]:
    return [
        file_path
        for file_path in CLIENT_ROOT.rglob("*.py")
        if not any(_is_within(file_path, excluded) for excluded in EXCLUDED_CLIENT_DIRS)
    ]


def find_needle(needle: str, files: list[Path]) -> list[str]:
    matches: list[str] = []
    for file_path in files:
        text = file_path.read_text(encoding="utf-8")
        if needle not in text:
            continue
        for line_no, line in enumerate(text.splitlines(), start=1):
            if needle in line:
                rel_path = file_path.relative_to(PROJECT_ROOT)
                matches.append(f"{rel_path}:{line_no}: {line.strip()}")
    return matches


def test_client_tree_is_not_empty() -> None:
    assert iter_client_python_files()


@pytest.mark.parametrize(
    "needle",
    [
        "import seva",
        "from seva",
        "import requests",
        "import tkinter",
        "WinOptimizePro",
    ],
)
def test_client_code_has_no_legacy_symbols(needle: str) -> None:
    matches = find_needle(needle, iter_client_python_files())
    assert not matches, "Legacy references found:\n" + "\n".join(matches)
