"""File collection and tool discovery helpers."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path


def collect_files(root: str | Path, extensions: Iterable[str]) -> list[Path]:
    """Recursively collect regular files whose extension is in ``extensions``.

    Extension comparison is case-insensitive.  Results are sorted so every
    detector walks files in the same order.
    """
    wanted = {e.lower().lstrip(".") for e in extensions}
    files: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            path = Path(dirpath) / name
            if path.suffix.lower().lstrip(".") in wanted and path.is_file():
                files.append(path)
    files.sort()
    return files


def relative_path(path: str | Path, root: str | Path) -> str:
    """POSIX-style path of ``path`` relative to ``root`` (unchanged if outside)."""
    p = Path(path)
    try:
        return p.relative_to(root).as_posix()
    except ValueError:
        return p.as_posix()


def which_exists(cmd: str) -> bool:
    """True when an executable named ``cmd`` is on PATH."""
    return shutil.which(cmd) is not None
