from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable

from .errors import MissingInputError


def _has_glob(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def clean_dir(path: Path) -> Path:
    """Recursively delete `path` and recreate it empty."""
    path = Path(path)
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path


def make_dirs(*paths: Path) -> None:
    for p in paths:
        Path(p).mkdir(parents=True, exist_ok=True)


def expand(patterns: Iterable[str], cwd: Path) -> list[Path]:
    """Expand glob patterns relative to `cwd`, preserving pattern order.

    A pattern that matches nothing is an error, as is a missing plain path.
    """
    cwd = Path(cwd)
    seen: set[Path] = set()
    out: list[Path] = []
    for pat in patterns:
        if _has_glob(pat):
            matches = sorted(cwd.glob(pat))
        else:
            p = cwd / pat
            matches = [p] if p.exists() else []
        if not matches:
            raise MissingInputError(f"No files match {pat!r} under {cwd}")
        for m in matches:
            if m not in seen:
                seen.add(m)
                out.append(m)
    return out


def copy_into(patterns: Iterable[str], dest: Path, cwd: Path) -> list[Path]:
    """Copy files and directory trees matching `patterns` into `dest`."""
    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for src in expand(patterns, cwd):
        target = dest / src.name
        if src.is_dir():
            shutil.copytree(src, target, dirs_exist_ok=True)
        else:
            shutil.copy2(src, target)
        copied.append(target)
    return copied


def remove(path: Path) -> None:
    path = Path(path)
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


def clear_checkout(path: Path) -> None:
    """Delete everything in a checkout except dot-entries such as `.git`."""
    for child in Path(path).iterdir():
        if child.name.startswith("."):
            continue
        remove(child)
