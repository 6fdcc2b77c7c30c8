"""Marker-driven line substitution for source and HTML templates.

A line matches a marker when it contains the marker text anywhere; the whole
line, including its line ending, is what gets replaced or removed. The text
functions are pure; `render` and `rewrite` apply a chain of them to files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .errors import MissingInputError

INCLUDE_ALL = "PDFJSSCRIPT_INCLUDE_ALL"
INCLUDE_BUILD = "PDFJSSCRIPT_INCLUDE_BUILD"
INCLUDE_BUNDLE = "PDFJSSCRIPT_INCLUDE_BUNDLE"
REMOVE_CORE = "PDFJSSCRIPT_REMOVE_CORE"
REMOVE_FIREFOX_EXTENSION = "PDFJSSCRIPT_REMOVE_FIREFOX_EXTENSION"
INCLUDE_FIREFOX_EXTENSION = "PDFJSSCRIPT_INCLUDE_FIREFOX_EXTENSION"

BUNDLE_VER = "PDFJSSCRIPT_BUNDLE_VER"
BUILD = "PDFJSSCRIPT_BUILD"

Transform = Callable[[str], str]


def _substitute(text: str, marker: str, replacement: str, first_only: bool) -> str:
    out: list[str] = []
    replaced = False
    for line in text.splitlines(keepends=True):
        if marker in line and not (first_only and replaced):
            out.append(replacement)
            replaced = True
        else:
            out.append(line)
    return "".join(out)


def replace_first(text: str, marker: str, replacement: str) -> str:
    """Replace only the first line containing `marker`; later matches stay."""
    return _substitute(text, marker, replacement, first_only=True)


def replace_all(text: str, marker: str, replacement: str) -> str:
    return _substitute(text, marker, replacement, first_only=False)


def remove_first(text: str, marker: str) -> str:
    return _substitute(text, marker, "", first_only=True)


def remove_all(text: str, marker: str) -> str:
    """Delete every line containing `marker`. No match returns `text` as is."""
    return _substitute(text, marker, "", first_only=False)


def replace_token(text: str, token: str, value: object) -> str:
    """Literal, in-line substitution of every occurrence of `token`."""
    return text.replace(token, str(value))


def _apply(text: str, transforms: tuple[Transform, ...]) -> str:
    for fn in transforms:
        text = fn(text)
    return text


def read_text(path: Path) -> str:
    path = Path(path)
    if not path.is_file():
        raise MissingInputError(f"Required template or input file not found: {path}")
    return path.read_text(encoding="utf-8")


def render(src: Path, dest: Path, *transforms: Transform) -> Path:
    """Write a transformed copy of `src` to `dest`, leaving `src` untouched."""
    text = _apply(read_text(src), transforms)
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(text, encoding="utf-8")
    return dest


def rewrite(path: Path, *transforms: Transform) -> Path:
    """Transform `path` in place; each call is one pass."""
    path = Path(path)
    path.write_text(_apply(read_text(path), transforms), encoding="utf-8")
    return path
