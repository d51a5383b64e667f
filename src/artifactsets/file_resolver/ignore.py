"""Exclusion patterns and tool-specific ignore files, using pathspec."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pathspec


def compile_patterns(patterns: Sequence[str]) -> pathspec.PathSpec | None:
    """Compile gitignore-style lines into a `PathSpec`, or `None` if there are none."""
    lines = [line for line in patterns if line.strip() and not line.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def _read_ignore_file(path: Path) -> pathspec.PathSpec | None:
    """
    Read an ignore file and return a compiled `PathSpec`, or `None` if the file is
    missing, unreadable, not UTF-8, or has no patterns.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    return compile_patterns(text.splitlines())


def load_ignore_file(ignore_name: str, start_dir: Path) -> pathspec.PathSpec | None:
    """
    Walk up from `start_dir` looking for `ignore_name` (e.g., `.artifactsetsignore`).
    Returns compiled `PathSpec` from first found, or `None`.
    """
    current = start_dir.resolve()
    while True:
        candidate = current / ignore_name
        if candidate.is_file():
            return _read_ignore_file(candidate)
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None
