"""Recursive enumeration of regular files below a directory."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

WalkErrorHandler = Callable[[Path, OSError], None]


def walk_files(directory: str | Path, on_error: WalkErrorHandler | None = None) -> list[Path]:
    """
    Return every regular file reachable below `directory`, following symlinks to
    both files and directories.

    Uses an explicit stack rather than recursion, so deep trees don't hit the
    recursion limit. A directory is not entered if it is one of its own ancestors
    (same device and inode), which keeps symlink cycles finite while still listing
    a directory once under each non-cyclic path that reaches it. Directories that
    can't be listed are skipped and reported to `on_error` if given.
    """
    root = Path(directory)
    files: list[Path] = []
    stack: list[tuple[Path, frozenset[tuple[int, int]]]] = [(root, frozenset())]

    while stack:
        current, ancestors = stack.pop()
        try:
            st = current.stat()
        except OSError as e:
            if on_error is not None:
                on_error(current, e)
            continue
        key = (st.st_dev, st.st_ino)
        if key in ancestors:
            continue
        lineage = ancestors | {key}

        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    full = current / entry.name
                    try:
                        if entry.is_dir():
                            stack.append((full, lineage))
                        elif entry.is_file():
                            files.append(full)
                    except OSError as e:
                        if on_error is not None:
                            on_error(full, e)
        except OSError as e:
            if on_error is not None:
                on_error(current, e)

    return files
