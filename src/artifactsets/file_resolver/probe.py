"""Existence and type checks for paths, without raising on filesystem errors."""

from __future__ import annotations

import errno
import os
import stat
from enum import Enum
from pathlib import Path


class PathKind(str, Enum):
    missing = "missing"
    unreadable = "unreadable"
    file = "file"
    directory = "directory"
    other = "other"


_NOT_FOUND_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR, errno.ELOOP, errno.ENAMETOOLONG})


def probe_path(path: str | Path) -> PathKind:
    """
    Report what is at `path`, following symlinks.

    A dangling symlink is `missing`. Permission and I/O errors are reported as
    `unreadable` rather than raised. Sockets, devices and FIFOs are `other`.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        if e.errno in _NOT_FOUND_ERRNOS:
            return PathKind.missing
        return PathKind.unreadable
    except ValueError:
        # Embedded null bytes and similar cannot name anything on disk.
        return PathKind.missing

    if not os.access(path, os.R_OK):
        return PathKind.unreadable
    if stat.S_ISDIR(st.st_mode):
        return PathKind.directory
    if stat.S_ISREG(st.st_mode):
        return PathKind.file
    return PathKind.other
