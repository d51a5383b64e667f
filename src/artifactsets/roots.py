"""Common root directory of a set of files."""

from __future__ import annotations

import os
from collections.abc import Collection
from pathlib import Path


def common_root(files: Collection[str | Path]) -> Path:
    """
    Longest common ancestor of the parent directories of `files`.

    Compares path components position by position and stops at the first
    disagreement. If nothing agrees (files on different drives), falls back to the
    anchor of the first file's parent. An empty input returns the current working
    directory; callers are expected to skip empty file sets before getting here.
    """
    if not files:
        return Path.cwd()

    parents = [Path(os.path.abspath(f)).parent for f in files]
    split = [p.parts for p in parents]
    shortest = min(len(parts) for parts in split)

    common: list[str] = []
    for i in range(shortest):
        part = split[0][i]
        if all(parts[i] == part for parts in split):
            common.append(part)
        else:
            break

    if not common:
        return Path(parents[0].anchor or Path.cwd())
    return Path(*common)
