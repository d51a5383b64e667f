"""Glob expansion into matched files and matched directories."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field
from pathlib import Path

from artifactsets.file_resolver.patterns import expand_braces
from artifactsets.file_resolver.probe import PathKind, probe_path


@dataclass
class GlobMatches:
    """Disjoint sets of regular files and directories matched by one pattern."""

    files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.directories


def expand_glob(pattern: str, base_directory: str | Path) -> GlobMatches:
    """
    Expand a glob pattern, anchored at `base_directory` unless it is absolute.

    Braces are expanded first, then each alternative goes through `glob.glob` with
    `**` recursion and hidden files included. The base directory is passed as
    `root_dir`, so wildcard characters in it are never interpreted. Matching
    follows symlinks and is case-sensitive on case-sensitive filesystems.
    Matches that are neither a readable file nor a directory are dropped.
    """
    base = os.fspath(base_directory)
    matches = GlobMatches()
    seen: set[str] = set()
    for alternative in expand_braces(pattern):
        for found in glob.glob(alternative, root_dir=base, recursive=True, include_hidden=True):
            full = os.path.normpath(os.path.join(base, found))
            if full in seen:
                continue
            seen.add(full)
            kind = probe_path(full)
            if kind is PathKind.file:
                matches.files.append(Path(full))
            elif kind is PathKind.directory:
                matches.directories.append(Path(full))
    return matches
