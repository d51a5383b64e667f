"""
PathResolver: main entry point for turning path patterns into files.

Resolves a mix of literal files, directories, and glob patterns into a
deduplicated, sorted tuple of absolute file paths. Problems with individual
patterns never raise; they are returned as diagnostics and the pattern is skipped.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

from artifactsets.diagnostics import Diagnostic, info, warning
from artifactsets.file_resolver.globbing import expand_glob
from artifactsets.file_resolver.ignore import compile_patterns, load_ignore_file
from artifactsets.file_resolver.patterns import is_glob_pattern
from artifactsets.file_resolver.probe import PathKind, probe_path
from artifactsets.file_resolver.types import FileResolverConfig
from artifactsets.file_resolver.walker import walk_files


@dataclass(frozen=True)
class Resolution:
    """Files resolved for one set of patterns, plus what was skipped and why."""

    files: tuple[Path, ...]
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.files


class PathResolver:
    """
    Resolves path patterns relative to a base directory.

    Each pattern is handled as:
    - Contains wildcard characters → expanded; matched files are added and matched
      directories are walked
    - Existing file → added directly
    - Existing directory → recursively walked (symlinks followed)
    - Missing, unreadable, or not a file or directory → skipped with a warning
    """

    def __init__(self, config: FileResolverConfig | None = None) -> None:
        self._config: FileResolverConfig = config or FileResolverConfig()
        self._exclude_spec: pathspec.PathSpec | None = compile_patterns(self._config.exclude)
        self._ignore_cache: dict[Path, pathspec.PathSpec | None] = {}
        self._exclude_dirs: list[Path] = [
            Path(os.path.normpath(os.path.abspath(d))) for d in self._config.exclude_dirs
        ]

    def resolve(self, base_directory: str | Path, patterns: Sequence[str]) -> Resolution:
        base = Path(os.path.abspath(base_directory))
        found: list[Path] = []
        diagnostics: list[Diagnostic] = []

        for pattern in patterns:
            if is_glob_pattern(pattern):
                self._resolve_glob(base, pattern, found, diagnostics)
            else:
                self._resolve_literal(base, pattern, found, diagnostics)

        files = [f for f in _normalize_unique(found) if not self._in_excluded_dir(f)]
        files = self._apply_exclusions(base, files, diagnostics)
        return Resolution(files=tuple(files), diagnostics=tuple(diagnostics))

    def _resolve_glob(
        self, base: Path, pattern: str, found: list[Path], diagnostics: list[Diagnostic]
    ) -> None:
        matches = expand_glob(pattern, base)
        if matches.is_empty:
            diagnostics.append(
                warning(f"Glob did not match any files or directories: {pattern}", pattern=pattern)
            )
            return
        for directory in matches.directories:
            found.extend(self._walk(directory, pattern, diagnostics))
        found.extend(matches.files)

    def _resolve_literal(
        self, base: Path, pattern: str, found: list[Path], diagnostics: list[Diagnostic]
    ) -> None:
        path = base / pattern
        kind = probe_path(path)
        if kind is PathKind.missing:
            diagnostics.append(warning(f"Path not found, skipping: {pattern}", pattern=pattern))
        elif kind is PathKind.unreadable:
            diagnostics.append(warning(f"Unable to read path, skipping: {pattern}", pattern=pattern))
        elif kind is PathKind.directory:
            dir_files = self._walk(path, pattern, diagnostics)
            if not dir_files:
                diagnostics.append(
                    warning(f"Directory is empty, skipping: {pattern}", pattern=pattern)
                )
            found.extend(dir_files)
        elif kind is PathKind.file:
            found.append(path)
        else:
            diagnostics.append(
                warning(f"Not a regular file or directory, skipping: {pattern}", pattern=pattern)
            )

    def _walk(self, directory: Path, pattern: str, diagnostics: list[Diagnostic]) -> list[Path]:
        def on_error(path: Path, exc: OSError) -> None:
            diagnostics.append(warning(f"Unable to read path, skipping: {exc}", pattern=pattern))

        return walk_files(directory, on_error=on_error)

    def _apply_exclusions(
        self, base: Path, files: list[Path], diagnostics: list[Diagnostic]
    ) -> list[Path]:
        specs = [spec for spec in (self._exclude_spec, self._get_ignore_file(base)) if spec]
        if not specs or not files:
            return files

        kept: list[Path] = []
        for path in files:
            rel = _match_path(path, base)
            if any(spec.match_file(rel) for spec in specs):
                continue
            kept.append(path)

        excluded = len(files) - len(kept)
        if excluded:
            diagnostics.append(info(f"Excluded {excluded} file(s) matching exclude patterns."))
        return kept

    def _in_excluded_dir(self, path: Path) -> bool:
        return any(path.is_relative_to(d) for d in self._exclude_dirs)

    def _get_ignore_file(self, base: Path) -> pathspec.PathSpec | None:
        """Lazily load the tool-specific ignore file, cached per base directory."""
        if not self._config.respect_ignore_file:
            return None
        if base not in self._ignore_cache:
            self._ignore_cache[base] = load_ignore_file(self._config.ignore_file_name, base)
        return self._ignore_cache[base]


def _normalize_unique(paths: Sequence[Path]) -> list[Path]:
    """Normalize to absolute paths without `.`/`..` segments, drop duplicates, sort."""
    unique = {os.path.normpath(os.path.abspath(p)) for p in paths}
    return sorted(Path(p) for p in unique)


def _match_path(path: Path, base: Path) -> str:
    """Path used for exclusion matching: relative to `base` if inside it, else the name."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.name
