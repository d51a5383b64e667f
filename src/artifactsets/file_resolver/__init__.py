"""
File discovery for artifact definitions: literal paths, directories, and glob
patterns resolved into deduplicated absolute file paths.

Usage::

    from artifactsets.file_resolver import PathResolver, FileResolverConfig

    resolver = PathResolver(FileResolverConfig(exclude=["*.tmp"]))
    resolution = resolver.resolve("/work", ["coverage", "reports/**/*.xml"])
    for diag in resolution.diagnostics:
        print(diag.message)
    files = resolution.files
"""

from artifactsets.file_resolver.globbing import GlobMatches, expand_glob
from artifactsets.file_resolver.patterns import expand_braces, is_glob_pattern
from artifactsets.file_resolver.probe import PathKind, probe_path
from artifactsets.file_resolver.resolver import PathResolver, Resolution
from artifactsets.file_resolver.types import FileResolverConfig
from artifactsets.file_resolver.walker import walk_files

__all__ = [
    "FileResolverConfig",
    "GlobMatches",
    "PathKind",
    "PathResolver",
    "Resolution",
    "expand_braces",
    "expand_glob",
    "is_glob_pattern",
    "probe_path",
    "walk_files",
]
