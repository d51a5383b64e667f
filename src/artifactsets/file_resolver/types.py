"""Configuration types for file resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class FileResolverConfig:
    """
    Configuration for resolving artifact path patterns.

    `tool_name` determines the ignore file name (e.g., `.artifactsetsignore`).
    `exclude` holds gitignore-style patterns; an empty list (the default) means no
    files are filtered unless an ignore file is found. Files anywhere below one of
    `exclude_dirs` (such as the archive output directory) are always dropped.
    """

    tool_name: str = "artifactsets"
    exclude: list[str] = field(default_factory=list)
    exclude_dirs: list[Path] = field(default_factory=list)
    respect_ignore_file: bool = True

    @property
    def ignore_file_name(self) -> str:
        return f".{self.tool_name}ignore"
