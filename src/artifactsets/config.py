"""
TOML-based settings file loading for artifactsets.

Searches for `.artifactsets.toml`, `artifactsets.toml`, or
`pyproject.toml [tool.artifactsets]` walking up from the workspace. Settings are
merged with CLI flags using three-way precedence: explicit CLI flags > settings
file > built-in defaults.
"""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from artifactsets.errors import ConfigError


@dataclass
class ArtifactSetsConfig:
    """
    Parsed settings from a TOML file. Fields are `None` when not set, so the
    merge logic can distinguish "not configured" from "explicitly set to the
    default value".
    """

    continue_on_error: bool | None = None
    compression_level: int | None = None
    jobs: int | None = None
    output_dir: str | None = None
    exclude: list[str] | None = None
    respect_ignore_file: bool | None = None


# Settings file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".artifactsets.toml", "artifactsets.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(ArtifactSetsConfig)}


def check_compression_level(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 9:
        raise ConfigError(f"Invalid compression level {value!r}: must be an integer from 0 to 9")
    return value


def check_jobs(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Invalid jobs value {value!r}: must be a positive integer")
    return value


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a settings file. Returns the first
    found, or `None`. Search order per directory: `.artifactsets.toml` >
    `artifactsets.toml` > `pyproject.toml` (only if it has `[tool.artifactsets]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.artifactsets] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "artifactsets" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> ArtifactSetsConfig:
    """
    Load an `ArtifactSetsConfig` from a TOML file. For `pyproject.toml` only the
    `[tool.artifactsets]` table is read. Kebab-case keys map to snake_case fields.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Settings file {config_path} is not valid TOML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read settings file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("artifactsets", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> ArtifactSetsConfig:
    """Parse a flat or sectioned TOML dict into `ArtifactSetsConfig`."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            mapped[snake_key] = value
        else:
            print(f"Warning: unrecognized config key ignored: {key}", file=sys.stderr)

    config = ArtifactSetsConfig(**mapped)
    if config.compression_level is not None:
        check_compression_level(config.compression_level)
    if config.jobs is not None:
        check_jobs(config.jobs)
    for name in ("continue_on_error", "respect_ignore_file"):
        flag = getattr(config, name)
        if flag is not None and not isinstance(flag, bool):
            key = name.replace("_", "-")
            raise ConfigError(f"Invalid {key} setting {flag!r}: must be true or false")
    if config.output_dir is not None and not (
        isinstance(config.output_dir, str) and config.output_dir.strip()
    ):
        raise ConfigError(
            f"Invalid output-dir setting {config.output_dir!r}: must be a non-empty string"
        )
    if config.exclude is not None and not (
        isinstance(config.exclude, list) and all(isinstance(p, str) for p in config.exclude)
    ):
        raise ConfigError("Invalid exclude setting: must be a list of strings")
    return config


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: ArtifactSetsConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with settings file values.

    Precedence: explicit CLI flags > settings file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(ArtifactSetsConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue
        if cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
