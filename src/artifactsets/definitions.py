"""
Artifact definitions: the `{name, path}` records that describe what to collect.

Raw records come from a JSON file or any already-parsed list. They are validated
all at once, before any filesystem access, so a typo in the last definition is
reported without having resolved the first.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from artifactsets.errors import ConfigError, FieldError

# Characters that artifact services and archive file names can't carry.
_INVALID_NAME_CHARS = frozenset('"\\/:<>|*?\r\n')


@dataclass(frozen=True)
class ArtifactDefinition:
    """A named group of path patterns. `name` is trimmed and `patterns` is never empty."""

    name: str
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class Invalid:
    """Validation outcome for a record that can't become an `ArtifactDefinition`."""

    errors: tuple[FieldError, ...]


def invalid_name_chars(name: str) -> list[str]:
    """The characters in `name` that can't appear in an artifact name, sorted."""
    return sorted(c for c in set(name) if c in _INVALID_NAME_CHARS)


def validate_definition(item: object, index: int) -> ArtifactDefinition | Invalid | None:
    """
    Validate one raw record.

    Returns the `ArtifactDefinition`, an `Invalid` listing every field problem, or
    `None` for an empty object, which is ignored rather than treated as an error.
    """
    if not isinstance(item, dict):
        return Invalid((FieldError(index, "artifact", "must be an object"),))
    record = cast(dict[str, Any], item)
    if not record:
        return None

    errors: list[FieldError] = []

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError(index, "name", 'is missing a non-empty "name"'))
    else:
        bad = invalid_name_chars(name)
        if bad:
            listed = " ".join(repr(c) for c in bad)
            reason = f"name {name.strip()!r} contains invalid characters: {listed}"
            errors.append(FieldError(index, "name", reason))

    patterns, path_errors = _to_patterns(record.get("path"), index)
    errors.extend(path_errors)
    if not patterns and not path_errors:
        errors.append(FieldError(index, "path", 'has no valid "path" entries'))

    if errors:
        return Invalid(tuple(errors))
    return ArtifactDefinition(name=cast(str, name).strip(), patterns=tuple(patterns))


def _to_patterns(value: object, index: int) -> tuple[list[str], list[FieldError]]:
    """
    Normalize a `path` value (a string or a list of strings) into trimmed,
    non-empty patterns. `None` entries in a list are dropped.
    """
    if value is None:
        return [], []
    if isinstance(value, str):
        stripped = value.strip()
        return ([stripped] if stripped else []), []
    if not isinstance(value, list):
        return [], [FieldError(index, "path", "must be a string or a list of strings")]

    patterns: list[str] = []
    errors: list[FieldError] = []
    for i, entry in enumerate(cast(list[object], value)):
        if entry is None:
            continue
        if not isinstance(entry, str):
            errors.append(FieldError(index, f"path[{i}]", f"path entry {i} must be a string"))
            continue
        stripped = entry.strip()
        if stripped:
            patterns.append(stripped)
    return patterns, errors


def parse_definitions(raw: object) -> list[ArtifactDefinition]:
    """
    Validate a parsed list of raw records into definitions, in order.

    Raises `ConfigError` listing every problem found if any record is invalid.
    """
    if not isinstance(raw, list):
        raise ConfigError("Config JSON must be an array of artifact definitions.")

    definitions: list[ArtifactDefinition] = []
    errors: list[FieldError] = []
    first_index: dict[str, int] = {}
    for index, item in enumerate(cast(list[object], raw)):
        result = validate_definition(item, index)
        if isinstance(result, Invalid):
            errors.extend(result.errors)
        elif result is not None:
            if result.name in first_index:
                reason = (
                    f'name "{result.name}" is already used by the artifact at index '
                    f"{first_index[result.name]}"
                )
                errors.append(FieldError(index, "name", reason))
                continue
            first_index[result.name] = index
            definitions.append(result)

    if errors:
        raise ConfigError("; ".join(str(e) for e in errors), errors)
    return definitions


def load_definitions_file(path: Path) -> list[ArtifactDefinition]:
    """Read and validate a JSON definitions file."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Config file is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    return parse_definitions(raw)
