"""Exception types for artifactsets."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class ArtifactSetsError(Exception):
    """Base class for errors raised by artifactsets."""


@dataclass(frozen=True)
class FieldError:
    """One problem with one field of one artifact definition."""

    index: int
    field: str
    reason: str

    def __str__(self) -> str:
        return f"Artifact at index {self.index}: {self.reason}"


class ConfigError(ArtifactSetsError):
    """
    Invalid configuration: the definitions file, the settings file, or an option
    value. Always raised before any filesystem resolution happens.
    """

    def __init__(self, message: str, errors: Sequence[FieldError] = ()) -> None:
        super().__init__(message)
        self.errors: tuple[FieldError, ...] = tuple(errors)
