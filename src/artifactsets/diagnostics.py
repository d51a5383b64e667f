"""
Structured diagnostics produced while resolving and grouping artifacts.

Resolution never prints. Every skip, warning and fatal condition is recorded as a
`Diagnostic` and returned with the results, so callers decide how to show them.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TextIO


class Severity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    artifact: str | None = None
    pattern: str | None = None

    def for_artifact(self, artifact: str) -> Diagnostic:
        """Copy of this diagnostic tagged with the artifact it belongs to."""
        return replace(self, artifact=artifact)


def info(message: str, **kwargs: str | None) -> Diagnostic:
    return Diagnostic(Severity.info, message, **kwargs)


def warning(message: str, **kwargs: str | None) -> Diagnostic:
    return Diagnostic(Severity.warning, message, **kwargs)


def error(message: str, **kwargs: str | None) -> Diagnostic:
    return Diagnostic(Severity.error, message, **kwargs)


def print_diagnostics(
    diagnostics: Iterable[Diagnostic],
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> None:
    """
    Print diagnostics in order: `info` to `out` (stdout by default), warnings and
    errors to `err` (stderr by default) with a `Warning:` or `Error:` prefix.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    for diag in diagnostics:
        if diag.severity is Severity.info:
            print(diag.message, file=out)
        elif diag.severity is Severity.warning:
            print(f"Warning: {diag.message}", file=err)
        else:
            print(f"Error: {diag.message}", file=err)
