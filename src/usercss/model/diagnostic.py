"""Diagnostic model: structured parse messages for user style analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Severity level for a diagnostic message."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding produced while parsing a user style.

    Attributes:
        rule: Identifier for the check that produced this diagnostic.
        severity: How serious the issue is.
        message: Human-readable description of the problem.
        line: 1-based line inside the metadata block, if applicable.
    """

    rule: str
    severity: Severity
    message: str
    line: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def __str__(self) -> str:
        location = f" [line={self.line}]" if self.line is not None else ""
        return f"{self.severity.value}{location}: {self.message}"


def error(rule: str, message: str, line: int | None = None) -> Diagnostic:
    return Diagnostic(rule=rule, severity=Severity.ERROR, message=message, line=line)


def warning(rule: str, message: str, line: int | None = None) -> Diagnostic:
    return Diagnostic(rule=rule, severity=Severity.WARNING, message=message, line=line)
