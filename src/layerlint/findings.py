"""Finding model: immutable rule violations with a precise source location."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Severity(enum.Enum):
    ERROR = "error"
    WARN = "warn"


@dataclass(frozen=True)
class Location:
    """A 1-based source span."""

    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Finding:
    """A single rule violation."""

    rule_name: str
    file_path: str
    location: Location
    message: str
    severity: Severity = Severity.ERROR

    def to_dict(self) -> dict[str, object]:
        return {
            "rule_name": self.rule_name,
            "severity": self.severity.value,
            "file_path": self.file_path,
            "line": self.location.line,
            "column": self.location.column,
            "end_line": self.location.end_line,
            "end_column": self.location.end_column,
            "message": self.message,
        }
