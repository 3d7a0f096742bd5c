"""Finding data models for applint."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from dataclasses_json import DataClassJsonMixin


class Severity(str, Enum):
    """Closed set of finding severities.

    Outcome precedence (ERROR > WARNING > INFO) lives in
    :func:`applint.reporting.markdown.outcome_title`, not in comparisons.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: str) -> Severity:
        """Parse a checker severity string; unknown values are rejected."""
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unrecognized severity: {value!r}") from None


@dataclass(frozen=True, slots=True)
class LineRange(DataClassJsonMixin):
    """An inclusive 1-based range of lines or columns."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Range end cannot precede its start")


@dataclass(frozen=True, slots=True)
class Location(DataClassJsonMixin):
    """Where in a file a finding applies."""

    line: LineRange
    column: Optional[LineRange] = None


@dataclass(frozen=True, slots=True)
class Finding(DataClassJsonMixin):
    """A single reportable lint result."""

    id: str
    severity: Severity
    title: str
    message: str
    location: Optional[Location] = field(default=None)
    source_path: str = field(default="")

    def __post_init__(self) -> None:
        """Validate finding data after initialization."""
        if not self.id:
            raise ValueError("Finding ID cannot be empty")
        if not isinstance(self.severity, Severity):
            raise ValueError(f"Severity must be a Severity, got {self.severity!r}")
        if not self.title:
            raise ValueError("Title cannot be empty")

    def attributed_to(self, path: str) -> Finding:
        """Return a copy of this finding attributed to ``path``."""
        if not path:
            raise ValueError("Attributed path cannot be empty")
        return replace(self, source_path=path)

    @property
    def is_attributed(self) -> bool:
        return bool(self.source_path)

    @classmethod
    def from_checker_result(cls, data: Dict[str, Any]) -> Finding:
        """Build a finding from one checker result object.

        Checker results look like ``{id, severity, title, message, file?,
        line?: {start, end}, column?: {start, end}}``.
        """
        location = None
        line = data.get("line")
        if line:
            column = data.get("column")
            location = Location(
                line=LineRange(start=int(line["start"]), end=int(line.get("end", line["start"]))),
                column=(
                    LineRange(start=int(column["start"]), end=int(column.get("end", column["start"])))
                    if column else None
                ),
            )

        return cls(
            id=str(data["id"]),
            severity=Severity.parse(data["severity"]),
            title=str(data["title"]),
            message=str(data.get("message", "")),
            location=location,
            source_path=str(data.get("file") or ""),
        )
