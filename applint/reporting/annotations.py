"""Inline annotations for located findings."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models.findings import Finding, Severity
from ..models.reports import LintReport
from .export import finding_to_record


class AnnotationLevel(str, Enum):
    FAILURE = "failure"
    WARNING = "warning"
    NOTICE = "notice"

    @property
    def command(self) -> str:
        """Workflow command name for this level."""
        return "error" if self is AnnotationLevel.FAILURE else self.value


ANNOTATION_LEVELS = {
    Severity.ERROR: AnnotationLevel.FAILURE,
    Severity.WARNING: AnnotationLevel.WARNING,
    Severity.INFO: AnnotationLevel.NOTICE,
}


def escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_command_property(value: str) -> str:
    return escape_command_data(value).replace(":", "%3A").replace(",", "%2C")


@dataclass(frozen=True)
class Annotation:
    """One annotation at a file/line range."""

    path: str
    start_line: int
    end_line: int
    level: AnnotationLevel
    rule_id: str
    title: str
    message: str
    start_column: Optional[int] = None
    end_column: Optional[int] = None
    raw_details: Optional[str] = None

    @classmethod
    def from_finding(cls, finding: Finding) -> "Annotation":
        if finding.location is None:
            raise ValueError(f"Finding {finding.id} has no location to annotate")
        line, column = finding.location.line, finding.location.column
        return cls(
            path=finding.source_path,
            start_line=line.start,
            end_line=line.end,
            start_column=column.start if column else None,
            end_column=column.end if column else None,
            level=ANNOTATION_LEVELS[finding.severity],
            rule_id=finding.id,
            title=finding.title,
            message=finding.message,
            raw_details=json.dumps(finding_to_record(finding), indent=2, ensure_ascii=False),
        )

    def to_workflow_command(self) -> str:
        """Render as a ``::error file=...::message`` workflow command."""
        properties = [
            ("file", self.path),
            ("line", self.start_line),
            ("endLine", self.end_line),
            ("col", self.start_column),
            ("endColumn", self.end_column),
            ("title", self.title),
        ]
        rendered = ",".join(
            f"{key}={escape_command_property(str(value))}"
            for key, value in properties
            if value is not None
        )
        return f"::{self.level.command} {rendered}::{escape_command_data(self.message)}"

    def to_check_run(self) -> Dict[str, Any]:
        """Render as a check-run annotation object."""
        annotation: Dict[str, Any] = {
            "path": self.path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "annotation_level": self.level.value,
            "message": self.message or self.title,
            "title": f"[{self.rule_id}] {self.title}",
        }
        # The checks API only accepts columns on single-line annotations.
        if self.start_line == self.end_line and self.start_column is not None:
            annotation["start_column"] = self.start_column
            annotation["end_column"] = (
                self.end_column if self.end_column is not None else self.start_column
            )
        if self.raw_details:
            annotation["raw_details"] = self.raw_details
        return annotation


def build_annotations(report: LintReport) -> List[Annotation]:
    """One annotation per located finding, in report order."""
    return [Annotation.from_finding(f) for f in report.annotated]
