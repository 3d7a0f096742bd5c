"""Aggregated report and outcome models for applint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .findings import Finding


@dataclass(frozen=True, slots=True)
class LintReport:
    """All findings of one run, in dispatch order, with severity counts."""

    findings: Tuple[Finding, ...]
    error_count: int = field(default=0)
    warning_count: int = field(default=0)
    info_count: int = field(default=0)

    def __post_init__(self) -> None:
        if self.error_count + self.warning_count + self.info_count != len(self.findings):
            raise ValueError("Severity counts must partition the findings")

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self):
        return iter(self.findings)

    @property
    def is_empty(self) -> bool:
        return not self.findings

    @property
    def annotated(self) -> List[Finding]:
        """Findings that carry a line location."""
        return [f for f in self.findings if f.location is not None]

    def counts(self) -> Dict[str, int]:
        return {
            "errors": self.error_count,
            "warnings": self.warning_count,
            "infos": self.info_count,
        }


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Pass/fail decision derived from a report's counts."""

    title: str
    error_count: int
    warning_count: int
    info_count: int
    failed: bool

    @property
    def conclusion(self) -> str:
        """Check-run conclusion for this outcome."""
        return "failure" if self.failed else "success"
