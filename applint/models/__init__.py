"""Data models for applint."""

from .changes import ChangedFile, ChangeKind, ChangeRequest, EntryKind, RevisionRange, TreeEntry
from .findings import Finding, LineRange, Location, Severity
from .reports import LintReport, RunOutcome
from .runs import Run, RunStatus

__all__ = [
    "ChangedFile",
    "ChangeKind",
    "ChangeRequest",
    "EntryKind",
    "Finding",
    "LineRange",
    "LintReport",
    "Location",
    "RevisionRange",
    "Run",
    "RunOutcome",
    "RunStatus",
    "Severity",
    "TreeEntry",
]
