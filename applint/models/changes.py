"""Change-set data models for applint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dataclasses_json import DataClassJsonMixin


class ChangeKind(str, Enum):
    """How a path changed between two revisions."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"

    @classmethod
    def from_status(cls, status: str) -> ChangeKind:
        """Map a compare-API file status onto a change kind."""
        return _STATUS_MAP.get(status, cls.MODIFIED)


_STATUS_MAP = {
    "added": ChangeKind.ADDED,
    "copied": ChangeKind.ADDED,
    "removed": ChangeKind.REMOVED,
    "renamed": ChangeKind.RENAMED,
    "modified": ChangeKind.MODIFIED,
    "changed": ChangeKind.MODIFIED,
    "unchanged": ChangeKind.MODIFIED,
}


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class ChangedFile(DataClassJsonMixin):
    """One path changed in the revision range."""

    path: str
    change_kind: ChangeKind
    previous_path: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("Changed file path cannot be empty")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> ChangedFile:
        """Create from one entry of a compare response's ``files`` list."""
        return cls(
            path=data["filename"],
            change_kind=ChangeKind.from_status(data.get("status", "modified")),
            previous_path=data.get("previous_filename"),
        )

    @property
    def is_removed(self) -> bool:
        return self.change_kind is ChangeKind.REMOVED

    @property
    def is_added(self) -> bool:
        return self.change_kind is ChangeKind.ADDED


@dataclass(frozen=True, slots=True)
class TreeEntry(DataClassJsonMixin):
    """One path of the repository tree at the head revision."""

    path: str
    kind: EntryKind

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> TreeEntry:
        """Create from one git tree item; only blobs count as files."""
        return cls(
            path=data["path"],
            kind=EntryKind.FILE if data.get("type") == "blob" else EntryKind.DIRECTORY,
        )

    def to_checker(self) -> Dict[str, str]:
        return {"path": self.path, "type": self.kind.value}


@dataclass(frozen=True, slots=True)
class RevisionRange:
    """The base and head revisions being compared."""

    base: str
    head: str

    @property
    def basehead(self) -> str:
        return f"{self.base}...{self.head}"


@dataclass(frozen=True, slots=True)
class ChangeRequest(DataClassJsonMixin):
    """The pull request a run belongs to, if any."""

    number: int
    html_url: Optional[str] = field(default=None)
    base_sha: Optional[str] = field(default=None)
    head_sha: Optional[str] = field(default=None)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> ChangeRequest:
        """Create from a pull request object of an event payload or the REST API."""
        return cls(
            number=int(data["number"]),
            html_url=data.get("html_url"),
            base_sha=(data.get("base") or {}).get("sha"),
            head_sha=(data.get("head") or {}).get("sha"),
        )
