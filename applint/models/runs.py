"""Run data models for applint pipeline execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

from dataclasses_json import DataClassJsonMixin, config

# Type aliases
RunStatus = Literal['started', 'passed', 'failed', 'errored']


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Run(DataClassJsonMixin):
    """A pipeline execution run."""

    id: str
    started_at: datetime = field(
        default_factory=_utcnow,
        metadata=config(encoder=datetime.isoformat, decoder=datetime.fromisoformat)
    )
    ended_at: Optional[datetime] = field(
        default=None,
        metadata=config(
            encoder=lambda d: d.isoformat() if d else None,
            decoder=lambda s: datetime.fromisoformat(s) if s else None,
        )
    )
    repository: Optional[str] = field(default=None)
    base: Optional[str] = field(default=None)
    head: Optional[str] = field(default=None)
    status: RunStatus = field(default='started')
    notes: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        """Validate run data after initialization."""
        if not self.id:
            raise ValueError("Run ID cannot be empty")

    def complete(self, status: RunStatus, notes: Optional[str] = None) -> None:
        """Mark the run as completed."""
        self.status = status
        self.ended_at = _utcnow()
        if notes:
            self.notes = notes

    def fail(self, error_message: str) -> None:
        """Mark the run as aborted by an error."""
        self.complete('errored', f"Error: {error_message}")

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get the duration of the run in seconds."""
        if self.ended_at:
            return (self.ended_at - self.started_at).total_seconds()
        return None
