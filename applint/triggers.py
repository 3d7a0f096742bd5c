"""Trigger sources: where a run's repository and pull request come from.

The GitHub Action and the webhook bot both deliver the same event payload
shape, so both build a :class:`TriggerContext` here and hand it to the one
pipeline.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .adapters.github import Platform
from .errors import ConfigurationError
from .logging import get_logger
from .models.changes import ChangeRequest

logger = get_logger(__name__)


@dataclass(frozen=True)
class TriggerContext:
    """Repository and optional pull request a run belongs to."""

    owner: str
    repo: str
    change_request: Optional[ChangeRequest] = None

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_event_payload(
        cls, payload: Dict[str, Any], owner: str, repo: str
    ) -> "TriggerContext":
        """Build from a GitHub event or webhook payload."""
        pull_request = payload.get("pull_request")
        if pull_request:
            logger.debug("Event is a pull request", number=pull_request.get("number"))
            return cls(owner, repo, ChangeRequest.from_api(pull_request))

        logger.debug("Event is not a pull request")
        return cls(owner, repo)

    @classmethod
    def from_event_file(cls, path: Optional[Path], owner: str, repo: str) -> "TriggerContext":
        """Build from the event payload file the runner provides, if any."""
        if path is None:
            return cls(owner, repo)
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ConfigurationError(f"Event payload not found: {path}") from None
        except ValueError as e:
            raise ConfigurationError(f"Event payload is not valid JSON: {path}") from e
        return cls.from_event_payload(payload, owner, repo)

    @classmethod
    async def from_pull_request(
        cls, platform: Platform, number: int, owner: str, repo: str
    ) -> "TriggerContext":
        """Build by looking the pull request up through the platform API."""
        change_request = await platform.get_pull_request(number)
        return cls(owner, repo, change_request)
