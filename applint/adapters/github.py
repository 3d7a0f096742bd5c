"""GitHub REST client used as the platform collaborator."""

import asyncio
import base64
import json
from typing import Any, Dict, List, Optional, Protocol, Tuple
from urllib.parse import quote

import aiohttp
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import get_settings
from ..errors import ConfigurationError, UpstreamAPIError
from ..logging import get_logger, log_api_call
from ..models.changes import ChangedFile, ChangeRequest, RevisionRange, TreeEntry

logger = get_logger(__name__)

API_VERSION = "2022-11-28"

# The compare endpoint never lists more than this many files.
COMPARE_FILE_LIMIT = 300

# Transport-level failures only; HTTP error statuses are never retried.
_retry_transient = retry(
    retry=retry_if_exception_type((aiohttp.ClientConnectionError, asyncio.TimeoutError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)


class Platform(Protocol):
    """What the pipeline needs from the hosting platform."""

    async def compare(self, revisions: RevisionRange) -> List[ChangedFile]: ...

    async def get_tree(self, ref: str) -> List[TreeEntry]: ...

    async def get_content(self, path: str, ref: str) -> Optional[str]: ...

    async def get_pull_request(self, number: int) -> ChangeRequest: ...

    async def create_comment(self, issue_number: int, body: str) -> Dict[str, Any]: ...

    async def create_check_run(self, name: str, head_sha: str, **fields: Any) -> int: ...

    async def update_check_run(self, check_run_id: int, **fields: Any) -> Dict[str, Any]: ...


class GitHubClient:
    """Thin async wrapper around the GitHub REST endpoints the linter uses.

    Use as an async context manager so all requests share one session::

        async with GitHubClient("getumbrel", "umbrel-apps", token) as gh:
            files = await gh.compare(RevisionRange(base, head))
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        *,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        if not owner or not repo:
            raise ConfigurationError("Repository owner and name are required")
        self.owner = owner
        self.repo = repo
        self._token = token
        self._api_url = (api_url or settings.github_api_url).rstrip('/')
        self._timeout = timeout or settings.request_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    async def __aenter__(self) -> "GitHubClient":
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "applint",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        self._session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        operation: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        allow: Tuple[int, ...] = (),
    ) -> Tuple[int, Any]:
        if self._session is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")

        async with self._session.request(
            method, f"{self._api_url}{path}", params=params, json=body
        ) as response:
            status = response.status
            text = await response.text()

        try:
            data = json.loads(text) if text else None
        except ValueError:
            data = None

        log_api_call(logger, operation, status, method=method, path=path)

        if status in allow:
            return status, data
        if not 200 <= status < 300:
            message = data.get("message") if isinstance(data, dict) else None
            raise UpstreamAPIError(operation, status, message)
        return status, data

    @_retry_transient
    async def _get(
        self,
        operation: str,
        path: str,
        *,
        params: Optional[Dict[str, str]] = None,
        allow: Tuple[int, ...] = (),
    ) -> Tuple[int, Any]:
        return await self._request("GET", operation, path, params=params, allow=allow)

    async def compare(self, revisions: RevisionRange) -> List[ChangedFile]:
        """List changed files between two revisions, in API order, each path once."""
        _, data = await self._get(
            "compare commits",
            f"{self.repo_path}/compare/{quote(revisions.basehead, safe='.')}",
        )
        raw_files = (data or {}).get("files") or []
        if len(raw_files) >= COMPARE_FILE_LIMIT:
            logger.warning(
                "Compare response hit the file limit; later files are not linted",
                limit=COMPARE_FILE_LIMIT,
            )

        changed: Dict[str, ChangedFile] = {}
        for raw in raw_files:
            changed_file = ChangedFile.from_api(raw)
            changed.setdefault(changed_file.path, changed_file)
        return list(changed.values())

    async def get_tree(self, ref: str) -> List[TreeEntry]:
        """Recursive path listing of the repository at ``ref``."""
        _, data = await self._get(
            "get tree",
            f"{self.repo_path}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        data = data or {}
        if data.get("truncated"):
            logger.warning("Tree listing was truncated by the API", ref=ref)
        return [TreeEntry.from_api(item) for item in data.get("tree", []) if item.get("path")]

    async def get_content(self, path: str, ref: str) -> Optional[str]:
        """Decoded text of a file at ``ref``, or None when there is no file blob."""
        status, data = await self._get(
            "get content",
            f"{self.repo_path}/contents/{quote(path)}",
            params={"ref": ref},
            allow=(404,),
        )
        if status == 404:
            return None
        # Directories come back as lists; submodules and symlinks as other types.
        if not isinstance(data, dict) or data.get("type") != "file":
            return None
        if data.get("encoding") != "base64" or "content" not in data:
            return None
        # Undecodable bytes become U+FFFD rather than failing the run
        return base64.b64decode(data["content"]).decode("utf-8", errors="replace")

    async def get_pull_request(self, number: int) -> ChangeRequest:
        _, data = await self._get("get pull request", f"{self.repo_path}/pulls/{number}")
        return ChangeRequest.from_api(data)

    async def create_comment(self, issue_number: int, body: str) -> Dict[str, Any]:
        """Post a comment on an issue or pull request."""
        _, data = await self._request(
            "POST",
            "create comment",
            f"{self.repo_path}/issues/{issue_number}/comments",
            body={"body": body},
        )
        return data

    async def create_check_run(self, name: str, head_sha: str, **fields: Any) -> int:
        """Create a check run and return its id."""
        _, data = await self._request(
            "POST",
            "create check run",
            f"{self.repo_path}/check-runs",
            body={"name": name, "head_sha": head_sha, **fields},
        )
        return int(data["id"])

    async def update_check_run(self, check_run_id: int, **fields: Any) -> Dict[str, Any]:
        _, data = await self._request(
            "PATCH",
            "update check run",
            f"{self.repo_path}/check-runs/{check_run_id}",
            body=fields,
        )
        return data
