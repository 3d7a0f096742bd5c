"""Checker adapter: the boundary to the external umbrel-cli linter."""

import json
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import anyio

from ..config import get_settings
from ..errors import CheckerError
from ..logging import get_logger
from ..models.changes import TreeEntry
from ..models.findings import Finding

logger = get_logger(__name__)


class FileKind(str, Enum):
    """Supported file kinds; the value is the filename they are recognized by."""

    APP_MANIFEST = "umbrel-app.yml"
    COMPOSE = "docker-compose.yml"
    APP_STORE_INDEX = "umbrel-app-store.yml"

    @property
    def is_unit_scoped(self) -> bool:
        return self is not FileKind.APP_STORE_INDEX


@dataclass(frozen=True)
class CheckContext:
    """Submission metadata handed to a checker alongside file content."""

    is_new_submission: bool = False
    pull_request_url: Optional[str] = None
    tree: Tuple[TreeEntry, ...] = field(default=())
    check_image_architectures: bool = False


class Checker(Protocol):
    """Uniform contract every checker implementation follows."""

    async def lint(
        self,
        kind: FileKind,
        content: str,
        unit_id: Optional[str],
        context: CheckContext,
    ) -> List[Finding]: ...

    async def lint_directory(self, unit_id: str, entries: Sequence[TreeEntry]) -> List[Finding]: ...


# Reads one JSON request from stdin, calls the matching library function and
# writes the result array to stdout.
_BRIDGE = r"""
let raw = "";
process.stdin.setEncoding("utf8");
for await (const chunk of process.stdin) raw += chunk;
const request = JSON.parse(raw);
const lib = await import(request.module);
const unitId = request.unitId ?? undefined;
let results;
switch (request.kind) {
  case "umbrel-app.yml":
    results = await lib.lintUmbrelAppYml(request.content, unitId, request.options);
    break;
  case "docker-compose.yml":
    results = await lib.lintDockerComposeYml(request.content, unitId, request.files, request.options);
    break;
  case "umbrel-app-store.yml":
    results = await lib.lintUmbrelAppStoreYml(request.content);
    break;
  case "directory":
    results = await lib.lintDirectoryStructure(request.files);
    break;
  case "ping":
    results = [];
    break;
  default:
    throw new Error(`Unknown check kind: ${request.kind}`);
}
process.stdout.write(JSON.stringify(results ?? []));
"""


class UmbrelCliChecker:
    """Runs umbrel-cli's lint functions through a Node.js bridge process."""

    def __init__(
        self,
        node_path: Optional[str] = None,
        module: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
    ):
        settings = get_settings()
        self.node_path = node_path or settings.node_path
        self.module = module or settings.checker_module
        self.timeout = timeout or settings.checker_timeout
        self.cwd = cwd

    def _run_bridge(self, payload: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.node_path, "--input-type=module", "-e", _BRIDGE],
            input=payload,
            capture_output=True,
            text=True,
            timeout=self.timeout,
            cwd=self.cwd,
        )

    async def _invoke(self, kind: str, request: Dict[str, Any]) -> List[Dict[str, Any]]:
        payload = json.dumps({"module": self.module, "kind": kind, **request})

        try:
            result = await anyio.to_thread.run_sync(self._run_bridge, payload)
        except subprocess.TimeoutExpired:
            raise CheckerError(kind, f"timed out after {self.timeout}s") from None
        except OSError as e:
            raise CheckerError(kind, f"could not start {self.node_path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip().splitlines()
            raise CheckerError(kind, stderr[-1] if stderr else f"exit status {result.returncode}")

        try:
            raw_results = json.loads(result.stdout or "[]")
        except ValueError as e:
            raise CheckerError(kind, f"output is not JSON: {e}") from e
        if not isinstance(raw_results, list):
            raise CheckerError(kind, "output is not a list of results")
        return raw_results

    def _to_findings(self, kind: str, raw_results: List[Dict[str, Any]]) -> List[Finding]:
        try:
            return [Finding.from_checker_result(raw) for raw in raw_results]
        except (KeyError, TypeError, ValueError) as e:
            raise CheckerError(kind, f"malformed result: {e}") from e

    async def lint(
        self,
        kind: FileKind,
        content: str,
        unit_id: Optional[str],
        context: CheckContext,
    ) -> List[Finding]:
        """Lint one file's content."""
        request: Dict[str, Any] = {"content": content, "unitId": unit_id}
        if kind is FileKind.APP_MANIFEST:
            request["options"] = {
                "isNewAppSubmission": context.is_new_submission,
                "pullRequestUrl": context.pull_request_url,
            }
        elif kind is FileKind.COMPOSE:
            request["files"] = [entry.to_checker() for entry in context.tree]
            request["options"] = {
                "checkImageArchitectures": context.check_image_architectures,
            }

        raw_results = await self._invoke(kind.value, request)
        logger.debug("Checker finished", kind=kind.value, unit_id=unit_id, results=len(raw_results))
        return self._to_findings(kind.value, raw_results)

    async def lint_directory(self, unit_id: str, entries: Sequence[TreeEntry]) -> List[Finding]:
        """Structural check over one unit's file listing."""
        raw_results = await self._invoke(
            "directory", {"files": [entry.to_checker() for entry in entries]}
        )
        logger.debug("Directory check finished", unit_id=unit_id, results=len(raw_results))
        return self._to_findings("directory", raw_results)

    async def health_check(self) -> bool:
        """Check that Node.js can load the checker library."""
        try:
            await self._invoke("ping", {})
            return True
        except CheckerError as e:
            logger.error("Checker health check failed", error=str(e))
            return False
