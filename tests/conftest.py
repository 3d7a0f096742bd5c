"""Shared fixtures and fakes for applint tests."""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import pytest

from applint.adapters.checker import CheckContext, FileKind
from applint.config import reset_settings
from applint.errors import CheckerError
from applint.models.changes import ChangedFile, ChangeKind, ChangeRequest, EntryKind, RevisionRange, TreeEntry
from applint.models.findings import Finding, LineRange, Location, Severity

_ENV_VARS = [
    "GITHUB_TOKEN",
    "INPUT_GITHUB-TOKEN",
    "INPUT_BASE",
    "INPUT_HEAD-SHA",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_PATH",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "APPLINT_BASE",
    "APPLINT_HEAD_SHA",
    "APPLINT_MAX_CONCURRENT_FETCHES",
    "APPLINT_POST_COMMENT",
    "APPLINT_CREATE_CHECK_RUN",
]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate every test from the runner's environment and any .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


def make_finding(
    id: str = "invalid-yaml",
    severity: Severity = Severity.ERROR,
    title: str = "Invalid YAML",
    message: str = "Could not parse the file",
    line: Optional[int] = None,
    end_line: Optional[int] = None,
    column: Optional[int] = None,
    source_path: str = "",
) -> Finding:
    location = None
    if line is not None:
        location = Location(
            line=LineRange(line, end_line if end_line is not None else line),
            column=LineRange(column, column) if column is not None else None,
        )
    return Finding(
        id=id,
        severity=severity,
        title=title,
        message=message,
        location=location,
        source_path=source_path,
    )


def changed(path: str, kind: ChangeKind = ChangeKind.MODIFIED) -> ChangedFile:
    return ChangedFile(path=path, change_kind=kind)


def tree_of(*paths: str) -> List[TreeEntry]:
    """Tree entries for ``paths`` plus the directories that contain them."""
    entries: Dict[str, EntryKind] = {}
    for path in paths:
        parts = path.split("/")
        for i in range(1, len(parts)):
            entries.setdefault("/".join(parts[:i]), EntryKind.DIRECTORY)
        entries[path] = EntryKind.FILE
    return [TreeEntry(path=p, kind=k) for p, k in entries.items()]


class FakePlatform:
    """In-memory platform recording every call."""

    def __init__(
        self,
        files: Sequence[ChangedFile] = (),
        tree: Sequence[TreeEntry] = (),
        contents: Optional[Dict[str, str]] = None,
        pull_request: Optional[ChangeRequest] = None,
        delays: Optional[Dict[str, float]] = None,
        compare_error: Optional[Exception] = None,
    ):
        self.files = list(files)
        self.tree = list(tree)
        self.contents = contents or {}
        self.pull_request = pull_request
        self.delays = delays or {}
        self.compare_error = compare_error
        self.calls: List[tuple] = []
        self.comments: List[tuple] = []
        self.check_runs: List[Dict[str, Any]] = []
        self.check_run_updates: List[Dict[str, Any]] = []

    async def compare(self, revisions: RevisionRange) -> List[ChangedFile]:
        self.calls.append(("compare", revisions.basehead))
        if self.compare_error is not None:
            raise self.compare_error
        return list(self.files)

    async def get_tree(self, ref: str) -> List[TreeEntry]:
        self.calls.append(("tree", ref))
        return list(self.tree)

    async def get_content(self, path: str, ref: str) -> Optional[str]:
        self.calls.append(("content", path, ref))
        await asyncio.sleep(self.delays.get(path, 0))
        return self.contents.get(path)

    async def get_pull_request(self, number: int) -> ChangeRequest:
        self.calls.append(("pull_request", number))
        return self.pull_request

    async def create_comment(self, issue_number: int, body: str) -> Dict[str, Any]:
        self.comments.append((issue_number, body))
        return {"id": len(self.comments)}

    async def create_check_run(self, name: str, head_sha: str, **fields: Any) -> int:
        self.check_runs.append({"name": name, "head_sha": head_sha, **fields})
        return 4242

    async def update_check_run(self, check_run_id: int, **fields: Any) -> Dict[str, Any]:
        self.check_run_updates.append({"id": check_run_id, **fields})
        return {"id": check_run_id}


class FakeChecker:
    """Checker returning canned findings keyed by content (files) or unit (directories)."""

    def __init__(
        self,
        results: Optional[Dict[str, List[Finding]]] = None,
        directory_results: Optional[Dict[str, List[Finding]]] = None,
        fail_on: Optional[str] = None,
    ):
        self.results = results or {}
        self.directory_results = directory_results or {}
        self.fail_on = fail_on
        self.calls: List[tuple] = []
        self.directory_calls: List[tuple] = []

    async def lint(
        self,
        kind: FileKind,
        content: str,
        unit_id: Optional[str],
        context: CheckContext,
    ) -> List[Finding]:
        self.calls.append((kind, content, unit_id, context))
        if content == self.fail_on:
            raise CheckerError(kind.value, "boom")
        return list(self.results.get(content, []))

    async def lint_directory(self, unit_id: str, entries: Sequence[TreeEntry]) -> List[Finding]:
        self.directory_calls.append((unit_id, [e.path for e in entries]))
        return list(self.directory_results.get(unit_id, []))


@pytest.fixture
def revisions() -> RevisionRange:
    return RevisionRange(base="aaa111", head="bbb222")
