"""Dispatch changed files and units to the checker."""

import asyncio
from typing import Awaitable, List, Optional, Sequence, Tuple, TypeVar

from ..adapters.checker import Checker, CheckContext, FileKind
from ..adapters.github import Platform
from ..config import get_settings
from ..logging import get_logger
from ..models.changes import ChangedFile, ChangeRequest, RevisionRange, TreeEntry
from ..models.findings import Finding

logger = get_logger(__name__)

FindingStream = List[Finding]
T = TypeVar("T")


def is_supported(path: str) -> bool:
    """Whether any supported filename occurs in ``path``."""
    return any(kind.value in path for kind in FileKind)


def classify(path: str) -> Optional[FileKind]:
    """The file kind ``path`` routes to, by filename suffix."""
    for kind in FileKind:
        if path.endswith(kind.value):
            return kind
    return None


def unit_id_for(path: str) -> Optional[str]:
    """Owning unit of a component-scoped file: its parent directory's name.

    Returns None for a file at the repository root, which has no owning unit.
    """
    segments = path.split("/")
    if len(segments) < 2 or not segments[-2]:
        return None
    return segments[-2]


def structural_unit_for(path: str) -> Optional[str]:
    """Top-level directory a changed path belongs to, or None for root files."""
    top, sep, _ = path.partition("/")
    if not sep or not top:
        return None
    return top


def unit_entries(tree: Sequence[TreeEntry], unit: str) -> List[TreeEntry]:
    """Tree entries under ``unit/``."""
    prefix = f"{unit}/"
    return [entry for entry in tree if entry.path.startswith(prefix)]


async def _run_all(coros: List[Awaitable[T]]) -> List[T]:
    """Await all checks and return their results in input order.

    If any check fails, the others are cancelled and awaited before the
    error propagates.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class Dispatcher:
    """Routes each changed file to the matching check and runs structural checks.

    Returns one finding stream per check in a fixed order: changed files in
    discovery order, then units in first-seen order. Fetches run concurrently,
    but results are always assembled in that order.
    """

    def __init__(
        self,
        platform: Platform,
        checker: Checker,
        *,
        max_concurrency: Optional[int] = None,
        check_image_architectures: Optional[bool] = None,
    ):
        settings = get_settings()
        self.platform = platform
        self.checker = checker
        self.max_concurrency = max_concurrency or settings.max_concurrent_fetches
        self.check_image_architectures = (
            settings.check_image_architectures
            if check_image_architectures is None
            else check_image_architectures
        )

    async def dispatch(
        self,
        revisions: RevisionRange,
        changed_files: Sequence[ChangedFile],
        tree: Optional[Sequence[TreeEntry]],
        change_request: Optional[ChangeRequest] = None,
    ) -> List[FindingStream]:
        snapshot: Tuple[TreeEntry, ...] = tuple(tree or ())
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def check_file(changed_file: ChangedFile) -> Optional[FindingStream]:
            async with semaphore:
                return await self._check_file(revisions, changed_file, snapshot, change_request)

        async def check_unit(unit: str) -> FindingStream:
            async with semaphore:
                return await self._check_unit(unit, snapshot)

        file_results = await _run_all([check_file(f) for f in changed_files])
        streams = [stream for stream in file_results if stream is not None]

        if tree is not None:
            units = self.units_of(changed_files)
            streams.extend(await _run_all([check_unit(u) for u in units]))

        logger.info(
            "Dispatch finished",
            changed=len(changed_files),
            checks=len(streams),
            findings=sum(len(s) for s in streams),
        )
        return streams

    @staticmethod
    def units_of(changed_files: Sequence[ChangedFile]) -> List[str]:
        """Distinct top-level units touched by the change set, first-seen order."""
        units = (structural_unit_for(f.path) for f in changed_files)
        return list(dict.fromkeys(u for u in units if u is not None))

    def _context_for(
        self,
        kind: FileKind,
        changed_file: ChangedFile,
        tree: Tuple[TreeEntry, ...],
        change_request: Optional[ChangeRequest],
    ) -> CheckContext:
        if kind is FileKind.APP_MANIFEST:
            return CheckContext(
                is_new_submission=changed_file.is_added,
                pull_request_url=change_request.html_url if change_request else None,
            )
        if kind is FileKind.COMPOSE:
            return CheckContext(
                tree=tree,
                check_image_architectures=self.check_image_architectures,
            )
        return CheckContext()

    async def _check_file(
        self,
        revisions: RevisionRange,
        changed_file: ChangedFile,
        tree: Tuple[TreeEntry, ...],
        change_request: Optional[ChangeRequest],
    ) -> Optional[FindingStream]:
        path = changed_file.path
        if not is_supported(path) or changed_file.is_removed:
            return None

        kind = classify(path)
        if kind is None:
            return None

        content = await self.platform.get_content(path, revisions.head)
        if content is None:
            logger.debug("No file content; skipping", path=path)
            return None

        unit_id = unit_id_for(path) if kind.is_unit_scoped else None
        context = self._context_for(kind, changed_file, tree, change_request)
        findings = await self.checker.lint(kind, content, unit_id, context)
        return [finding.attributed_to(path) for finding in findings]

    async def _check_unit(self, unit: str, tree: Tuple[TreeEntry, ...]) -> FindingStream:
        findings = await self.checker.lint_directory(unit, unit_entries(tree, unit))
        return [
            finding if finding.is_attributed else finding.attributed_to(f"{unit}/")
            for finding in findings
        ]
