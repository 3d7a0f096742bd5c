"""Change discovery: which paths differ between two revisions."""

from typing import List, Optional, Tuple

from ..adapters.github import Platform
from ..errors import RangeResolutionError
from ..logging import get_logger
from ..models.changes import ChangedFile, ChangeRequest, RevisionRange, TreeEntry

logger = get_logger(__name__)


def resolve_range(
    base: Optional[str],
    head: Optional[str],
    change_request: Optional[ChangeRequest] = None,
) -> RevisionRange:
    """Pick the revision range to lint.

    Explicit revisions win; an enclosing pull request fills in whichever is
    missing. Raises :class:`RangeResolutionError` if either is still unknown.
    """
    if change_request is not None:
        base = base or change_request.base_sha
        head = head or change_request.head_sha

    if not base or not head:
        raise RangeResolutionError(
            "Linting can only run on pull requests or with 'base' and 'head-sha' set"
        )
    return RevisionRange(base=base, head=head)


class ChangeDiscovery:
    """Lists changed files and snapshots the head tree."""

    def __init__(self, platform: Platform):
        self.platform = platform

    async def discover(
        self, revisions: RevisionRange, *, include_tree: bool = True
    ) -> Tuple[List[ChangedFile], Optional[List[TreeEntry]]]:
        """Return the changed files in API order and, if requested, the tree at head.

        Platform errors propagate; a bad range is a configuration problem, not
        something to retry.
        """
        changed_files = await self.platform.compare(revisions)
        logger.info(
            "Discovered changed files",
            basehead=revisions.basehead,
            changed=len(changed_files),
        )

        if not include_tree or not changed_files:
            return changed_files, None

        tree = await self.platform.get_tree(revisions.head)
        logger.info("Fetched head tree", head=revisions.head, entries=len(tree))
        return changed_files, tree
