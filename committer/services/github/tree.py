"""
Tree creation.

New trees are declared sparsely: GitHub layers the listed entries over
`base_tree`, so only changed or added files are sent.
"""

import logging
from typing import Any

from committer.services.github.exceptions import InvalidTreeEntry
from committer.services.github.git_data import GitDataOperations
from committer.services.github.types import Blob, Repository, TreeEntry

logger = logging.getLogger(__name__)


def _validate_path(path: str) -> None:
    if not path:
        raise InvalidTreeEntry("Tree entry path must not be empty")
    if path.startswith("/"):
        raise InvalidTreeEntry(f"Tree entry path must be relative: {path}")
    if ".." in path.split("/"):
        raise InvalidTreeEntry(f"Tree entry path escapes the repository root: {path}")


class TreeBuilder:
    """Builds and saves a tree from uploaded blobs over a base tree."""

    def __init__(
        self,
        ops: GitDataOperations,
        repo: Repository,
        blobs: list[Blob],
        base_tree: str,
    ):
        self.ops = ops
        self.repo = repo
        self.blobs = blobs
        self.base_tree = base_tree
        self.sha: str | None = None

    def entries(self) -> list[TreeEntry]:
        """
        Tree entries for the blobs, in blob order.

        Raises:
            InvalidTreeEntry: If a blob has no sha yet, or a path is empty,
                absolute, escapes the root, or is listed twice
        """
        entries: list[TreeEntry] = []
        paths: set[str] = set()
        for blob in self.blobs:
            _validate_path(blob.path)
            if blob.sha is None:
                raise InvalidTreeEntry(f"Blob for {blob.path} has not been uploaded")
            if blob.path in paths:
                raise InvalidTreeEntry(f"Duplicate tree entry: {blob.path}")
            paths.add(blob.path)
            entries.append(TreeEntry(path=blob.path, mode=blob.mode, sha=blob.sha))
        return entries

    def build_request(self) -> dict[str, Any]:
        """Request body for POST git/trees."""
        return {
            "base_tree": self.base_tree,
            "tree": [entry.to_payload() for entry in self.entries()],
        }

    async def save(self) -> str:
        self.sha = await self.ops.create_tree(self.repo, self.build_request())
        logger.debug(f"Created tree {self.sha} over {self.base_tree}")
        return self.sha
