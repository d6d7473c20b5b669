"""Commit creation."""

import logging

from committer.services.github.exceptions import CommitCreateFailed
from committer.services.github.git_data import GitDataOperations
from committer.services.github.types import Repository

logger = logging.getLogger(__name__)


class CommitBuilder:
    """
    A commit object with an `Unsaved -> Saved` lifecycle.

    save() is not idempotent: each call creates a new commit on GitHub.
    """

    def __init__(
        self,
        ops: GitDataOperations,
        repo: Repository,
        tree_sha: str,
        message: str,
        parents: list[str],
    ):
        self.ops = ops
        self.repo = repo
        self.tree_sha = tree_sha
        self.message = message
        self.parents = list(parents)
        self._sha: str | None = None

    @property
    def sha(self) -> str:
        if self._sha is None:
            raise RuntimeError("Commit has not been saved")
        return self._sha

    async def save(self) -> str:
        """
        Create the commit on GitHub.

        Raises:
            CommitCreateFailed: If the message is empty or GitHub rejects the commit
        """
        if not self.message.strip():
            raise CommitCreateFailed("Commit message must not be empty")

        self._sha = await self.ops.create_commit(
            self.repo, self.message, self.tree_sha, self.parents
        )
        logger.info(f"Created commit {self._sha} (tree {self.tree_sha}, parents {self.parents})")
        return self._sha
