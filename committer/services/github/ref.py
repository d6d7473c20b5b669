"""
Git references.

A ReferenceHandle is loaded once to learn the commit (and root tree) the ref
points at, and updated once at the end of the run to the new commit.
"""

import logging

from committer.services.github.exceptions import NonFastForward
from committer.services.github.git_data import GitDataOperations
from committer.services.github.types import RefUpdateResult, Repository

logger = logging.getLogger(__name__)


def normalize_ref(name: str) -> str:
    """
    Normalize a ref name to the form the Git Data API expects.

    "main", "heads/main" and "refs/heads/main" all become "heads/main";
    tags keep their "tags/" prefix.
    """
    ref = name.strip()
    if ref.startswith("refs/"):
        ref = ref[len("refs/"):]
    if not ref.startswith(("heads/", "tags/")):
        ref = f"heads/{ref}"
    return ref


class ReferenceHandle:
    """Reference with an `Unresolved -> Resolved` lifecycle."""

    def __init__(self, ops: GitDataOperations, repo: Repository, name: str):
        if not name.strip():
            raise ValueError("Reference name must not be empty")
        self.ops = ops
        self.repo = repo
        self.name = normalize_ref(name)
        self._commit_oid: str | None = None
        self._tree_oid: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self._commit_oid is not None

    @property
    def commit_oid(self) -> str:
        if self._commit_oid is None:
            raise RuntimeError(f"Reference {self.name} has not been loaded")
        return self._commit_oid

    @property
    def tree_oid(self) -> str:
        if self._tree_oid is None:
            raise RuntimeError(f"Reference {self.name} has not been loaded")
        return self._tree_oid

    async def load(self) -> None:
        """
        Resolve the commit the reference points to and that commit's tree.

        Raises:
            RefNotFound: If the reference does not exist
        """
        commit_oid = await self.ops.get_ref_commit_sha(self.repo, self.name)
        tree_oid = await self.ops.get_commit_tree_sha(self.repo, commit_oid)
        self._commit_oid, self._tree_oid = commit_oid, tree_oid
        logger.debug(f"Resolved {self.name} -> commit {commit_oid}, tree {tree_oid}")

    async def update(self, sha: str) -> RefUpdateResult:
        """
        Fast-forward the reference to `sha`.

        Raises:
            RuntimeError: If called before load()
            NonFastForward: If GitHub rejected the update; the ref is unchanged
        """
        if not self.is_resolved:
            raise RuntimeError(f"Reference {self.name} must be loaded before update")

        result = await self.ops.update_ref(self.repo, self.name, sha)
        if not result.updated:
            raise NonFastForward(
                self.name,
                result.reason or "Update is not a fast forward",
                result.status_code,
            )

        logger.info(f"Updated {self.name}: {self._commit_oid} -> {sha}")
        self._commit_oid = sha
        return result
