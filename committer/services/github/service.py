"""
Commit pipeline facade.

Composes the Git Data API stages into one run:

    repository -> ref -> blobs -> tree -> commit -> ref update

Each stage hands its result to the next explicitly; nothing is kept in
module-level state. Any error aborts the run. Objects created before the
failure (blobs, tree, commit) are left unreferenced on GitHub.
"""

import logging
import os

from committer.services.github.blob import (
    MissingFilePolicy,
    get_blobs_from_files,
    upload_blobs,
)
from committer.services.github.commit import CommitBuilder
from committer.services.github.constants import (
    DEFAULT_BLOB_CHUNK_SIZE,
    DEFAULT_UPLOAD_CONCURRENCY,
    GITHUB_API_URL,
)
from committer.services.github.exceptions import CommitCreateFailed
from committer.services.github.git_data import GitDataOperations
from committer.services.github.ref import ReferenceHandle
from committer.services.github.repo import RepositoryHandle
from committer.services.github.tree import TreeBuilder
from committer.services.github.types import CommitResult

logger = logging.getLogger(__name__)


class GitHubCommitService:
    """Commits local files to a GitHub repository without a checkout."""

    def __init__(
        self,
        token: str,
        base_url: str = GITHUB_API_URL,
        max_concurrent: int = DEFAULT_UPLOAD_CONCURRENCY,
        chunk_size: int = DEFAULT_BLOB_CHUNK_SIZE,
    ):
        self.ops = GitDataOperations(token, base_url)
        self.max_concurrent = max_concurrent
        self.chunk_size = chunk_size

    async def commit_files(
        self,
        repository: str,
        files: str,
        *,
        base_dir: str | os.PathLike[str],
        message: str,
        ref: str | None = None,
        missing: MissingFilePolicy = MissingFilePolicy.PERMISSIVE,
    ) -> CommitResult | None:
        """
        Commit the listed files on top of `ref`.

        Args:
            repository: "owner/name"
            files: Newline-delimited paths relative to `base_dir`
            base_dir: Workspace the paths resolve against (the repository root)
            message: Commit message
            ref: Branch or ref to update (default: the repository's default branch)
            missing: Policy for listed paths that do not exist

        Returns:
            CommitResult for the new commit, or None when there is nothing to commit

        Raises:
            CommitPipelineError: Any stage failure; see exceptions.py
        """
        if not files.strip():
            logger.info("Files to be committed are not specified.")
            return None
        if not message.strip():
            raise CommitCreateFailed("Commit message must not be empty")

        repo_handle = RepositoryHandle(self.ops, repository)
        repo = await repo_handle.load()

        ref_handle = ReferenceHandle(self.ops, repo, ref or repo.default_branch)
        await ref_handle.load()

        blobs = get_blobs_from_files(files, base_dir, missing=missing)
        logger.debug(
            f"Received {len(blobs)} blob{'' if len(blobs) == 1 else 's'}: "
            f"{', '.join(blob.absolute_path for blob in blobs)}"
        )
        if not blobs:
            logger.info("No listed file can be committed; nothing to commit.")
            return None

        await upload_blobs(self.ops, repo, blobs, self.max_concurrent, self.chunk_size)

        tree = TreeBuilder(self.ops, repo, blobs, ref_handle.tree_oid)
        tree_sha = await tree.save()

        parent_sha = ref_handle.commit_oid
        commit = CommitBuilder(self.ops, repo, tree_sha, message, [parent_sha])
        await commit.save()

        await ref_handle.update(commit.sha)

        return CommitResult(
            sha=commit.sha,
            tree_sha=tree_sha,
            parent_sha=parent_sha,
            ref=ref_handle.name,
            blobs=blobs,
        )
