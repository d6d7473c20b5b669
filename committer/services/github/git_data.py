"""
GitHub Git Data API operations.

Provides the low-level calls the commit pipeline is built from:
- Repository lookup
- Reading a reference and the commit it points to
- Creating blobs (streamed), trees and commits
- Fast-forward reference updates
"""

import hashlib
import logging
from typing import Any

from committer.services.github.blob_stream import CreateBlobRequestBody
from committer.services.github.cache import cached_github_call, repo_details_cache
from committer.services.github.constants import (
    DEFAULT_BLOB_CHUNK_SIZE,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    REF_UPDATE_REJECTED_STATUSES,
)
from committer.services.github.exceptions import (
    CommitCreateFailed,
    GitHubAPIError,
    InvalidTreeEntry,
    RefNotFound,
    RepositoryNotFound,
)
from committer.services.github.helpers import error_message, handle_error_response
from committer.services.github.http_client import get_github_client
from committer.services.github.types import RefUpdateResult, Repository

logger = logging.getLogger(__name__)


class GitDataOperations:
    """
    Git Data API operations for a single token.

    Every method performs exactly one HTTP call through the shared client and
    converts failures into the pipeline's exception types.
    """

    def __init__(self, token: str, base_url: str = GITHUB_API_URL):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    @property
    def cache_scope(self) -> str:
        """Host and hashed token; cached lookups are only shared within this scope."""
        token_hash = hashlib.sha256(self.token.encode()).hexdigest()
        return f"{self.base_url}|{token_hash}"

    def _repo_url(self, repo: Repository, path: str) -> str:
        return f"{self.base_url}/repos/{repo.owner}/{repo.name}/{path}"

    @cached_github_call(repo_details_cache)
    async def get_repository(self, owner: str, name: str) -> Repository:
        """
        Fetch repository metadata.

        Results are cached for 10 minutes.

        Args:
            owner: Repository owner (username or org)
            name: Repository name

        Returns:
            Repository with its id and default branch
        """
        client = get_github_client()
        response = await client.get(
            f"{self.base_url}/repos/{owner}/{name}",
            headers=self._headers,
        )
        handle_error_response(response, f"{owner}/{name}", not_found=RepositoryNotFound)

        data = response.json()
        return Repository(
            id=data["id"],
            owner=owner,
            name=name,
            full_name=data.get("full_name", f"{owner}/{name}"),
            default_branch=data.get("default_branch", "main"),
        )

    async def get_ref_commit_sha(self, repo: Repository, ref: str) -> str:
        """
        Get the commit sha a reference points to.

        Args:
            repo: Resolved repository
            ref: Fully qualified ref without the "refs/" prefix (e.g. "heads/main")

        Returns:
            The commit sha
        """
        client = get_github_client()
        response = await client.get(
            self._repo_url(repo, f"git/ref/{ref}"),
            headers=self._headers,
        )
        handle_error_response(
            response, f"ref '{ref}' in {repo.full_name}", not_found=RefNotFound
        )

        sha: str = response.json()["object"]["sha"]
        return sha

    async def get_commit_tree_sha(self, repo: Repository, commit_sha: str) -> str:
        """Get the root tree sha of a commit."""
        client = get_github_client()
        response = await client.get(
            self._repo_url(repo, f"git/commits/{commit_sha}"),
            headers=self._headers,
        )
        handle_error_response(response, f"commit {commit_sha} in {repo.full_name}")

        sha: str = response.json()["tree"]["sha"]
        return sha

    async def create_blob(
        self,
        repo: Repository,
        absolute_path: str,
        chunk_size: int = DEFAULT_BLOB_CHUNK_SIZE,
    ) -> str:
        """
        Upload a file as a blob, streaming its base64 encoding.

        Args:
            repo: Resolved repository
            absolute_path: File on disk
            chunk_size: Bytes read from disk per chunk

        Returns:
            The blob sha assigned by GitHub

        Raises:
            FileUnreadable: If the file cannot be opened or read mid-stream
        """
        client = get_github_client()
        response = await client.post(
            self._repo_url(repo, "git/blobs"),
            headers={**self._headers, "Content-Type": "application/json"},
            content=CreateBlobRequestBody(absolute_path, chunk_size),
        )
        handle_error_response(
            response, f"blob for {absolute_path}", expected=(200, 201)
        )

        sha: str = response.json()["sha"]
        logger.debug(f"Created blob {sha} for {absolute_path}")
        return sha

    async def create_tree(self, repo: Repository, payload: dict[str, Any]) -> str:
        """
        Create a tree layered over `payload["base_tree"]`.

        Args:
            repo: Resolved repository
            payload: Request body as built by TreeBuilder

        Returns:
            The new tree sha
        """
        client = get_github_client()
        response = await client.post(
            self._repo_url(repo, "git/trees"),
            headers=self._headers,
            json=payload,
        )

        if response.status_code == 422:
            detail = error_message(response) or "unprocessable tree"
            raise InvalidTreeEntry(f"GitHub rejected tree: {detail}")
        handle_error_response(response, f"tree in {repo.full_name}", expected=(200, 201))

        sha: str = response.json()["sha"]
        return sha

    async def create_commit(
        self,
        repo: Repository,
        message: str,
        tree_sha: str,
        parents: list[str],
    ) -> str:
        """
        Create a commit object.

        Returns:
            The new commit sha

        Raises:
            CommitCreateFailed: On any error response, keeping its status code
        """
        client = get_github_client()
        response = await client.post(
            self._repo_url(repo, "git/commits"),
            headers=self._headers,
            json={
                "message": message,
                "tree": tree_sha,
                "parents": parents,
            },
        )

        try:
            handle_error_response(
                response, f"commit in {repo.full_name}", expected=(200, 201)
            )
        except GitHubAPIError as e:
            raise CommitCreateFailed(
                f"Failed to create commit: {e.message}", e.status_code
            ) from e

        sha: str = response.json()["sha"]
        return sha

    async def update_ref(self, repo: Repository, ref: str, sha: str) -> RefUpdateResult:
        """
        Move a reference to `sha`, fast-forward only.

        GitHub checks that `sha` descends from the ref's current target; when
        it does not (someone else moved the ref), the update is rejected and
        the ref stays where it was.

        Returns:
            RefUpdateResult, rejected on 409/422
        """
        client = get_github_client()
        response = await client.patch(
            self._repo_url(repo, f"git/refs/{ref}"),
            headers=self._headers,
            json={"sha": sha, "force": False},
        )

        if response.status_code in REF_UPDATE_REJECTED_STATUSES:
            reason = error_message(response) or "Update is not a fast forward"
            return RefUpdateResult.rejected(reason, response.status_code)
        handle_error_response(
            response, f"ref '{ref}' in {repo.full_name}", not_found=RefNotFound
        )

        return RefUpdateResult.updated_to(response.json()["object"]["sha"])
