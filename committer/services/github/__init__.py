"""
GitHub Git Data API package.

Usage: `from committer.services.github import GitHubCommitService`

Module structure:
- service.py: GitHubCommitService pipeline facade
- git_data.py: One method per Git Data API call
- blob_stream.py: Streaming base64 create-blob request bodies
- blob.py: File list expansion and concurrent blob upload
- repo.py, ref.py, tree.py, commit.py: Pipeline stages
- helpers.py: Rate limit handling and error utilities
- types.py: Data types
- exceptions.py: Error taxonomy
- constants.py: API constants
"""

from committer.services.github.blob import (
    MissingFilePolicy,
    get_blobs_from_files,
    upload_blobs,
)
from committer.services.github.blob_stream import CreateBlobRequestBody
from committer.services.github.cache import clear_all_caches as clear_github_caches
from committer.services.github.commit import CommitBuilder
from committer.services.github.exceptions import (
    CommitCreateFailed,
    CommitPipelineError,
    FileUnreadable,
    GitHubAPIError,
    InvalidTreeEntry,
    NonFastForward,
    RefNotFound,
    RepositoryNotFound,
    Unauthorized,
)
from committer.services.github.git_data import GitDataOperations
from committer.services.github.http_client import close_github_client
from committer.services.github.ref import ReferenceHandle, normalize_ref
from committer.services.github.repo import RepositoryHandle
from committer.services.github.service import GitHubCommitService
from committer.services.github.tree import TreeBuilder
from committer.services.github.types import (
    Blob,
    CommitResult,
    RefUpdateResult,
    Repository,
    TreeEntry,
)

__all__ = [
    # Service (main entry point)
    "GitHubCommitService",
    # Pipeline stages
    "CommitBuilder",
    "CreateBlobRequestBody",
    "GitDataOperations",
    "ReferenceHandle",
    "RepositoryHandle",
    "TreeBuilder",
    "get_blobs_from_files",
    "normalize_ref",
    "upload_blobs",
    "MissingFilePolicy",
    # HTTP client lifecycle
    "close_github_client",
    # Cache management
    "clear_github_caches",
    # Exceptions
    "CommitCreateFailed",
    "CommitPipelineError",
    "FileUnreadable",
    "GitHubAPIError",
    "InvalidTreeEntry",
    "NonFastForward",
    "RefNotFound",
    "RepositoryNotFound",
    "Unauthorized",
    # Types
    "Blob",
    "CommitResult",
    "RefUpdateResult",
    "Repository",
    "TreeEntry",
]
