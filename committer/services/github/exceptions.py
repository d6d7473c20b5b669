"""Exceptions for the commit pipeline."""


class CommitPipelineError(Exception):
    """Base error for any failure that aborts a commit run."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FileUnreadable(CommitPipelineError):
    """A file selected for commit could not be opened or read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read {path}: {reason}")


class InvalidTreeEntry(CommitPipelineError):
    """A tree entry is missing its blob sha or has an unusable path."""


class GitHubAPIError(CommitPipelineError):
    """Error from GitHub API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int | None = None,
    ):
        self.status_code = status_code
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message)


class Unauthorized(GitHubAPIError):
    """Token is missing, invalid or expired."""


class RepositoryNotFound(GitHubAPIError):
    """Repository does not exist or is not visible to the token."""


class RefNotFound(GitHubAPIError):
    """Named reference does not exist in the repository."""


class CommitCreateFailed(GitHubAPIError):
    """GitHub refused to create the commit object."""


class NonFastForward(GitHubAPIError):
    """Reference moved since it was loaded; the update was rejected.

    The reference is left untouched. Callers are expected to start a new run
    rather than retry or force the update.
    """

    def __init__(self, ref: str, reason: str, status_code: int | None = None):
        self.ref = ref
        self.reason = reason
        super().__init__(f"Update of {ref} rejected: {reason}", status_code)
