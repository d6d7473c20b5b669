"""
GitHub API helper utilities.

Provides rate limit handling and maps error responses onto the pipeline's
exception taxonomy.
"""

import logging

import httpx

from committer.services.github.exceptions import GitHubAPIError, Unauthorized

logger = logging.getLogger(__name__)


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        return int(self.reset) if self.reset else None

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining is not None and int(self.remaining) == 0


def error_message(response: httpx.Response) -> str | None:
    """Extract GitHub's `message` field from an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        message: str = body["message"]
        return message
    return None


def handle_error_response(
    response: httpx.Response,
    context: str,
    not_found: type[GitHubAPIError] = GitHubAPIError,
    expected: tuple[int, ...] = (200,),
) -> None:
    """
    Raise the matching pipeline error for a non-successful GitHub response.

    Args:
        response: The HTTP response from GitHub API
        context: What was being requested, for error messages (e.g. "owner/repo")
        not_found: Exception class to raise on 404
        expected: Status codes that count as success

    Raises:
        Unauthorized: If the token is invalid or expired (401)
        GitHubAPIError: Or `not_found` on 404, for any other failure
    """
    if response.status_code in expected:
        return

    rate_info = RateLimitInfo(response)
    detail = error_message(response)

    if response.status_code == 401:
        raise Unauthorized("Invalid or expired GitHub token", 401)
    elif response.status_code == 404:
        raise not_found(f"Not found: {context}", 404)
    elif response.status_code == 403:
        if rate_info.is_exhausted:
            raise GitHubAPIError(
                "GitHub API rate limit exceeded",
                403,
                rate_limit_reset=rate_info.reset_timestamp,
            )
        raise GitHubAPIError(f"GitHub API forbidden: {detail or context}", 403)

    logger.debug(f"GitHub returned {response.status_code} for {context}: {detail!r}")
    suffix = f" ({detail})" if detail else ""
    raise GitHubAPIError(
        f"GitHub API error {response.status_code} for {context}{suffix}",
        response.status_code,
    )
