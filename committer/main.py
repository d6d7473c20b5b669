"""
Entry point: commit files to GitHub in a single run.

Usage:
    GITHUB_TOKEN=... GITHUB_REPOSITORY=owner/repo INPUT_FILES=$'a.txt\nb.txt' committer

Reads inputs from the environment (see committer.config.settings), runs the
commit pipeline and writes the new commit sha to the `commit-sha` output.
Exits non-zero if any stage fails.
"""

import asyncio
import logging
import sys

import httpx
from pydantic import ValidationError

from committer.config import Settings, get_settings
from committer.services.changed_files import detect_changed_files
from committer.services.github import (
    CommitPipelineError,
    GitHubCommitService,
    MissingFilePolicy,
    close_github_client,
)

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure run logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


def write_output(name: str, value: str, output_file: str = "") -> None:
    """Append `name=value` to the Actions output file, or log it when there is none."""
    if not output_file:
        logger.info(f"Output {name}={value}")
        return
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")


async def run(settings: Settings) -> str | None:
    """
    Run the commit pipeline once.

    Returns:
        The new commit sha, or None if there was nothing to commit
    """
    workspace = settings.workspace_dir
    files = await detect_changed_files(workspace) if settings.detect_changed else settings.files

    service = GitHubCommitService(
        settings.github_token,
        base_url=settings.github_api_url,
        max_concurrent=settings.upload_concurrency,
        chunk_size=settings.blob_chunk_size,
    )
    try:
        result = await service.commit_files(
            settings.github_repository,
            files,
            base_dir=workspace,
            message=settings.commit_message,
            ref=settings.ref or None,
            missing=MissingFilePolicy(settings.missing_files),
        )
    finally:
        await close_github_client()

    if result is None:
        return None

    logger.debug(f"Commit result: {result.as_dict()}")
    write_output("commit-sha", result.sha, settings.github_output)
    logger.info(f"Committed {len(result.blobs)} file(s) to {result.ref} as {result.sha}")
    return result.sha


def main() -> None:
    """Console entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Commit failed: invalid configuration: {e}")
        sys.exit(1)

    setup_logging(settings.debug)

    try:
        asyncio.run(run(settings))
    except CommitPipelineError as e:
        logger.error(f"Commit failed: {e.message}")
        sys.exit(1)
    except httpx.HTTPError as e:
        logger.error(f"Commit failed: GitHub request error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Commit failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
