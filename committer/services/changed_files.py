"""Detect files changed in a local git working tree."""

import asyncio
import logging
import os

from committer.services.github.exceptions import CommitPipelineError

logger = logging.getLogger(__name__)

# Modified (including deleted) tracked files plus untracked files not ignored
GIT_CHANGED_FILES_COMMAND = ("git", "ls-files", "--modified", "--others", "--exclude-standard")


class ChangedFilesError(CommitPipelineError):
    """Changed files could not be listed."""


async def detect_changed_files(workspace: str | os.PathLike[str]) -> str:
    """
    List files that differ from HEAD in the workspace.

    Deleted files are included; they no longer exist on disk, so the
    permissive missing-file policy drops them later.

    Args:
        workspace: Root of a git working tree

    Returns:
        Newline-delimited paths relative to `workspace`

    Raises:
        ChangedFilesError: If git is unavailable or exits non-zero
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *GIT_CHANGED_FILES_COMMAND,
            cwd=str(workspace),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ChangedFilesError(f"Unable to run git in {workspace}: {e}") from e

    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        error_msg = stderr.decode("utf-8", errors="replace").strip() or "unknown error"
        raise ChangedFilesError(f"git ls-files failed: {error_msg}")

    # Drop duplicates: a deleted file is reported by --modified as well
    paths = list(dict.fromkeys(stdout.decode("utf-8").splitlines()))
    logger.debug(f"Detected {len(paths)} changed file(s) in {workspace}")
    return "\n".join(paths)
