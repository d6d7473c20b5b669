"""
Expanding file lists into blobs and uploading them.

A file list is the newline-delimited text produced by the `files` input or
the changed-files provider. Lines name paths relative to a base directory.
"""

import asyncio
import logging
import os
import stat
from enum import Enum
from pathlib import Path

from committer.services.github.constants import (
    DEFAULT_BLOB_CHUNK_SIZE,
    DEFAULT_UPLOAD_CONCURRENCY,
    FILE_MODE_EXECUTABLE,
    FILE_MODE_REGULAR,
)
from committer.services.github.exceptions import FileUnreadable
from committer.services.github.git_data import GitDataOperations
from committer.services.github.types import Blob, Repository

logger = logging.getLogger(__name__)


class MissingFilePolicy(str, Enum):
    """What to do with listed paths that are not files on disk."""

    PERMISSIVE = "permissive"  # drop them
    STRICT = "strict"  # fail the run


def _file_mode(st: os.stat_result) -> str:
    return FILE_MODE_EXECUTABLE if st.st_mode & stat.S_IXUSR else FILE_MODE_REGULAR


def get_blobs_from_files(
    files: str,
    base_dir: str | os.PathLike[str],
    *,
    repo_root: str | os.PathLike[str] | None = None,
    missing: MissingFilePolicy = MissingFilePolicy.PERMISSIVE,
) -> list[Blob]:
    """
    Expand a newline-delimited list of paths into blob descriptors.

    Args:
        files: Newline-delimited paths, relative to `base_dir` (blank lines ignored)
        base_dir: Directory the listed paths are resolved against
        repo_root: Repository root the git paths are relative to (default: `base_dir`)
        missing: Policy for paths that are not regular files or lie outside `repo_root`

    Returns:
        Blobs in input order, one per distinct path

    Raises:
        FileUnreadable: For a missing or outside path under MissingFilePolicy.STRICT
    """
    base = Path(base_dir)
    root = Path(repo_root) if repo_root is not None else base

    blobs: list[Blob] = []
    seen: set[str] = set()

    for line in files.splitlines():
        name = line.strip()
        if not name:
            continue

        absolute = os.path.abspath(base / name)
        try:
            st = os.stat(absolute)
        except OSError:
            st = None

        if st is None or not stat.S_ISREG(st.st_mode):
            if missing is MissingFilePolicy.STRICT:
                raise FileUnreadable(absolute, "no such file")
            logger.debug(f"Skipping {name}: not a file in {base}")
            continue

        if absolute in seen:
            continue
        seen.add(absolute)

        git_path = Path(os.path.relpath(absolute, os.path.abspath(root))).as_posix()
        if git_path == ".." or git_path.startswith("../"):
            if missing is MissingFilePolicy.STRICT:
                raise FileUnreadable(absolute, "outside the repository")
            logger.warning(f"Skipping {name}: outside the repository at {root}")
            continue

        blobs.append(Blob(absolute_path=absolute, path=git_path, mode=_file_mode(st)))

    return blobs


async def upload_blobs(
    ops: GitDataOperations,
    repo: Repository,
    blobs: list[Blob],
    max_concurrent: int = DEFAULT_UPLOAD_CONCURRENCY,
    chunk_size: int = DEFAULT_BLOB_CHUNK_SIZE,
) -> list[Blob]:
    """
    Upload blobs with bounded concurrency, filling in each blob's sha.

    Uploads are independent of each other; at most `max_concurrent` are in
    flight at once. Every upload has finished when this returns; the first
    failure is then raised.

    Returns:
        The same blobs, in the same order, each with `sha` set
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrent))

    async def upload_with_limit(blob: Blob) -> None:
        async with semaphore:
            blob.sha = await ops.create_blob(repo, blob.absolute_path, chunk_size)
            logger.info(f"Uploaded {blob.path} as blob {blob.sha}")

    results = await asyncio.gather(
        *(upload_with_limit(blob) for blob in blobs), return_exceptions=True
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return blobs
