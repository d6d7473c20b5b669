"""Unit tests for file list expansion and blob upload."""

from __future__ import annotations

import asyncio
import os
from unittest.mock import MagicMock

import pytest

from committer.services.github.blob import (
    MissingFilePolicy,
    get_blobs_from_files,
    upload_blobs,
)
from committer.services.github.constants import FILE_MODE_EXECUTABLE, FILE_MODE_REGULAR
from committer.services.github.exceptions import FileUnreadable, GitHubAPIError
from committer.services.github.types import Blob, Repository

REPO = Repository(id=1, owner="octo", name="hello", full_name="octo/hello", default_branch="main")


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.txt").write_text("c")
    return tmp_path


# ═══════════════════════════════════════════════════════════════════════════
# get_blobs_from_files
# ═══════════════════════════════════════════════════════════════════════════


class TestGetBlobsFromFiles:
    def test_keeps_existing_subset_in_order(self, workspace):
        files = "sub/c.txt\nmissing.txt\na.txt\ngone/x.txt\nb.txt"

        blobs = get_blobs_from_files(files, workspace)

        assert [b.path for b in blobs] == ["sub/c.txt", "a.txt", "b.txt"]

    def test_absolute_and_git_paths(self, workspace):
        blobs = get_blobs_from_files("sub/c.txt", workspace)

        assert blobs[0].absolute_path == str(workspace / "sub" / "c.txt")
        assert blobs[0].path == "sub/c.txt"
        assert blobs[0].sha is None

    def test_ignores_blank_lines_and_whitespace(self, workspace):
        blobs = get_blobs_from_files("\n  a.txt  \n\n\nb.txt\n", workspace)

        assert [b.path for b in blobs] == ["a.txt", "b.txt"]

    def test_empty_list(self, workspace):
        assert get_blobs_from_files("", workspace) == []

    def test_all_missing_is_not_an_error(self, workspace):
        assert get_blobs_from_files("x\ny\nz", workspace) == []

    def test_directories_are_dropped(self, workspace):
        blobs = get_blobs_from_files("sub\na.txt", workspace)

        assert [b.path for b in blobs] == ["a.txt"]

    def test_duplicates_collapse_to_first(self, workspace):
        blobs = get_blobs_from_files("a.txt\nb.txt\n./a.txt", workspace)

        assert [b.path for b in blobs] == ["a.txt", "b.txt"]

    def test_strict_policy_raises_on_missing(self, workspace):
        with pytest.raises(FileUnreadable, match="missing.txt"):
            get_blobs_from_files("a.txt\nmissing.txt", workspace, missing=MissingFilePolicy.STRICT)

    def test_strict_policy_passes_when_all_exist(self, workspace):
        blobs = get_blobs_from_files("a.txt\nb.txt", workspace, missing=MissingFilePolicy.STRICT)

        assert len(blobs) == 2

    def test_git_path_relative_to_repo_root(self, workspace):
        blobs = get_blobs_from_files("c.txt", workspace / "sub", repo_root=workspace)

        assert blobs[0].path == "sub/c.txt"

    def test_regular_file_mode(self, workspace):
        blobs = get_blobs_from_files("a.txt", workspace)

        assert blobs[0].mode == FILE_MODE_REGULAR

    def test_executable_file_mode(self, workspace):
        script = workspace / "run.sh"
        script.write_text("#!/bin/sh\n")
        os.chmod(script, 0o755)

        blobs = get_blobs_from_files("run.sh", workspace)

        assert blobs[0].mode == FILE_MODE_EXECUTABLE

    def test_paths_outside_repository_are_dropped(self, tmp_path, workspace):
        outside = tmp_path.parent / f"{tmp_path.name}-outside.txt"
        outside.write_text("x")
        files = f"../{outside.name}\n{outside}\na.txt"

        blobs = get_blobs_from_files(files, workspace)

        assert [b.path for b in blobs] == ["a.txt"]

    def test_strict_policy_raises_on_outside_path(self, tmp_path, workspace):
        outside = tmp_path.parent / f"{tmp_path.name}-outside.txt"
        outside.write_text("x")

        with pytest.raises(FileUnreadable, match="outside the repository"):
            get_blobs_from_files(
                f"a.txt\n../{outside.name}", workspace, missing=MissingFilePolicy.STRICT
            )

    def test_absolute_path_inside_repository_is_kept(self, workspace):
        blobs = get_blobs_from_files(str(workspace / "sub" / "c.txt"), workspace)

        assert [b.path for b in blobs] == ["sub/c.txt"]


# ═══════════════════════════════════════════════════════════════════════════
# upload_blobs
# ═══════════════════════════════════════════════════════════════════════════


def _make_ops(delay: float = 0.01, fail_on: str | None = None) -> tuple[MagicMock, dict[str, int]]:
    """Stub GitDataOperations whose create_blob tracks concurrency."""
    stats = {"in_flight": 0, "max_in_flight": 0, "calls": 0}

    async def create_blob(repo, absolute_path, chunk_size):
        stats["calls"] += 1
        stats["in_flight"] += 1
        stats["max_in_flight"] = max(stats["max_in_flight"], stats["in_flight"])
        try:
            await asyncio.sleep(delay)
            if fail_on and absolute_path.endswith(fail_on):
                raise GitHubAPIError("GitHub API error: 500", 500)
            return f"sha-{os.path.basename(absolute_path)}"
        finally:
            stats["in_flight"] -= 1

    ops = MagicMock()
    ops.create_blob = create_blob
    return ops, stats


def _blobs(count: int) -> list[Blob]:
    return [Blob(absolute_path=f"/ws/f{i}.txt", path=f"f{i}.txt") for i in range(count)]


class TestUploadBlobs:
    @pytest.mark.anyio
    async def test_sets_sha_on_every_blob_in_order(self):
        ops, _ = _make_ops()
        blobs = _blobs(5)

        result = await upload_blobs(ops, REPO, blobs, max_concurrent=2)

        assert result is blobs
        assert [b.sha for b in result] == [f"sha-f{i}.txt" for i in range(5)]

    @pytest.mark.anyio
    async def test_bounded_concurrency(self):
        ops, stats = _make_ops()

        await upload_blobs(ops, REPO, _blobs(10), max_concurrent=3)

        assert stats["calls"] == 10
        assert 1 < stats["max_in_flight"] <= 3

    @pytest.mark.anyio
    async def test_serial_when_concurrency_is_one(self):
        ops, stats = _make_ops()

        await upload_blobs(ops, REPO, _blobs(4), max_concurrent=1)

        assert stats["max_in_flight"] == 1

    @pytest.mark.anyio
    async def test_failure_propagates(self):
        ops, _ = _make_ops(fail_on="f2.txt")

        with pytest.raises(GitHubAPIError, match="500"):
            await upload_blobs(ops, REPO, _blobs(4), max_concurrent=4)

    @pytest.mark.anyio
    async def test_no_blobs(self):
        ops, stats = _make_ops()

        assert await upload_blobs(ops, REPO, []) == []
        assert stats["calls"] == 0

    @pytest.mark.anyio
    async def test_no_upload_left_running_after_failure(self):
        finished: list[str] = []

        async def create_blob(repo, absolute_path, chunk_size):
            if absolute_path.endswith("bad.txt"):
                raise FileUnreadable(absolute_path, "no such file")
            await asyncio.sleep(0.05)
            finished.append(os.path.basename(absolute_path))
            return "sha-slow"

        ops = MagicMock()
        ops.create_blob = create_blob
        blobs = [
            Blob(absolute_path="/ws/bad.txt", path="bad.txt"),
            Blob(absolute_path="/ws/slow.txt", path="slow.txt"),
        ]

        with pytest.raises(FileUnreadable):
            await upload_blobs(ops, REPO, blobs, max_concurrent=2)

        assert finished == ["slow.txt"]
        assert blobs[1].sha == "sha-slow"
