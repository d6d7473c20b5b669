"""Root conftest: test infrastructure for all tests.

Provides:
- Cache reset between tests
- An in-memory GitHub behind httpx.MockTransport, patched into the pipeline
- Environment isolation for settings-driven tests
"""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from committer.services.github.cache import clear_all_caches
from tests.helpers.fake_github import FakeGitHub

# Environment variables Settings reads; cleared so the runner's own values don't leak in
SETTINGS_ENV_VARS = [
    "INPUT_TOKEN",
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
    "GITHUB_WORKSPACE",
    "INPUT_FILES",
    "FILES",
    "INPUT_WORKSPACE",
    "WORKSPACE",
    "INPUT_COMMIT-MESSAGE",
    "INPUT_COMMIT_MESSAGE",
    "COMMIT_MESSAGE",
    "INPUT_REF",
    "REF",
    "INPUT_DETECT-CHANGED",
    "INPUT_DETECT_CHANGED",
    "DETECT_CHANGED",
    "INPUT_MISSING-FILES",
    "INPUT_MISSING_FILES",
    "MISSING_FILES",
    "UPLOAD_CONCURRENCY",
    "BLOB_CHUNK_SIZE",
    "RUNNER_DEBUG",
    "DEBUG",
]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear GitHub TTL caches before each test to prevent cross-test pollution."""
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def github_client(fake_github: FakeGitHub):
    """Route every Git Data API call to `fake_github`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_github.handler))
    with patch("committer.services.github.git_data.get_github_client", return_value=client):
        yield client


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Unset every variable Settings reads and run from an empty directory (no .env)."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
