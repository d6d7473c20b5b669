"""Repository resolution."""

import logging

from committer.services.github.exceptions import RepositoryNotFound
from committer.services.github.git_data import GitDataOperations
from committer.services.github.types import Repository

logger = logging.getLogger(__name__)


def parse_repository(full_name: str) -> tuple[str, str]:
    """Split "owner/name" into its parts."""
    owner, sep, name = full_name.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise RepositoryNotFound(f"Invalid repository identifier: {full_name!r}")
    return owner, name


class RepositoryHandle:
    """
    Resolves a repository once and exposes its metadata.

    Accessing `repository`, `id` or `default_branch` before `load()` raises
    RuntimeError.
    """

    def __init__(self, ops: GitDataOperations, full_name: str):
        self.ops = ops
        self.owner, self.name = parse_repository(full_name)
        self._repository: Repository | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def repository(self) -> Repository:
        if self._repository is None:
            raise RuntimeError(f"Repository {self.full_name} has not been loaded")
        return self._repository

    @property
    def id(self) -> int:
        return self.repository.id

    @property
    def default_branch(self) -> str:
        return self.repository.default_branch

    async def load(self) -> Repository:
        if self._repository is None:
            self._repository = await self.ops.get_repository(self.owner, self.name)
            logger.debug(
                f"Resolved {self.full_name} (id={self.id}, default branch {self.default_branch})"
            )
        return self._repository
