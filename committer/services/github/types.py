"""Data types for Git Data API objects."""

from dataclasses import dataclass
from typing import Any

from committer.services.github.constants import FILE_MODE_REGULAR


@dataclass(frozen=True)
class Repository:
    """Resolved repository metadata."""

    id: int
    owner: str
    name: str
    full_name: str
    default_branch: str


@dataclass
class Blob:
    """A file selected for commit.

    `sha` stays None until GitHub has stored the content and returned its id.
    """

    absolute_path: str
    path: str  # Path relative to the repository root, used as the tree entry key
    mode: str = FILE_MODE_REGULAR
    sha: str | None = None


@dataclass(frozen=True)
class TreeEntry:
    """Single entry of a create-tree request."""

    path: str
    mode: str
    sha: str
    type: str = "blob"

    def to_payload(self) -> dict[str, str]:
        return {"path": self.path, "mode": self.mode, "type": self.type, "sha": self.sha}


@dataclass(frozen=True)
class RefUpdateResult:
    """Outcome of a reference update: either updated or rejected with a reason."""

    updated: bool
    sha: str | None = None
    reason: str | None = None
    status_code: int | None = None

    @classmethod
    def updated_to(cls, sha: str) -> "RefUpdateResult":
        return cls(updated=True, sha=sha)

    @classmethod
    def rejected(cls, reason: str, status_code: int | None = None) -> "RefUpdateResult":
        return cls(updated=False, reason=reason, status_code=status_code)


@dataclass(frozen=True)
class CommitResult:
    """Summary of a completed commit run."""

    sha: str
    tree_sha: str
    parent_sha: str
    ref: str
    blobs: list[Blob]

    def as_dict(self) -> dict[str, Any]:
        return {
            "sha": self.sha,
            "tree_sha": self.tree_sha,
            "parent_sha": self.parent_sha,
            "ref": self.ref,
            "files": [blob.path for blob in self.blobs],
        }
