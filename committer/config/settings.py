import os
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Run settings loaded from environment variables.

    Inputs accept the GitHub Actions `INPUT_*` variable names as well as
    plain names for use outside of Actions.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # GitHub
    github_token: str = Field(
        default="", validation_alias=AliasChoices("input_token", "github_token")
    )
    github_repository: str = ""  # "owner/name"
    github_api_url: str = "https://api.github.com"
    # File the run's outputs are appended to (set by the Actions runner)
    github_output: str = ""

    # Inputs
    files: str = Field(default="", validation_alias=AliasChoices("input_files", "files"))
    # Empty = process working directory
    workspace: str = Field(
        default="",
        validation_alias=AliasChoices("input_workspace", "github_workspace", "workspace"),
    )
    commit_message: str = Field(
        default="Update files",
        validation_alias=AliasChoices(
            "input_commit-message", "input_commit_message", "commit_message"
        ),
    )
    # Empty = repository default branch
    ref: str = Field(default="", validation_alias=AliasChoices("input_ref", "ref"))
    detect_changed: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "input_detect-changed", "input_detect_changed", "detect_changed"
        ),
    )
    # "permissive" drops listed paths that don't exist, "strict" fails the run
    missing_files: Literal["permissive", "strict"] = Field(
        default="permissive",
        validation_alias=AliasChoices(
            "input_missing-files", "input_missing_files", "missing_files"
        ),
    )

    # Upload tuning
    upload_concurrency: int = Field(default=4, ge=1)
    blob_chunk_size: int = Field(default=3 * 64 * 1024, gt=0)

    debug: bool = Field(default=False, validation_alias=AliasChoices("runner_debug", "debug"))

    @property
    def workspace_dir(self) -> str:
        """Directory listed files are resolved against."""
        return self.workspace or os.getcwd()


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
