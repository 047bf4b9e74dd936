"""Configuration for flowzonify.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The settings object is built once by the CLI and handed to the orchestrator; nothing
below the CLI reads the environment directly.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_repos(value: object) -> list[str]:
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        return [p for p in parts if p]
    if isinstance(value, list | tuple):
        return [str(p).strip() for p in value if str(p).strip()]
    raise TypeError("REPOS must be a comma-separated string")


class FlowzonifySettings(BaseSettings):
    """Settings for a bulk onboarding run.

    Environment variables:
    - REPOS                     (required, comma-separated 'owner/name' list)
    - PERSONAL_ACCESS_TOKEN     (required)
    - WORKSPACE                 (optional)
    - GITHUB_HOST               (optional)
    - GITHUB_BASE_URL           (optional)
    - LOG_LEVEL                 (optional)
    - KEEP_UNCHANGED_WORKSPACE  (optional)
    - BRANCH_ATTEMPTS           (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `FlowzonifySettings(_env_file=path_to_env)`.
    """

    repos: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        validation_alias="REPOS",
        description="Repositories to onboard, in the form 'owner/name'",
    )
    personal_access_token: str = Field(
        default="",
        validation_alias="PERSONAL_ACCESS_TOKEN",
        description="GitHub token used for git over HTTPS and the REST API",
    )
    workspace: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        validation_alias="WORKSPACE",
        description="Directory under which repositories are cloned",
    )

    github_host: str = Field(
        default="github.com",
        validation_alias="GITHUB_HOST",
        description="Host used for cloning, pushing and the visibility probe",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    keep_unchanged_workspace: bool = Field(
        default=False,
        validation_alias="KEEP_UNCHANGED_WORKSPACE",
        description="Leave the clone on disk when a repository needs no changes",
    )
    branch_attempts: int = Field(
        default=5,
        ge=1,
        validation_alias="BRANCH_ATTEMPTS",
        description="Random branch names to try before giving up on a collision",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("repos", mode="before")
    @classmethod
    def _parse_repos(cls, value: object) -> list[str]:
        return _split_repos(value)

    @model_validator(mode="after")
    def _require_inputs(self) -> FlowzonifySettings:
        if not self.repos:
            raise ValueError("REPOS is required")
        if not self.personal_access_token.strip():
            raise ValueError("PERSONAL_ACCESS_TOKEN is required")
        return self
