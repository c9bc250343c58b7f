"""Document source configuration."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from guidelines.constants import (
    DEFAULT_DOCS_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    GITHUB_API_URL,
)

SourceType = Literal["local", "github"]


class RepositoryRef(BaseModel):
    """A parsed `owner/repo[@branch]` reference."""

    owner: str
    repo: str
    branch: str | None = None

    @classmethod
    def parse(cls, ref: str) -> "RepositoryRef":
        name, _, branch = ref.strip().partition("@")
        owner, _, repo = name.strip("/").partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(
                f"Invalid repository reference '{ref}', expected 'owner/repo[@branch]'"
            )
        return cls(owner=owner, repo=repo, branch=branch or None)

    def __str__(self) -> str:
        base = f"{self.owner}/{self.repo}"
        return f"{base}@{self.branch}" if self.branch else base


class SourceConfig(BaseModel):
    """Resolved configuration handed to the catalog at startup."""

    source_type: SourceType = Field(
        default="local", description="Where documents are read from"
    )

    base_path: str | None = Field(
        default=None, description="Corpus root directory (local source)"
    )

    repository_ref: str | None = Field(
        default=None,
        description="GitHub repository as 'owner/repo' or 'owner/repo@branch'",
    )

    docs_path: str = Field(
        default=DEFAULT_DOCS_PATH,
        description="Documentation folder inside the repository (github source)",
    )

    github_token: str | None = Field(
        default=None, description="Token for authenticated GitHub API requests"
    )

    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description="Per-request timeout in seconds for remote fetches",
    )

    api_url: str = Field(default=GITHUB_API_URL, description="GitHub API base URL")

    @model_validator(mode="after")
    def check_source_fields(self) -> "SourceConfig":
        if self.source_type == "local" and not self.base_path:
            raise ValueError("base_path is required for the local source")
        if self.source_type == "github":
            if not self.repository_ref:
                raise ValueError("repository_ref is required for the github source")
            RepositoryRef.parse(self.repository_ref)
        return self

    @property
    def repository(self) -> RepositoryRef:
        if not self.repository_ref:
            raise ValueError("No repository_ref configured")
        return RepositoryRef.parse(self.repository_ref)


__all__ = ["SourceConfig", "SourceType", "RepositoryRef"]
