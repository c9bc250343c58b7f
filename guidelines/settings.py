from functools import cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from guidelines.constants import (
    DEFAULT_DOCS_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    GITHUB_API_URL,
)
from guidelines.contracts.config import SourceConfig, SourceType

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    source_type: SourceType = Field(
        default="local",
        alias="GUIDELINES_SOURCE",
        description="Document source: local or github",
    )
    base_path: str = Field(
        default=DEFAULT_DOCS_PATH,
        alias="GUIDELINES_BASE_PATH",
        description="Corpus directory for the local source",
    )

    # GitHub source
    repository: str | None = Field(
        default=None,
        alias="GUIDELINES_REPOSITORY",
        description="Repository as owner/repo or owner/repo@branch",
    )
    branch: str | None = Field(
        default=None,
        alias="GUIDELINES_BRANCH",
        description="Branch override for the repository reference",
    )
    docs_path: str = Field(
        default=DEFAULT_DOCS_PATH,
        alias="GUIDELINES_DOCS_PATH",
        description="Documentation folder inside the repository",
    )
    github_token: str | None = Field(default=None, alias="GITHUB_TOKEN")
    github_api_url: str = Field(default=GITHUB_API_URL, alias="GITHUB_API_URL")

    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        alias="GUIDELINES_REQUEST_TIMEOUT",
        description="Timeout in seconds for remote requests",
    )

    log_level: LogLevel = Field(default="INFO", alias="GUIDELINES_LOG_LEVEL")

    @field_validator("source_type", mode="before")
    @classmethod
    def parse_source_type(cls, v: str | None) -> str:
        if v is None:
            return "local"
        return str(v).strip().lower()

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: str | None) -> str:
        if v is None:
            return "INFO"
        return str(v).strip().upper()

    def repository_ref(self) -> str | None:
        if not self.repository:
            return None
        if self.branch:
            name = self.repository.partition("@")[0]
            return f"{name}@{self.branch}"
        return self.repository

    def to_source_config(self) -> SourceConfig:
        return SourceConfig(
            source_type=self.source_type,
            base_path=self.base_path,
            repository_ref=self.repository_ref(),
            docs_path=self.docs_path,
            github_token=self.github_token,
            request_timeout=self.request_timeout,
            api_url=self.github_api_url,
        )


@cache
def get_settings() -> Settings:
    return Settings()
