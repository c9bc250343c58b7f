"""Source factory for creating document sources from configuration."""

import httpx

from guidelines.contracts.config import SourceConfig
from guidelines.sources.base import DocumentSource
from guidelines.sources.github import GitHubDocumentSource
from guidelines.sources.local import LocalDocumentSource


class SourceFactory:
    """Factory for creating document sources."""

    @staticmethod
    def from_config(
        config: SourceConfig,
        client: httpx.Client | None = None,
    ) -> DocumentSource:
        """
        Create a document source from configuration.

        Args:
            config: Resolved source configuration
            client: Optional httpx client for the github source

        Returns:
            Configured source instance

        Raises:
            ValueError: If the config lacks the location its source needs
        """
        match config.source_type:
            case "local":
                if not config.base_path:
                    raise ValueError("base_path is required for the local source")
                return LocalDocumentSource(config.base_path)
            case "github":
                ref = config.repository
                return GitHubDocumentSource(
                    owner=ref.owner,
                    repo=ref.repo,
                    branch=ref.branch,
                    docs_path=config.docs_path,
                    token=config.github_token,
                    timeout=config.request_timeout,
                    api_url=config.api_url,
                    client=client,
                )


__all__ = ["SourceFactory"]
