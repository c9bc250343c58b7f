"""GitHub repository document source using the contents API."""

import logging
import time
from typing import Any
from urllib.parse import quote

import httpx

from guidelines.constants import (
    DEFAULT_DOCS_PATH,
    DEFAULT_REQUEST_TIMEOUT,
    GITHUB_API_URL,
    GITHUB_USER_AGENT,
    MARKDOWN_SUFFIXES,
)
from guidelines.errors import (
    DocumentNotFoundError,
    RateLimitedError,
    SourceUnavailableError,
)
from guidelines.sources.base import DocumentSource, SourceEntry

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/vnd.github+json"
RAW_MEDIA_TYPE = "application/vnd.github.raw"


def _retry_after(response: httpx.Response) -> float | None:
    """Extract the provider's retry hint in seconds, if any."""
    retry_after = response.headers.get("retry-after")
    if retry_after:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            pass

    reset = response.headers.get("x-ratelimit-reset")
    if reset:
        try:
            return max(0.0, float(reset) - time.time())
        except ValueError:
            pass

    return None


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


class GitHubDocumentSource(DocumentSource):
    """
    Read markdown documents from a GitHub repository.

    Directory listings go through `GET /repos/{owner}/{repo}/contents/{path}`
    and files are fetched with the raw media type. Requests are never retried:
    throttling surfaces as RateLimitedError and the caller decides when to try
    again.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str | None = None,
        docs_path: str = DEFAULT_DOCS_PATH,
        token: str | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        api_url: str = GITHUB_API_URL,
        client: httpx.Client | None = None,
    ):
        """
        Initialize the source.

        Args:
            owner: Repository owner
            repo: Repository name
            branch: Branch, tag or commit (default: the repository default branch)
            docs_path: Documentation folder inside the repository
            token: Optional token for authenticated requests
            timeout: Per-request timeout in seconds
            api_url: GitHub API base URL
            client: Pre-configured httpx client (tests, connection sharing)
        """
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.docs_path = docs_path.strip("/")

        headers = {
            "Accept": JSON_MEDIA_TYPE,
            "User-Agent": GITHUB_USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=api_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )
        if client is not None:
            self._client.headers.update(headers)
            self._client.timeout = httpx.Timeout(timeout)

    def describe(self) -> str:
        ref = f"@{self.branch}" if self.branch else ""
        return f"github:{self.owner}/{self.repo}{ref}/{self.docs_path}"

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _contents_url(self, repo_path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{quote(repo_path)}"

    def _repo_path(self, path: str) -> str:
        path = path.strip("/")
        return f"{self.docs_path}/{path}" if self.docs_path else path

    def _get(self, repo_path: str, accept: str = JSON_MEDIA_TYPE) -> httpx.Response:
        params = {"ref": self.branch} if self.branch else None

        try:
            response = self._client.get(
                self._contents_url(repo_path),
                params=params,
                headers={"Accept": accept},
            )
        except httpx.TimeoutException as e:
            raise SourceUnavailableError(
                f"Timed out fetching {repo_path} from {self.describe()}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceUnavailableError(
                f"Network error fetching {repo_path} from {self.describe()}: {e}"
            ) from e

        if response.is_success:
            return response

        if _is_rate_limited(response):
            retry_after = _retry_after(response)
            logger.warning(
                "GitHub rate limit hit for %s (retry after %s s)",
                self.describe(),
                retry_after,
            )
            raise RateLimitedError(
                f"GitHub API rate limit exceeded for {self.owner}/{self.repo}",
                retry_after=retry_after,
            )

        if response.status_code == 404:
            raise DocumentNotFoundError(
                repo_path,
                f"{repo_path} not found in {self.describe()}",
            )

        raise SourceUnavailableError(
            f"GitHub API returned {response.status_code} for {repo_path}"
        )

    def _list_directory(self, repo_path: str) -> list[dict[str, Any]]:
        payload = self._get(repo_path).json()
        if not isinstance(payload, list):
            # The contents API returns an object when the path is a file
            raise SourceUnavailableError(f"{repo_path} is not a directory")
        return payload

    def list_paths(self) -> list[str]:
        """Walk the documentation folder recursively."""
        prefix = f"{self.docs_path}/" if self.docs_path else ""
        paths: list[str] = []
        pending = [self.docs_path]

        while pending:
            directory = pending.pop()
            for item in self._list_directory(directory):
                item_path = item.get("path", "")
                match item.get("type"):
                    case "dir":
                        pending.append(item_path)
                    case "file" if item_path.lower().endswith(MARKDOWN_SUFFIXES):
                        paths.append(item_path.removeprefix(prefix))
                    case _:
                        pass

        logger.debug("Listed %d markdown files in %s", len(paths), self.describe())
        return sorted(paths)

    def fetch_entry(self, path: str) -> SourceEntry:
        response = self._get(self._repo_path(path), accept=RAW_MEDIA_TYPE)
        # GitHub does not report modification times on the contents endpoint
        return SourceEntry(path=path, content=response.text.lstrip("\ufeff"))


__all__ = ["GitHubDocumentSource"]
