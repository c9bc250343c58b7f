"""Tests for GitHubDocumentSource against a mocked contents API."""

import time

import httpx
import pytest

from guidelines.errors import (
    DocumentNotFoundError,
    RateLimitedError,
    SourceUnavailableError,
)
from guidelines.sources.github import RAW_MEDIA_TYPE, GitHubDocumentSource

API = "https://api.github.com"
CONTENTS = "/repos/acme/handbook/contents"

LISTINGS = {
    f"{CONTENTS}/docs": [
        {"type": "dir", "path": "docs/adr"},
        {"type": "file", "path": "docs/README.md"},
        {"type": "file", "path": "docs/logo.png"},
    ],
    f"{CONTENTS}/docs/adr": [
        {"type": "file", "path": "docs/adr/0001-x.md"},
        {"type": "file", "path": "docs/adr/0002-y.md"},
    ],
}

FILES = {
    f"{CONTENTS}/docs/README.md": "# Overview\n",
    f"{CONTENTS}/docs/adr/0001-x.md": "---\ntype: ADR\nstatus: Accepted\n---\n# X\n",
}


def contents_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if request.headers.get("accept") == RAW_MEDIA_TYPE:
        if path in FILES:
            return httpx.Response(200, text=FILES[path])
        return httpx.Response(404, json={"message": "Not Found"})
    if path in LISTINGS:
        return httpx.Response(200, json=LISTINGS[path])
    return httpx.Response(404, json={"message": "Not Found"})


def make_source(handler, **kwargs) -> GitHubDocumentSource:
    client = httpx.Client(base_url=API, transport=httpx.MockTransport(handler))
    return GitHubDocumentSource("acme", "handbook", client=client, **kwargs)


class TestListing:
    """Test recursive directory listing"""

    def test_lists_markdown_relative_to_docs(self):
        source = make_source(contents_handler)

        assert source.list_paths() == [
            "README.md",
            "adr/0001-x.md",
            "adr/0002-y.md",
        ]

    def test_missing_docs_folder(self):
        source = make_source(contents_handler, docs_path="nowhere")

        with pytest.raises(DocumentNotFoundError):
            source.list_paths()

    def test_file_instead_of_directory(self):
        def handler(request):
            return httpx.Response(200, json={"type": "file", "path": "docs"})

        with pytest.raises(SourceUnavailableError):
            make_source(handler).list_paths()

    def test_branch_sent_as_ref(self):
        seen = []

        def handler(request):
            seen.append(request.url.params.get("ref"))
            return contents_handler(request)

        make_source(handler, branch="release").list_paths()

        assert seen and all(ref == "release" for ref in seen)

    def test_token_sent_as_bearer(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("authorization"))
            return contents_handler(request)

        make_source(handler, token="secret").list_paths()

        assert seen == ["Bearer secret", "Bearer secret"]


class TestFetching:
    """Test raw file fetches"""

    def test_fetch_entry(self):
        entry = make_source(contents_handler).fetch_entry("adr/0001-x.md")

        assert entry.path == "adr/0001-x.md"
        assert entry.content.startswith("---\ntype: ADR")
        assert entry.last_modified is None

    def test_fetch_missing(self):
        with pytest.raises(DocumentNotFoundError):
            make_source(contents_handler).fetch_entry("adr/9999.md")

    def test_list_entries_skips_vanished_files(self):
        entries = list(make_source(contents_handler).list_entries())

        assert [e.path for e in entries] == ["README.md", "adr/0001-x.md"]


class TestErrorMapping:
    """Test HTTP failures map onto the error taxonomy"""

    def test_too_many_requests(self):
        def handler(request):
            return httpx.Response(429, headers={"retry-after": "30"})

        with pytest.raises(RateLimitedError) as exc_info:
            make_source(handler).list_paths()

        assert exc_info.value.retry_after == 30.0

    def test_exhausted_quota(self):
        reset = int(time.time()) + 120

        def handler(request):
            return httpx.Response(
                403,
                headers={
                    "x-ratelimit-remaining": "0",
                    "x-ratelimit-reset": str(reset),
                },
                json={"message": "API rate limit exceeded"},
            )

        with pytest.raises(RateLimitedError) as exc_info:
            make_source(handler).list_paths()

        assert 0 < exc_info.value.retry_after <= 120

    def test_forbidden_is_unavailable(self):
        def handler(request):
            return httpx.Response(403, json={"message": "Resource not accessible"})

        with pytest.raises(SourceUnavailableError):
            make_source(handler).list_paths()

    def test_server_error(self):
        def handler(request):
            return httpx.Response(500)

        with pytest.raises(SourceUnavailableError):
            make_source(handler).list_paths()

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(SourceUnavailableError):
            make_source(handler).fetch_entry("README.md")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SourceUnavailableError):
            make_source(handler).list_paths()


class TestLifecycle:
    def test_injected_client_left_open(self):
        source = make_source(contents_handler)

        source.close()

        assert not source._client.is_closed

    def test_describe(self):
        source = make_source(contents_handler, branch="main")

        assert source.describe() == "github:acme/handbook@main/docs"

    def test_injected_client_gets_timeout(self):
        source = make_source(contents_handler, timeout=5)

        assert source._client.timeout == httpx.Timeout(5)
