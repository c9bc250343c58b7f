"""Shared constants for the guidelines catalog."""

MARKDOWN_SUFFIXES = (".md",)

FRONTMATTER_DELIMITER = "---"

SUMMARY_LENGTH = 200
EXCERPT_LENGTH = 200
MAX_EXCERPTS = 3

DEFAULT_DOCS_PATH = "docs"
DEFAULT_REQUEST_TIMEOUT = 30.0

GITHUB_API_URL = "https://api.github.com"
GITHUB_USER_AGENT = "guidelines-catalog/0.1"

ADR_STATUSES = ("Proposed", "Accepted", "Deprecated", "Superseded")
