"""Document sources - where raw markdown comes from."""

from guidelines.sources.base import DocumentSource, SourceEntry
from guidelines.sources.factory import SourceFactory
from guidelines.sources.github import GitHubDocumentSource
from guidelines.sources.local import LocalDocumentSource

__all__ = [
    "DocumentSource",
    "SourceEntry",
    "SourceFactory",
    "GitHubDocumentSource",
    "LocalDocumentSource",
]
