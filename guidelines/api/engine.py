"""High-level Python API for querying the guidelines catalog."""

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from guidelines.contracts.config import SourceConfig
from guidelines.contracts.document import Document, DocumentSummary, DocumentType
from guidelines.corpus.catalog import SearchHit
from guidelines.corpus.loader import DocumentLoader
from guidelines.corpus.parser import DocumentParser
from guidelines.corpus.refresh import CatalogManager, CatalogStatus
from guidelines.sources.factory import SourceFactory

logger = logging.getLogger(__name__)


class QueryEngine:
    """
    Query operations over the current catalog generation.

    The first query builds the catalog; later queries reuse it until
    `invalidate()` or `refresh()`. Lookup misses return None or an empty list.

    Example usage:

        engine = QueryEngine.from_config(
            SourceConfig(source_type="local", base_path="docs"),
        )

        for summary in engine.get_all_summaries():
            print(summary.id, summary.title)

        accepted = engine.get_adrs_by_status("Accepted")
        hits = engine.search("null checks")
    """

    def __init__(self, manager: CatalogManager):
        self.manager = manager

    @classmethod
    def from_config(
        cls,
        config: SourceConfig,
        parser: DocumentParser | None = None,
        client: httpx.Client | None = None,
    ) -> "QueryEngine":
        """
        Wire source, loader and cache policy from a resolved configuration.

        Args:
            config: Source configuration
            parser: Custom parser (default: DocumentParser())
            client: httpx client for the github source (optional)
        """
        source = SourceFactory.from_config(config, client=client)
        return cls(CatalogManager(DocumentLoader(source, parser)))

    def close(self) -> None:
        self.manager.loader.source.close()

    def __enter__(self) -> "QueryEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_all_summaries(self) -> list[DocumentSummary]:
        """All documents as summaries, ordered by path."""
        return self.manager.get().summaries()

    def get_all_documents(self) -> list[Document]:
        return list(self.manager.get().documents)

    def get_by_id(self, doc_id: str) -> Document | None:
        doc = self.manager.get().by_id(doc_id)
        if doc is None:
            logger.debug("No document with id %r", doc_id)
        return doc

    def get_by_path(self, path: str) -> Document | None:
        doc = self.manager.get().by_path(path)
        if doc is None:
            logger.debug("No document at path %r", path)
        return doc

    def get_by_type(self, doc_type: DocumentType | str) -> list[Document]:
        """Documents of a type; unknown type names match nothing."""
        return self.manager.get().by_type(doc_type)

    def get_by_category(self, category: str) -> list[Document]:
        return self.manager.get().by_category(category)

    def get_by_language(self, language: str) -> list[Document]:
        return self.manager.get().by_language(language)

    def search(self, term: str) -> list[Document]:
        """
        Keyword search over title, content and tags.

        Matching is a case-insensitive substring test; results are unique by
        id and ordered by path. A blank term returns no results.
        """
        return self.manager.get().search(term)

    def search_with_excerpts(self, term: str) -> list[SearchHit]:
        """Keyword search that also reports match counts and matching lines."""
        return self.manager.get().search_hits(term)

    def get_by_tags(self, tags: Iterable[str]) -> list[Document]:
        """Documents tagged with any of `tags`, ordered by path."""
        return self.manager.get().by_tags(tags)

    def list_categories(self) -> list[str]:
        return self.manager.get().categories()

    def get_adrs_by_status(self, status: str) -> list[Document]:
        """ADRs with the given status (Proposed, Accepted, Deprecated, Superseded)."""
        return self.manager.get().by_status(status)

    def get_style_guide_by_language(self, language: str) -> Document | None:
        """First style guide that applies to a language."""
        for doc in self.manager.get().by_language(language):
            if doc.type is DocumentType.STYLE_GUIDE:
                return doc
        return None

    def statistics(self) -> dict[str, Any]:
        return self.manager.get().statistics()

    def refresh(self) -> int:
        """
        Rebuild the catalog now.

        Returns:
            Number of documents in the new generation.
        """
        return len(self.manager.refresh())

    def invalidate(self) -> None:
        """Drop the current generation at the next query."""
        self.manager.invalidate()

    def cancel(self) -> bool:
        return self.manager.cancel()

    def status(self) -> CatalogStatus:
        return self.manager.status()


__all__ = ["QueryEngine"]
