"""Tools for listing, looking up and searching guideline documents."""

import functools
import logging
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

from guidelines.api.engine import QueryEngine
from guidelines.contracts.document import Document
from guidelines.contracts.tool_results import (
    CatalogStatusResult,
    DocumentResult,
    ErrorKind,
    SummaryResult,
    ToolError,
)
from guidelines.errors import (
    BuildCancelledError,
    DocumentNotFoundError,
    DuplicateKeyError,
    GuidelinesError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def to_tool_error(error: GuidelinesError) -> ToolError:
    """Map a catalog exception onto its tool payload."""
    kind: ErrorKind
    match error:
        case DocumentNotFoundError():
            kind = "not_found"
        case RateLimitedError():
            kind = "rate_limited"
        case DuplicateKeyError():
            kind = "duplicate_key"
        case BuildCancelledError():
            kind = "cancelled"
        case _:
            kind = "source_unavailable"

    return ToolError(
        kind=kind,
        error=str(error),
        retry_after=error.retry_after if isinstance(error, RateLimitedError) else None,
    )


def _returns_tool_error(func: Callable[P, R]) -> Callable[P, R | ToolError]:
    """Report catalog failures as ToolError results instead of raising."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | ToolError:
        try:
            return func(*args, **kwargs)
        except GuidelinesError as e:
            logger.warning("Tool %s failed: %s", func.__name__, e)
            return to_tool_error(e)

    return wrapper


def _documents(docs: list[Document]) -> list[DocumentResult]:
    return [DocumentResult.from_document(doc) for doc in docs]


class DocumentTools:
    """
    Tool surface over a QueryEngine.

    Every method returns plain pydantic results; failures come back as
    ToolError so the transport never sees an exception. Method docstrings are
    the tool descriptions.
    """

    def __init__(self, engine: QueryEngine):
        self.engine = engine

    @_returns_tool_error
    def list_documents(self) -> list[SummaryResult]:
        """List all documents (guidelines, style guides, ADRs, recommendations) with summaries."""
        return [
            SummaryResult.model_validate(summary.model_dump())
            for summary in self.engine.get_all_summaries()
        ]

    @_returns_tool_error
    def get_document(self, id: str) -> DocumentResult | ToolError:
        """Get a specific document by its ID (e.g. 'adr-0001-use-mcp')."""
        doc = self.engine.get_by_id(id)
        if doc is None:
            return ToolError(
                kind="not_found", error=f"Document with ID '{id}' not found"
            )
        return DocumentResult.from_document(doc)

    @_returns_tool_error
    def get_document_by_path(self, path: str) -> DocumentResult | ToolError:
        """Get a specific document by its path (e.g. 'guidelines/csharp-naming.md')."""
        doc = self.engine.get_by_path(path)
        if doc is None:
            return ToolError(
                kind="not_found", error=f"Document at path '{path}' not found"
            )
        return DocumentResult.from_document(doc)

    @_returns_tool_error
    def get_documents_by_type(self, type: str) -> list[DocumentResult]:
        """Get documents by type (CodingGuideline, StyleGuide, ADR, Recommendation)."""
        return _documents(self.engine.get_by_type(type))

    @_returns_tool_error
    def get_documents_by_category(self, category: str) -> list[DocumentResult]:
        """Get documents by category."""
        return _documents(self.engine.get_by_category(category))

    @_returns_tool_error
    def get_documents_by_language(self, language: str) -> list[DocumentResult]:
        """Get documents for a specific programming language (e.g. C#, TypeScript)."""
        return _documents(self.engine.get_by_language(language))

    @_returns_tool_error
    def search_documents(
        self, term: str, include_excerpts: bool = False
    ) -> list[DocumentResult]:
        """
        Search for documents by keyword in title, content, or tags.

        With include_excerpts, each result also carries the number of matches
        and up to three matching content lines.
        """
        if include_excerpts:
            return [
                DocumentResult.from_hit(hit)
                for hit in self.engine.search_with_excerpts(term)
            ]
        return _documents(self.engine.search(term))

    @_returns_tool_error
    def get_documents_by_tags(self, tags: list[str]) -> list[DocumentResult]:
        """Get documents tagged with any of the given tags (e.g. naming, mcp)."""
        return _documents(self.engine.get_by_tags(tags))

    @_returns_tool_error
    def list_categories(self) -> list[str]:
        """List the document categories in the catalog."""
        return self.engine.list_categories()

    @_returns_tool_error
    def get_adrs_by_status(self, status: str) -> list[DocumentResult]:
        """Get ADRs by status (Proposed, Accepted, Deprecated, Superseded)."""
        return _documents(self.engine.get_adrs_by_status(status))

    @_returns_tool_error
    def get_style_guide_by_language(self, language: str) -> DocumentResult | ToolError:
        """Get the style guide for a specific programming language (e.g. C#, TypeScript)."""
        doc = self.engine.get_style_guide_by_language(language)
        if doc is None:
            return ToolError(
                kind="not_found",
                error=f"No style guide found for language '{language}'",
            )
        return DocumentResult.from_document(doc)

    @_returns_tool_error
    def refresh_documents(self) -> CatalogStatusResult:
        """Reload all documents from the source and report the new catalog state."""
        self.engine.refresh()
        return self.catalog_status()

    def catalog_status(self) -> CatalogStatusResult:
        """Report the state of the document catalog (generation, size, last error)."""
        status = self.engine.status()
        return CatalogStatusResult(
            state=status.state.value,
            generation=status.generation,
            document_count=status.document_count,
            source=status.source,
            last_error=status.last_error,
        )


def make_document_tools(engine: QueryEngine) -> list[Callable[..., Any]]:
    """
    Create document tools bound to a query engine.

    Returns:
        Bound tool callables, named after the tools they implement
    """
    tools = DocumentTools(engine)

    return [
        tools.list_documents,
        tools.get_document,
        tools.get_document_by_path,
        tools.get_documents_by_type,
        tools.get_documents_by_category,
        tools.get_documents_by_language,
        tools.search_documents,
        tools.get_documents_by_tags,
        tools.list_categories,
        tools.get_adrs_by_status,
        tools.get_style_guide_by_language,
        tools.refresh_documents,
        tools.catalog_status,
    ]


__all__ = ["DocumentTools", "make_document_tools", "to_tool_error"]
