"""Typed result contracts for tools in guidelines/tools/."""

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from guidelines.contracts.document import Document, DocumentType

if TYPE_CHECKING:
    from guidelines.corpus.catalog import SearchHit

ErrorKind = Literal[
    "not_found",
    "source_unavailable",
    "rate_limited",
    "duplicate_key",
    "cancelled",
]


class DocumentResult(BaseModel):
    """Full document returned by lookup and search tools."""

    id: str = Field(description="Document identifier")
    path: str = Field(description="Path relative to the corpus root")
    type: DocumentType = Field(description="Document type")
    title: str = Field(description="Document title")
    category: str | None = Field(default=None, description="Document category")
    language: str | None = Field(default=None, description="Target language")
    status: str | None = Field(default=None, description="ADR status")
    tags: list[str] = Field(default_factory=list, description="Document tags")
    summary: str = Field(default="", description="Short excerpt")
    content: str = Field(description="Markdown content")
    last_modified: str | None = Field(default=None, description="ISO timestamp")
    parse_warning: str | None = Field(
        default=None, description="Metadata problem, if any"
    )
    match_count: int | None = Field(
        default=None, description="Occurrences of the search term (excerpt search)"
    )
    excerpts: list[str] | None = Field(
        default=None, description="Content lines matching the search term"
    )

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentResult":
        return cls(
            id=doc.id,
            path=doc.path,
            type=doc.type,
            title=doc.title,
            category=doc.category,
            language=doc.language,
            status=doc.status,
            tags=list(doc.tags),
            summary=doc.summary,
            content=doc.content,
            last_modified=doc.last_modified.isoformat() if doc.last_modified else None,
            parse_warning=doc.parse_warning,
        )

    @classmethod
    def from_hit(cls, hit: "SearchHit") -> "DocumentResult":
        return cls.from_document(hit.document).model_copy(
            update={"match_count": hit.match_count, "excerpts": list(hit.excerpts)}
        )


class SummaryResult(BaseModel):
    """A document listing entry."""

    id: str = Field(description="Document identifier")
    title: str = Field(description="Document title")
    type: DocumentType = Field(description="Document type")
    category: str | None = Field(default=None, description="Document category")
    summary: str = Field(description="Short excerpt")
    path: str = Field(description="Path relative to the corpus root")


class CatalogStatusResult(BaseModel):
    """State of the catalog cache."""

    state: str = Field(description="Cache state")
    generation: int = Field(description="Current catalog generation (0 = none)")
    document_count: int = Field(description="Documents in the current generation")
    source: str = Field(description="Description of the document source")
    last_error: str | None = Field(default=None, description="Last build failure")


class ToolError(BaseModel):
    """Typed failure returned instead of raising through the tool layer."""

    kind: ErrorKind = Field(description="Failure category")
    error: str = Field(description="Human-readable message")
    retry_after: float | None = Field(
        default=None, description="Seconds to wait before retrying (rate limits)"
    )


__all__ = [
    "DocumentResult",
    "SummaryResult",
    "CatalogStatusResult",
    "ToolError",
    "ErrorKind",
]
