"""Document contracts - the catalog's central entities."""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _type_key(value: str) -> str:
    return re.sub(r"[\s_\-]+", "", value).casefold()


class DocumentType(str, Enum):
    """Closed classification of corpus documents."""

    CODING_GUIDELINE = "CodingGuideline"
    STYLE_GUIDE = "StyleGuide"
    ADR = "ADR"
    RECOMMENDATION = "Recommendation"
    DOCUMENT = "Document"

    @classmethod
    def lookup(cls, value: "str | DocumentType | None") -> "DocumentType | None":
        """
        Resolve a declared type name or alias.

        Returns None for unrecognized values; callers decide whether that
        means "generic document" or "no match".
        """
        if value is None:
            return None
        if isinstance(value, DocumentType):
            return value
        return _TYPE_ALIASES.get(_type_key(str(value)))

    @classmethod
    def normalize(cls, value: "str | DocumentType | None") -> "DocumentType":
        """Resolve a declared type, falling back to the generic variant."""
        return cls.lookup(value) or cls.DOCUMENT


_TYPE_ALIASES: dict[str, DocumentType] = {
    _type_key(alias): doc_type
    for doc_type, aliases in {
        DocumentType.CODING_GUIDELINE: (
            "CodingGuideline",
            "coding-guideline",
            "guideline",
            "guidelines",
        ),
        DocumentType.STYLE_GUIDE: ("StyleGuide", "style-guide", "style", "styleguides"),
        DocumentType.ADR: (
            "ADR",
            "adrs",
            "architecture-decision-record",
            "decision",
        ),
        DocumentType.RECOMMENDATION: (
            "Recommendation",
            "recommendations",
            "best-practice",
        ),
        DocumentType.DOCUMENT: ("Document",),
    }.items()
    for alias in aliases
}


class Document(BaseModel):
    """A parsed corpus document, immutable once built."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier, unique within the catalog")
    path: str = Field(description="Posix path relative to the corpus root")
    type: DocumentType = Field(description="Document classification")
    title: str = Field(description="Human-readable title")
    content: str = Field(description="Markdown body without the metadata block")
    summary: str = Field(default="", description="Short excerpt for listings")

    category: str | None = Field(default=None, description="Document category")
    tags: tuple[str, ...] = Field(default=(), description="Tags, in declared order")
    language: str | None = Field(
        default=None, description="Programming language the document applies to"
    )
    status: str | None = Field(
        default=None, description="ADR status (Proposed, Accepted, ...)"
    )

    extra: dict[str, Any] = Field(
        default_factory=dict, description="Unindexed metadata keys"
    )
    parse_warning: str | None = Field(
        default=None, description="Set when the metadata block was malformed"
    )
    last_modified: datetime | None = Field(default=None)
    generation: int = Field(default=0, ge=0, description="Catalog generation")

    @property
    def is_adr(self) -> bool:
        return self.type is DocumentType.ADR

    def to_summary(self) -> "DocumentSummary":
        return DocumentSummary(
            id=self.id,
            title=self.title,
            type=self.type,
            category=self.category,
            summary=self.summary,
            path=self.path,
        )


class DocumentSummary(BaseModel):
    """Listing view of a document, without the full content."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: DocumentType
    category: str | None = None
    summary: str = ""
    path: str


__all__ = ["Document", "DocumentSummary", "DocumentType"]
