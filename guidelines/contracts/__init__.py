"""Data contracts for the guidelines catalog."""

from guidelines.contracts.config import RepositoryRef, SourceConfig, SourceType
from guidelines.contracts.document import Document, DocumentSummary, DocumentType
from guidelines.contracts.tool_results import (
    CatalogStatusResult,
    DocumentResult,
    ErrorKind,
    SummaryResult,
    ToolError,
)

__all__ = [
    # Documents
    "Document",
    "DocumentSummary",
    "DocumentType",
    # Configuration
    "SourceConfig",
    "SourceType",
    "RepositoryRef",
    # Tool Results
    "DocumentResult",
    "SummaryResult",
    "CatalogStatusResult",
    "ToolError",
    "ErrorKind",
]
