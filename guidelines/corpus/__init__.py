"""Corpus management - parsing, catalog building and refresh policy."""

from guidelines.corpus.catalog import Catalog, SearchHit
from guidelines.corpus.loader import DocumentLoader
from guidelines.corpus.parser import DocumentParser, parse_frontmatter
from guidelines.corpus.refresh import CatalogManager, CatalogState, CatalogStatus

__all__ = [
    "Catalog",
    "CatalogManager",
    "CatalogState",
    "CatalogStatus",
    "DocumentLoader",
    "DocumentParser",
    "SearchHit",
    "parse_frontmatter",
]
