"""In-memory catalog of one document generation."""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from guidelines.constants import EXCERPT_LENGTH, MAX_EXCERPTS
from guidelines.contracts.document import Document, DocumentSummary, DocumentType
from guidelines.errors import DuplicateKeyError


def _key(value: str) -> str:
    return value.strip().casefold()


def _excerpt(line: str, needle: str, length: int) -> str:
    """Trim a matching line to `length` characters around the first match."""
    line = line.strip()
    if len(line) <= length:
        return line

    start = max(0, line.casefold().find(needle) - length // 2)
    end = min(len(line), start + length)
    return (
        ("..." if start > 0 else "")
        + line[start:end]
        + ("..." if end < len(line) else "")
    )


@dataclass(frozen=True)
class SearchHit:
    """A search match with its occurrence count and matching lines."""

    document: Document
    match_count: int
    excerpts: tuple[str, ...] = ()


class Catalog:
    """
    Immutable lookup structures over one generation of documents.

    Built once by `Catalog.build` and never mutated afterwards, so any number
    of readers can share it. Every returned sequence is ordered by path.
    """

    def __init__(
        self,
        documents: tuple[Document, ...],
        by_id: dict[str, Document],
        by_path: dict[str, Document],
        by_type: dict[DocumentType, tuple[Document, ...]],
        by_category: dict[str, tuple[Document, ...]],
        by_language: dict[str, tuple[Document, ...]],
        generation: int,
    ):
        self._documents = documents
        self._by_id = by_id
        self._by_path = by_path
        self._by_type = by_type
        self._by_category = by_category
        self._by_language = by_language
        self.generation = generation

        # Lowercased search haystacks, aligned with _documents
        self._haystacks = tuple(
            (
                doc.title.casefold(),
                doc.content.casefold(),
                tuple(tag.casefold() for tag in doc.tags),
            )
            for doc in documents
        )

    @classmethod
    def build(cls, documents: Iterable[Document], generation: int = 0) -> "Catalog":
        """
        Aggregate documents into a catalog.

        Raises:
            DuplicateKeyError: If two documents share an id or a path.
        """
        ordered = tuple(sorted(documents, key=lambda d: d.path))

        by_id: dict[str, Document] = {}
        by_path: dict[str, Document] = {}
        by_type: dict[DocumentType, list[Document]] = defaultdict(list)
        by_category: dict[str, list[Document]] = defaultdict(list)
        by_language: dict[str, list[Document]] = defaultdict(list)

        for doc in ordered:
            path_key = _key(doc.path)
            if path_key in by_path:
                raise DuplicateKeyError(
                    "path", doc.path, (by_path[path_key].path, doc.path)
                )
            by_path[path_key] = doc

            id_key = _key(doc.id)
            if id_key in by_id:
                raise DuplicateKeyError("id", doc.id, (by_id[id_key].path, doc.path))
            by_id[id_key] = doc

            by_type[doc.type].append(doc)
            if doc.category:
                by_category[_key(doc.category)].append(doc)
            if doc.language:
                by_language[_key(doc.language)].append(doc)

        return cls(
            documents=ordered,
            by_id=by_id,
            by_path=by_path,
            by_type={t: tuple(docs) for t, docs in by_type.items()},
            by_category={c: tuple(docs) for c, docs in by_category.items()},
            by_language={lang: tuple(docs) for lang, docs in by_language.items()},
            generation=generation,
        )

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def by_id(self, doc_id: str) -> Document | None:
        return self._by_id.get(_key(doc_id))

    def by_path(self, path: str) -> Document | None:
        return self._by_path.get(_key(path.replace("\\", "/").strip("/")))

    def by_type(self, doc_type: DocumentType | str) -> list[Document]:
        resolved = DocumentType.lookup(doc_type)
        if resolved is None:
            return []
        return list(self._by_type.get(resolved, ()))

    def by_category(self, category: str) -> list[Document]:
        return list(self._by_category.get(_key(category), ()))

    def by_language(self, language: str) -> list[Document]:
        return list(self._by_language.get(_key(language), ()))

    def by_tags(self, tags: Iterable[str]) -> list[Document]:
        """Documents carrying any of the given tags, case-insensitively."""
        wanted = {_key(tag) for tag in tags if tag.strip()}
        if not wanted:
            return []

        return [
            doc
            for doc, (_, _, doc_tags) in zip(self._documents, self._haystacks)
            if wanted.intersection(doc_tags)
        ]

    def by_status(self, status: str) -> list[Document]:
        """ADRs whose status matches, case-insensitively."""
        wanted = _key(status)
        return [
            doc
            for doc in self._by_type.get(DocumentType.ADR, ())
            if doc.status is not None and _key(doc.status) == wanted
        ]

    def search(self, term: str) -> list[Document]:
        """
        Case-insensitive substring match over title, content and tags.

        A blank term matches nothing.
        """
        needle = term.strip().casefold()
        if not needle:
            return []

        return [
            doc
            for doc, (title, content, tags) in zip(self._documents, self._haystacks)
            if needle in title or needle in content or any(needle in t for t in tags)
        ]

    def search_hits(
        self,
        term: str,
        max_excerpts: int = MAX_EXCERPTS,
        excerpt_length: int = EXCERPT_LENGTH,
    ) -> list[SearchHit]:
        """
        Like `search`, with a match count and matching content lines per hit.

        The count adds occurrences in the title, matching tags and
        occurrences in the content. Hits stay ordered by path.
        """
        needle = term.strip().casefold()
        if not needle:
            return []

        hits: list[SearchHit] = []
        for doc, (title, content, tags) in zip(self._documents, self._haystacks):
            tag_matches = sum(1 for t in tags if needle in t)
            count = title.count(needle) + tag_matches + content.count(needle)
            if not count:
                continue

            excerpts = tuple(
                _excerpt(line, needle, excerpt_length)
                for line in doc.content.splitlines()
                if needle in line.casefold()
            )[:max_excerpts]
            hits.append(SearchHit(document=doc, match_count=count, excerpts=excerpts))

        return hits

    def summaries(self) -> list[DocumentSummary]:
        return [doc.to_summary() for doc in self._documents]

    def categories(self) -> list[str]:
        return sorted({doc.category for doc in self._documents if doc.category})

    def languages(self) -> list[str]:
        return sorted({doc.language for doc in self._documents if doc.language})

    def statistics(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "total_documents": len(self._documents),
            "documents_by_type": {
                doc_type.value: len(docs) for doc_type, docs in self._by_type.items()
            },
            "categories": self.categories(),
            "languages": self.languages(),
            "parse_warnings": sum(1 for d in self._documents if d.parse_warning),
        }


__all__ = ["Catalog", "SearchHit"]
