"""Markdown document parsing - front-matter metadata, title and summary."""

import logging
import re
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any

import yaml

from guidelines.constants import ADR_STATUSES, FRONTMATTER_DELIMITER, SUMMARY_LENGTH
from guidelines.contracts.document import Document, DocumentType
from guidelines.sources.base import SourceEntry

logger = logging.getLogger(__name__)

# Closing delimiter of a block that opened on the first line
_FRONTMATTER_END = re.compile(
    rf"^{FRONTMATTER_DELIMITER}[ \t]*$\n?", re.MULTILINE
)

_H1_PATTERN = re.compile(r"^#[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)

_STATUS_SECTION = re.compile(
    r"^#{2,3}[ \t]*Status[ \t]*\n+[ \t]*(?:[-*+][ \t]+)?(.+)$",
    re.MULTILINE | re.IGNORECASE,
)
_STATUS_LINE = re.compile(
    r"^[ \t]*[*_]*Status[*_]*[ \t]*:[*_ \t]*([A-Za-z][\w-]*)",
    re.MULTILINE | re.IGNORECASE,
)

# (directory keyword, type) checked in order against the parent directories
_DIRECTORY_TYPES: tuple[tuple[tuple[str, ...], DocumentType], ...] = (
    (("adr", "architecture"), DocumentType.ADR),
    (("style",), DocumentType.STYLE_GUIDE),
    (("guideline",), DocumentType.CODING_GUIDELINE),
    (("recommendation",), DocumentType.RECOMMENDATION),
)

_FILENAME_LANGUAGES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("csharp", "c-sharp"), "C#"),
    (("typescript",), "TypeScript"),
    (("javascript",), "JavaScript"),
    (("python",), "Python"),
    (("java",), "Java"),
)

_TITLE_KEYS = ("title",)
_TYPE_KEYS = ("type", "doc_type")
_SUMMARY_KEYS = ("summary", "abstract", "description")
_INDEXED_KEYS = frozenset(
    ("id", "category", "tags", "language", "status")
    + _TITLE_KEYS
    + _TYPE_KEYS
    + _SUMMARY_KEYS
)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str, str | None]:
    """
    Split a leading `---` metadata block from markdown content.

    Returns:
        (metadata, body, warning). Metadata is empty when there is no block or
        the block is malformed; in the latter case `warning` says why. The body
        never contains the block.
    """
    text = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    first_line, newline, rest = text.partition("\n")
    if first_line.rstrip() != FRONTMATTER_DELIMITER:
        return {}, text, None

    end = _FRONTMATTER_END.search(rest) if newline else None
    if end is None:
        return {}, rest, "Metadata block is not terminated"

    block = rest[: end.start()]
    body = rest[end.end() :]

    if not block.strip():
        return {}, body, None

    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as e:
        problem = getattr(e, "problem", None) or str(e)
        return {}, body, f"Invalid YAML metadata: {problem}"

    if metadata is None:
        return {}, body, None

    if not isinstance(metadata, dict):
        return {}, body, "Metadata block is not a key/value mapping"

    return {str(key): value for key, value in metadata.items()}, body, None


def _as_text(value: Any) -> str | None:
    """Coerce a metadata scalar to a stripped string, None if empty."""
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        value = ", ".join(str(v) for v in value if v is not None)
    text = str(value).strip()
    return text or None


def _as_tags(value: Any) -> tuple[str, ...]:
    """Normalize tags declared as a list or a comma/semicolon separated string."""
    if value is None:
        return ()

    if isinstance(value, str):
        raw = re.split(r"[,;]", value)
    elif isinstance(value, (list, tuple, set)):
        raw = [str(v) for v in value if v is not None]
    else:
        raw = [str(value)]

    tags: list[str] = []
    seen: set[str] = set()
    for tag in raw:
        tag = tag.strip()
        if tag and tag.casefold() not in seen:
            seen.add(tag.casefold())
            tags.append(tag)

    return tuple(tags)


def _first(metadata: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        text = _as_text(metadata.get(key))
        if text:
            return text
    return None


def normalize_path(path: str) -> str:
    """Posix-style path relative to the corpus root."""
    return PurePosixPath(path.replace("\\", "/").strip("/")).as_posix()


def generate_doc_id(path: str) -> str:
    """Generate a document ID from its relative path."""
    stem = PurePosixPath(path).with_suffix("").as_posix()
    return stem.replace("/", "-").replace(" ", "-")


def infer_type(path: str) -> DocumentType:
    """Infer the document type from the directories containing it."""
    directory = PurePosixPath(path).parent.as_posix().lower()
    if directory == ".":
        return DocumentType.DOCUMENT

    for keywords, doc_type in _DIRECTORY_TYPES:
        if any(keyword in directory for keyword in keywords):
            return doc_type

    return DocumentType.DOCUMENT


def infer_category(path: str) -> str | None:
    """Use the parent directory name as the category."""
    parent = PurePosixPath(path).parent
    return parent.name or None


def infer_language(path: str) -> str | None:
    """Detect the target language from common file name markers."""
    stem = PurePosixPath(path).stem.lower()
    for markers, language in _FILENAME_LANGUAGES:
        if any(marker in stem for marker in markers):
            return language
    return None


def normalize_status(status: str | None) -> str | None:
    """Canonical capitalization for the known ADR statuses."""
    if status is None:
        return None
    for known in ADR_STATUSES:
        if status.casefold() == known.casefold():
            return known
    return status


def extract_status(body: str) -> str | None:
    """Find the status of an ADR in a `## Status` section or `Status:` line."""
    match = _STATUS_SECTION.search(body) or _STATUS_LINE.search(body)
    if not match:
        return None

    status = _as_text(match.group(1).strip("*_ \t"))
    if status is None:
        return None

    # "Superseded by ADR-0007" still counts as Superseded
    first_word = re.match(r"[A-Za-z]+", status)
    if first_word and normalize_status(first_word.group(0)) in ADR_STATUSES:
        return normalize_status(first_word.group(0))
    return status


def extract_title(body: str) -> str | None:
    """First level-1 heading."""
    match = _H1_PATTERN.search(body)
    return match.group(1).strip() if match else None


def make_summary(body: str, length: int = SUMMARY_LENGTH) -> str:
    """
    Plain-text excerpt of the body with markdown markers stripped.

    Fenced code blocks are dropped; headings, emphasis, links, list and quote
    markers are reduced to their text.
    """
    text = re.sub(r"^[ \t]*(```|~~~).*?^[ \t]*\1[ \t]*$", " ", body, flags=re.M | re.S)
    text = re.sub(r"!\[([^\]]*)\]\([^)]*\)", r"\1", text)
    text = re.sub(r"\[([^\]]*)\]\([^)]*\)", r"\1", text)
    text = re.sub(r"^[ \t]*([-*_])([ \t]*\1){2,}[ \t]*$", " ", text, flags=re.M)
    text = re.sub(r"^[ \t]{0,3}#{1,6}[ \t]*", "", text, flags=re.M)
    text = re.sub(r"^[ \t]*>[ \t]?", "", text, flags=re.M)
    text = re.sub(r"^[ \t]*(?:[-*+]|\d+\.)[ \t]+", "", text, flags=re.M)
    text = re.sub(r"(\*\*|\*|~~)(?=\S)(.+?)(?<=\S)\1", r"\2", text)
    text = re.sub(r"(?<!\w)(__|_)(?=\S)(.+?)(?<=\S)\1(?!\w)", r"\2", text)
    text = text.replace("`", "")

    text = " ".join(text.split())
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "..."


class DocumentParser:
    """
    Turn raw markdown into Documents.

    Parsing is best-effort: a malformed metadata block never fails the
    document, it is replaced by defaults and flagged with `parse_warning`.
    """

    def __init__(self, summary_length: int = SUMMARY_LENGTH):
        self.summary_length = summary_length

    def parse(
        self,
        path: str,
        content: str,
        last_modified: datetime | None = None,
        generation: int = 0,
        source_warning: str | None = None,
    ) -> Document:
        path = normalize_path(path)
        metadata, body, warning = parse_frontmatter(content)

        if warning:
            logger.warning("Malformed metadata in %s: %s", path, warning)
        if source_warning:
            warning = f"{source_warning}; {warning}" if warning else source_warning

        meta = {key.lower(): value for key, value in metadata.items()}
        body = body.strip()

        declared_type = _first(meta, _TYPE_KEYS)
        doc_type = (
            DocumentType.normalize(declared_type) if declared_type else infer_type(path)
        )

        status = normalize_status(_as_text(meta.get("status")))
        if status is None and doc_type is DocumentType.ADR:
            status = normalize_status(extract_status(body))

        return Document(
            id=_as_text(meta.get("id")) or generate_doc_id(path),
            path=path,
            type=doc_type,
            title=(
                _first(meta, _TITLE_KEYS)
                or extract_title(body)
                or PurePosixPath(path).stem
            ),
            content=body,
            summary=(
                _first(meta, _SUMMARY_KEYS) or make_summary(body, self.summary_length)
            ),
            category=_as_text(meta.get("category")) or infer_category(path),
            tags=_as_tags(meta.get("tags")),
            language=_as_text(meta.get("language")) or infer_language(path),
            status=status,
            extra={
                key: value
                for key, value in metadata.items()
                if key.lower() not in _INDEXED_KEYS
            },
            parse_warning=warning,
            last_modified=last_modified,
            generation=generation,
        )

    def parse_entry(self, entry: SourceEntry, generation: int = 0) -> Document:
        return self.parse(
            entry.path,
            entry.content,
            last_modified=entry.last_modified,
            generation=generation,
            source_warning=entry.warning,
        )


__all__ = [
    "DocumentParser",
    "parse_frontmatter",
    "generate_doc_id",
    "infer_type",
    "infer_category",
    "infer_language",
    "make_summary",
    "normalize_status",
]
