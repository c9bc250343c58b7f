"""Local filesystem document source."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from guidelines.constants import MARKDOWN_SUFFIXES
from guidelines.errors import DocumentNotFoundError, SourceUnavailableError
from guidelines.sources.base import DocumentSource, SourceEntry

logger = logging.getLogger(__name__)


class LocalDocumentSource(DocumentSource):
    """Read markdown documents from a directory tree."""

    def __init__(self, base_path: Path | str):
        """
        Initialize the source.

        Args:
            base_path: Corpus root; every document path is relative to it.
        """
        self.base_path = Path(base_path)

    def describe(self) -> str:
        return f"local:{self.base_path}"

    def _ensure_available(self) -> Path:
        if not self.base_path.is_dir():
            raise SourceUnavailableError(
                f"Corpus directory {self.base_path} does not exist"
            )
        return self.base_path.resolve()

    def list_paths(self) -> list[str]:
        """Find all markdown files below the base directory."""
        root = self._ensure_available()

        paths: list[str] = []
        for file_path in root.rglob("*"):
            if file_path.suffix.lower() not in MARKDOWN_SUFFIXES:
                continue
            if not file_path.is_file():
                continue
            paths.append(file_path.relative_to(root).as_posix())

        return sorted(paths)

    def _resolve(self, path: str) -> Path:
        root = self._ensure_available()
        full_path = (root / path).resolve()

        # Reject lookups that escape the corpus root
        if not full_path.is_relative_to(root) or not full_path.is_file():
            raise DocumentNotFoundError(path)

        return full_path

    def fetch_entry(self, path: str) -> SourceEntry:
        full_path = self._resolve(path)

        try:
            raw = full_path.read_bytes()
            mtime = full_path.stat().st_mtime
        except OSError as e:
            raise SourceUnavailableError(f"Failed to read {full_path}: {e}") from e

        warning = None
        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            # Undecodable bytes become U+FFFD; the document is still indexed.
            content = raw.decode("utf-8-sig", errors="replace")
            warning = f"File is not valid UTF-8 ({e.reason} at byte {e.start})"
            logger.warning("Invalid UTF-8 in %s: %s", path, e)

        logger.debug("Read %s (%d chars)", path, len(content))

        return SourceEntry(
            path=path,
            content=content,
            last_modified=datetime.fromtimestamp(mtime, tz=timezone.utc),
            warning=warning,
        )


__all__ = ["LocalDocumentSource"]
