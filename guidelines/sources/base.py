"""Document source interface."""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime

from guidelines.errors import BuildCancelledError, DocumentNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEntry:
    """Raw markdown file as delivered by a source."""

    path: str
    content: str
    last_modified: datetime | None = None
    warning: str | None = None


class DocumentSource(ABC):
    """
    Capability interface for reading a markdown corpus.

    Implementations only do I/O; they never cache. Paths are posix-style and
    relative to the corpus root.
    """

    @abstractmethod
    def list_paths(self) -> list[str]:
        """
        List markdown files in the corpus, sorted.

        Raises:
            SourceUnavailableError: If the corpus cannot be reached.
        """

    @abstractmethod
    def fetch_entry(self, path: str) -> SourceEntry:
        """
        Fetch the raw content of one file.

        Raises:
            DocumentNotFoundError: If there is no file at `path`.
            SourceUnavailableError: If the corpus cannot be reached.
        """

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable description for logs and status output."""

    def list_entries(
        self, cancel_event: threading.Event | None = None
    ) -> Iterator[SourceEntry]:
        """
        Enumerate and fetch every file in the corpus.

        Files that disappear between listing and fetching are skipped. The
        cancellation signal is checked before each fetch, so a cancelled build
        stops issuing requests at the next file boundary.

        Raises:
            BuildCancelledError: If `cancel_event` is set during enumeration.
        """
        for path in self.list_paths():
            if cancel_event is not None and cancel_event.is_set():
                raise BuildCancelledError(f"Load from {self.describe()} cancelled")
            try:
                entry = self.fetch_entry(path)
            except DocumentNotFoundError:
                logger.warning("Skipping %s: removed from %s", path, self.describe())
                continue
            yield entry

    def close(self) -> None:
        """Release resources held by the source."""

    def __enter__(self) -> "DocumentSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["DocumentSource", "SourceEntry"]
