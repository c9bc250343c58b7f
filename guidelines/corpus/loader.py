"""Document loader - reads a source and parses every entry."""

import logging
import threading

from guidelines.contracts.document import Document
from guidelines.corpus.parser import DocumentParser
from guidelines.sources.base import DocumentSource

logger = logging.getLogger(__name__)


class DocumentLoader:
    """
    Load one generation of documents from a source.

    Parsing is best-effort per document; only source-level failures
    (unreachable corpus, throttling, cancellation) abort a load.
    """

    def __init__(
        self,
        source: DocumentSource,
        parser: DocumentParser | None = None,
    ):
        """
        Initialize document loader.

        Args:
            source: Where raw markdown is read from
            parser: Parser to use (default: DocumentParser())
        """
        self.source = source
        self.parser = parser or DocumentParser()

    def describe(self) -> str:
        return self.source.describe()

    def load(
        self,
        generation: int = 0,
        cancel_event: threading.Event | None = None,
    ) -> list[Document]:
        """
        Load all documents from the source.

        Args:
            generation: Catalog generation stamped on every document
            cancel_event: Cooperative cancellation signal

        Raises:
            SourceUnavailableError: If the corpus cannot be reached.
            RateLimitedError: If the remote provider throttles the load.
            DocumentNotFoundError: If the corpus root itself is missing remotely.
            BuildCancelledError: If `cancel_event` was set.
        """
        documents: list[Document] = []
        warnings = 0

        for entry in self.source.list_entries(cancel_event):
            doc = self.parser.parse_entry(entry, generation=generation)
            if doc.parse_warning:
                warnings += 1
            documents.append(doc)

        if warnings:
            logger.warning(
                "%d of %d documents from %s had malformed metadata",
                warnings,
                len(documents),
                self.describe(),
            )

        return documents


__all__ = ["DocumentLoader"]
