"""
Catalog cache and refresh policy.

`CatalogManager` owns the current catalog generation and decides when it is
rebuilt. States and transitions:

    UNBUILT / FAILED --query--> BUILDING
    BUILDING --success--> READY
    BUILDING --failure, previous generation--> STALE_DEGRADED
    BUILDING --failure, no generation--> FAILED
    BUILDING --cancelled--> STALE_DEGRADED (previous generation) or UNBUILT
    READY / STALE_DEGRADED --invalidate, then query--> BUILDING
    READY / STALE_DEGRADED --refresh--> BUILDING

Only one build runs at a time; callers that trigger a build while one is in
flight wait for it and share its result (or its error). Readers of an already
built catalog never wait, even while a refresh is running.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum

from guidelines.corpus.catalog import Catalog
from guidelines.corpus.loader import DocumentLoader
from guidelines.errors import BuildCancelledError

logger = logging.getLogger(__name__)


class CatalogState(str, Enum):
    """Lifecycle state of the managed catalog."""

    UNBUILT = "unbuilt"
    BUILDING = "building"
    READY = "ready"
    STALE_DEGRADED = "stale_degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class CatalogStatus:
    """Snapshot of the manager for status reporting."""

    state: CatalogState
    generation: int
    document_count: int
    source: str
    invalidated: bool = False
    last_error: str | None = None


class CatalogManager:
    """Lazily build, share and replace catalog generations."""

    def __init__(self, loader: DocumentLoader):
        self.loader = loader

        self._lock = threading.Lock()
        self._catalog: Catalog | None = None
        self._state = CatalogState.UNBUILT
        self._invalidated = False
        self._last_error: BaseException | None = None

        self._inflight: Future[Catalog] | None = None
        self._cancel_event: threading.Event | None = None

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def catalog(self) -> Catalog | None:
        """Current generation without triggering a build."""
        return self._catalog

    def get(self) -> Catalog:
        """
        Return the current catalog, building it first if needed.

        Raises:
            GuidelinesError: The failure of the build this call triggered or
                joined (SourceUnavailableError, RateLimitedError,
                DuplicateKeyError, BuildCancelledError, ...).
        """
        with self._lock:
            if self._catalog is not None and not self._invalidated:
                return self._catalog
            future, owner = self._start_or_join()

        if owner:
            self._run_build(future)
        return future.result()

    def refresh(self) -> Catalog:
        """
        Rebuild now and return the new generation.

        Readers keep getting the current generation until the new one is ready.
        """
        with self._lock:
            future, owner = self._start_or_join()

        if owner:
            self._run_build(future)
        return future.result()

    def invalidate(self) -> None:
        """Mark the current generation stale; the next query rebuilds."""
        with self._lock:
            if self._catalog is not None:
                self._invalidated = True
                logger.info(
                    "Catalog generation %d invalidated", self._catalog.generation
                )

    def cancel(self) -> bool:
        """
        Ask the in-flight build to stop.

        Returns:
            True if a build was running and has been signalled.
        """
        with self._lock:
            if self._cancel_event is None:
                return False
            self._cancel_event.set()
            logger.info("Cancellation requested for catalog build")
            return True

    def status(self) -> CatalogStatus:
        with self._lock:
            return CatalogStatus(
                state=self._state,
                generation=self._catalog.generation if self._catalog else 0,
                document_count=len(self._catalog) if self._catalog else 0,
                source=self.loader.describe(),
                invalidated=self._invalidated,
                last_error=str(self._last_error) if self._last_error else None,
            )

    def _start_or_join(self) -> tuple["Future[Catalog]", bool]:
        """Join the in-flight build or register a new one. Caller holds the lock."""
        if self._inflight is not None:
            return self._inflight, False

        self._inflight = Future()
        self._cancel_event = threading.Event()
        self._state = CatalogState.BUILDING
        return self._inflight, True

    def _run_build(self, future: "Future[Catalog]") -> None:
        assert self._cancel_event is not None
        cancel_event = self._cancel_event
        generation = (self._catalog.generation if self._catalog else 0) + 1

        started = time.perf_counter()
        logger.info(
            "Building catalog generation %d from %s", generation, self.loader.describe()
        )

        try:
            documents = self.loader.load(
                generation=generation, cancel_event=cancel_event
            )
            if cancel_event.is_set():
                raise BuildCancelledError("Catalog build cancelled")
            catalog = Catalog.build(documents, generation=generation)
        except BaseException as e:
            # Waiters must never be left on a build that will not finish
            self._finish_failed(e)
            future.set_exception(e)
            if not isinstance(e, Exception):
                raise
            return

        with self._lock:
            self._catalog = catalog
            self._state = CatalogState.READY
            self._invalidated = False
            self._last_error = None
            self._inflight = None
            self._cancel_event = None

        logger.info(
            "Catalog generation %d ready: %d documents in %.2fs",
            generation,
            len(catalog),
            time.perf_counter() - started,
        )
        future.set_result(catalog)

    def _finish_failed(self, error: BaseException) -> None:
        with self._lock:
            self._inflight = None
            self._cancel_event = None
            self._last_error = error

            if isinstance(error, BuildCancelledError):
                self._state = (
                    CatalogState.STALE_DEGRADED
                    if self._catalog is not None
                    else CatalogState.UNBUILT
                )
            elif self._catalog is not None:
                self._state = CatalogState.STALE_DEGRADED
            else:
                self._state = CatalogState.FAILED

            # Serve the last good generation until the next invalidation
            self._invalidated = False
            previous = self._catalog.generation if self._catalog else None

        if isinstance(error, BuildCancelledError):
            logger.info("Catalog build cancelled")
        elif previous is not None:
            logger.error(
                "Catalog build failed, keeping generation %d: %s", previous, error
            )
        else:
            logger.error("Catalog build failed with no previous generation: %s", error)


__all__ = ["CatalogManager", "CatalogState", "CatalogStatus"]
