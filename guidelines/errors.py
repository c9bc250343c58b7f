"""Error taxonomy for document acquisition and catalog builds."""


class GuidelinesError(Exception):
    """Base class for all catalog errors."""


class DocumentNotFoundError(GuidelinesError):
    """Raised when a source has no document at the requested path."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Document not found: {path}")


class SourceUnavailableError(GuidelinesError):
    """Raised when the corpus cannot be reached (I/O, network, timeout)."""


class RateLimitedError(GuidelinesError):
    """
    Raised when the remote provider throttles requests.

    The caller owns the retry policy; `retry_after` is the provider's hint in
    seconds when one was reported.
    """

    def __init__(self, message: str, retry_after: float | None = None):
        self.retry_after = retry_after
        super().__init__(message)


class DuplicateKeyError(GuidelinesError):
    """Raised when two documents share an id or a path within one build."""

    def __init__(self, kind: str, key: str, paths: tuple[str, str]):
        self.kind = kind
        self.key = key
        self.paths = paths
        super().__init__(
            f"Duplicate document {kind} '{key}' in {paths[0]} and {paths[1]}"
        )


class BuildCancelledError(GuidelinesError):
    """Raised to every waiter of a catalog build that was cancelled."""


__all__ = [
    "GuidelinesError",
    "DocumentNotFoundError",
    "SourceUnavailableError",
    "RateLimitedError",
    "DuplicateKeyError",
    "BuildCancelledError",
]
