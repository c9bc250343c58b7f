"""Guidelines catalog - index and query markdown engineering guidelines."""

__version__ = "0.1.0"


# Lazy imports to keep the CLI and server startup light
def __getattr__(name: str):
    if name == "QueryEngine":
        from guidelines.api.engine import QueryEngine

        return QueryEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["QueryEngine", "__version__"]
