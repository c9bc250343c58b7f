"""Public query API."""

from guidelines.api.engine import QueryEngine

__all__ = ["QueryEngine"]
