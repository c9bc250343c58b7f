"""Tools exposed to MCP clients."""

from guidelines.tools.document_tools import (
    DocumentTools,
    make_document_tools,
    to_tool_error,
)

__all__ = [
    "DocumentTools",
    "make_document_tools",
    "to_tool_error",
]
