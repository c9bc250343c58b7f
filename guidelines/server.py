"""MCP server exposing the guidelines catalog over stdio."""

import inspect
import logging

from mcp.server.fastmcp import FastMCP

from guidelines.api.engine import QueryEngine
from guidelines.tools.document_tools import make_document_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "guidelines"


def create_server(engine: QueryEngine) -> FastMCP:
    """
    Create an MCP server with every document tool registered.

    Tool names are the method names; descriptions are their docstrings.
    """
    server = FastMCP(SERVER_NAME)

    for tool in make_document_tools(engine):
        server.add_tool(
            tool,
            name=tool.__name__,
            description=inspect.getdoc(tool),
            structured_output=False,
        )

    return server


def serve(engine: QueryEngine) -> None:
    """Run the server on stdio until the client disconnects."""
    server = create_server(engine)
    logger.info("Serving %s over stdio", engine.status().source)
    server.run("stdio")


__all__ = ["SERVER_NAME", "create_server", "serve"]
