"""Tests for MCP server wiring."""

import asyncio

from guidelines.server import SERVER_NAME, create_server


class TestServer:
    def test_registers_every_tool(self, engine):
        server = create_server(engine)

        tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}

        assert server.name == SERVER_NAME
        assert set(tools) == {
            "list_documents",
            "get_document",
            "get_document_by_path",
            "get_documents_by_type",
            "get_documents_by_category",
            "get_documents_by_language",
            "search_documents",
            "get_documents_by_tags",
            "list_categories",
            "get_adrs_by_status",
            "get_style_guide_by_language",
            "refresh_documents",
            "catalog_status",
        }

    def test_tool_schemas_use_method_parameters(self, engine):
        server = create_server(engine)

        tools = {tool.name: tool for tool in asyncio.run(server.list_tools())}

        assert list(tools["get_document"].inputSchema["properties"]) == ["id"]
        assert list(tools["search_documents"].inputSchema["properties"]) == [
            "term",
            "include_excerpts",
        ]
        assert tools["search_documents"].inputSchema["required"] == ["term"]
        assert tools["get_documents_by_tags"].inputSchema["properties"]["tags"][
            "type"
        ] == "array"
        assert tools["list_documents"].inputSchema.get("properties", {}) == {}
        assert tools["get_document"].description.startswith("Get a specific document")
