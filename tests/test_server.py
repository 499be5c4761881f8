"""Tests for the MCP server module."""

import json
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from mcp.types import CallToolRequest, CallToolRequestParams, ListToolsRequest

from add_to_cart.config import Settings
from add_to_cart.logging_config import configure_logging
from add_to_cart.server import (
    SERVER_NAME,
    build_tool,
    call_tool_content,
    create_mcp_server,
    list_tool_definitions,
)


class TestSettings:
    """Tests for Settings configuration."""

    def test_default_settings(self):
        """Test default settings values."""
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)
            assert settings.log_level == "INFO"
            assert settings.log_json is True
            assert settings.cart_type == "default"
            assert settings.validate_quantity_eagerly is True
            assert settings.include_structured_result is True
            assert settings.catalog_file is None

    def test_settings_from_env(self):
        """Test settings from environment variables."""
        env_vars = {
            "ADD_TO_CART_LOG_LEVEL": "DEBUG",
            "ADD_TO_CART_CART_TYPE": "wishlist",
            "ADD_TO_CART_VALIDATE_QUANTITY_EAGERLY": "false",
            "ADD_TO_CART_STORE_ID": "eu",
        }
        with patch.dict("os.environ", env_vars, clear=False):
            settings = Settings(_env_file=None)
            assert settings.log_level == "DEBUG"
            assert settings.cart_type == "wishlist"
            assert settings.validate_quantity_eagerly is False
            assert settings.store_id == "eu"


class TestBuildTool:
    """Tests for wiring the served tool."""

    def test_seeded_catalog(self, tmp_path):
        """The catalog file seeds the served catalog."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"variations": [{"id": 123, "title": "Blue Mug"}]}))

        tool = build_tool(Settings(_env_file=None, catalog_file=path, store_id="s1"))
        result = tool.execute({"productVariationId": 123, "quantity": "2"})

        assert result.success is True
        assert result.message == 'Successfully added 2 x "Blue Mug" to cart. Order item ID: 1'
        assert tool.store_context.current_store().id == "s1"

    def test_empty_catalog(self, settings):
        """Without a seed file every ID is unknown."""
        result = build_tool(settings).execute({"productVariationId": 1})
        assert result.message == "Error: Product variation with ID 1 not found."


class TestToolContent:
    """Tests for rendering tool calls as MCP content."""

    def test_list_tools(self, tool):
        """The add_to_cart tool is listed with its input schema."""
        tools = list_tool_definitions(tool)

        assert len(tools) == 1
        assert tools[0].name == "add_to_cart"
        assert "productVariationId" in tools[0].inputSchema["properties"]
        assert tools[0].inputSchema["required"] == ["productVariationId"]

    def test_call_success(self, tool):
        """A call returns the message then the JSON record."""
        content = call_tool_content(
            tool, "add_to_cart", {"productVariationId": 123, "quantity": "2"}
        )

        assert len(content) == 2
        assert content[0].text == 'Successfully added 2 x "Blue Mug" to cart. Order item ID: 456'
        record = json.loads(content[1].text)
        assert record["success"] is True
        assert record["orderItemId"] == 456
        assert record["productTitle"] == "Blue Mug"

    def test_call_failure(self, tool):
        """Failures are content, not exceptions."""
        content = call_tool_content(tool, "add_to_cart", None)

        assert content[0].text == "Error: Missing required parameter: productVariationId."
        assert json.loads(content[1].text)["errorCode"] == "MISSING_PARAMETER"

    def test_message_only(self, tool):
        """The JSON record can be left out."""
        content = call_tool_content(
            tool, "add_to_cart", {"productVariationId": 123}, include_structured=False
        )
        assert len(content) == 1

    def test_unknown_tool(self, tool):
        """Unknown tool names are reported."""
        content = call_tool_content(tool, "checkout", {})

        assert content[0].text == "Error: Unknown tool: checkout"
        assert json.loads(content[1].text) == {
            "success": False,
            "message": "Error: Unknown tool: checkout",
            "errorCode": "UNKNOWN_TOOL",
        }


class TestMCPServer:
    """Tests for MCP server creation."""

    def test_create_server(self, tool, settings):
        """Test MCP server creation."""
        server = create_mcp_server(tool=tool, settings=settings)

        assert server.name == SERVER_NAME
        assert ListToolsRequest in server.request_handlers
        assert CallToolRequest in server.request_handlers

    @pytest.mark.asyncio
    async def test_list_tools_handler(self, tool, settings):
        """The registered handler lists the tool."""
        server = create_mcp_server(tool=tool, settings=settings)

        result = await server.request_handlers[ListToolsRequest](
            ListToolsRequest(method="tools/list")
        )

        assert [t.name for t in result.root.tools] == ["add_to_cart"]

    @pytest.mark.asyncio
    async def test_call_tool_handler(self, tool, settings):
        """The registered handler returns the message and the JSON record."""
        server = create_mcp_server(tool=tool, settings=settings)

        result = await server.request_handlers[CallToolRequest](
            CallToolRequest(
                method="tools/call",
                params=CallToolRequestParams(
                    name="add_to_cart",
                    arguments={"productVariationId": 123, "quantity": "2"},
                ),
            )
        )

        content = result.root.content
        assert result.root.isError is False
        assert len(content) == 2
        assert content[0].text == (
            'Successfully added 2 x "Blue Mug" to cart. Order item ID: 456'
        )
        assert json.loads(content[1].text)["orderItemId"] == 456

    @pytest.mark.asyncio
    async def test_call_tool_handler_keeps_tool_validation(self, tool, settings):
        """Bad arguments reach the tool instead of the SDK schema check."""
        server = create_mcp_server(tool=tool, settings=settings)

        result = await server.request_handlers[CallToolRequest](
            CallToolRequest(
                method="tools/call",
                params=CallToolRequestParams(
                    name="add_to_cart",
                    arguments={"productVariationId": "x"},
                ),
            )
        )

        content = result.root.content
        assert content[0].text.startswith(
            "Error: Invalid value for parameter productVariationId:"
        )
        assert json.loads(content[1].text)["errorCode"] == "INVALID_PARAMETER"

    @pytest.mark.asyncio
    async def test_call_tool_handler_message_only(self, tool):
        """The structured record follows the include_structured_result setting."""
        settings = Settings(_env_file=None, include_structured_result=False)
        server = create_mcp_server(tool=tool, settings=settings)

        result = await server.request_handlers[CallToolRequest](
            CallToolRequest(
                method="tools/call",
                params=CallToolRequestParams(
                    name="add_to_cart",
                    arguments={"productVariationId": 999},
                ),
            )
        )

        assert [c.text for c in result.root.content] == [
            "Error: Product variation with ID 999 not found."
        ]


def test_configure_logging(settings):
    """Logging can be configured for both renderers."""
    try:
        configure_logging(settings)
        structlog.get_logger().info("configured")
        configure_logging(Settings(_env_file=None, log_json=False))
    finally:
        structlog.reset_defaults()


def test_mcp_requirement_stays_on_decorator_api():
    """The server registers handlers through decorators removed in mcp 2."""
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    with pyproject.open("rb") as f:
        dependencies = tomllib.load(f)["project"]["dependencies"]

    mcp_requirement = next(d for d in dependencies if d.startswith("mcp"))
    assert "<2" in mcp_requirement
