"""Add-to-cart MCP Server.

Exposes the add_to_cart tool to AI agents over MCP stdio, backed by the
in-memory catalog and cart collaborators.
"""

import asyncio
import json
from functools import partial
from typing import Any

import structlog
from anyio import to_thread
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from add_to_cart.config import Settings, get_settings
from add_to_cart.formatters import ToolResult
from add_to_cart.logging_config import configure_logging
from add_to_cart.memory import (
    InMemoryCartManager,
    InMemoryCartProvider,
    InMemoryCatalog,
    StaticStoreContext,
    Store,
    load_catalog,
)
from add_to_cart.tools import AddToCartTool

SERVER_NAME = "add-to-cart-mcp"

logger = structlog.get_logger()


def build_tool(settings: Settings) -> AddToCartTool:
    """Create the tool wired to in-memory collaborators.

    Args:
        settings: Settings naming the store and the optional catalog seed.

    Returns:
        Ready-to-use tool.
    """
    if settings.catalog_file is not None:
        catalog = load_catalog(settings.catalog_file)
    else:
        catalog = InMemoryCatalog()

    return AddToCartTool(
        catalog=catalog,
        store_context=StaticStoreContext(
            Store(id=settings.store_id, name=settings.store_name)
        ),
        cart_provider=InMemoryCartProvider(),
        cart_manager=InMemoryCartManager(),
        settings=settings,
    )


def list_tool_definitions(tool: AddToCartTool) -> list[Tool]:
    """Describe the served tools for an MCP client."""
    definition = tool.definition
    return [
        Tool(
            name=definition.function_name,
            description=definition.description,
            inputSchema=definition.input_schema(),
        )
    ]


def call_tool_content(
    tool: AddToCartTool,
    name: str,
    arguments: dict[str, Any] | None,
    include_structured: bool = True,
) -> list[TextContent]:
    """Run a tool call and render it as MCP content.

    Args:
        tool: Tool serving the call.
        name: Requested tool name.
        arguments: Raw call arguments.
        include_structured: Append the JSON result record.

    Returns:
        The readable message, then the JSON record when requested.
    """
    if name == tool.definition.function_name:
        result = tool.execute(arguments or {})
    else:
        result = ToolResult(
            success=False,
            message=f"Error: Unknown tool: {name}",
            error_code="UNKNOWN_TOOL",
        )
    logger.info("Tool completed", tool=name, success=result.success)

    content = [TextContent(type="text", text=result.readable_output())]
    if include_structured:
        content.append(
            TextContent(
                type="text",
                text=json.dumps(result.to_dict(), indent=2, default=str),
            )
        )
    return content


# ============================================================================
# MCP Server Implementation
# ============================================================================


def create_mcp_server(
    tool: AddToCartTool | None = None,
    settings: Settings | None = None,
) -> Server:
    """Create and configure the MCP server.

    Args:
        tool: Tool to serve. Built from settings when omitted.
        settings: Server settings. Defaults to the environment settings.

    Returns:
        Configured server.
    """
    settings = settings or get_settings()
    tool = tool or build_tool(settings)
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return list_tool_definitions(tool)

    # Arguments are validated by the tool so failures keep its messages
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        # Collaborators may block, so the tool runs in a worker thread
        return await to_thread.run_sync(
            partial(
                call_tool_content,
                tool,
                name,
                arguments,
                include_structured=settings.include_structured_result,
            )
        )

    return server


async def run_server(settings: Settings) -> None:
    """Run the MCP server using stdio transport."""
    logger.info(
        "Starting add-to-cart MCP server",
        store_id=settings.store_id,
        catalog_file=str(settings.catalog_file) if settings.catalog_file else None,
        cart_type=settings.cart_type,
    )

    server = create_mcp_server(settings=settings)

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Entry point for the ``add-to-cart-mcp`` console script."""
    settings = get_settings()
    configure_logging(settings)
    asyncio.run(run_server(settings))


if __name__ == "__main__":
    main()
