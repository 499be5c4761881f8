"""Add-to-cart tool for AI agents.

Lets an agent add a product variation to the caller's cart by ID, with a
quantity and a merge preference, and reports the outcome as a readable
message plus a structured record.

This package provides:
- AddToCartTool, the tool itself, wired to injected collaborators
- Protocols for the catalog, store context, cart provider and cart manager
- In-memory implementations of those collaborators
- An MCP stdio server exposing the tool
"""

from add_to_cart.formatters import ToolResult
from add_to_cart.tools import AddToCartTool, InvocationContext

__all__ = ["AddToCartTool", "InvocationContext", "ToolResult"]

__version__ = "1.0.0"
