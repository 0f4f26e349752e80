"""mcp-relay: chat backend that relays model tool calls to an MCP server.

This package provides a small FastAPI server with a browser GUI, a chat
route whose model can call MCP tools, and routes for listing and calling
those tools directly.
"""

__version__ = "0.1.0"

from mcp_relay.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
