"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific concern (GUI, tools, chat, health).
"""

from mcp_relay.routers import chat, gui, health, tools

__all__ = [
    "chat",
    "gui",
    "health",
    "tools",
]
