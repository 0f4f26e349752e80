"""Business logic services for mcp-relay.

This package contains the tool invoker and the relay loop that connects the
chat model to the MCP server.
"""

from mcp_relay.services.invoker import ToolInvoker
from mcp_relay.services.relay import RelayOutcome, RelayPhase, RelayService

__all__ = [
    "RelayOutcome",
    "RelayPhase",
    "RelayService",
    "ToolInvoker",
]
