"""MCP client wrapper and tool directory.

This package provides the async connection to the MCP tool server and the
time-boxed cache of the tools it exposes.
"""

from mcp_relay.mcp.client import McpConnection
from mcp_relay.mcp.directory import ToolDirectory
from mcp_relay.mcp.types import ToolCallResult, ToolDescriptor

__all__ = ["McpConnection", "ToolDirectory", "ToolCallResult", "ToolDescriptor"]
