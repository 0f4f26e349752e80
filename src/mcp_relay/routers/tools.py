"""Tools router for listing and manually calling MCP tools.

These endpoints back the tool dropdown and the "Call Tool" form of the GUI.
"""

import logging

from fastapi import APIRouter, Depends

from mcp_relay.dependencies import get_mcp_connection, get_tool_directory
from mcp_relay.errors import BadRequestError, RelayError, ToolInvocationError
from mcp_relay.mcp import McpConnection, ToolDirectory
from mcp_relay.models.tools import (
    ToolCallRequest,
    ToolCallResponse,
    ToolDetail,
    ToolListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tools"])


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(
    refresh: bool = False,
    directory: ToolDirectory = Depends(get_tool_directory),
) -> ToolListResponse:
    """List the tools exposed by the MCP server.

    Served from the tool directory cache unless it has expired or
    ``refresh`` is set.

    Raises:
        ToolDirectoryError: If the tool list cannot be fetched (500).
    """
    if refresh:
        directory.invalidate()

    tools = await directory.ensure_fresh()
    logger.info(f"Listed {len(tools)} tools")
    return ToolListResponse(tools=[ToolDetail(**tool.to_dict()) for tool in tools])


@router.post("/call", response_model=ToolCallResponse)
async def call_tool(
    request_body: ToolCallRequest,
    connection: McpConnection = Depends(get_mcp_connection),
) -> ToolCallResponse:
    """Call an MCP tool directly, bypassing the chat model.

    Unlike tool calls made during chat, failures here are reported to the
    caller as errors.

    Raises:
        BadRequestError: If ``name`` is missing (400).
        McpConnectionError: If the tool server is unreachable (500).
        ToolInvocationError: If the tool call fails (500).
    """
    if not request_body.name:
        raise BadRequestError("Missing 'name'.")

    try:
        result = await connection.call_tool(request_body.name, request_body.args or {})
    except RelayError:
        raise
    except Exception as e:
        logger.error(f"Tool call {request_body.name} failed: {e}")
        raise ToolInvocationError(str(e) or None) from e

    logger.info(f"Called tool {request_body.name}")
    return ToolCallResponse(result=result)
