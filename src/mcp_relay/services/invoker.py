"""Tool invocation service.

Forwards a named tool call to the MCP server and normalizes every outcome
into a ToolCallResult.
"""

import logging
from typing import Any

from mcp_relay.errors import McpConnectionError, ToolInvocationError
from mcp_relay.mcp import McpConnection, ToolCallResult

logger = logging.getLogger(__name__)


class ToolInvoker:
    """Calls remote tools without letting tool failures escape.

    Attributes:
        connection: The shared MCP connection
    """

    def __init__(self, connection: McpConnection) -> None:
        self.connection = connection

    async def invoke(
        self,
        name: str,
        args: dict[str, Any],
        call_id: str | None = None,
    ) -> ToolCallResult:
        """Invoke a tool and return its result or a captured failure.

        Arguments are passed through unchanged; schema checking is left to
        the server.

        Args:
            name: Exact tool name
            args: Arguments object for the tool
            call_id: Identifier of the model tool call being answered

        Returns:
            ToolCallResult: ``ok=False`` with ``{"error": message}`` on failure

        Raises:
            McpConnectionError: If the connection cannot be established
        """
        await self.connection.connect()

        try:
            payload = await self.connection.call_tool(name, args)
        except McpConnectionError:
            raise
        except ToolInvocationError as e:
            logger.warning(f"Tool {name} failed: {e.message}")
            return ToolCallResult.failure(name, e.message, call_id=call_id)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e}")
            return ToolCallResult.failure(
                name, str(e) or "MCP call failed", call_id=call_id
            )

        logger.info(f"Tool {name} completed")
        return ToolCallResult(name=name, payload=payload, call_id=call_id)
