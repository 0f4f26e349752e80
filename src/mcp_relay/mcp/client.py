"""Async MCP connection handle.

This module provides a wrapper around ``mcp.ClientSession`` running over the
streamable HTTP transport. The connection is created once at startup, stored
on ``app.state`` and established lazily on first use.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import Implementation

from mcp_relay.errors import McpConnectionError, ToolInvocationError
from mcp_relay.mcp.types import ToolDescriptor

logger = logging.getLogger(__name__)

CONSUMER_TAG_HEADER = "x-lunar-consumer-tag"


class McpConnection:
    """Lazily established connection to an MCP tool server.

    ``connect()`` is idempotent and guarded by a lock, so concurrent requests
    arriving before the handshake completes share a single session. Once
    established, the session is reused until ``close()`` is called.

    Attributes:
        url: The MCP endpoint URL (e.g., "http://localhost:9000/mcp")
        consumer_tag: Identifier sent as a header and as the client name
    """

    def __init__(self, url: str, consumer_tag: str, version: str = "1.0.0") -> None:
        """Initialize the connection handle without connecting.

        Args:
            url: The MCP endpoint URL
            consumer_tag: Identifier sent with every request
            version: Client version reported during the handshake
        """
        self.url = url
        self.consumer_tag = consumer_tag
        self.version = version
        self._session: ClientSession | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> ClientSession:
        """Return the shared session, establishing it on first use.

        Returns:
            ClientSession: The initialized MCP session

        Raises:
            McpConnectionError: If the transport or the handshake fails
        """
        if self._session is not None:
            return self._session

        async with self._lock:
            # Another caller may have connected while we waited
            if self._session is not None:
                return self._session

            exit_stack = AsyncExitStack()
            try:
                read, write, _ = await exit_stack.enter_async_context(
                    streamablehttp_client(
                        self.url,
                        headers={CONSUMER_TAG_HEADER: self.consumer_tag},
                    )
                )
                session = await exit_stack.enter_async_context(
                    ClientSession(
                        read,
                        write,
                        client_info=Implementation(
                            name=self.consumer_tag, version=self.version
                        ),
                    )
                )
                await session.initialize()
            except Exception as e:
                logger.error(f"Failed to connect to MCP server at {self.url}: {e}")
                await self._discard(exit_stack)
                raise McpConnectionError(
                    f"Failed to connect to MCP server at {self.url}: {e}"
                ) from e

            self._exit_stack = exit_stack
            self._session = session
            logger.info(f"Connected to MCP server at {self.url}")
            return session

    async def list_tools(self) -> list[ToolDescriptor]:
        """List every tool the server exposes, following pagination cursors.

        Returns:
            list[ToolDescriptor]: All tools in server order

        Raises:
            McpConnectionError: If the connection cannot be established
            Exception: If the ``tools/list`` request fails
        """
        session = await self.connect()

        tools: list[ToolDescriptor] = []
        result = await session.list_tools()
        while True:
            tools.extend(ToolDescriptor.from_mcp_tool(tool) for tool in result.tools)
            cursor = getattr(result, "nextCursor", None)
            if not cursor:
                break
            result = await session.list_tools(cursor=cursor)

        logger.debug(f"Retrieved {len(tools)} tools from MCP server")
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Call a remote tool and return its result as JSON-ready data.

        Args:
            name: Exact tool name
            arguments: Arguments object passed through unchanged

        Returns:
            dict: The ``CallToolResult`` dumped in MCP wire form

        Raises:
            McpConnectionError: If the connection cannot be established
            ToolInvocationError: If the call itself fails
        """
        session = await self.connect()

        try:
            logger.debug(f"Calling MCP tool {name} with arguments: {arguments}")
            result = await session.call_tool(name, arguments=arguments)
        except Exception as e:
            raise ToolInvocationError(str(e) or f"MCP call to {name} failed") from e

        if hasattr(result, "model_dump"):
            return result.model_dump(mode="json", by_alias=True, exclude_none=True)
        return dict(result)

    async def close(self) -> None:
        """Close the session and its transport."""
        exit_stack, self._exit_stack = self._exit_stack, None
        self._session = None
        if exit_stack is not None:
            await self._discard(exit_stack)
            logger.debug("MCP connection closed")

    async def _discard(self, exit_stack: AsyncExitStack) -> None:
        try:
            await exit_stack.aclose()
        except Exception as e:
            # The transport may complain when closed from another task
            logger.warning(f"Error while closing MCP transport: {e}")
