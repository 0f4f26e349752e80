"""Time-boxed cache of the tools exposed by the MCP server."""

import logging
import time
from typing import Callable

from mcp_relay.errors import ToolDirectoryError
from mcp_relay.mcp.client import McpConnection
from mcp_relay.mcp.types import ToolDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


class ToolDirectory:
    """Memoizes the remote tool list for a bounded freshness window.

    The cached tuple is replaced wholesale on each refresh and never merged.
    An empty tool list is a valid cached value.

    Attributes:
        connection: The MCP connection used to fetch tools
        ttl_seconds: Maximum age of the cached list before it is refetched
    """

    def __init__(
        self,
        connection: McpConnection,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.connection = connection
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._tools: tuple[ToolDescriptor, ...] | None = None
        self._last_fetch = 0.0

    @property
    def cached(self) -> tuple[ToolDescriptor, ...] | None:
        return self._tools

    def is_stale(self) -> bool:
        if self._tools is None:
            return True
        return self._clock() - self._last_fetch > self.ttl_seconds

    def invalidate(self) -> None:
        """Drop the cached list so the next call refetches."""
        self._tools = None

    async def ensure_fresh(self) -> tuple[ToolDescriptor, ...]:
        """Return the tool list, refreshing it first if it has expired.

        Returns:
            tuple[ToolDescriptor, ...]: The current tool list

        Raises:
            ToolDirectoryError: If the refresh fails. The previous cache is kept.
        """
        if self.is_stale():
            now = self._clock()
            try:
                tools = tuple(await self.connection.list_tools())
            except Exception as e:
                logger.error(f"Failed to refresh tool list: {e}")
                raise ToolDirectoryError(str(e) or None) from e

            self._tools, self._last_fetch = tools, now
            logger.info(f"Tools: {[tool.name for tool in tools]}")

        return self._tools
