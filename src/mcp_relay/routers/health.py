"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from mcp_relay import __version__
from mcp_relay.models.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Reports the configured model and whether the MCP session has been
    established. This never opens a connection itself.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    settings = request.app.state.settings
    mcp_url = None
    mcp_connected = None

    if hasattr(request.app.state, "mcp_connection"):
        connection = request.app.state.mcp_connection
        mcp_url = connection.url
        mcp_connected = bool(connection.is_connected)
        logger.debug(f"MCP connection state: {mcp_connected}")

    return HealthResponse(
        status="ok",
        version=__version__,
        model=settings.openai_model,
        mcp_url=mcp_url,
        mcp_connected=mcp_connected,
        api_key_configured=settings.api_key_configured,
    )
