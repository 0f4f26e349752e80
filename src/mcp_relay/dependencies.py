"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject the shared clients and services.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from mcp_relay.config import RelaySettings
from mcp_relay.llm import ChatModelClient
from mcp_relay.mcp import McpConnection, ToolDirectory
from mcp_relay.services import RelayService, ToolInvoker


@lru_cache
def get_settings() -> RelaySettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the RELAY_ prefix.

    Returns:
        RelaySettings: The application configuration settings.
    """
    return RelaySettings()


def _app_state_attr(request: Request, name: str, label: str):
    if not hasattr(request.app.state, name):
        raise HTTPException(status_code=503, detail=f"{label} not initialized")
    return getattr(request.app.state, name)


def get_mcp_connection(request: Request) -> McpConnection:
    """Get the MCP connection from app state.

    Raises:
        HTTPException: If the connection is not initialized (503 Service Unavailable).
    """
    return _app_state_attr(request, "mcp_connection", "MCP connection")


def get_tool_directory(request: Request) -> ToolDirectory:
    """Get the shared tool directory cache from app state.

    Raises:
        HTTPException: If the directory is not initialized (503 Service Unavailable).
    """
    return _app_state_attr(request, "tool_directory", "Tool directory")


def get_model_client(request: Request) -> ChatModelClient:
    """Get the chat model client from app state.

    Raises:
        HTTPException: If the client is not initialized (503 Service Unavailable).
    """
    return _app_state_attr(request, "model_client", "Chat model client")


def get_relay_service(request: Request) -> RelayService:
    """Get a RelayService instance wired to the shared clients.

    Creates a new RelayService for each request, using the system prompt
    from settings and the clients from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        RelayService: A new RelayService instance.
    """
    # Use settings from app.state so tests can use their own settings
    settings = request.app.state.settings
    return RelayService(
        model_client=get_model_client(request),
        invoker=ToolInvoker(get_mcp_connection(request)),
        system_prompt=settings.system_prompt,
    )
