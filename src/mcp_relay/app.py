"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown,
the JSON error envelope and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mcp_relay import __version__
from mcp_relay.config import RelaySettings
from mcp_relay.errors import RelayError, ToolDirectoryError
from mcp_relay.llm import ChatModelClient
from mcp_relay.mcp import McpConnection, ToolDirectory
from mcp_relay.routers import chat, gui, health, tools

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The MCP connection, the tool directory and the chat model client are
    created once at startup and stored in app.state for reuse across all
    requests. Neither a missing API key nor an unreachable tool server
    prevents startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: RelaySettings = app.state.settings

    if not settings.api_key_configured:
        logger.warning("Missing OPENAI_API_KEY; chat requests will fail")

    app.state.model_client = ChatModelClient(
        model=settings.openai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        temperature=settings.temperature,
    )
    app.state.mcp_connection = McpConnection(
        url=settings.mcp_url,
        consumer_tag=settings.consumer_tag,
        version=__version__,
    )
    app.state.tool_directory = ToolDirectory(
        app.state.mcp_connection,
        ttl_seconds=settings.tools_ttl_seconds,
    )
    logger.info(f"Initialized relay for model {settings.openai_model} and MCP {settings.mcp_url}")

    # Warm the tool cache
    try:
        await app.state.tool_directory.ensure_fresh()
    except ToolDirectoryError as e:
        logger.warning(f"Could not load tools at startup: {e.message}")

    yield

    # Shutdown: Clean up resources
    if hasattr(app.state, "mcp_connection"):
        await app.state.mcp_connection.close()
        logger.info("MCP connection closed")
    if hasattr(app.state, "model_client"):
        await app.state.model_client.close()
        logger.info("Chat model client closed")


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render any RelayError as a JSON error envelope."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404, 405, 503) in the same envelope."""
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as a 422 error envelope.

    Only the first problem is reported, prefixed with its location in the
    request (e.g. ``body.messages.0.role``).
    """
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", message)
        if location:
            message = f"{location}: {message}"
    return JSONResponse(status_code=422, content={"error": message})


def create_app(settings: RelaySettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional RelaySettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from mcp_relay.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="mcp-relay",
        description="Chat backend relaying model tool calls to an MCP server",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RelayError, relay_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]

    app.include_router(gui.router)
    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(chat.router)

    return app
