"""CLI entry point for mcp-relay.

This module provides the command-line interface for starting the server.
It can be invoked as `mcp-relay` (via the script entry point) or
`python -m mcp_relay`.
"""

import argparse
import logging
import sys

import uvicorn

from mcp_relay import __version__, create_app
from mcp_relay.config import RelaySettings


def main() -> None:
    """Main entry point for the mcp-relay CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="mcp-relay",
        description="Chat backend relaying model tool calls to an MCP server",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"mcp-relay {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via RELAY_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 3001, can be set via PORT or RELAY_PORT)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Chat model to use (default: gpt-4o-mini, can be set via OPENAI_MODEL)",
    )

    parser.add_argument(
        "--mcp-url",
        type=str,
        default=None,
        help="MCP endpoint URL (default: http://localhost:9000/mcp, can be set via RELAY_MCP_URL)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via RELAY_LOG_LEVEL)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.model is not None:
        settings_kwargs["openai_model"] = args.model
    if args.mcp_url is not None:
        settings_kwargs["mcp_url"] = args.mcp_url
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    settings = RelaySettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
