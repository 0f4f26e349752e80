"""Exception hierarchy for mcp-relay.

Every exception carries the HTTP status code it maps to. The app factory
registers a single handler that renders any RelayError as ``{"error": message}``.
"""


class RelayError(Exception):
    """Base class for all mcp-relay errors."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(RelayError):
    """The request body is missing a required field."""

    status_code = 400
    default_message = "Bad request"


class McpConnectionError(RelayError):
    """The tool server is unreachable or the MCP handshake failed."""

    default_message = "Failed to connect to tool server"


class ToolDirectoryError(RelayError):
    """The tool list could not be fetched."""

    default_message = "Failed to list tools"


class ToolInvocationError(RelayError):
    """A remote tool call failed."""

    default_message = "Tool call failed"


class ArgumentParseError(RelayError):
    """Tool-call arguments emitted by the model are not a JSON object."""

    status_code = 400
    default_message = "Tool arguments must be a JSON object"


class ModelRequestError(RelayError):
    """The chat-completion request failed."""

    default_message = "Chat failed"
