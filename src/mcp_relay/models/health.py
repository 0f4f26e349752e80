"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of mcp-relay.
        model: The configured chat model.
        mcp_url: The MCP endpoint URL, if the connection is initialized.
        mcp_connected: Whether the MCP session has been established.
        api_key_configured: Whether a chat model API key is set.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of mcp-relay")
    model: str = Field(..., description="Configured chat model")
    mcp_url: str | None = Field(default=None, description="MCP endpoint URL")
    mcp_connected: bool | None = Field(
        default=None,
        description="Whether the MCP session is established",
    )
    api_key_configured: bool = Field(
        default=False,
        description="Whether a chat model API key is set",
    )
