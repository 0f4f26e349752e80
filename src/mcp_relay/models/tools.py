"""Pydantic models for the tool listing and manual tool call endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolDetail(BaseModel):
    """A tool exposed by the MCP server."""

    name: str = Field(description="Exact MCP tool name")
    description: str = Field(default="", description="What the tool does")
    inputSchema: dict[str, Any] = Field(
        default_factory=dict, description="JSON schema of the tool arguments"
    )


class ToolListResponse(BaseModel):
    """Response body for GET /api/tools."""

    tools: list[ToolDetail] = Field(description="Tools available on the server")


class ToolCallRequest(BaseModel):
    """Request body for POST /api/call.

    ``name`` is optional at the schema level so that a missing name is
    reported as a 400 rather than a validation error. A null ``args`` is
    accepted and treated as an empty object.
    """

    name: str | None = Field(default=None, description="Exact MCP tool name")
    args: dict[str, Any] | None = Field(
        default=None, description="Arguments object for the tool"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"name": "time__get_current_time", "args": {"timezone": "UTC"}},
            ]
        }
    )


class ToolCallResponse(BaseModel):
    """Response body for POST /api/call."""

    result: dict[str, Any] = Field(description="The MCP CallToolResult")
