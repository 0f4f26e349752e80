"""Pydantic models for the chat endpoint."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ConversationMessage(BaseModel):
    """A single chat message supplied by the caller.

    Unknown fields are kept and forwarded to the model unchanged.
    """

    role: Literal["system", "user", "assistant", "tool"] = Field(
        description="Message role"
    )
    content: str | None = Field(default=None, description="Message text")
    tool_calls: list[dict[str, Any]] | None = Field(
        default=None, description="Tool calls issued by an assistant message"
    )
    tool_call_id: str | None = Field(
        default=None, description="Tool call answered by a tool message"
    )
    name: str | None = Field(default=None, description="Optional author name")

    model_config = ConfigDict(extra="allow")


class ChatRequest(BaseModel):
    """Request body for POST /chat."""

    messages: list[ConversationMessage] = Field(
        default_factory=list,
        description="Conversation history, oldest first",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"messages": [{"role": "user", "content": "What time is it?"}]},
            ]
        }
    )


class ToolCallExecuted(BaseModel):
    """A tool invocation performed while answering."""

    call_id: str | None = Field(default=None, description="Model tool call id")
    name: str = Field(description="MCP tool name")
    ok: bool = Field(description="False when the tool call failed")
    payload: dict[str, Any] = Field(description="Tool result or error object")


class ChatResponse(BaseModel):
    """Response body for POST /chat."""

    reply: str = Field(description="Final natural-language answer")
    raw: dict[str, Any] = Field(description="Raw response of the last model round")
    tool_calls_executed: list[ToolCallExecuted] = Field(
        default_factory=list,
        description="Tools that were executed during this turn",
    )
