"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from mcp_relay.models.chat import (
    ChatRequest,
    ChatResponse,
    ConversationMessage,
    ToolCallExecuted,
)
from mcp_relay.models.health import HealthResponse
from mcp_relay.models.tools import (
    ToolCallRequest,
    ToolCallResponse,
    ToolDetail,
    ToolListResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ConversationMessage",
    "HealthResponse",
    "ToolCallExecuted",
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolDetail",
    "ToolListResponse",
]
