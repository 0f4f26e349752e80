"""Pytest configuration and shared fixtures for mcp-relay tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and mocks for the
MCP connection and chat model client.
"""

import copy
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openai.types.chat import ChatCompletion

from mcp_relay import create_app
from mcp_relay.config import RelaySettings
from mcp_relay.mcp import ToolDescriptor


def build_completion(content=None, tool_calls=None, empty=False):
    """Build a ChatCompletion.

    Args:
        content: Assistant message text
        tool_calls: Optional list of (call_id, function_name, arguments_text)
        empty: Return a completion with no choices at all
    """
    message = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = [
            {
                "id": call_id,
                "type": "function",
                "function": {"name": name, "arguments": arguments},
            }
            for call_id, name, arguments in tool_calls
        ]

    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-4o-mini",
            "choices": []
            if empty
            else [
                {
                    "index": 0,
                    "finish_reason": "tool_calls" if tool_calls else "stop",
                    "message": message,
                    "logprobs": None,
                }
            ],
        }
    )


class RecordingModelClient:
    """Chat model stand-in that replays responses and snapshots each request."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    async def complete(self, messages, tools=None):
        self.calls.append((copy.deepcopy(messages), copy.deepcopy(tools)))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def completion_factory():
    """Return the ChatCompletion builder."""
    return build_completion


@pytest.fixture
def recording_model_client():
    """Return a factory for RecordingModelClient instances."""
    return RecordingModelClient


@pytest.fixture
def sample_tools():
    """Tools as returned by the MCP server."""
    return [
        ToolDescriptor(
            name="time__get_current_time",
            description="Get the current time in a timezone",
            input_schema={
                "type": "object",
                "properties": {"timezone": {"type": "string"}},
            },
        ),
        ToolDescriptor(
            name="Notion__notion-search",
            description="Search Notion pages",
            input_schema={
                "type": "object",
                "properties": {"query": {"type": "string"}},
                "required": ["query"],
            },
        ),
    ]


@pytest.fixture
def test_settings():
    """Create test settings that never reach a real server.

    Returns:
        RelaySettings: Settings instance configured for testing.
    """
    return RelaySettings(
        host="127.0.0.1",
        port=3001,
        openai_api_key="sk-test",
        openai_model="gpt-4o-mini",
        mcp_url="http://mcp.test/mcp",
        consumer_tag="test-relay",
        tools_ttl_seconds=60.0,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture(autouse=True)
def mock_mcp_connection(sample_tools):
    """Mock McpConnection for every app created in tests.

    The class is patched before the app is created, so the lifespan stores
    this mock in app.state instead of opening a real connection.
    """
    with patch("mcp_relay.app.McpConnection") as mock_class:
        mock_instance = AsyncMock()
        mock_instance.url = "http://mcp.test/mcp"
        mock_instance.is_connected = False
        mock_instance.list_tools.return_value = sample_tools
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture(autouse=True)
def mock_model_client():
    """Mock ChatModelClient for every app created in tests."""
    with patch("mcp_relay.app.ChatModelClient") as mock_class:
        mock_instance = AsyncMock()
        mock_instance.model = "gpt-4o-mini"
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
