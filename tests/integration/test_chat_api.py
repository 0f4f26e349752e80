"""Integration tests for the chat API endpoint.

Tests POST /chat with a full app setup. The chat model and the MCP
connection are mocked at the app level by the shared conftest fixtures.
"""

import json

import pytest
from httpx import AsyncClient

from mcp_relay.errors import (
    McpConnectionError,
    ModelRequestError,
    ToolInvocationError,
)
from mcp_relay.services.relay import MCP_CALL_TOOL


class TestChat:
    """Tests for POST /chat."""

    @pytest.mark.asyncio
    async def test_direct_answer(
        self, async_client: AsyncClient, mock_model_client, completion_factory
    ):
        """Test a turn where the model answers without tools."""
        mock_model_client.complete.side_effect = [
            completion_factory(content="Hello! How can I help?")
        ]

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "Hello! How can I help?"
        assert data["raw"]["choices"][0]["message"]["content"] == data["reply"]
        assert data["tool_calls_executed"] == []
        assert mock_model_client.complete.await_count == 1

        messages = mock_model_client.complete.await_args.args[0]
        assert messages[0]["role"] == "system"
        assert messages[1] == {"role": "user", "content": "Hi"}
        assert mock_model_client.complete.await_args.kwargs == {
            "tools": [MCP_CALL_TOOL]
        }

    @pytest.mark.asyncio
    async def test_time_question_uses_tool(
        self,
        async_client: AsyncClient,
        mock_model_client,
        mock_mcp_connection,
        completion_factory,
    ):
        """Test the full relay: tool call, tool result, final sentence."""
        tool_payload = {
            "content": [{"type": "text", "text": "2025-01-15T10:35:00+00:00"}],
            "isError": False,
        }
        mock_mcp_connection.call_tool.return_value = tool_payload
        mock_model_client.complete.side_effect = [
            completion_factory(
                tool_calls=[
                    (
                        "call_time",
                        "mcp_call",
                        json.dumps({"name": "time__get_current_time", "args": {}}),
                    )
                ]
            ),
            completion_factory(
                content="It is currently 10:35 UTC on January 15, 2025."
            ),
        ]

        response = await async_client.post(
            "/chat",
            json={"messages": [{"role": "user", "content": "What time is it?"}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert "10:35" in data["reply"]
        assert data["tool_calls_executed"] == [
            {
                "call_id": "call_time",
                "name": "time__get_current_time",
                "ok": True,
                "payload": tool_payload,
            }
        ]
        mock_mcp_connection.call_tool.assert_awaited_once_with(
            "time__get_current_time", {}
        )

        # The second round sees the tool result and declares no tools
        final_call = mock_model_client.complete.await_args_list[1]
        assert final_call.kwargs == {}
        transcript = final_call.args[0]
        assert [m["role"] for m in transcript] == [
            "system",
            "user",
            "assistant",
            "tool",
        ]
        assert transcript[-1]["tool_call_id"] == "call_time"
        assert json.loads(transcript[-1]["content"]) == tool_payload

    @pytest.mark.asyncio
    async def test_history_is_forwarded_in_order(
        self, async_client: AsyncClient, mock_model_client, completion_factory
    ):
        """Test that the caller's history follows the system preamble."""
        mock_model_client.complete.side_effect = [completion_factory(content="4")]
        history = [
            {"role": "user", "content": "What is 1+1?"},
            {"role": "assistant", "content": "2"},
            {"role": "user", "content": "And 2+2?"},
        ]

        response = await async_client.post("/chat", json={"messages": history})

        assert response.status_code == 200
        messages = mock_model_client.complete.await_args.args[0]
        assert messages[1:4] == history

    @pytest.mark.asyncio
    async def test_empty_body_uses_empty_history(
        self, async_client: AsyncClient, mock_model_client, completion_factory
    ):
        mock_model_client.complete.side_effect = [completion_factory(content="Hi")]

        response = await async_client.post("/chat", json={})

        assert response.status_code == 200
        messages = mock_model_client.complete.await_args.args[0]
        assert [m["role"] for m in messages] == ["system", "assistant"]

    @pytest.mark.asyncio
    async def test_failing_tool_still_answers(
        self,
        async_client: AsyncClient,
        mock_model_client,
        mock_mcp_connection,
        completion_factory,
    ):
        """Test that a tool failure is reported to the model, not the caller."""
        mock_mcp_connection.call_tool.side_effect = ToolInvocationError("not found")
        mock_model_client.complete.side_effect = [
            completion_factory(
                tool_calls=[
                    ("call_1", "mcp_call", json.dumps({"name": "nope__tool"}))
                ]
            ),
            completion_factory(content="Sorry, that tool is not available."),
        ]

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "use nope"}]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "Sorry, that tool is not available."
        assert data["tool_calls_executed"][0]["ok"] is False
        assert data["tool_calls_executed"][0]["payload"] == {"error": "not found"}

    @pytest.mark.asyncio
    async def test_model_failure_returns_error_envelope(
        self, async_client: AsyncClient, mock_model_client
    ):
        """Test that model failures surface as a 500 with an error message."""
        mock_model_client.complete.side_effect = ModelRequestError("rate limited")

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "rate limited"}

    @pytest.mark.asyncio
    async def test_connection_failure_returns_error_envelope(
        self,
        async_client: AsyncClient,
        mock_model_client,
        mock_mcp_connection,
        completion_factory,
    ):
        mock_mcp_connection.connect.side_effect = McpConnectionError("unreachable")
        mock_model_client.complete.side_effect = [
            completion_factory(
                tool_calls=[("call_1", "mcp_call", json.dumps({"name": "t"}))]
            ),
        ]

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "unreachable"}

    @pytest.mark.asyncio
    async def test_unexpected_failure_returns_error_envelope(
        self, async_client: AsyncClient, mock_model_client
    ):
        mock_model_client.complete.side_effect = RuntimeError("kaboom")

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "kaboom"}

    @pytest.mark.asyncio
    async def test_invalid_role_is_rejected(self, async_client: AsyncClient):
        response = await async_client.post(
            "/chat", json={"messages": [{"role": "robot", "content": "beep"}]}
        )

        assert response.status_code == 422
        data = response.json()
        assert list(data) == ["error"]
        assert data["error"].startswith("body.messages.0.role")

    @pytest.mark.asyncio
    async def test_malformed_json_returns_error_envelope(
        self, async_client: AsyncClient, mock_model_client
    ):
        response = await async_client.post(
            "/chat",
            content=b"not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 422
        assert list(response.json()) == ["error"]
        mock_model_client.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_final_round_returns_empty_reply(
        self,
        async_client: AsyncClient,
        mock_model_client,
        mock_mcp_connection,
        completion_factory,
    ):
        """Test that a final round without choices still answers with 200."""
        mock_mcp_connection.call_tool.return_value = {"content": []}
        mock_model_client.complete.side_effect = [
            completion_factory(
                tool_calls=[("call_1", "mcp_call", json.dumps({"name": "t"}))]
            ),
            completion_factory(empty=True),
        ]

        response = await async_client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == ""
        assert data["raw"]["choices"] == []
        assert len(data["tool_calls_executed"]) == 1
