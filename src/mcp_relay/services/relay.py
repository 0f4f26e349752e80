"""Tool-call relay between the chat model and the MCP server.

This module provides the RelayService which runs a single chat turn: it asks
the model for a response, executes any ``mcp_call`` requests through the
ToolInvoker, and asks the model once more for a final answer.

A turn runs through at most two model rounds::

    AWAITING_FIRST_RESPONSE --(no tool calls)--> DONE
    AWAITING_FIRST_RESPONSE --> EXECUTING_TOOLS --> AWAITING_FINAL_RESPONSE --> DONE

The final round declares no tools, so the model cannot ask for another tool
round.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from mcp_relay.config import DEFAULT_SYSTEM_PROMPT
from mcp_relay.errors import ArgumentParseError, ModelRequestError
from mcp_relay.llm import ChatModelClient
from mcp_relay.mcp import ToolCallResult
from mcp_relay.services.invoker import ToolInvoker

logger = logging.getLogger(__name__)

MCP_CALL_TOOL_NAME = "mcp_call"

# One generic function the model uses to reach any MCP tool
MCP_CALL_TOOL: dict[str, Any] = {
    "type": "function",
    "function": {
        "name": MCP_CALL_TOOL_NAME,
        "description": (
            "Call an MCP tool by name with JSON args "
            "(e.g., Notion__notion-search, time__get_current_time)."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Exact MCP tool name"},
                "args": {
                    "type": "object",
                    "description": "Arguments object for that tool",
                },
            },
            "required": ["name"],
        },
    },
}


class RelayPhase(str, Enum):
    """States of a single relay turn."""

    AWAITING_FIRST_RESPONSE = "awaiting_first_response"
    EXECUTING_TOOLS = "executing_tools"
    AWAITING_FINAL_RESPONSE = "awaiting_final_response"
    DONE = "done"


@dataclass
class RelayOutcome:
    """Result of a relay turn.

    Attributes:
        reply: Text content of the last model response ("" if absent)
        raw: The last model response, dumped to JSON-ready data
        transcript: The working transcript including tool results
        tool_results: Tool invocations performed during the turn, in order
        rounds: Number of model rounds issued (1 or 2)
    """

    reply: str
    raw: dict[str, Any]
    transcript: list[dict[str, Any]]
    tool_results: list[ToolCallResult] = field(default_factory=list)
    rounds: int = 1


def parse_tool_arguments(raw: str | None) -> dict[str, Any]:
    """Parse the raw JSON arguments of a model tool call.

    Args:
        raw: Arguments text as emitted by the model

    Returns:
        dict: The parsed arguments object ({} for empty input)

    Raises:
        ArgumentParseError: If the text is not valid JSON or not an object
    """
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ArgumentParseError(f"Invalid tool arguments: {e}") from e
    if not isinstance(parsed, dict):
        raise ArgumentParseError()
    return parsed


def assistant_message_to_dict(message: Any) -> dict[str, Any]:
    """Convert a model response message to chat-completion message format.

    Tool calls are kept so the following tool messages can be correlated.
    """
    entry: dict[str, Any] = {
        "role": "assistant",
        "content": message.content,
    }

    tool_calls = getattr(message, "tool_calls", None)
    if tool_calls:
        entry["tool_calls"] = [
            call.model_dump(mode="json", exclude_none=True) for call in tool_calls
        ]

    return entry


class RelayService:
    """Runs chat turns that may delegate work to MCP tools.

    Attributes:
        model_client: The chat-completion client
        invoker: The tool invoker
        system_prompt: Preamble placed before the caller's messages
    """

    def __init__(
        self,
        model_client: ChatModelClient,
        invoker: ToolInvoker,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self.model_client = model_client
        self.invoker = invoker
        self.system_prompt = system_prompt

    def build_transcript(
        self, messages: Sequence[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        return [{"role": "system", "content": self.system_prompt}, *messages]

    async def converse(self, messages: Sequence[dict[str, Any]]) -> RelayOutcome:
        """Run one chat turn.

        Args:
            messages: Caller-supplied conversation in chat-completion format

        Returns:
            RelayOutcome: The reply and diagnostics for the turn

        Raises:
            ModelRequestError: If either model round fails
            McpConnectionError: If the MCP connection cannot be established
        """
        transcript = self.build_transcript(messages)
        phase = RelayPhase.AWAITING_FIRST_RESPONSE
        logger.debug(f"Relay {phase.value}: {len(transcript)} messages")

        first = await self.model_client.complete(transcript, tools=[MCP_CALL_TOOL])
        if not first.choices:
            raise ModelRequestError("Chat model returned no choices")
        message = first.choices[0].message
        transcript.append(assistant_message_to_dict(message))

        tool_calls = message.tool_calls or []
        if not tool_calls:
            phase = RelayPhase.DONE
            logger.debug(f"Relay turn {phase.value} after 1 round")
            return RelayOutcome(
                reply=message.content or "",
                raw=first.model_dump(mode="json"),
                transcript=transcript,
            )

        phase = RelayPhase.EXECUTING_TOOLS
        logger.info(f"Relay {phase.value}: model requested {len(tool_calls)} tool call(s)")
        tool_results = await self._execute_tool_calls(tool_calls, transcript)

        phase = RelayPhase.AWAITING_FINAL_RESPONSE
        logger.debug(f"Relay {phase.value}")
        final = await self.model_client.complete(transcript)
        reply = ""
        if final.choices:
            reply = final.choices[0].message.content or ""

        phase = RelayPhase.DONE
        logger.debug(f"Relay turn {phase.value} after 2 rounds")
        return RelayOutcome(
            reply=reply,
            raw=final.model_dump(mode="json"),
            transcript=transcript,
            tool_results=tool_results,
            rounds=2,
        )

    async def _execute_tool_calls(
        self,
        tool_calls: Sequence[Any],
        transcript: list[dict[str, Any]],
    ) -> list[ToolCallResult]:
        """Invoke each ``mcp_call`` request in order and record its result."""
        results: list[ToolCallResult] = []

        for call in tool_calls:
            function = getattr(call, "function", None)
            if function is None or function.name != MCP_CALL_TOOL_NAME:
                # TODO: report unsupported tool calls back to the model
                logger.warning(f"Skipping unsupported tool call: {call.id}")
                continue

            try:
                parsed = parse_tool_arguments(function.arguments)
            except ArgumentParseError as e:
                logger.warning(f"Tool call {call.id}: {e.message}; using empty arguments")
                parsed = {}

            # The server rejects a missing or unknown name
            name = parsed.get("name")
            if not isinstance(name, str):
                name = ""
            args = parsed.get("args")
            if not isinstance(args, dict):
                args = {}

            result = await self.invoker.invoke(name, args, call_id=call.id)
            results.append(result)
            transcript.append(
                {
                    "role": "tool",
                    "tool_call_id": call.id,
                    "content": json.dumps(result.payload),
                }
            )

        return results
