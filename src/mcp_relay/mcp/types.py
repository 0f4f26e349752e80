"""Type definitions for MCP integration.

This module contains dataclasses used for representing remote tools and the
normalized outcome of calling them.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolDescriptor:
    """Description of a tool exposed by the MCP server.

    Attributes:
        name: Unique tool name (e.g., "time__get_current_time")
        description: Human-readable description of what the tool does
        input_schema: JSON schema describing the tool's arguments
    """

    name: str
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_mcp_tool(tool: Any) -> "ToolDescriptor":
        """Create a ToolDescriptor from an MCP ``Tool`` object or dict.

        Args:
            tool: Tool entry from an MCP ``tools/list`` response

        Returns:
            ToolDescriptor: Parsed tool description
        """

        # Helper to get value from either object attribute or dict key
        def get_value(obj: Any, key: str, default: Any = None) -> Any:
            if isinstance(obj, dict):
                return obj.get(key, default)
            return getattr(obj, key, default)

        return ToolDescriptor(
            name=get_value(tool, "name", ""),
            description=get_value(tool, "description") or "",
            input_schema=dict(get_value(tool, "inputSchema") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the MCP wire shape used by the tools listing route."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolCallResult:
    """Outcome of a single tool invocation.

    Failures are normalized into ``payload = {"error": message}`` so that
    callers never have to handle exceptions from the invocation itself.

    Attributes:
        name: The tool that was called
        payload: The tool's JSON result, or an error object
        ok: False when the payload is an error object
        call_id: Identifier of the model tool call this answers, if any
    """

    name: str
    payload: dict[str, Any]
    ok: bool = True
    call_id: str | None = None

    @classmethod
    def failure(
        cls, name: str, message: str, call_id: str | None = None
    ) -> "ToolCallResult":
        return cls(name=name, payload={"error": message}, ok=False, call_id=call_id)
