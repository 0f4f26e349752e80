"""Chat-completion client wrapper.

This package provides the async client used to talk to an OpenAI-compatible
chat-completion API.
"""

from mcp_relay.llm.client import ChatModelClient

__all__ = ["ChatModelClient"]
