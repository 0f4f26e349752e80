"""Async chat-completion client wrapper.

This module provides a thin wrapper around ``openai.AsyncOpenAI``. The
underlying SDK client is built on first use so that a missing API key only
fails the requests that need the model, not the server startup.
"""

import logging
from typing import Any

from openai import APIError, AsyncOpenAI
from openai.types.chat import ChatCompletion

from mcp_relay.errors import ModelRequestError

logger = logging.getLogger(__name__)


class ChatModelClient:
    """Async client for an OpenAI-compatible chat-completion API.

    Attributes:
        model: The model identifier sent with every request
        temperature: Sampling temperature sent with every request
        base_url: Optional override of the API base URL
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.2,
    ) -> None:
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self._api_key = api_key
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            # Falls back to OPENAI_API_KEY when no key was configured
            self._client = AsyncOpenAI(api_key=self._api_key, base_url=self.base_url)
            logger.info(f"ChatModelClient initialized for model: {self.model}")
        return self._client

    async def complete(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
    ) -> ChatCompletion:
        """Request a single, non-streamed chat completion.

        Args:
            messages: The transcript in chat-completion message format
            tools: Optional function declarations. When given, the model
                   decides on its own whether to call them.

        Returns:
            ChatCompletion: The raw completion response

        Raises:
            ModelRequestError: If the client cannot be built or the request
                               fails
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if tools:
            request_params["tools"] = tools
            request_params["tool_choice"] = "auto"

        logger.debug(
            f"Requesting completion: {len(messages)} messages, "
            f"tools={'yes' if tools else 'no'}"
        )
        try:
            completion = await self._get_client().chat.completions.create(
                **request_params
            )
        except APIError as e:
            message = e.message
            if isinstance(e.body, dict):
                message = e.body.get("message", message)
            logger.error(f"Chat model API error: {message}")
            raise ModelRequestError(message) from e
        except Exception as e:
            logger.error(f"Chat model request failed: {e}")
            raise ModelRequestError(str(e) or None) from e

        return completion

    async def close(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.debug("ChatModelClient closed")
