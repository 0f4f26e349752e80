"""Chat API endpoint.

The model may call MCP tools automatically through the relay before it
answers.
"""

import logging

from fastapi import APIRouter, Depends

from mcp_relay.dependencies import get_relay_service
from mcp_relay.errors import ModelRequestError, RelayError
from mcp_relay.models.chat import ChatRequest, ChatResponse, ToolCallExecuted
from mcp_relay.services import RelayService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    relay: RelayService = Depends(get_relay_service),
) -> ChatResponse:
    """Run one chat turn over the supplied message history.

    Nothing is stored between requests; every call rebuilds the transcript
    from the messages in the body.

    Args:
        request_body: Chat request containing the conversation history
        relay: Injected relay service

    Returns:
        ChatResponse with the reply and the raw model response

    Raises:
        RelayError: 500 if the model or the MCP connection fails
    """
    messages = [
        message.model_dump(exclude_none=True) for message in request_body.messages
    ]

    try:
        outcome = await relay.converse(messages)
    except RelayError as e:
        logger.error(f"Chat failed: {e.message}")
        raise
    except Exception as e:
        logger.exception("Unexpected error during chat")
        raise ModelRequestError(str(e) or None) from e

    logger.info(
        f"Chat completed in {outcome.rounds} round(s), "
        f"{len(outcome.tool_results)} tool call(s)"
    )
    return ChatResponse(
        reply=outcome.reply,
        raw=outcome.raw,
        tool_calls_executed=[
            ToolCallExecuted(
                call_id=result.call_id,
                name=result.name,
                ok=result.ok,
                payload=result.payload,
            )
            for result in outcome.tool_results
        ],
    )
