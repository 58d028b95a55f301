from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from botanical_friend.dependencies import get_chat_service
from botanical_friend.exceptions import ChatTurnInProgressError
from botanical_friend.modules.chatbot.schemas import ChatRequest, ChatTranscriptRead
from botanical_friend.modules.chatbot.services import ChatService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["chatbot"],
    responses={404: {"description": "Not found"}},
)


async def _to_ndjson(chat_service: ChatService, message: str) -> AsyncIterator[str]:
    async for chat_message in chat_service.send(message):
        yield chat_message.model_dump_json(by_alias=True) + "\n"


@router.get("/messages", response_model=ChatTranscriptRead)
async def get_messages(chat_service: ChatService = Depends(get_chat_service)) -> Any:
    return ChatTranscriptRead(
        messages=chat_service.transcript.messages, loading=chat_service.loading
    )


@router.post("/messages")
async def send_message(
    request: ChatRequest, chat_service: ChatService = Depends(get_chat_service)
) -> StreamingResponse:
    """Send a message to the gardening assistant. The response streams one json line per
    update: the user message, then the reply message (same id) with its text growing, and
    an error flagged message if the turn fails."""
    if chat_service.loading:
        raise ChatTurnInProgressError()
    return StreamingResponse(
        _to_ndjson(chat_service, request.message), media_type="application/x-ndjson"
    )
