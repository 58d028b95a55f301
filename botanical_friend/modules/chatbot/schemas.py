from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict, Field

from botanical_friend.shared.base_schema import BaseSchema, RequestContainer
from botanical_friend.shared.enums import ChatRole


class ChatMessage(BaseSchema):
    id: str  # noqa: A003
    role: ChatRole
    text: str
    timestamp: datetime
    is_error: bool = False

    # streamed fragments may start or end with whitespace
    model_config = BaseSchema.model_config | ConfigDict(str_strip_whitespace=False)


class ChatRequest(RequestContainer):
    message: Annotated[str, Field(min_length=1, max_length=10_000)]


class ChatTranscriptRead(BaseSchema):
    messages: list[ChatMessage]
    loading: bool
