from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from botanical_friend.constants import CHAT_WELCOME_MESSAGE, CHAT_WELCOME_MESSAGE_ID
from botanical_friend.modules.chatbot.schemas import ChatMessage
from botanical_friend.shared.enums import ChatRole


def new_message(role: ChatRole, text: str, is_error: bool = False) -> ChatMessage:
    return ChatMessage(
        id=uuid.uuid4().hex,
        role=role,
        text=text,
        timestamp=datetime.now(timezone.utc),
        is_error=is_error,
    )


def welcome_message() -> ChatMessage:
    return ChatMessage(
        id=CHAT_WELCOME_MESSAGE_ID,
        role=ChatRole.MODEL,
        text=CHAT_WELCOME_MESSAGE,
        timestamp=datetime.now(timezone.utc),
    )


def append_delta(
    messages: Sequence[ChatMessage], message_id: str, delta: str
) -> list[ChatMessage]:
    """Reducer for one streamed fragment: returns a new message list in which the message
    with message_id has the fragment appended; ids and order stay unchanged."""
    return [
        message.model_copy(update={"text": message.text + delta})
        if message.id == message_id
        else message
        for message in messages
    ]


class ChatTranscript:
    """Append-only log of the rendered chat messages."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = [welcome_message()]

    def append(self, message: ChatMessage) -> ChatMessage:
        self.messages.append(message)
        return message

    def apply_delta(self, message_id: str, delta: str) -> ChatMessage:
        self.messages = append_delta(self.messages, message_id, delta)
        return self.get(message_id)

    def get(self, message_id: str) -> ChatMessage:
        return next(m for m in self.messages if m.id == message_id)

    def discard(self, message_id: str) -> None:
        """Drop a message that was never filled, i.e. an unused streaming placeholder."""
        self.messages = [m for m in self.messages if m.id != message_id]
