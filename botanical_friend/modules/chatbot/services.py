from __future__ import annotations

import logging
from contextlib import aclosing
from typing import TYPE_CHECKING

from botanical_friend.constants import MSG_CHAT_FAILED
from botanical_friend.exceptions import ChatTurnError, ChatTurnInProgressError, ConfigurationError
from botanical_friend.modules.chatbot.transcript import ChatTranscript, new_message
from botanical_friend.shared.enums import ChatRole

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from botanical_friend.modules.chatbot.schemas import ChatMessage
    from botanical_friend.modules.chatbot.session import ChatSessionManager

logger = logging.getLogger(__name__)


class ChatService:
    """Runs chat turns against the session and folds the streamed reply into the
    transcript."""

    def __init__(self, session_manager: ChatSessionManager, transcript: ChatTranscript):
        self.session_manager = session_manager
        self.transcript = transcript
        self._active_turn_id: str | None = None

    @property
    def loading(self) -> bool:
        return self._active_turn_id is not None

    def _fail_turn(self, reply: ChatMessage, user_message: str) -> ChatMessage:
        """Replace an unused placeholder by an error flagged message; partial text stays."""
        if not self.transcript.get(reply.id).text:
            self.transcript.discard(reply.id)
        return self.transcript.append(new_message(ChatRole.MODEL, user_message, is_error=True))

    async def send(self, user_text: str) -> AsyncIterator[ChatMessage]:
        """Yield every state of the messages created by this turn: the user message, the
        model's reply growing fragment by fragment, and an error message if the turn
        fails. Sends while another turn is in flight are ignored."""
        text = user_text.strip()
        if not text:
            return
        if self.loading:
            logger.warning("Ignoring chat message while a turn is in flight.")
            return

        user_message = new_message(ChatRole.USER, text)
        self._active_turn_id = user_message.id
        try:
            yield self.transcript.append(user_message)

            reply = self.transcript.append(new_message(ChatRole.MODEL, ""))
            yield reply

            try:
                async with aclosing(self.session_manager.send_turn(text)) as deltas:
                    async for delta in deltas:
                        reply = self.transcript.apply_delta(reply.id, delta)
                        yield reply
            except (ChatTurnError, ChatTurnInProgressError, ConfigurationError) as exc:
                logger.error(f"Chat turn failed: {exc.detail}")
                yield self._fail_turn(reply, exc.user_message)
            except Exception:
                logger.exception("Unexpected error during chat turn.")
                yield self._fail_turn(reply, MSG_CHAT_FAILED)
            else:
                logger.info(f"Chat turn completed with {len(reply.text)} characters.")
        finally:
            self._active_turn_id = None
