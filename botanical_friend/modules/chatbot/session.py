from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from google.genai import errors as genai_errors
from google.genai import types

from botanical_friend import settings
from botanical_friend.constants import CHAT_SYSTEM_INSTRUCTION
from botanical_friend.exceptions import ChatTurnError, ChatTurnInProgressError, ConfigurationError
from botanical_friend.extensions.ai import PROVIDER_TRANSPORT_ERRORS, is_credential_error
from botanical_friend.shared.enums import ChatTurnState

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from google import genai
    from google.genai.chats import AsyncChat

logger = logging.getLogger(__name__)


class ChatSessionManager:
    """Owns the one conversational session of the application. The provider keeps the
    turn history; it is only ever touched through send_turn."""

    def __init__(self, client: genai.Client | None, model_name: str | None = None):
        self._client = client
        self.model_name = model_name or settings.ai.model_name
        self._session: AsyncChat | None = None
        self.turn_state = ChatTurnState.IDLE

    def create_session(self) -> AsyncChat | None:
        """Create the session on first call and return the same one afterwards."""
        if self._session is None and self._client is not None:
            logger.info(f"Creating chat session with {self.model_name}.")
            self._session = self._client.aio.chats.create(
                model=self.model_name,
                config=types.GenerateContentConfig(system_instruction=CHAT_SYSTEM_INSTRUCTION),
            )
        return self._session

    @property
    def busy(self) -> bool:
        return self.turn_state != ChatTurnState.IDLE

    async def send_turn(self, user_text: str) -> AsyncIterator[str]:
        """Send a user message and yield the model's reply as text fragments in arrival
        order. Only one turn may be outstanding at a time."""
        if self.busy:
            raise ChatTurnInProgressError()
        if self._session is None:
            raise ConfigurationError("No chat session available")

        self.turn_state = ChatTurnState.SENDING
        try:
            stream = await self._session.send_message_stream(message=user_text)
            self.turn_state = ChatTurnState.STREAMING
            try:
                async for chunk in stream:
                    if chunk.text:
                        yield chunk.text
            finally:
                # release the provider response also when the caller stops early
                aclose = getattr(stream, "aclose", None)
                if aclose is not None:
                    await aclose()
        except genai_errors.APIError as exc:
            if is_credential_error(exc):
                raise ConfigurationError(f"Gemini API rejected credentials: {exc}") from exc
            raise ChatTurnError(f"{exc.code} {exc.status}: {exc.message}") from exc
        except PROVIDER_TRANSPORT_ERRORS as exc:
            raise ChatTurnError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            self.turn_state = ChatTurnState.IDLE
