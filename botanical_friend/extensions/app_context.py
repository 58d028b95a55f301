from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from botanical_friend.modules.chatbot.services import ChatService
from botanical_friend.modules.chatbot.session import ChatSessionManager
from botanical_friend.modules.chatbot.transcript import ChatTranscript
from botanical_friend.modules.identification.acquisition import ImageAcquisition
from botanical_friend.modules.identification.extraction import PlantIdentifier
from botanical_friend.modules.identification.services import IdentificationService
from botanical_friend.modules.view.state import ViewStateMachine

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Single owner of everything that lives as long as the application: view state,
    chat session and transcript."""

    view: ViewStateMachine
    identification: IdentificationService
    chat: ChatService


def create_app_context(
    client: genai.Client | None, acquisition: ImageAcquisition | None = None
) -> AppContext:
    view = ViewStateMachine()
    session_manager = ChatSessionManager(client=client)
    # the chat session exists from startup on, whether or not the chat panel is ever opened
    if session_manager.create_session() is None:
        logger.error("No chat session created; chat turns will fail.")
    return AppContext(
        view=view,
        identification=IdentificationService(
            view=view,
            acquisition=acquisition or ImageAcquisition(),
            identifier=PlantIdentifier(client=client),
        ),
        chat=ChatService(session_manager=session_manager, transcript=ChatTranscript()),
    )
