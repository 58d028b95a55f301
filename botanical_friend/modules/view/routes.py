from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from botanical_friend.dependencies import get_chat_service, get_view
from botanical_friend.modules.chatbot.services import ChatService
from botanical_friend.modules.view.schemas import AppStateRead, ChatPanelUpdate
from botanical_friend.modules.view.services import read_app_state
from botanical_friend.modules.view.state import ViewStateMachine

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["view"],
    responses={404: {"description": "Not found"}},
)


@router.get("/state", response_model=AppStateRead)
async def get_state(
    view: ViewStateMachine = Depends(get_view),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    return read_app_state(view, chat_loading=chat_service.loading)


@router.put("/chat/panel", response_model=AppStateRead)
async def update_chat_panel(
    update: ChatPanelUpdate,
    view: ViewStateMachine = Depends(get_view),
    chat_service: ChatService = Depends(get_chat_service),
) -> Any:
    """Open, close, minimize or expand the chat panel; never touches the main view."""
    status = view.apply_chat_panel_action(update.action)
    logger.info(f"Chat panel {update.action.value}: {status.value}")
    return read_app_state(view, chat_loading=chat_service.loading)
