from __future__ import annotations

from fastapi import Depends, Request

from botanical_friend.extensions.app_context import AppContext
from botanical_friend.modules.chatbot.services import ChatService
from botanical_friend.modules.identification.services import IdentificationService
from botanical_friend.modules.view.state import ViewStateMachine


def get_app_context(request: Request) -> AppContext:
    """The context is created once at startup, see main.startup_event."""
    return request.app.state.context  # type: ignore[no-any-return]


def get_view(context: AppContext = Depends(get_app_context)) -> ViewStateMachine:
    return context.view


def get_identification_service(
    context: AppContext = Depends(get_app_context),
) -> IdentificationService:
    return context.identification


def get_chat_service(context: AppContext = Depends(get_app_context)) -> ChatService:
    return context.chat
