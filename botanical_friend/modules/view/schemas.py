from __future__ import annotations

from botanical_friend.modules.identification.schemas import PlantData
from botanical_friend.shared.base_schema import BaseSchema, RequestContainer
from botanical_friend.shared.enums import ChatPanelAction, ChatPanelStatus, ViewStatus


class MainViewRead(BaseSchema):
    status: ViewStatus
    image_preview: str | None = None
    plant_data: PlantData | None = None
    error: str | None = None
    url_text: str
    url_input_visible: bool


class ChatPanelRead(BaseSchema):
    open: bool  # noqa: A003
    minimized: bool
    status: ChatPanelStatus
    loading: bool


class AppStateRead(BaseSchema):
    main: MainViewRead
    chat_panel: ChatPanelRead


class ChatPanelUpdate(RequestContainer):
    action: ChatPanelAction
