from __future__ import annotations

from typing import TYPE_CHECKING

from botanical_friend.modules.view.schemas import AppStateRead, ChatPanelRead, MainViewRead

if TYPE_CHECKING:
    from botanical_friend.modules.view.state import ViewStateMachine


def read_app_state(view: ViewStateMachine, chat_loading: bool) -> AppStateRead:
    main = view.main
    panel = view.chat_panel
    return AppStateRead(
        main=MainViewRead(
            status=main.status,
            image_preview=main.image_preview,
            plant_data=main.plant_data,
            error=main.error,
            url_text=main.url_text,
            url_input_visible=main.url_input_visible,
        ),
        chat_panel=ChatPanelRead(
            open=panel.open,
            minimized=panel.minimized,
            status=panel.status,
            loading=chat_loading,
        ),
    )
