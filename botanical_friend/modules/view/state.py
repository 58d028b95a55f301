from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from botanical_friend.exceptions import AnalysisInProgressError
from botanical_friend.shared.enums import ChatPanelAction, ChatPanelStatus, ViewStatus

if TYPE_CHECKING:
    from botanical_friend.modules.identification.schemas import PlantData

logger = logging.getLogger(__name__)


@dataclass
class MainView:
    status: ViewStatus = ViewStatus.NO_IMAGE
    image_preview: str | None = None
    plant_data: PlantData | None = None
    error: str | None = None
    url_text: str = ""
    url_input_visible: bool = False


@dataclass
class ChatPanel:
    open: bool = False  # noqa: A003
    minimized: bool = False  # only meaningful while open

    @property
    def status(self) -> ChatPanelStatus:
        if not self.open:
            return ChatPanelStatus.CLOSED
        return ChatPanelStatus.MINIMIZED if self.minimized else ChatPanelStatus.EXPANDED


@dataclass
class ViewStateMachine:
    """Application view state: the identification flow and the independent chat panel.

    NoImage --(image acquired)--> Analyzing --> HasResult | HasError --(reset)--> NoImage
    """

    main: MainView = field(default_factory=MainView)
    chat_panel: ChatPanel = field(default_factory=ChatPanel)

    @property
    def analyzing(self) -> bool:
        return self.main.status == ViewStatus.ANALYZING

    def begin_analysis(self, preview: str | None = None) -> None:
        """Enter Analyzing; result and error of a previous analysis are dropped."""
        if self.analyzing:
            raise AnalysisInProgressError()
        self.main.status = ViewStatus.ANALYZING
        self.main.plant_data = None
        self.main.error = None
        self.main.image_preview = preview

    def show_preview(self, preview: str) -> None:
        if not self.analyzing:
            logger.warning("Ignoring image preview outside of analysis.")
            return
        self.main.image_preview = preview

    def complete_analysis(self, plant_data: PlantData) -> None:
        if not self.analyzing:
            logger.warning(f"Ignoring stale analysis result for {plant_data.name}.")
            return
        self.main.status = ViewStatus.HAS_RESULT
        self.main.plant_data = plant_data

    def fail_analysis(self, message: str) -> None:
        if not self.analyzing:
            logger.warning(f"Ignoring stale analysis failure: {message}")
            return
        self.main.status = ViewStatus.HAS_ERROR
        self.main.error = message

    def reset(self) -> None:
        """Return to the initial screen. Not available while an analysis is running."""
        if self.analyzing:
            raise AnalysisInProgressError()
        self.main = MainView()

    def set_url_input(self, visible: bool, text: str = "") -> None:
        # hiding the url input discards what was typed
        self.main.url_input_visible = visible
        self.main.url_text = text if visible else ""

    def apply_chat_panel_action(self, action: ChatPanelAction) -> ChatPanelStatus:
        panel = self.chat_panel
        if action == ChatPanelAction.OPEN:
            panel.open = True
        elif action == ChatPanelAction.CLOSE:
            panel.open = False
        elif not panel.open:
            logger.debug(f"Ignoring chat panel action {action.value} while closed.")
        elif action == ChatPanelAction.MINIMIZE:
            panel.minimized = True
        elif action == ChatPanelAction.EXPAND:
            panel.minimized = False
        elif action == ChatPanelAction.TOGGLE_MINIMIZED:
            panel.minimized = not panel.minimized
        return panel.status
