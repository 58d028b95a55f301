from __future__ import annotations

from enum import Enum


class ViewStatus(str, Enum):
    """Main flow of the identification view."""

    NO_IMAGE = "NoImage"
    ANALYZING = "Analyzing"
    HAS_RESULT = "HasResult"
    HAS_ERROR = "HasError"


class ChatPanelStatus(str, Enum):
    CLOSED = "ChatClosed"
    EXPANDED = "ChatOpen-Expanded"
    MINIMIZED = "ChatOpen-Minimized"


class ChatPanelAction(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    MINIMIZE = "minimize"
    EXPAND = "expand"
    TOGGLE_MINIMIZED = "toggle_minimized"


class ChatRole(str, Enum):
    USER = "user"
    MODEL = "model"


class ChatTurnState(str, Enum):
    IDLE = "Idle"
    SENDING = "Sending"
    STREAMING = "Streaming"
