"""
Events consumed by the UI reducer.

Every producer (signaling, data channel, media, keyboard, terminal,
logger) talks to the UI exclusively through these values. Events are
frozen dataclasses carrying the minimal payload needed to update state.

The set is closed from the reducer's point of view: anything else that
reaches reduce() leaves every field unchanged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from asciichat.tui.state import PageName, WinSize


# =============================================================================
# Payload enums
# =============================================================================

class EndConnReason(str, Enum):
    """Why a connection attempt ended."""
    SETUP_ERROR = "setup_error"
    MATCH_ERROR = "match_error"
    NORMAL = "normal"
    TIMED_OUT = "timed_out"
    DISCONNECTED = "disconnected"
    GONE = "gone"


class LogLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


# =============================================================================
# Connection lifecycle (signaling layer)
# =============================================================================

@dataclass(frozen=True)
class ConnStartedEvent:
    """A new peer connection was established."""
    pass


@dataclass(frozen=True)
class ConnEndedEvent:
    """The current connection attempt ended."""
    reason: EndConnReason


@dataclass(frozen=True)
class DataOpenedEvent:
    """The text-chat data channel to the peer is open."""
    pass


# =============================================================================
# Chat (data channel)
# =============================================================================

@dataclass(frozen=True)
class ReceivedChatEvent:
    text: str


@dataclass(frozen=True)
class SentMessageEvent:
    """The local user sent a message (text taken from State.input)."""
    text: str


# =============================================================================
# Media
# =============================================================================

@dataclass(frozen=True)
class FrameEvent:
    """A decoded video frame from the remote peer."""
    image: Any


# =============================================================================
# Keyboard / terminal
# =============================================================================

@dataclass(frozen=True)
class KeypressEvent:
    """A code point typed by the user."""
    rune: str


@dataclass(frozen=True)
class BackspaceEvent:
    pass


@dataclass(frozen=True)
class ResizeEvent:
    win_size: WinSize


@dataclass(frozen=True)
class SetPageEvent:
    page: PageName


@dataclass(frozen=True)
class ToggleHelpEvent:
    pass


@dataclass(frozen=True)
class SkipEvent:
    """User asked for the next partner."""
    pass


# =============================================================================
# Logger
# =============================================================================

@dataclass(frozen=True)
class LogEvent:
    level: LogLevel
    text: str


# Event union type for type checking
Event = Union[
    ConnStartedEvent,
    ConnEndedEvent,
    DataOpenedEvent,
    ReceivedChatEvent,
    SentMessageEvent,
    FrameEvent,
    KeypressEvent,
    BackspaceEvent,
    ResizeEvent,
    SetPageEvent,
    ToggleHelpEvent,
    SkipEvent,
    LogEvent,
]
