"""
UI state snapshot for the chat client.

Architecture:
- State is a frozen dataclass; one value exists per processed event
- reduce(state, event) (see reducer.py) is the only code that builds a
  new State after startup
- Renderers receive snapshots and must treat them as read-only
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional


# =============================================================================
# Data Types
# =============================================================================

# Owned by the host application; the reducer never inspects the value.
PageName = Literal["splash", "confirm", "chat", "error"]

INITIAL_PAGE: PageName = "splash"


class MessageType(str, Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """A single transcript line. Never mutated after creation."""
    type: MessageType
    user: str
    text: str

    @property
    def is_system(self) -> bool:
        return self.type in (MessageType.INFO, MessageType.ERROR)


@dataclass(frozen=True)
class WinSize:
    """Terminal dimensions as last reported."""
    rows: int = 0
    cols: int = 0


# =============================================================================
# State
# =============================================================================

@dataclass(frozen=True)
class State:
    """
    Point-in-time snapshot of everything the renderer paints.

    Fields are mutually independent; the input buffer is the only field
    whose reducer also reads another field (chat_active).
    """

    # Latest decoded frame from the remote peer (opaque to the core)
    image: Optional[Any] = None

    # Text channel open; gates keyboard input
    chat_active: bool = False

    # In-progress message (a str is already a sequence of code points)
    input: str = ""

    # Append-only transcript, oldest first
    messages: tuple[Message, ...] = field(default_factory=tuple)

    page: PageName = INITIAL_PAGE
    win_size: WinSize = field(default_factory=WinSize)
    help_on: bool = False

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def has_video(self) -> bool:
        return self.image is not None

    @property
    def can_send(self) -> bool:
        """Whether enter should turn the input buffer into a message."""
        return self.chat_active and bool(self.input)


def initial_state(page: PageName = INITIAL_PAGE) -> State:
    """The State value a client starts with."""
    return State(page=page)
