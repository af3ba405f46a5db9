"""
Reducer for the chat client UI.

reduce(state, event) is a pure function: it never performs I/O, never
raises and never mutates its arguments. It is built from one field
reducer per State field. Each field reducer returns the field unchanged
for any event it does not handle.
"""

from dataclasses import replace
from typing import Any, Optional

from asciichat.tui.events import (
    BackspaceEvent,
    ConnEndedEvent,
    ConnStartedEvent,
    DataOpenedEvent,
    EndConnReason,
    Event,
    FrameEvent,
    KeypressEvent,
    LogEvent,
    LogLevel,
    ReceivedChatEvent,
    ResizeEvent,
    SentMessageEvent,
    SetPageEvent,
    SkipEvent,
    ToggleHelpEvent,
)
from asciichat.tui.sanitize import sanitize
from asciichat.tui.state import Message, MessageType, PageName, State, WinSize


# =============================================================================
# Composition
# =============================================================================

def reduce(state: State, event: Event) -> State:
    """
    Apply an event and return the next snapshot.

    Every field reducer sees the same prior state; none of them is given
    another reducer's output.
    """
    return replace(
        state,
        image=image_reducer(state.image, event),
        chat_active=chat_active_reducer(state.chat_active, event),
        input=input_reducer(state.input, state.chat_active, event),
        messages=messages_reducer(state.messages, event),
        page=page_reducer(state.page, event),
        win_size=win_size_reducer(state.win_size, event),
        help_on=help_on_reducer(state.help_on, event),
    )


# =============================================================================
# Field reducers
# =============================================================================

def chat_active_reducer(active: bool, event: Event) -> bool:
    match event:
        case DataOpenedEvent():
            return True
        case ConnEndedEvent():
            return False
        case _:
            return active


def help_on_reducer(help_on: bool, event: Event) -> bool:
    match event:
        case ToggleHelpEvent():
            return not help_on
        case SkipEvent() | SentMessageEvent():
            return False
        case _:
            return help_on


def page_reducer(page: PageName, event: Event) -> PageName:
    match event:
        case SetPageEvent(page=new_page):
            return new_page
        case _:
            return page


def win_size_reducer(win_size: WinSize, event: Event) -> WinSize:
    match event:
        case ResizeEvent(win_size=new_size):
            return new_size
        case _:
            return win_size


def input_reducer(text: str, chat_active: bool, event: Event) -> str:
    match event:
        case ConnStartedEvent() | SentMessageEvent():
            return ""

        case KeypressEvent(rune=str() as rune):
            if not chat_active:
                return text
            # Whole buffer, so a sequence completed by this key is caught too
            return sanitize(text + rune)

        case BackspaceEvent():
            if not chat_active or not text:
                return text
            return text[:-1]

        case _:
            return text


def image_reducer(image: Optional[Any], event: Event) -> Optional[Any]:
    match event:
        case FrameEvent(image=frame):
            return frame
        case SetPageEvent() | SkipEvent():
            return None
        case _:
            return image


# Connection-end reasons that produce a transcript line. SETUP_ERROR is
# surfaced by the error page and MATCH_ERROR is routine, so neither is here.
END_CONN_MESSAGES: dict[EndConnReason, Message] = {
    EndConnReason.NORMAL: Message(MessageType.INFO, "", "Skipping..."),
    EndConnReason.TIMED_OUT: Message(MessageType.ERROR, "", "Connection timed out."),
    EndConnReason.DISCONNECTED: Message(MessageType.ERROR, "", "Lost connection."),
    EndConnReason.GONE: Message(MessageType.INFO, "", "Your partner left the chat."),
}


def messages_reducer(
    messages: tuple[Message, ...], event: Event
) -> tuple[Message, ...]:
    msg = _message_for(event)
    if msg is None:
        return messages
    return messages + (msg,)


def _message_for(event: Event) -> Optional[Message]:
    """The transcript line an event appends, if any."""
    match event:
        case SentMessageEvent(text=text):
            return Message(MessageType.OUTGOING, "You", text)

        case ReceivedChatEvent(text=text):
            return Message(MessageType.INCOMING, "Them", text)

        case ConnStartedEvent():
            return Message(MessageType.INFO, "", "Connected")

        case ConnEndedEvent(reason=reason):
            # Producers may hand over unhashable reasons; those map to nothing
            try:
                return END_CONN_MESSAGES.get(reason)
            except TypeError:
                return None

        case LogEvent(level=level, text=text):
            if level == LogLevel.ERROR:
                return Message(MessageType.ERROR, "", text)
            return Message(MessageType.INFO, "", text)

        case _:
            return None
