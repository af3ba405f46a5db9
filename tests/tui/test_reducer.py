"""
Tests for the composition reducer and the small field reducers.

Covers the identity default for every field, the chat_active lifecycle,
help overlay resets, page/size setters and the image field.
"""

from dataclasses import fields

import pytest

from asciichat.tui.events import (
    BackspaceEvent,
    ConnEndedEvent,
    ConnStartedEvent,
    DataOpenedEvent,
    EndConnReason,
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
from asciichat.tui.reducer import (
    chat_active_reducer,
    help_on_reducer,
    image_reducer,
    reduce,
)
from asciichat.tui.state import Message, MessageType, State, WinSize, initial_state


def busy_state() -> State:
    """A state with every field away from its default."""
    return State(
        image="frame-0",
        chat_active=True,
        input="draft",
        messages=(Message(MessageType.INFO, "", "Connected"),),
        page="chat",
        win_size=WinSize(rows=24, cols=80),
        help_on=True,
    )


ALL_EVENTS = [
    ConnStartedEvent(),
    ConnEndedEvent(EndConnReason.NORMAL),
    DataOpenedEvent(),
    ReceivedChatEvent("hello"),
    SentMessageEvent("hey"),
    FrameEvent("frame-1"),
    KeypressEvent("x"),
    BackspaceEvent(),
    SetPageEvent("confirm"),
    ResizeEvent(WinSize(rows=40, cols=120)),
    ToggleHelpEvent(),
    SkipEvent(),
    LogEvent(LogLevel.INFO, "log line"),
]

# field -> event types that may change it
HANDLED = {
    "image": (FrameEvent, SetPageEvent, SkipEvent),
    "chat_active": (DataOpenedEvent, ConnEndedEvent),
    "input": (ConnStartedEvent, SentMessageEvent, KeypressEvent, BackspaceEvent),
    "messages": (
        SentMessageEvent,
        ReceivedChatEvent,
        ConnStartedEvent,
        ConnEndedEvent,
        LogEvent,
    ),
    "page": (SetPageEvent,),
    "win_size": (ResizeEvent,),
    "help_on": (ToggleHelpEvent, SkipEvent, SentMessageEvent),
}


class TestIdentityDefault:
    """Fields are untouched by events they don't handle."""

    def test_every_field_is_covered(self):
        assert set(HANDLED) == {f.name for f in fields(State)}

    @pytest.mark.parametrize("event", ALL_EVENTS, ids=lambda e: type(e).__name__)
    @pytest.mark.parametrize("start", [initial_state(), busy_state()], ids=["initial", "busy"])
    def test_unhandled_events_leave_field_unchanged(self, start, event):
        after = reduce(start, event)
        for name, handled in HANDLED.items():
            if isinstance(event, handled):
                continue
            assert getattr(after, name) == getattr(start, name), name

    @pytest.mark.parametrize("event", [object(), None, "keypress", 42, {"type": "skip"}])
    def test_unknown_events_are_noops(self, event):
        start = busy_state()
        assert reduce(start, event) == start

    def test_malformed_payloads_do_not_raise(self):
        start = busy_state()
        after = reduce(start, KeypressEvent(rune=None))
        assert after.input == "draft"

        after = reduce(start, ConnEndedEvent(reason="not-a-reason"))
        assert after.messages == start.messages
        assert after.chat_active is False


class TestPurity:
    def test_prior_state_is_not_mutated(self):
        start = busy_state()
        snapshot = busy_state()
        for event in ALL_EVENTS:
            reduce(start, event)
        assert start == snapshot

    def test_same_input_gives_same_output(self):
        for event in ALL_EVENTS:
            assert reduce(busy_state(), event) == reduce(busy_state(), event)

    def test_returns_new_state_value(self):
        start = initial_state()
        after = reduce(start, ToggleHelpEvent())
        assert after is not start
        assert start.help_on is False


class TestChatActive:
    def test_data_opened_then_conn_ended(self):
        state = initial_state()
        assert state.chat_active is False

        state = reduce(state, DataOpenedEvent())
        assert state.chat_active is True

        state = reduce(state, ConnEndedEvent(EndConnReason.NORMAL))
        assert state.chat_active is False

    @pytest.mark.parametrize("reason", list(EndConnReason))
    def test_any_end_reason_deactivates(self, reason):
        assert chat_active_reducer(True, ConnEndedEvent(reason)) is False
        assert chat_active_reducer(False, ConnEndedEvent(reason)) is False

    def test_conn_started_does_not_activate(self):
        assert reduce(initial_state(), ConnStartedEvent()).chat_active is False


class TestHelpOn:
    def test_toggle_flips(self):
        state = reduce(initial_state(), ToggleHelpEvent())
        assert state.help_on is True
        state = reduce(state, ToggleHelpEvent())
        assert state.help_on is False

    def test_skip_and_send_force_off(self):
        assert help_on_reducer(True, SkipEvent()) is False
        assert help_on_reducer(True, SentMessageEvent("x")) is False
        assert help_on_reducer(False, SkipEvent()) is False

    def test_sent_message_scenario(self):
        start = State(chat_active=True, input="hey", help_on=True, page="chat")
        after = reduce(start, SentMessageEvent("hey"))

        assert after.help_on is False
        assert after.input == ""
        assert after.messages == (Message(MessageType.OUTGOING, "You", "hey"),)


class TestSetters:
    def test_set_page_overwrites_without_validation(self):
        state = reduce(initial_state(), SetPageEvent("chat"))
        assert state.page == "chat"

        # The producer owns validation
        state = reduce(state, SetPageEvent("nonexistent"))
        assert state.page == "nonexistent"

    def test_resize_overwrites(self):
        state = reduce(initial_state(), ResizeEvent(WinSize(rows=50, cols=200)))
        assert state.win_size == WinSize(rows=50, cols=200)


class TestImage:
    def test_frame_replaces_image(self):
        state = reduce(initial_state(), FrameEvent("a"))
        state = reduce(state, FrameEvent("b"))
        assert state.image == "b"
        assert state.has_video

    @pytest.mark.parametrize("event", [SetPageEvent("chat"), SkipEvent()])
    def test_page_change_and_skip_clear_image(self, event):
        assert image_reducer("frame", event) is None

    def test_conn_ended_keeps_last_frame(self):
        state = reduce(State(image="frame"), ConnEndedEvent(EndConnReason.GONE))
        assert state.image == "frame"


def test_initial_state_defaults():
    state = initial_state()
    assert state.image is None
    assert state.chat_active is False
    assert state.input == ""
    assert state.messages == ()
    assert state.page == "splash"
    assert state.win_size == WinSize(0, 0)
    assert state.help_on is False


def test_initial_state_accepts_page():
    assert initial_state("confirm").page == "confirm"
