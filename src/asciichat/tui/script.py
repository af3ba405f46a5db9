"""
Event scripts: YAML files describing a sequence of UI events.

Scripts stand in for the live producers (signaling, data channel,
keyboard, ...) so a session can be replayed deterministically or played
into a running TUI. Example:

    - type: conn_started
    - type: data_opened
    - type: text
      text: "hi"
      delay: 0.5
    - type: received
      text: "hello!"
    - type: conn_ended
      reason: gone

Validation happens here, at the producer. The reducer never rejects an
event, so a malformed script is reported before anything is dispatched.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, get_args

import yaml

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
from asciichat.tui.reducer import reduce
from asciichat.tui.state import PageName, State, WinSize, initial_state
from asciichat.tui.store import EventStore

logger = logging.getLogger(__name__)


class ScriptError(RuntimeError):
    """A script entry could not be turned into events."""

    def __init__(self, index: int, message: str) -> None:
        super().__init__(f"entry {index}: {message}")
        self.index = index


@dataclass(frozen=True)
class ScriptStep:
    event: Event
    delay: float = 0.0


@dataclass(frozen=True)
class ReplayResult:
    """Final state after applying a script, and how many events it took."""
    state: State
    applied: int


# =============================================================================
# Parsing
# =============================================================================

def _text(entry: dict, key: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _enum(enum_cls, entry: dict, key: str):
    raw = entry.get(key)
    try:
        return enum_cls(str(raw).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"'{key}' must be one of: {allowed}") from None


def _page(entry: dict) -> PageName:
    page = entry.get("page")
    if page not in get_args(PageName):
        raise ValueError(f"unknown page {page!r}")
    return page


def _size(entry: dict) -> WinSize:
    rows, cols = entry.get("rows"), entry.get("cols")
    if any(isinstance(v, bool) or not isinstance(v, int) for v in (rows, cols)):
        raise ValueError("'rows' and 'cols' must be integers")
    return WinSize(rows=rows, cols=cols)


def _keypress(entry: dict) -> list[Event]:
    return [KeypressEvent(_text(entry, "rune"))]


def _typed_text(entry: dict) -> list[Event]:
    return [KeypressEvent(ch) for ch in _text(entry, "text")]


# type name -> builder returning one or more events
EVENT_BUILDERS: dict[str, Callable[[dict], list[Event]]] = {
    "conn_started": lambda e: [ConnStartedEvent()],
    "conn_ended": lambda e: [ConnEndedEvent(_enum(EndConnReason, e, "reason"))],
    "data_opened": lambda e: [DataOpenedEvent()],
    "received": lambda e: [ReceivedChatEvent(_text(e, "text"))],
    "sent": lambda e: [SentMessageEvent(_text(e, "text"))],
    "frame": lambda e: [FrameEvent(e.get("image"))],
    "keypress": _keypress,
    "text": _typed_text,
    "backspace": lambda e: [BackspaceEvent()],
    "set_page": lambda e: [SetPageEvent(_page(e))],
    "resize": lambda e: [ResizeEvent(_size(e))],
    "toggle_help": lambda e: [ToggleHelpEvent()],
    "skip": lambda e: [SkipEvent()],
    "log": lambda e: [LogEvent(_enum(LogLevel, e, "level"), _text(e, "text"))],
}


def parse_script(data: Any) -> list[ScriptStep]:
    """Turn decoded YAML into script steps.

    A step's delay applies before its first event; events expanded from
    one entry (e.g. "text") follow each other without delay.
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise ScriptError(0, "script must be a list of events")

    steps: list[ScriptStep] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ScriptError(index, "each event must be a mapping")

        kind = entry.get("type")
        builder = EVENT_BUILDERS.get(kind) if isinstance(kind, str) else None
        if builder is None:
            raise ScriptError(index, f"unknown event type {kind!r}")

        delay = entry.get("delay", 0)
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
            raise ScriptError(index, "'delay' must be a non-negative number")

        try:
            events = builder(entry)
        except ValueError as e:
            raise ScriptError(index, str(e)) from None

        for n, event in enumerate(events):
            steps.append(ScriptStep(event=event, delay=float(delay) if n == 0 else 0.0))
    return steps


def load_script(path: Path | str) -> list[ScriptStep]:
    """Read and parse a YAML script file."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ScriptError(0, f"invalid YAML: {e}") from None
    return parse_script(data)


# =============================================================================
# Replay
# =============================================================================

def replay(events: Iterable[Event], initial: Optional[State] = None) -> ReplayResult:
    """Fold reduce() over events. Same events always give the same state."""
    state = initial if initial is not None else initial_state()
    count = 0
    for event in events:
        state = reduce(state, event)
        count += 1
    return ReplayResult(state=state, applied=count)


class ScriptProducer(threading.Thread):
    """Plays script steps into a store from its own thread."""

    def __init__(self, store: EventStore, steps: list[ScriptStep]) -> None:
        super().__init__(name="asciichat-script", daemon=True)
        self.store = store
        self.steps = steps
        self._cancelled = threading.Event()

    def run(self) -> None:
        logger.debug("Playing %d scripted events", len(self.steps))
        for step in self.steps:
            if step.delay and self._cancelled.wait(step.delay):
                return
            if self._cancelled.is_set():
                return
            self.store.dispatch(step.event)

    def cancel(self) -> None:
        self._cancelled.set()
