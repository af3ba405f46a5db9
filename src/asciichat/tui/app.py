"""asciichat TUI host with Elm-inspired architecture.

- All state lives in an EventStore; the app never builds a State itself
- Keyboard and terminal resizes become events (input/terminal producers)
- The store's consumer thread hands each snapshot over with post_message(),
  which never blocks the consumer
- Page widgets are mounted only when the page or the help overlay changes;
  every other snapshot updates the mounted widgets in place
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Footer, Header

from asciichat.tui.events import (
    BackspaceEvent,
    KeypressEvent,
    ResizeEvent,
    SentMessageEvent,
    SetPageEvent,
    SkipEvent,
    ToggleHelpEvent,
)
from asciichat.tui.script import ScriptProducer, ScriptStep
from asciichat.tui.state import PageName, State, WinSize
from asciichat.tui.store import EventStore
from asciichat.tui.views.base import View
from asciichat.tui.views.chat import ChatView
from asciichat.tui.views.help import HelpView
from asciichat.tui.views.notice import NoticeView

logger = logging.getLogger(__name__)

# Where Enter leads from each non-chat page
NEXT_PAGE: dict[str, PageName] = {
    "splash": "confirm",
    "confirm": "chat",
}

PAGE_VIEWS: dict[str, View] = {
    "chat": ChatView(),
}


def view_for(state: State) -> View:
    return PAGE_VIEWS.get(state.page, NoticeView())


def views_for(state: State) -> list:
    """Widgets for the current page, with the help overlay last when on."""
    widgets = list(view_for(state).render(state))
    widgets.extend(HelpView().render(state))
    return widgets


def layout_key(state: State) -> tuple:
    """Snapshots with equal keys share the same mounted widgets."""
    return (state.page, state.help_on)


class SnapshotPublished(Message):
    """A new State from the store's consumer thread."""

    def __init__(self, state: State) -> None:
        super().__init__()
        self.state = state


class ChatApp(App):
    TITLE = "asciichat"
    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+n", "skip", "Next"),
        ("f1", "toggle_help", "Help"),
    ]

    def __init__(
        self,
        store: EventStore,
        script: Optional[list[ScriptStep]] = None,
        on_send: Optional[Callable[[str], None]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.store = store
        self.snapshot: State = store.state
        self._script = script or []
        self._producer: Optional[ScriptProducer] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._on_send = on_send
        self._layout: Optional[tuple] = None
        self._render_lock = asyncio.Lock()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(id="main")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_snapshot)
        self.store.start()

        if self._script:
            self._producer = ScriptProducer(self.store, self._script)
            self._producer.start()

        self.post_message(SnapshotPublished(self.store.state))

    def on_unmount(self) -> None:
        if self._producer is not None:
            self._producer.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
        # The consumer drains and exits on its own; never join on the UI loop
        self.store.stop(wait=False)

    # =====================
    # Producers
    # =====================

    def on_key(self, event: events.Key) -> None:
        state = self.store.state

        if event.key == "enter":
            self._enter(state)
        elif event.key == "backspace":
            self.store.dispatch(BackspaceEvent())
        elif event.is_printable and event.character:
            self.store.dispatch(KeypressEvent(event.character))
        else:
            return
        event.stop()

    def on_resize(self, event: events.Resize) -> None:
        self.store.dispatch(
            ResizeEvent(WinSize(rows=event.size.height, cols=event.size.width))
        )

    def action_skip(self) -> None:
        self.store.dispatch(SkipEvent())

    def action_toggle_help(self) -> None:
        self.store.dispatch(ToggleHelpEvent())

    def _enter(self, state: State) -> None:
        if state.page in NEXT_PAGE:
            self.store.dispatch(SetPageEvent(NEXT_PAGE[state.page]))
            return
        if not state.can_send:
            return

        text = state.input
        if self._on_send is not None:
            try:
                self._on_send(text)
            except Exception:
                logger.exception("Sending message failed")
                return
        self.store.dispatch(SentMessageEvent(text))

    # =====================
    # Rendering
    # =====================

    def _on_snapshot(self, state: State) -> None:
        # Store thread; post_message is thread-safe and does not wait
        self.post_message(SnapshotPublished(state))

    def on_snapshot_published(self, message: SnapshotPublished) -> None:
        self.snapshot = message.state
        if layout_key(message.state) == self._layout:
            self._update_in_place(message.state)
            return
        self.run_worker(self._rebuild(), group="render", exit_on_error=False)

    async def _rebuild(self) -> None:
        """Remount the page; runs one at a time and always uses the newest snapshot."""
        async with self._render_lock:
            state = self.snapshot
            key = layout_key(state)
            if key != self._layout:
                try:
                    container = self.screen.query_one("#main")
                except NoMatches:
                    return
                await container.remove_children()
                await container.mount_all(views_for(state))
                self._layout = key
            self._update_in_place(state)

    def _update_in_place(self, state: State) -> None:
        try:
            container = self.screen.query_one("#main")
            view_for(state).update(container, state)
        except NoMatches:
            # A rebuild is in flight; it finishes with the newest snapshot
            pass
