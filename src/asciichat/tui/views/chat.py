from rich.markup import escape
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import Static

from asciichat.tui.state import Message, MessageType, State
from asciichat.tui.views.base import View


# Textual markup per message type
MESSAGE_STYLES = {
    MessageType.OUTGOING: "bold cyan",
    MessageType.INCOMING: "bold magenta",
    MessageType.INFO: "dim",
    MessageType.ERROR: "bold red",
}

HINTS = "Enter:send  Ctrl+N:next partner  F1:help  Ctrl+Q:quit"
WAITING_HINT = "Waiting for the chat channel to open..."


def format_message(msg: Message) -> str:
    """One transcript line as Textual markup. User text is escaped."""
    style = MESSAGE_STYLES.get(msg.type, "none")
    text = escape(msg.text)
    if msg.user:
        return f"[{style}]{escape(msg.user)}:[/{style}] {text}"
    return f"[{style}]{text}[/{style}]"


def transcript_markup(state: State, limit: int = 0) -> str:
    """The last `limit` messages (all when limit <= 0), oldest first."""
    messages = state.messages
    if limit > 0:
        messages = messages[-limit:]
    return "\n".join(format_message(m) for m in messages)


def frame_text(state: State) -> str:
    if state.image is None:
        return "[dim]No video[/dim]"
    return escape(str(state.image))


def input_line(state: State) -> str:
    return f"> {escape(state.input)}"


class ChatView(View):
    name = "chat"

    def _visible_lines(self, state: State) -> int:
        # frame, input line and hint bar each take at least a row
        rows = state.win_size.rows
        if rows <= 0:
            return 0
        return max(rows - 3, 1)

    def _contents(self, state: State) -> dict[str, str]:
        """Widget id -> markup, for everything that changes with state."""
        return {
            "frame": frame_text(state),
            "transcript": transcript_markup(state, self._visible_lines(state)),
            "input_line": input_line(state),
            "hint-bar": HINTS if state.chat_active else WAITING_HINT,
        }

    def render(self, state: State):
        contents = self._contents(state)
        return [
            Vertical(
                *(Static(text, id=widget_id) for widget_id, text in contents.items()),
                id="chat_layout",
            )
        ]

    def update(self, root: Widget, state: State) -> None:
        for widget_id, text in self._contents(state).items():
            root.query_one(f"#{widget_id}", Static).update(text)
