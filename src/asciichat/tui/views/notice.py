from textual.containers import Vertical
from textual.widgets import Static

from asciichat.tui.state import State
from asciichat.tui.views.base import View


NOTICES = {
    "splash": (
        "asciichat",
        "Video chat with a random stranger, right in your terminal.",
        "Press Enter to continue.",
    ),
    "confirm": (
        "Before you start",
        "Your camera will be shared with whoever you are matched with.",
        "Enter:start  Ctrl+Q:quit",
    ),
    "error": (
        "Something went wrong",
        "Could not set up a connection. Check the log file for details.",
        "Ctrl+Q:quit",
    ),
}


class NoticeView(View):
    """Static pages shown outside of a chat (splash, confirm, error)."""

    name = "notice"

    def render(self, state: State):
        title, body, hint = NOTICES.get(state.page, NOTICES["splash"])
        return [
            Vertical(
                Static(f"[bold]{title}[/bold]", id="notice_title"),
                Static(body, id="notice_body"),
                Static(hint, id="hint-bar"),
                id="notice_layout",
            )
        ]
