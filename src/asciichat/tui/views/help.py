from textual.containers import Vertical
from textual.widgets import Static

from asciichat.tui.state import State
from asciichat.tui.views.base import View


class HelpView(View):
    """Key binding overlay, drawn on top of the current page."""

    name = "help"

    HELP_STYLE = "[dim]"
    HELP_END = "[/dim]"

    KEYS = [
        ("Enter", "send message / continue"),
        ("Backspace", "delete last character"),
        ("Ctrl+N", "skip to the next partner"),
        ("F1", "toggle this help"),
        ("Ctrl+Q", "quit"),
    ]

    def _help_text(self) -> str:
        h = self.HELP_STYLE
        e = self.HELP_END
        width = max(len(key) for key, _ in self.KEYS)
        lines = [f"{h}─── Keys ───{e}", ""]
        for key, what in self.KEYS:
            lines.append(f"{key.ljust(width)}  {h}{what}{e}")
        return "\n".join(lines)

    def render(self, state: State):
        if not state.help_on:
            return []
        return [Vertical(Static(self._help_text(), id="help_text"), id="help_overlay")]
