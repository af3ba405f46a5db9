from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

from asciichat.tui.script import EVENT_BUILDERS, ScriptError, load_script, replay
from asciichat.tui.state import State


def state_summary(state: State) -> dict:
    """Plain-data view of a snapshot, for printing."""
    return {
        "page": state.page,
        "chat_active": state.chat_active,
        "help_on": state.help_on,
        "input": state.input,
        "win_size": {"rows": state.win_size.rows, "cols": state.win_size.cols},
        "image": None if state.image is None else str(state.image),
        "messages": [
            {"type": m.type.value, "user": m.user, "text": m.text}
            for m in state.messages
        ],
    }


def register(app):
    @app.command("replay")
    def replay_script(
        script: Path = typer.Argument(..., help="YAML event script"),
        as_json: bool = typer.Option(False, "--json", help="Print the final state as JSON"),
    ):
        """Apply a script's events to a fresh state and print the result."""
        try:
            steps = load_script(script)
        except ScriptError as e:
            print(f"Invalid script: {e}", file=sys.stderr)
            sys.exit(1)
        except OSError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)

        result = replay(step.event for step in steps)
        summary = state_summary(result.state)

        if as_json:
            print(json.dumps(summary, indent=2, ensure_ascii=False))
            return

        print(f"Applied {result.applied} events\n")
        print("Transcript:")
        if not summary["messages"]:
            print("  (empty)")
        for m in summary["messages"]:
            prefix = f"{m['user']}: " if m["user"] else f"[{m['type']}] "
            print(f"  {prefix}{m['text']}")

        print("\nState:")
        print(f"  • Page:        {summary['page']}")
        print(f"  • Chat active: {summary['chat_active']}")
        print(f"  • Help on:     {summary['help_on']}")
        print(f"  • Input:       {summary['input']!r}")
        rows, cols = summary["win_size"]["rows"], summary["win_size"]["cols"]
        print(f"  • Window:      {rows}x{cols}")

    @app.command("events")
    def list_events():
        """List event types usable in scripts."""
        for name in EVENT_BUILDERS:
            print(name)
