"""Main CLI application wiring for asciichat.

  asciichat tui                      # interactive client
  asciichat tui --script demo.yml    # play scripted events into the TUI
  asciichat replay demo.yml          # fold a script, print the result
  asciichat events                   # list scriptable event types
"""

import sys
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(add_completion=False, help="asciichat: chat with strangers in your terminal")


@app.callback()
def main():
    """asciichat CLI."""
    pass


from asciichat.cli import replay as replay_cmd

replay_cmd.register(app)


@app.command()
def tui(
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (YAML)"),
    script: Optional[Path] = typer.Option(
        None, "--script", help="Play events from a YAML script"
    ),
):
    """Launch the asciichat TUI."""
    from asciichat.config import configure_logging, load_config
    from asciichat.tui.app import ChatApp
    from asciichat.tui.logbridge import attach_log_bridge
    from asciichat.tui.script import load_script
    from asciichat.tui.state import initial_state
    from asciichat.tui.store import EventStore

    try:
        cfg = load_config(config)
        steps = load_script(script) if script is not None else None
    except (RuntimeError, OSError) as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    configure_logging(cfg)

    store = EventStore(initial_state(cfg.initial_page))
    if cfg.show_log_in_chat:
        attach_log_bridge(store)

    ChatApp(store, script=steps).run()
