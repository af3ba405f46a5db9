"""
asciichat CLI entrypoint.

Executed via:
  python -m asciichat

Assumes dependencies are installed in an isolated environment.
"""

from asciichat.cli.app import app

if __name__ == "__main__":
    app()
