"""Input-buffer sanitization.

Strips terminal control sequences and non-printable code points so the
chat input never carries anything the renderer would interpret.
"""

import re

# CSI/OSC sequences introduced by ESC or the single-byte C1 CSI (0x9b).
# OSC-style sequences end with BEL; CSI-style end with a final byte.
ANSI_PATTERN = re.compile(
    "[\u001b\u009b][\\[\\]()#;?]*"
    "(?:"
    "(?:(?:[a-zA-Z\\d]*(?:;[a-zA-Z\\d]*)*)?\u0007)"
    "|"
    "(?:(?:\\d{1,4}(?:;\\d{0,4})*)?[\\dA-PRZcf-ntqry=><~])"
    ")",
    re.ASCII,
)


def strip_escape_sequences(text: str) -> str:
    return ANSI_PATTERN.sub("", text)


def strip_unprintable(text: str) -> str:
    """Drop every code point that isn't printable (ASCII space is kept)."""
    return "".join(ch for ch in text if ch.isprintable())


def sanitize(text: str) -> str:
    """Remove escape sequences first, then any leftover unprintable code points.

    Idempotent: sanitize(sanitize(s)) == sanitize(s).
    """
    return strip_unprintable(strip_escape_sequences(text))
