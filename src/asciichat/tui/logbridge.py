"""Route log records into the chat transcript as LogEvents."""

from __future__ import annotations

import logging

from asciichat.tui.events import LogEvent, LogLevel
from asciichat.tui.store import EventStore

# The store logs subscriber failures; feeding those back would loop.
_SKIPPED_LOGGERS = ("asciichat.tui.store",)


class EventLogHandler(logging.Handler):
    """logging.Handler that dispatches each record to an EventStore."""

    def __init__(self, store: EventStore, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.store = store

    def emit(self, record: logging.LogRecord) -> None:
        if record.name in _SKIPPED_LOGGERS:
            return
        try:
            text = record.getMessage()
        except Exception:
            self.handleError(record)
            return

        level = LogLevel.ERROR if record.levelno >= logging.ERROR else LogLevel.INFO
        self.store.dispatch(LogEvent(level=level, text=text))


def attach_log_bridge(
    store: EventStore, logger_name: str = "asciichat", level: int = logging.INFO
) -> EventLogHandler:
    """Install an EventLogHandler on `logger_name` and return it."""
    handler = EventLogHandler(store, level)
    logging.getLogger(logger_name).addHandler(handler)
    return handler


def detach_log_bridge(handler: EventLogHandler, logger_name: str = "asciichat") -> None:
    logging.getLogger(logger_name).removeHandler(handler)
