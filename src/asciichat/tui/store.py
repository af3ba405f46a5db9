"""Single-consumer event loop around the reducer.

Producers may live on any thread and only ever call dispatch(). One
consumer (run(), or process_pending() on the caller's thread) drains the
queue and reduces strictly in arrival order, so the State value has a
single writer and the reducer needs no locks.

- Events are never reordered, coalesced or dropped
- Subscribers get every snapshot, after each reduction
- stop() is queued like any event: everything dispatched before it is
  still applied
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional

from asciichat.tui.events import Event
from asciichat.tui.reducer import reduce
from asciichat.tui.state import State, initial_state

logger = logging.getLogger(__name__)

Subscriber = Callable[[State], None]

_STOP = object()


class EventStore:
    """Owns the current State and the queue that feeds it."""

    def __init__(self, initial: Optional[State] = None) -> None:
        self._state = initial if initial is not None else initial_state()
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._subscribers: List[Subscriber] = []
        self._subs_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.applied = 0

    @property
    def state(self) -> State:
        """Latest snapshot (read-only)."""
        return self._state

    # -------------------------------------------------------------------------
    # Producers
    # -------------------------------------------------------------------------

    def dispatch(self, event: Event) -> None:
        """Queue an event. Safe to call from any thread."""
        self._queue.put(event)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a snapshot consumer; returns a function that removes it."""
        with self._subs_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._subs_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Consumer
    # -------------------------------------------------------------------------

    def process_pending(self) -> int:
        """Reduce everything queued so far on the calling thread."""
        count = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return count
            if item is _STOP:
                continue
            self._apply(item)
            count += 1

    def run(self) -> None:
        """Consume events until stop() is reached in the queue."""
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self._apply(item)

    def start(self) -> threading.Thread:
        """Run the consumer loop on a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._thread = threading.Thread(
            target=self.run, name="asciichat-store", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None, wait: bool = True) -> None:
        """Finish the events already queued, then end run().

        With wait=False only the stop marker is queued; the consumer thread
        drains and exits on its own.
        """
        self._queue.put(_STOP)
        if not wait:
            return
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _apply(self, event: object) -> None:
        self._state = reduce(self._state, event)
        self.applied += 1

        with self._subs_lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(self._state)
            except Exception:
                logger.exception("Snapshot subscriber %r failed", callback)
