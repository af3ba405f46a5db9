"""
Tests for the EventStore: serial reduction of events from many producers.
"""

import threading

from asciichat.tui.events import (
    ConnStartedEvent,
    DataOpenedEvent,
    KeypressEvent,
    ReceivedChatEvent,
    ToggleHelpEvent,
)
from asciichat.tui.state import State, initial_state
from asciichat.tui.store import EventStore


class TestProcessPending:
    def test_starts_from_initial_state(self):
        store = EventStore()
        assert store.state == initial_state()

        custom = State(page="chat")
        assert EventStore(custom).state is custom

    def test_dispatch_only_queues(self):
        store = EventStore()
        store.dispatch(ToggleHelpEvent())
        assert store.state.help_on is False

        assert store.process_pending() == 1
        assert store.state.help_on is True
        assert store.applied == 1

    def test_events_applied_in_arrival_order(self):
        store = EventStore()
        store.dispatch(DataOpenedEvent())
        for ch in "abc":
            store.dispatch(KeypressEvent(ch))
        store.process_pending()
        assert store.state.input == "abc"

    def test_subscribers_see_every_snapshot(self):
        store = EventStore()
        seen = []
        store.subscribe(seen.append)

        store.dispatch(ConnStartedEvent())
        store.dispatch(ToggleHelpEvent())
        store.process_pending()

        assert len(seen) == 2
        assert len(seen[0].messages) == 1 and seen[0].help_on is False
        assert seen[1].help_on is True
        assert seen[-1] is store.state

    def test_unsubscribe(self):
        store = EventStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        store.dispatch(ToggleHelpEvent())
        store.process_pending()
        assert seen == []

    def test_failing_subscriber_does_not_stop_processing(self, caplog):
        store = EventStore()
        seen = []

        def broken(state):
            raise RuntimeError("renderer crashed")

        store.subscribe(broken)
        store.subscribe(seen.append)

        store.dispatch(ToggleHelpEvent())
        store.dispatch(ToggleHelpEvent())
        store.process_pending()

        assert len(seen) == 2
        assert store.applied == 2
        assert "Snapshot subscriber" in caplog.text


class TestConsumerThread:
    def test_stop_drains_queued_events(self):
        store = EventStore()
        store.start()
        store.dispatch(DataOpenedEvent())
        for ch in "hello":
            store.dispatch(KeypressEvent(ch))
        store.stop(timeout=5)

        assert store.state.input == "hello"
        assert store.applied == 6

    def test_concurrent_producers_are_serialized(self):
        store = EventStore()
        store.start()

        per_producer = 200
        producers = 4

        def produce(n):
            for i in range(per_producer):
                store.dispatch(ReceivedChatEvent(f"{n}:{i}"))

        threads = [threading.Thread(target=produce, args=(n,)) for n in range(producers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        store.stop(timeout=5)

        messages = store.state.messages
        assert len(messages) == per_producer * producers

        # Nothing dropped, and each producer's events keep their order
        for n in range(producers):
            mine = [m.text for m in messages if m.text.startswith(f"{n}:")]
            assert mine == [f"{n}:{i}" for i in range(per_producer)]

    def test_start_is_idempotent_while_running(self):
        store = EventStore()
        first = store.start()
        assert store.start() is first
        store.stop(timeout=5)
        assert not first.is_alive()

    def test_stop_without_wait_returns_and_thread_drains(self):
        store = EventStore()
        gate = threading.Event()
        store.subscribe(lambda _state: gate.wait(5))
        thread = store.start()
        store.dispatch(ConnStartedEvent())

        store.stop(wait=False)
        assert thread.is_alive()

        gate.set()
        thread.join(5)
        assert not thread.is_alive()
        assert store.applied == 1
