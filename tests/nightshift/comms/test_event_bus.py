"""Unit tests for EventBus — pub/sub, topic filters, overflow (drop oldest)."""
from __future__ import annotations

import queue
import threading

import pytest

from nightshift.comms.event_bus import EventBus


@pytest.mark.unit
class TestEventBusBasics:
    def test_subscribe_returns_queue(self):
        bus = EventBus()
        assert isinstance(bus.subscribe(), queue.Queue)

    def test_publish_delivers_to_subscriber(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("anomaly_spawned", {"room": "kitchen"})
        msg = q.get_nowait()
        assert msg["type"] == "anomaly_spawned"
        assert msg["data"]["room"] == "kitchen"

    def test_publish_without_data(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("ping")
        msg = q.get_nowait()
        assert msg == {"type": "ping"}

    def test_multiple_subscribers(self):
        bus = EventBus()
        q1 = bus.subscribe()
        q2 = bus.subscribe()
        bus.publish("shift_over", {"result": "win"})
        assert q1.get_nowait()["type"] == "shift_over"
        assert q2.get_nowait()["type"] == "shift_over"

    def test_unsubscribe_stops_delivery(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.unsubscribe(q)
        bus.publish("after_unsub")
        assert q.empty()
        assert bus.subscriber_count == 0

    def test_unsubscribe_unknown_queue_is_safe(self):
        bus = EventBus()
        bus.unsubscribe(queue.Queue())


@pytest.mark.unit
class TestTopicFilter:
    def test_only_matching_events_delivered(self):
        bus = EventBus()
        q = bus.subscribe("tension_alert")
        bus.publish("anomaly_spawned", {"undetected": 1})
        bus.publish("tension_alert", {"undetected": 3})
        assert q.qsize() == 1
        assert q.get_nowait()["data"] == {"undetected": 3}

    def test_unfiltered_sees_everything(self):
        bus = EventBus()
        everything = bus.subscribe()
        bus.subscribe("shift_over")
        bus.publish("anomaly_spawned")
        bus.publish("shift_over")
        assert everything.qsize() == 2


@pytest.mark.unit
class TestOverflow:
    def test_full_queue_drops_oldest(self):
        bus = EventBus()
        q = bus.subscribe()
        for i in range(105):
            bus.publish("tick", {"n": i})
        assert q.qsize() == 100
        assert q.get_nowait()["data"]["n"] == 5

    def test_publish_never_blocks(self):
        bus = EventBus()
        bus.subscribe()
        done = threading.Event()

        def flood():
            for i in range(1000):
                bus.publish("tick", {"n": i})
            done.set()

        t = threading.Thread(target=flood)
        t.start()
        t.join(timeout=5.0)
        assert done.is_set()
