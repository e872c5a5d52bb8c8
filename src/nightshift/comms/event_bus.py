"""EventBus — thread-safe pub/sub for shift notifications.

The shift controller publishes every player-visible change here (spawns,
resolutions, wrong reports, state transitions, the debrief).  Presentation
code subscribes and drains its queue at its own pace.  The controller
never waits on a subscriber.
"""

from __future__ import annotations

import queue
import threading

_QUEUE_SIZE = 100


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[str | None, queue.Queue]] = []

    def subscribe(self, topic: str | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue of ``{"type", "data"}`` dicts.

        With *topic* set only events of that type are delivered; with
        ``None`` the subscriber sees everything.
        """
        q: queue.Queue = queue.Queue(maxsize=_QUEUE_SIZE)
        with self._lock:
            self._subscribers.append((topic, q))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(t, s) for t, s in self._subscribers if s is not q]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for topic, q in self._subscribers:
                if topic is not None and topic != event_type:
                    continue
                _put_latest(q, msg)


def _put_latest(q: queue.Queue, msg: dict) -> None:
    """Enqueue *msg*, evicting the oldest message when the queue is full."""
    try:
        q.put_nowait(msg)
    except queue.Full:
        try:
            q.get_nowait()
        except queue.Empty:
            pass
        try:
            q.put_nowait(msg)
        except queue.Full:
            pass
