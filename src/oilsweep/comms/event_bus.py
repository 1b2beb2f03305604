"""EventBus — thread-safe pub/sub for simulation notifications.

Two kinds of subscriber are supported:

  * listeners: callables invoked synchronously, on the publishing thread,
    before ``publish()`` returns.  The lifecycle controller relies on this
    to hand every observer the current state after each change.
  * queues: bounded ``queue.Queue`` objects for consumers on another
    thread (HTTP handlers, recorders).  A full queue drops its oldest
    message so fresh state is never lost behind stale state.

Both receive the same message dict: ``{"type": ..., "data": ...}``.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable

from loguru import logger

Listener = Callable[[dict], Any]


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[queue.Queue] = []
        self._listeners: list[Listener] = []

    def subscribe(self, maxsize: int = 100) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives all events."""
        q: queue.Queue = queue.Queue(maxsize=maxsize)
        with self._lock:
            self._subscribers.append(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            try:
                self._subscribers.remove(q)
            except ValueError:
                pass

    def add_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg: dict = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            listeners = list(self._listeners)
            for q in self._subscribers:
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

        # Outside the lock so a listener may (un)subscribe
        for listener in listeners:
            try:
                listener(msg)
            except Exception:
                logger.exception(f"Listener {listener!r} failed on '{event_type}'")
