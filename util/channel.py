"""Bounded, closable single-consumer channel for background → UI messages."""

import threading
from collections import deque
from typing import Any, Deque, Optional, Tuple

DEFAULT_CAPACITY = 32
_POLL_INTERVAL = 0.05


class Channel:
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("channel capacity must be >= 1")
        self.capacity = capacity
        self._items: Deque[Any] = deque()
        self._closed = False
        self._cond = threading.Condition()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def send(self, item: Any, cancel_event: Optional[threading.Event] = None) -> bool:
        """Block until there is room. Returns False if the channel closed or cancel fired first."""
        with self._cond:
            while len(self._items) >= self.capacity:
                if self._closed or (cancel_event is not None and cancel_event.is_set()):
                    return False
                self._cond.wait(_POLL_INTERVAL)
            if self._closed:
                return False
            self._items.append(item)
            self._cond.notify_all()
            return True

    def try_send(self, item: Any) -> bool:
        """Non-blocking send; drops the item when full or closed."""
        with self._cond:
            if self._closed or len(self._items) >= self.capacity:
                return False
            self._items.append(item)
            self._cond.notify_all()
            return True

    def receive(self, timeout: Optional[float] = None) -> Tuple[Any, bool]:
        """Next item as (item, True); (None, False) once closed and drained.

        With a timeout, returns (None, True) if nothing arrived in time.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                return None, True
            if self._items:
                item = self._items.popleft()
                self._cond.notify_all()
                return item, True
            return None, False

    def close(self) -> None:
        """Never blocks; pending items stay readable."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()


__all__ = ["Channel", "DEFAULT_CAPACITY"]
