"""One-way channels between the event source and the dispatch loop."""

from __future__ import annotations

import queue
import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised by a receive on a channel that is closed and drained."""


_CLOSED = object()


class Channel(Generic[T]):
    """Unbounded FIFO with an explicit closed state.

    ``send`` reports failure instead of raising once the channel is closed,
    which is how a producer learns that nobody is listening any more.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, item: T) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._queue.put(item)
            return True

    def recv(self, timeout: Optional[float] = None) -> T:
        """Block for the next item.

        Raises ``queue.Empty`` when ``timeout`` expires and ``ChannelClosed``
        once the channel is closed and every pending item was received.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # keep the marker visible to any other receiver
            self._queue.put(_CLOSED)
            raise ChannelClosed()
        return item  # type: ignore[return-value]

    def try_recv(self) -> T:
        """Non-blocking receive; raises ``queue.Empty`` if nothing is pending."""
        item = self._queue.get_nowait()
        if item is _CLOSED:
            self._queue.put(_CLOSED)
            raise ChannelClosed()
        return item  # type: ignore[return-value]

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)
