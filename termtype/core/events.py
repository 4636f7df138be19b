from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from termtype.core.channel import Channel
from termtype.core.keys import KeyEvent

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.25


@dataclass(frozen=True)
class InputEvent:
    key: KeyEvent


@dataclass(frozen=True)
class TickEvent:
    pass


Event = Union[InputEvent, TickEvent]
Poller = Callable[[float], Optional[KeyEvent]]


class EventSource:
    """Multiplexes raw key input and periodic ticks onto one channel.

    ``poll(timeout)`` must return a key event or None within ``timeout``
    seconds. The wait is capped at the time left until the next tick, and the
    tick check runs on every iteration, so a burst of input cannot hold ticks
    back. The loop ends quietly once the channel refuses a send.
    """

    def __init__(
        self,
        poll: Poller,
        channel: Channel[Event],
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if tick_interval <= 0:
            raise ValueError("tick_interval must be positive")
        self._poll = poll
        self._channel = channel
        self._tick_interval = tick_interval
        self._clock = clock
        self._thread: Optional[threading.Thread] = None

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    def run(self) -> None:
        last_tick = self._clock()
        while True:
            timeout = max(0.0, self._tick_interval - (self._clock() - last_tick))
            try:
                key = self._poll(timeout)
            except Exception:
                logger.exception("Input backend failed, stopping event source")
                self._channel.close()
                return

            if key is not None and not self._channel.send(InputEvent(key)):
                break

            if self._clock() - last_tick >= self._tick_interval:
                if not self._channel.send(TickEvent()):
                    break
                last_tick = self._clock()
        logger.debug("Event channel closed, event source stopped")

    def start(self) -> threading.Thread:
        """Run the source on a daemon thread."""
        if self._thread is not None:
            raise RuntimeError("event source already started")
        self._thread = threading.Thread(target=self.run, name="termtype-events", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the background thread; return True once it has stopped."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()
