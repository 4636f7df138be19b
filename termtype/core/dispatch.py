from __future__ import annotations

import enum
import logging
import queue
from typing import Callable

from termtype.core.channel import Channel, ChannelClosed
from termtype.core.events import Event, InputEvent
from termtype.core.keys import Key, KeyEvent
from termtype.core.session import TypingTest

logger = logging.getLogger(__name__)


class ExitReason(enum.Enum):
    KILL = "kill"
    QUIT = "quit"
    DISCONNECTED = "disconnected"


def route_key(test: TypingTest, key: KeyEvent) -> None:
    """Forward a key press to the matching state machine operation."""
    if key.code is Key.ESC:
        test.on_exit_request()
    elif key.code is Key.BACKSPACE:
        test.on_backspace()
    elif key.code is Key.ENTER:
        test.on_confirm()
    elif key.code is Key.CHAR and key.char and not key.control:
        test.on_character(key.char, shift=key.shift)


def run_dispatch_loop(
    test: TypingTest,
    events: Channel[Event],
    exit_signal: Channel[None],
    render: Callable[[TypingTest], None],
) -> ExitReason:
    """Draw, wait for one event, apply it; repeat until asked to stop.

    Every consumed event is followed by exactly one redraw, and nothing is
    redrawn without an event. The event channel is closed on return so the
    producer thread winds down.
    """
    try:
        while True:
            render(test)
            try:
                event = events.recv()
            except ChannelClosed:
                logger.info("Event channel closed, leaving dispatch loop")
                return ExitReason.DISCONNECTED

            if isinstance(event, InputEvent):
                if event.key.is_kill():
                    logger.info("Kill combination pressed")
                    return ExitReason.KILL
                route_key(test, event.key)
            else:
                test.on_tick()

            try:
                exit_signal.try_recv()
            except queue.Empty:
                continue
            except ChannelClosed:
                return ExitReason.DISCONNECTED
            logger.info("Exit requested")
            return ExitReason.QUIT
    finally:
        events.close()
