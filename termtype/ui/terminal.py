"""curses front end: terminal setup, key reading and drawing."""

from __future__ import annotations

import contextlib
import curses
import logging
import os
import threading
import time
from typing import Callable, Iterator, Optional, Union

from termtype.core.keys import Key, KeyEvent, Modifiers
from termtype.ui.colors import Style
from termtype.ui.view import Snapshot, WordView

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"
BOX_MIN_WIDTH = 30
WORD_LINES = 3
# longest single wait inside get_wch while holding the screen lock
INPUT_SLICE = 0.02


def translate_key(raw: Union[int, str]) -> KeyEvent:
    """Map a ``get_wch`` result to a KeyEvent."""
    if isinstance(raw, int):
        if raw in (curses.KEY_BACKSPACE, curses.KEY_DC):
            return KeyEvent(Key.BACKSPACE)
        if raw == curses.KEY_ENTER:
            return KeyEvent(Key.ENTER)
        return KeyEvent(Key.OTHER)

    if raw == ESCAPE:
        return KeyEvent(Key.ESC)
    if raw in ("\n", "\r"):
        return KeyEvent(Key.ENTER)
    if raw in ("\x7f", "\b"):
        return KeyEvent(Key.BACKSPACE)
    if len(raw) == 1 and 0 < ord(raw) < 32:
        # raw mode delivers Ctrl+<letter> as its control code
        return KeyEvent(Key.CHAR, chr(ord(raw) + 96), Modifiers.CONTROL)
    if raw.isprintable():
        modifiers = Modifiers.SHIFT if raw.isupper() else Modifiers.NONE
        return KeyEvent(Key.CHAR, raw, modifiers)
    return KeyEvent(Key.OTHER)


class CursesKeyReader:
    """Bounded-wait key polling on a dedicated one-cell input window.

    ncurses is not thread-safe, so every call into it holds ``lock``, the same
    lock the renderer takes per frame. The wait is cut into short slices so a
    frame never waits longer than ``INPUT_SLICE`` for the reader.
    """

    def __init__(
        self,
        window: "curses.window",
        lock: Optional[threading.Lock] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window = window
        self._lock = lock or threading.Lock()
        self._clock = clock
        with self._lock:
            self._window.keypad(True)

    def poll(self, timeout: float) -> Optional[KeyEvent]:
        deadline = self._clock() + max(0.0, timeout)
        while True:
            remaining = deadline - self._clock()
            wait = min(INPUT_SLICE, max(0.0, remaining))
            with self._lock:
                self._window.timeout(int(wait * 1000))
                try:
                    raw = self._window.get_wch()
                except curses.error:
                    # no input within this slice
                    raw = None
            if raw is not None and raw != curses.KEY_RESIZE:
                return translate_key(raw)
            if remaining <= INPUT_SLICE:
                return None


def _put(screen: "curses.window", y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> int:
    """addstr clipped to the screen; returns the column after the text."""
    height, width = screen.getmaxyx()
    if y < 0 or y >= height or x >= width or not text:
        return x
    text = text[: max(0, width - x - 1)]
    try:
        screen.addstr(y, x, text, attr)
    except curses.error:
        logger.debug("Could not draw at %d,%d", y, x)
    return x + len(text)


class CursesRenderer:
    """Draws a Snapshot: word box, typed word box and status box."""

    def __init__(
        self,
        screen: "curses.window",
        attrs: Optional[dict[Style, int]] = None,
        lock: Optional[threading.Lock] = None,
    ) -> None:
        self._screen = screen
        self._attrs = attrs or {style: curses.A_NORMAL for style in Style}
        self._lock = lock or threading.Lock()

    def __call__(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._draw(snapshot)

    def _draw(self, snapshot: Snapshot) -> None:
        screen = self._screen
        screen.erase()
        height, width = screen.getmaxyx()

        box_width = max(BOX_MIN_WIDTH, width // 2)
        left = max(0, (width - box_width) // 2)
        top = max(0, height // 2 - WORD_LINES)

        self._frame(top, left, box_width, WORD_LINES + 2)
        for row, line in enumerate(self._wrap(snapshot.words, box_width - 4)[:WORD_LINES]):
            x = left + 2
            for word in line:
                for text, style in word.segments:
                    x = _put(screen, top + 1 + row, x, text, self._attrs[style])
                x += 1

        lower = top + WORD_LINES + 2
        typed_width = min(BOX_MIN_WIDTH, box_width // 3)
        self._frame(lower, left, typed_width, 3)
        _put(screen, lower + 1, left + 2, snapshot.typed[-(typed_width - 4):])
        self._frame(lower, left + typed_width, box_width - typed_width, 3)
        _put(screen, lower + 1, left + typed_width + 2, snapshot.status)
        _put(screen, lower + 3, left + 2, snapshot.hint, self._attrs[Style.MUTED])

        screen.refresh()

    def _frame(self, top: int, left: int, width: int, height: int) -> None:
        horizontal = "+" + "-" * (width - 2) + "+"
        _put(self._screen, top, left, horizontal)
        for row in range(1, height - 1):
            _put(self._screen, top + row, left, "|")
            _put(self._screen, top + row, left + width - 1, "|")
        _put(self._screen, top + height - 1, left, horizontal)

    @staticmethod
    def _wrap(words: list[WordView], width: int) -> list[list[WordView]]:
        lines: list[list[WordView]] = [[]]
        used = 0
        for word in words:
            length = len(word.text)
            if lines[-1] and used + 1 + length > width:
                lines.append([])
                used = 0
            used += length + (1 if lines[-1] else 0)
            lines[-1].append(word)
        return lines


@contextlib.contextmanager
def terminal_session() -> Iterator["curses.window"]:
    """Put the terminal in raw, no-echo mode and always restore it on exit."""
    # Esc must not wait a full second for a possible escape sequence
    os.environ.setdefault("ESCDELAY", "25")
    screen = curses.initscr()
    try:
        curses.noecho()
        curses.raw()
        screen.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal cannot hide the cursor")
        yield screen
    finally:
        screen.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()
        logger.debug("Terminal restored")
