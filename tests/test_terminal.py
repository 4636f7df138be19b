"""Tests for termtype.ui.terminal – key translation and drawing without a real terminal."""

from __future__ import annotations

import curses
import threading

import pytest

from termtype.core.keys import Key, KeyEvent, Modifiers
from termtype.core.session import RoundState
from termtype.ui.colors import Style
from termtype.ui.terminal import INPUT_SLICE, CursesKeyReader, CursesRenderer, translate_key
from termtype.ui.view import Snapshot, WordView


class FakeScreen:
    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.size = (height, width)
        self.writes: list[tuple[int, int, str]] = []
        self.refreshed = 0

    def getmaxyx(self):
        return self.size

    def erase(self):
        self.writes.clear()

    def addstr(self, y, x, text, attr=0):
        self.writes.append((y, x, text))

    def refresh(self):
        self.refreshed += 1

    def text(self) -> str:
        return " ".join(text for _, _, text in self.writes)


class FakeInputWindow:
    """Scripted get_wch results; each timeout() call advances a fake clock.

    Once the script is used up every read times out.
    """

    def __init__(self, results, lock=None) -> None:
        self.results = list(results)
        self.timeouts: list[int] = []
        self.now = 0.0
        self.lock = lock
        self.locked_reads: list[bool] = []

    def clock(self) -> float:
        return self.now

    def keypad(self, flag):
        pass

    def timeout(self, ms):
        self.timeouts.append(ms)
        self.now += ms / 1000

    def get_wch(self):
        if self.lock is not None:
            self.locked_reads.append(self.lock.locked())
        if not self.results:
            raise curses.error("no input")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def snapshot(**overrides) -> Snapshot:
    values = dict(
        state=RoundState.ACTIVE,
        words=[WordView([("he", Style.CORRECT), ("llo", Style.DEFAULT)], current=True), WordView([("world", Style.DEFAULT)])],
        typed="he",
        status="25s | ~0 wpm",
        hint="esc quit",
    )
    values.update(overrides)
    return Snapshot(**values)


# ===========================================================================
# translate_key
# ===========================================================================

class TestTranslateKey:
    @pytest.mark.parametrize("raw", ["a", "z", "5", ";"])
    def test_printable(self, raw):
        assert translate_key(raw) == KeyEvent(Key.CHAR, raw)

    def test_uppercase_carries_shift(self):
        assert translate_key("A") == KeyEvent(Key.CHAR, "A", Modifiers.SHIFT)

    def test_space(self):
        assert translate_key(" ") == KeyEvent(Key.CHAR, " ")

    def test_ctrl_c(self):
        event = translate_key("\x03")
        assert event == KeyEvent(Key.CHAR, "c", Modifiers.CONTROL)
        assert event.is_kill()

    @pytest.mark.parametrize("raw", ["\n", "\r", curses.KEY_ENTER])
    def test_enter(self, raw):
        assert translate_key(raw).code is Key.ENTER

    @pytest.mark.parametrize("raw", ["\x7f", "\b", curses.KEY_BACKSPACE])
    def test_backspace(self, raw):
        assert translate_key(raw).code is Key.BACKSPACE

    def test_escape(self):
        assert translate_key("\x1b").code is Key.ESC

    @pytest.mark.parametrize("raw", [curses.KEY_UP, curses.KEY_F1])
    def test_other_special_keys(self, raw):
        assert translate_key(raw).code is Key.OTHER


# ===========================================================================
# CursesKeyReader
# ===========================================================================

class TestKeyReader:
    def reader(self, window, lock=None) -> CursesKeyReader:
        return CursesKeyReader(window, lock=lock, clock=window.clock)

    def test_returns_translated_key(self):
        window = FakeInputWindow(["x"])
        assert self.reader(window).poll(0.25) == KeyEvent(Key.CHAR, "x")
        assert window.timeouts == [int(INPUT_SLICE * 1000)]

    def test_timeout_returns_none(self):
        window = FakeInputWindow([])
        assert self.reader(window).poll(0.1) is None
        assert window.now == pytest.approx(0.1, abs=INPUT_SLICE)

    def test_waits_in_short_slices(self):
        window = FakeInputWindow([])
        self.reader(window).poll(0.25)
        assert len(window.timeouts) > 1
        assert all(ms <= INPUT_SLICE * 1000 for ms in window.timeouts)

    def test_key_after_several_empty_slices(self):
        window = FakeInputWindow([curses.error("no input"), curses.error("no input"), "k"])
        assert self.reader(window).poll(0.25) == KeyEvent(Key.CHAR, "k")
        assert len(window.timeouts) == 3

    def test_resize_is_skipped(self):
        window = FakeInputWindow([curses.KEY_RESIZE, "y"])
        assert self.reader(window).poll(0.25) == KeyEvent(Key.CHAR, "y")

    def test_negative_timeout_clamped(self):
        window = FakeInputWindow(["x"])
        self.reader(window).poll(-1.0)
        assert window.timeouts == [0]

    def test_reads_hold_the_screen_lock(self):
        lock = threading.Lock()
        window = FakeInputWindow([curses.error("no input"), "x"], lock=lock)
        self.reader(window, lock).poll(0.25)
        assert window.locked_reads == [True, True]
        assert not lock.locked()


# ===========================================================================
# CursesRenderer
# ===========================================================================

class TestRenderer:
    def test_draws_words_typed_and_status(self):
        screen = FakeScreen()
        CursesRenderer(screen)(snapshot())
        drawn = screen.text()
        for piece in ("he", "llo", "world", "25s | ~0 wpm", "esc quit"):
            assert piece in drawn
        assert screen.refreshed == 1

    def test_tiny_terminal_does_not_crash(self):
        screen = FakeScreen(height=3, width=10)
        CursesRenderer(screen)(snapshot())
        assert all(0 <= y < 3 and x < 10 for y, x, _ in screen.writes)

    def test_frame_drawn_under_lock(self):
        lock = threading.Lock()
        seen = []

        class LockCheckingScreen(FakeScreen):
            def addstr(self, y, x, text, attr=0):
                seen.append(lock.locked())
                super().addstr(y, x, text, attr)

        CursesRenderer(LockCheckingScreen(), lock=lock)(snapshot())
        assert seen and all(seen)
        assert not lock.locked()

    def test_wrap_splits_long_queues(self):
        words = [WordView([("abcdefgh", Style.DEFAULT)]) for _ in range(10)]
        lines = CursesRenderer._wrap(words, 20)
        assert [len(line) for line in lines] == [2] * 5
