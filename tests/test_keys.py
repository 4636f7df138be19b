"""Tests for termtype.core.keys – key events."""

from __future__ import annotations

from termtype.core.keys import Key, KeyEvent, Modifiers


class TestKeyEvent:
    def test_defaults(self):
        k = KeyEvent(Key.ENTER)
        assert k.char is None
        assert k.modifiers == Modifiers.NONE
        assert not k.shift
        assert not k.control

    def test_combined_modifiers(self):
        k = KeyEvent(Key.CHAR, "a", Modifiers.SHIFT | Modifiers.CONTROL)
        assert k.shift
        assert k.control


class TestIsKill:
    def test_ctrl_c(self):
        assert KeyEvent(Key.CHAR, "c", Modifiers.CONTROL).is_kill()

    def test_ctrl_shift_c(self):
        assert KeyEvent(Key.CHAR, "C", Modifiers.CONTROL | Modifiers.SHIFT).is_kill()

    def test_plain_c(self):
        assert not KeyEvent(Key.CHAR, "c").is_kill()

    def test_ctrl_other(self):
        assert not KeyEvent(Key.CHAR, "x", Modifiers.CONTROL).is_kill()

    def test_escape(self):
        assert not KeyEvent(Key.ESC).is_kill()
