"""Keyboard events as seen by the typing test."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Key(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    ESC = "esc"
    OTHER = "other"


class Modifiers(enum.Flag):
    NONE = 0
    SHIFT = enum.auto()
    CONTROL = enum.auto()


KILL_CHAR = "c"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press: a key code plus the modifiers held with it."""

    code: Key
    char: Optional[str] = None
    modifiers: Modifiers = Modifiers.NONE

    @property
    def shift(self) -> bool:
        return bool(self.modifiers & Modifiers.SHIFT)

    @property
    def control(self) -> bool:
        return bool(self.modifiers & Modifiers.CONTROL)

    def is_kill(self) -> bool:
        """Return True for the global kill combination (Ctrl+C)."""
        return self.code is Key.CHAR and self.control and (self.char or "").lower() == KILL_CHAR
