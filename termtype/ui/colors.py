"""Segment styles and their curses color pairs."""

from __future__ import annotations

import curses
import enum


class Style(enum.Enum):
    DEFAULT = "default"
    CORRECT = "correct"
    WRONG = "wrong"
    MUTED = "muted"


class TerminalColors:
    """Foreground colors per style; -1 keeps the terminal default."""

    DEFAULT = -1
    CORRECT = curses.COLOR_GREEN
    WRONG = curses.COLOR_RED
    MUTED = curses.COLOR_CYAN


_PAIR_IDS = {
    Style.CORRECT: 1,
    Style.WRONG: 2,
    Style.MUTED: 3,
}


def init_color_pairs() -> dict[Style, int]:
    """Register the curses color pairs and return the attribute per style.

    Needs an initialised screen. On terminals without color every style
    falls back to plain text.
    """
    attrs = {style: curses.A_NORMAL for style in Style}
    if not curses.has_colors():
        return attrs
    curses.start_color()
    curses.use_default_colors()
    for style, pair_id in _PAIR_IDS.items():
        curses.init_pair(pair_id, getattr(TerminalColors, style.name), TerminalColors.DEFAULT)
        attrs[style] = curses.color_pair(pair_id)
    attrs[Style.WRONG] |= curses.A_BOLD
    return attrs
