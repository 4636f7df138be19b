"""Read-only projection of a typing test for the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from termtype.core.session import RoundState, TypingTest
from termtype.ui.colors import Style

Segment = tuple[str, Style]

HINTS = {
    RoundState.IDLE: "start typing to begin  |  esc quit",
    RoundState.ACTIVE: "space submits a word  |  esc quit",
    RoundState.COMPLETED: "enter for a new round  |  esc quit",
}


@dataclass
class WordView:
    segments: list[Segment] = field(default_factory=list)
    current: bool = False

    @property
    def text(self) -> str:
        return "".join(text for text, _ in self.segments)


@dataclass
class Snapshot:
    state: RoundState
    words: list[WordView]
    typed: str
    status: str
    hint: str


def current_word_view(target: str, typed: str) -> WordView:
    """Color the word being typed.

    The typed prefix that matches is CORRECT and the untyped rest DEFAULT;
    a single mismatch turns the whole word WRONG.
    """
    matched = 0
    for typed_ch, target_ch in zip(typed, target):
        if typed_ch != target_ch:
            return WordView([(target, Style.WRONG)], current=True)
        matched += 1

    segments: list[Segment] = []
    if matched:
        segments.append((target[:matched], Style.CORRECT))
    if target[matched:]:
        segments.append((target[matched:], Style.DEFAULT))
    return WordView(segments, current=True)


def status_line(test: TypingTest, now: Optional[float] = None) -> str:
    metrics = test.metrics(now)
    if test.state is RoundState.ACTIVE:
        return f"{metrics.remaining_seconds}s | ~{metrics.live_wpm} wpm"
    if test.state is RoundState.COMPLETED:
        return f"{metrics.adjusted_wpm} wpm | {metrics.accuracy * 100:.0f}% acc"
    return "---"


def build_snapshot(test: TypingTest, preview_words: int = 10, now: Optional[float] = None) -> Snapshot:
    queue = test.word_queue[:preview_words]
    words = [
        current_word_view(word, test.typed) if index == 0 else WordView([(word, Style.DEFAULT)])
        for index, word in enumerate(queue)
    ]
    return Snapshot(
        state=test.state,
        words=words,
        typed=test.typed,
        status=status_line(test, now),
        hint=HINTS[test.state],
    )
