from __future__ import annotations

import enum
import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from termtype.core.channel import Channel
from termtype.core.config import Settings
from termtype.core.sampler import sample_words

logger = logging.getLogger(__name__)

DELIMITER = " "
CHARS_PER_WORD = 5


class RoundState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class RoundMetrics:
    """Derived scores for the current round."""

    live_wpm: int
    remaining_seconds: int
    accuracy: float
    gross_wpm: float
    adjusted_wpm: int


class TypingTest:
    """State machine for a timed typing round.

    A round starts IDLE with a freshly sampled word queue. The first typed
    character starts the clock (ACTIVE); once ``round_seconds`` have passed a
    tick ends it (COMPLETED) and Enter resets to a new IDLE round.

    Scoring compares the typed buffer to the front word position by position
    up to the shorter of the two; characters past that length are not scored
    either way.
    """

    def __init__(
        self,
        dictionary: Sequence[str],
        settings: Optional[Settings] = None,
        exit_signal: Optional[Channel[None]] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._dictionary = tuple(dictionary)
        self._settings = settings or Settings()
        self._exit_signal = exit_signal
        self._clock = clock
        self._rng = rng

        self._state = RoundState.IDLE
        self._queue: deque[str] = deque(self._sample())
        self._typed: list[str] = []
        self._words_tried: list[str] = []
        self._words_entered: list[str] = []
        self._chars_correct = 0
        self._chars_wrong = 0
        self._start = self._clock()

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def state(self) -> RoundState:
        """Current phase of the round."""
        return self._state

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def word_queue(self) -> tuple[str, ...]:
        """Words still to type, front first."""
        return tuple(self._queue)

    @property
    def typed(self) -> str:
        """Characters entered since the last submission."""
        return "".join(self._typed)

    @property
    def words_tried(self) -> tuple[str, ...]:
        """Target words popped by each submission, in order."""
        return tuple(self._words_tried)

    @property
    def words_entered(self) -> tuple[str, ...]:
        """What was actually typed for each entry in ``words_tried``."""
        return tuple(self._words_entered)

    @property
    def chars_correct(self) -> int:
        return self._chars_correct

    @property
    def chars_wrong(self) -> int:
        return self._chars_wrong

    @property
    def start_time(self) -> float:
        """Clock reading at the IDLE -> ACTIVE transition."""
        return self._start

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def on_tick(self, now: Optional[float] = None) -> None:
        """End an active round once its time is up."""
        if self._state is not RoundState.ACTIVE:
            return
        now = self._clock() if now is None else now
        if now - self._start >= self._settings.round_seconds:
            self._state = RoundState.COMPLETED
            self._queue.clear()
            logger.info(
                "Round completed: %d correct, %d wrong, %d words",
                self._chars_correct,
                self._chars_wrong,
                len(self._words_tried),
            )

    def on_character(self, ch: str, shift: bool = False, now: Optional[float] = None) -> None:
        """Type one character; the delimiter submits the word instead."""
        if self._state is RoundState.COMPLETED:
            return
        if shift:
            upper = ch.upper()
            # some letters upper-case to several characters (ß -> SS)
            if len(upper) == 1:
                ch = upper
        if ch == DELIMITER:
            self._submit_word()
            return
        if self._state is RoundState.IDLE:
            self._state = RoundState.ACTIVE
            self._start = self._clock() if now is None else now
            logger.debug("Round started at %.3f", self._start)
        self._typed.append(ch)

    def on_backspace(self) -> None:
        """Drop the last typed character, if any."""
        if self._typed:
            self._typed.pop()

    def on_confirm(self) -> None:
        """Start a new round after a completed one."""
        if self._state is not RoundState.COMPLETED:
            return
        self._queue = deque(self._sample())
        self._typed.clear()
        self._chars_correct = 0
        self._chars_wrong = 0
        self._words_tried.clear()
        self._words_entered.clear()
        self._state = RoundState.IDLE
        logger.debug("Round reset with %d words", len(self._queue))

    def on_exit_request(self) -> None:
        """Ask the dispatch loop to shut down; the round itself is untouched."""
        if self._exit_signal is None:
            logger.warning("Exit requested but no exit channel is attached")
            return
        self._exit_signal.send(None)

    def _submit_word(self) -> None:
        if not self._queue:
            self._typed.clear()
            return

        target = self._queue[0]
        for typed_ch, target_ch in zip(self._typed, target):
            if typed_ch == target_ch:
                self._chars_correct += 1
            else:
                self._chars_wrong += 1

        self._words_entered.append(self.typed)
        self._words_tried.append(self._queue.popleft())
        self._typed.clear()

    def _sample(self) -> list[str]:
        return sample_words(self._dictionary, self._settings.word_count, self._rng)

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def elapsed(self, now: Optional[float] = None) -> float:
        """Seconds since the round started; 0 while IDLE."""
        if self._state is RoundState.IDLE:
            return 0.0
        now = self._clock() if now is None else now
        return max(0.0, now - self._start)

    def metrics(self, now: Optional[float] = None) -> RoundMetrics:
        """Scores for display.

        ``live_wpm`` rescales correct characters over the round window to a
        per-minute rate. The completed-round figures are zero when nothing was
        typed.
        """
        round_seconds = self._settings.round_seconds
        correct, wrong = self._chars_correct, self._chars_wrong
        total = correct + wrong

        live_wpm = (correct // CHARS_PER_WORD) * 60 // round_seconds
        remaining = max(0, round_seconds - int(self.elapsed(now)))

        accuracy = correct / total if total else 0.0
        gross_wpm = (total / CHARS_PER_WORD) * (60 / round_seconds)
        adjusted_wpm = int(gross_wpm * accuracy)
        return RoundMetrics(
            live_wpm=live_wpm,
            remaining_seconds=remaining,
            accuracy=accuracy,
            gross_wpm=gross_wpm,
            adjusted_wpm=adjusted_wpm,
        )
