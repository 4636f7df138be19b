from __future__ import annotations

import random
from typing import Optional, Sequence


def sample_words(
    dictionary: Sequence[str],
    count: int,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Draw ``count`` words without replacement, in random order.

    A dictionary shorter than ``count`` yields all of its words, shuffled.
    The dictionary itself is never modified. Pass ``rng`` for a reproducible
    draw; otherwise the process-wide ``random`` state is used.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    source = rng if rng is not None else random
    return source.sample(list(dictionary), min(count, len(dictionary)))
