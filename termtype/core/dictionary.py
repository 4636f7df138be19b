from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

HEADER_SENTINEL = "---"
DEFAULT_DICTIONARY = Path(__file__).resolve().parent.parent / "data" / "dict.txt"


class DictionaryProvider:
    """Reads the word list from a text file.

    Every line up to and including the ``---`` sentinel is a header (licence,
    attribution) and is skipped; each following non-blank line is one word.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or DEFAULT_DICTIONARY

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> tuple[str, ...]:
        if not self._path.exists():
            raise FileNotFoundError(f"Dictionary not found: {self._path}")

        lines = self._path.read_text(encoding="utf-8").splitlines()
        try:
            start = lines.index(HEADER_SENTINEL) + 1
        except ValueError:
            raise ValueError(
                f"{self._path.name}: missing '{HEADER_SENTINEL}' header sentinel"
            ) from None

        words = tuple(line.strip() for line in lines[start:] if line.strip())
        if not words:
            raise ValueError(f"{self._path.name}: no words after the header")
        logger.info("Loaded %d words from %s", len(words), self._path)
        return words
