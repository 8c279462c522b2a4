from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from aligner import SEPARATOR
from corpus import WordRecord


ADVANCE_CHARS = frozenset(" \n\r")

Clock = Callable[[], float]


@dataclass
class SessionWord:
    """One target word, its typed buffer, and the time spent typing it.

    A burst runs from the first character typed into an empty buffer until
    the buffer is emptied again or the word is left. ``duration`` is the sum
    of all closed bursts.
    """
    text: str
    definition: str | None = None
    tier: str | None = None
    typed: str = ""
    burst_start: float | None = None
    duration: float = 0.0

    @property
    def active(self) -> bool:
        return self.burst_start is not None

    def type_char(self, char: str, now: float) -> None:
        if self.burst_start is None:
            self.burst_start = now
        self.typed += char

    def backspace(self, now: float) -> bool:
        """Remove the last character. Returns False if there was nothing to remove."""
        if not self.typed:
            return False
        self.typed = self.typed[:-1]
        if not self.typed:
            self.finish(now)
        return True

    def finish(self, now: float) -> None:
        """Close the running burst, if any."""
        if self.burst_start is None:
            return
        self.duration += max(now - self.burst_start, 0.0)
        self.burst_start = None

    def active_duration(self, now: float) -> float:
        """Duration including the burst still running at ``now``."""
        if self.burst_start is None:
            return self.duration
        return self.duration + max(now - self.burst_start, 0.0)

    @property
    def is_correct(self) -> bool:
        return self.typed == self.text


@dataclass
class Session:
    words: list[SessionWord] = field(default_factory=list)
    cursor: int = 0
    clock: Clock = time.monotonic
    started_at: float | None = None
    finished_at: float | None = None
    completed: bool = False

    @classmethod
    def build(cls, records: Sequence[WordRecord], clock: Clock = time.monotonic) -> Session:
        words = [
            SessionWord(text=r.word, definition=r.definitions, tier=r.usage_category.label)
            for r in records
        ]
        return cls(words=words, clock=clock)

    @property
    def current(self) -> SessionWord | None:
        if self.cursor < len(self.words):
            return self.words[self.cursor]
        return None

    def hint(self) -> str | None:
        """The current word's definition, prefixed with its usage tier."""
        word = self.current
        if word is None or word.definition is None:
            return None
        if word.tier is None:
            return word.definition
        return f"{word.tier}: {word.definition}"

    def type_char(self, char: str) -> None:
        if self.completed or not self.words:
            return
        if char in ADVANCE_CHARS:
            self.advance()
            return
        now = self.clock()
        if self.started_at is None:
            self.started_at = now
        word = self.words[self.cursor]
        word.type_char(char, now)
        self._check_last_word(now)

    def backspace(self) -> None:
        if self.completed or not self.words:
            return
        now = self.clock()
        word = self.words[self.cursor]
        if word.backspace(now):
            self._check_last_word(now)
        elif self.cursor > 0:
            self.cursor -= 1

    def advance(self) -> None:
        """Leave the current word, whatever its buffer holds."""
        if self.completed or not self.words:
            return
        now = self.clock()
        self.words[self.cursor].finish(now)
        self.cursor = min(self.cursor + 1, len(self.words))
        if self.cursor == len(self.words):
            self._complete(now)

    def _check_last_word(self, now: float) -> None:
        word = self.words[self.cursor]
        if self.cursor == len(self.words) - 1 and word.is_correct:
            self._complete(now)

    def _complete(self, now: float) -> None:
        for word in self.words:
            word.finish(now)
        self.cursor = len(self.words)
        self.finished_at = now
        self.completed = True
        logging.info("Session complete: %d words", len(self.words))

    def target_words(self) -> list[str]:
        return [word.text for word in self.words]

    def typed_text(self) -> str:
        """Input so far, in the same separator convention as the target."""
        done = "".join(word.typed + SEPARATOR for word in self.words[:self.cursor])
        current = self.current
        return done + (current.typed if current is not None else "")
