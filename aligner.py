"""Two-level alignment of typed input against target text.

Tokens are aligned first; tokens present on both sides are then aligned
character by character. Every position is followed by a separator segment
that is always Correct, so word boundaries are never marked wrong.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterable, Iterator, Sequence


SEPARATOR = " "


class Kind(enum.Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXCESS = "excess"
    NO_INPUT = "no_input"


@dataclass(frozen=True)
class Segment:
    kind: Kind
    target: str
    typed: str

    @property
    def text(self) -> str:
        """What the display shows: the target where one exists, else the excess input."""
        return self.target if self.kind is not Kind.EXCESS else self.typed

    @classmethod
    def correct(cls, text: str) -> Segment:
        return cls(Kind.CORRECT, text, text)

    @classmethod
    def incorrect(cls, target: str, typed: str) -> Segment:
        return cls(Kind.INCORRECT, target, typed)

    @classmethod
    def excess(cls, text: str) -> Segment:
        return cls(Kind.EXCESS, "", text)

    @classmethod
    def no_input(cls, text: str) -> Segment:
        return cls(Kind.NO_INPUT, text, "")


def split_tokens(text: str) -> list[str]:
    """Split on the separator, dropping one trailing empty token.

    ``"cat "`` is a finished word, not a finished word plus an empty one.
    """
    if not text:
        return []
    tokens = text.split(SEPARATOR)
    if tokens[-1] == "":
        tokens.pop()
    return tokens


def _align_chars(target: str, typed: str) -> Iterator[Segment]:
    for want, got in zip_longest(target, typed):
        if got is None:
            yield Segment.no_input(want)
        elif want is None:
            yield Segment.excess(got)
        elif want == got:
            yield Segment.correct(want)
        else:
            yield Segment.incorrect(want, got)


def _align_tokens(targets: Sequence[str], typed: Sequence[str]) -> Iterator[Segment]:
    for want, got in zip_longest(targets, typed):
        if got is None:
            yield Segment.no_input(want)
        elif want is None:
            yield Segment.excess(got)
        else:
            yield from _align_chars(want, got)
        yield Segment.correct(SEPARATOR)


def coalesce(segments: Iterable[Segment]) -> Iterator[Segment]:
    """Merge adjacent segments of the same kind into runs; drop empty ones."""
    kind = None
    target: list[str] = []
    typed: list[str] = []
    for segment in segments:
        if not segment.target and not segment.typed:
            continue
        if segment.kind is not kind and kind is not None:
            yield Segment(kind, "".join(target), "".join(typed))
            target.clear()
            typed.clear()
        kind = segment.kind
        target.append(segment.target)
        typed.append(segment.typed)
    if kind is not None:
        yield Segment(kind, "".join(target), "".join(typed))


def align(target: str | Sequence[str], typed: str) -> Iterator[Segment]:
    """Classify typed input against the target, lazily, as coalesced segments.

    ``target`` is a token sequence; a plain string is split the same way as
    ``typed``. Safe to call on every keystroke: nothing is kept between calls.
    """
    if isinstance(target, str):
        target = split_tokens(target)
    return coalesce(_align_tokens(target, split_tokens(typed)))


def target_text(segments: Iterable[Segment]) -> str:
    return "".join(segment.target for segment in segments)


def typed_text(segments: Iterable[Segment]) -> str:
    """The input side. An untyped target token still adds its separator."""
    return "".join(segment.typed for segment in segments)
