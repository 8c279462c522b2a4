from __future__ import annotations

from dataclasses import dataclass

from dispatcher import SessionView


def compute_correct_chars(target_text: str, typed_text: str) -> int:
    correct = 0
    for i, ch in enumerate(typed_text):
        if i >= len(target_text):
            break
        if ch == target_text[i]:
            correct += 1
    return correct


@dataclass(frozen=True)
class WordResult:
    word: str
    typed: str
    seconds: float
    correct: bool


@dataclass(frozen=True)
class SessionSummary:
    words_total: int
    words_typed: int
    words_correct: int
    typed_chars: int
    correct_chars: int
    accuracy: float
    active_s: float
    wall_s: float
    wpm: float
    rows: tuple[WordResult, ...]


def summarize(session: SessionView) -> SessionSummary:
    rows = tuple(
        WordResult(word=w.text, typed=w.typed, seconds=w.duration, correct=w.is_correct)
        for w in session.words
    )
    typed_chars = sum(len(w.typed) for w in session.words)
    correct_chars = sum(compute_correct_chars(w.text, w.typed) for w in session.words)
    active_s = sum(w.duration for w in session.words)
    accuracy = (correct_chars / typed_chars) if typed_chars > 0 else 0.0
    minutes = max(active_s / 60.0, 1e-9)
    wpm = (correct_chars / 5.0) / minutes if correct_chars else 0.0

    wall_s = 0.0
    if session.started_at is not None and session.finished_at is not None:
        wall_s = max(session.finished_at - session.started_at, 0.0)

    return SessionSummary(
        words_total=len(session.words),
        words_typed=sum(1 for w in session.words if w.typed),
        words_correct=sum(1 for row in rows if row.correct),
        typed_chars=typed_chars,
        correct_chars=correct_chars,
        accuracy=accuracy,
        active_s=active_s,
        wall_s=wall_s,
        wpm=wpm,
        rows=rows,
    )
