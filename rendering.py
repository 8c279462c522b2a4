from __future__ import annotations

from typing import Iterable

from rich.console import Group
from rich.style import Style
from rich.table import Table
from rich.text import Text

from aligner import Kind, Segment
from metrics import SessionSummary


PLACEHOLDER = "_"

STYLES = {
    Kind.CORRECT: Style(),
    Kind.INCORRECT: Style(color="red", underline=True),
    Kind.EXCESS: Style(color="bright_yellow"),
    Kind.NO_INPUT: Style(dim=True),
}


def segment_text(segments: Iterable[Segment]) -> Text:
    """Style aligned segments; untyped target characters show as placeholders."""
    text = Text()
    for segment in segments:
        if segment.kind is Kind.NO_INPUT:
            text.append(PLACEHOLDER * len(segment.target), STYLES[segment.kind])
        else:
            text.append(segment.text, STYLES[segment.kind])
    return text


def summary_renderable(summary: SessionSummary) -> Group:
    header = (
        f"Words: {summary.words_correct}/{summary.words_total} correct\n"
        f"WPM: {summary.wpm:.1f}\n"
        f"Accuracy: {summary.accuracy * 100.0:.1f}%\n"
        f"Active time: {summary.active_s:.1f}s\n"
        f"Session time: {summary.wall_s:.1f}s\n"
    )

    table = Table(show_header=True, box=None, show_edge=False, pad_edge=False)
    table.add_column("Word", no_wrap=True)
    table.add_column("Typed", no_wrap=True)
    table.add_column("Seconds", justify="right", width=8, no_wrap=True)
    table.add_column("", width=2, no_wrap=True)

    for row in summary.rows:
        table.add_row(
            row.word,
            Text(row.typed, style=STYLES[Kind.CORRECT if row.correct else Kind.INCORRECT]),
            f"{row.seconds:.2f}",
            "ok" if row.correct else "x",
        )

    return Group(header, table)
