"""Tests for rich rendering of segments and summaries."""

from rich.console import Console

from aligner import Kind, align
from metrics import SessionSummary, WordResult
from rendering import PLACEHOLDER, STYLES, segment_text, summary_renderable


def render_plain(renderable) -> str:
    console = Console(width=80, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestSegmentText:
    def test_placeholders_for_untyped(self):
        text = segment_text(align("cat dog", "cat "))
        assert text.plain == "cat " + PLACEHOLDER * 3 + " "

    def test_incorrect_shows_target(self):
        text = segment_text(align("cat", "cot"))
        assert text.plain == "cat "

    def test_excess_shown(self):
        text = segment_text(align("jan", "janne"))
        assert text.plain == "janne "

    def test_styles(self):
        text = segment_text(align("cat", "cot"))
        styles = {text.plain[span.start:span.end]: span.style for span in text.spans}
        assert styles["a"] == STYLES[Kind.INCORRECT]

    def test_empty(self):
        assert segment_text([]).plain == ""


class TestSummaryRenderable:
    def test_contains_figures(self):
        summary = SessionSummary(
            words_total=2,
            words_typed=2,
            words_correct=1,
            typed_chars=8,
            correct_chars=7,
            accuracy=0.875,
            active_s=3.0,
            wall_s=4.0,
            wpm=28.0,
            rows=(
                WordResult("toki", "toki", 1.0, True),
                WordResult("pona", "pina", 2.0, False),
            ),
        )
        output = render_plain(summary_renderable(summary))
        assert "WPM: 28.0" in output
        assert "Accuracy: 87.5%" in output
        assert "Words: 1/2 correct" in output
        assert "pina" in output
        assert "2.00" in output
