from __future__ import annotations

from inlineplot.directive_segments import PlotSegment, TextSegment, accent_color, split_segments
from inlineplot.plot_options import PlotOptions


def test_prose_and_directives_keep_their_order() -> None:
    text = "Here is the parabola: [PLOT: x^2, -2, 2] What do you notice?"
    assert split_segments(text) == [
        TextSegment("Here is the parabola: "),
        PlotSegment(payload="x^2, -2, 2", raw="[PLOT: x^2, -2, 2]"),
        TextSegment(" What do you notice?"),
    ]


def test_adjacent_directives_have_no_empty_prose_between() -> None:
    segments = split_segments("[PLOT:sin(x)][PLOT: cos(x) ]")
    assert segments == [
        PlotSegment(payload="sin(x)", raw="[PLOT:sin(x)]"),
        PlotSegment(payload="cos(x)", raw="[PLOT: cos(x) ]"),
    ]


def test_text_without_directives_is_one_segment() -> None:
    assert split_segments("What is $2x$?") == [TextSegment("What is $2x$?")]
    assert split_segments("") == []


def test_unterminated_or_empty_directives_stay_prose() -> None:
    assert split_segments("[PLOT: x^2") == [TextSegment("[PLOT: x^2")]
    assert split_segments("[PLOT:]") == [TextSegment("[PLOT:]")]


def test_accent_color_tracks_mode() -> None:
    assert accent_color() == "#6366f1"
    assert accent_color(deep_dive=True) == "#a855f7"
    assert accent_color(True, PlotOptions(deep_dive_color="#000000")) == "#000000"
