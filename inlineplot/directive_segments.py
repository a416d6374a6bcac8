"""Splitting of tutor text into prose and plot-directive segments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TypeAlias, Union

from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions

__all__ = ["TextSegment", "PlotSegment", "Segment", "split_segments", "accent_color"]

PLOT_DIRECTIVE = re.compile(r"\[PLOT:\s*([^\]]+)\]")


@dataclass(frozen=True)
class TextSegment:
    """Prose to hand to the markdown/math renderer."""

    text: str


@dataclass(frozen=True)
class PlotSegment:
    """One ``[PLOT: ...]`` directive.

    ``payload`` is the content between ``[PLOT:`` and ``]``; ``raw`` is the
    directive as it appeared in the text.
    """

    payload: str
    raw: str


Segment: TypeAlias = Union[TextSegment, PlotSegment]


def split_segments(text: str) -> list[Segment]:
    """Split ``text`` into ordered prose and plot segments.

    Empty prose between adjacent directives is dropped.

    >>> split_segments("Look: [PLOT: x^2, -2, 2] nice.")
    [TextSegment(text='Look: '), PlotSegment(payload='x^2, -2, 2', raw='[PLOT: x^2, -2, 2]'), TextSegment(text=' nice.')]
    """
    segments: list[Segment] = []
    pos = 0
    for match in PLOT_DIRECTIVE.finditer(text or ""):
        if match.start() > pos:
            segments.append(TextSegment(text[pos : match.start()]))
        segments.append(PlotSegment(payload=match.group(1).strip(), raw=match.group(0)))
        pos = match.end()
    if text and pos < len(text):
        segments.append(TextSegment(text[pos:]))
    return segments


def accent_color(deep_dive: bool = False, options: PlotOptions = DEFAULT_PLOT_OPTIONS) -> str:
    """Return the curve color for the current conversation mode."""
    return options.deep_dive_color if deep_dive else options.color
