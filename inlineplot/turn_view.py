"""Notebook rendering of one tutor turn.

Prose segments are rendered as markdown and go to
:class:`ipywidgets.HTMLMath`, which typesets the ``$...$`` math left in
them; plot segments go through :func:`~inlineplot.plot_renderer.render_plot`
and land in :class:`ipywidgets.HTML`. Plots that render as nothing are left
out of the box entirely.
"""

from __future__ import annotations

import html
import re
from typing import Optional

import ipywidgets as widgets
import markdown
from IPython.display import display

from .directive_segments import PlotSegment, TextSegment, accent_color, split_segments
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions
from .plot_renderer import render_plot

__all__ = ["render_turn", "show_turn"]


# Display math first so $$...$$ is not read as two empty inline spans.
_MATH_SPAN = re.compile(r"\$\$.+?\$\$|\$[^$\n]+?\$", re.DOTALL)
_MATH_TOKEN = re.compile(r"inlineplotmath(\d+)x")


def _prose_html(text: str) -> str:
    """Escape prose, render it as markdown, and keep ``$...$`` math intact for HTMLMath."""
    spans: list[str] = []

    def _stash(match: re.Match) -> str:
        spans.append(html.escape(match.group(0), quote=False))
        return f"inlineplotmath{len(spans) - 1}x"

    body = html.escape(_MATH_SPAN.sub(_stash, text), quote=False)
    rendered = markdown.markdown(body, extensions=["nl2br"])
    return _MATH_TOKEN.sub(lambda m: spans[int(m.group(1))], rendered)


def render_turn(
    text: str,
    *,
    deep_dive: bool = False,
    color: Optional[str] = None,
    options: PlotOptions = DEFAULT_PLOT_OPTIONS,
) -> widgets.VBox:
    """Build a widget box for ``text`` with its plot directives rendered inline.

    Parameters
    ----------
    text : str
        Tutor output, possibly containing ``[PLOT: ...]`` directives.
    deep_dive : bool, optional
        Selects the deep-dive accent color when ``color`` is not given.
    color : str or None, optional
        Explicit accent color for every plot in the turn.
    options : PlotOptions, optional
        Renderer constants.

    Returns
    -------
    ipywidgets.VBox
        One child per rendered segment, in text order.
    """
    stroke = color or accent_color(deep_dive, options)
    children: list[widgets.Widget] = []
    for segment in split_segments(text):
        if isinstance(segment, TextSegment):
            if segment.text.strip():
                children.append(widgets.HTMLMath(value=_prose_html(segment.text)))
        elif isinstance(segment, PlotSegment):
            view = render_plot(segment.payload, stroke, options)
            if view:
                children.append(widgets.HTML(value=view.html))
    return widgets.VBox(children)


def show_turn(text: str, **kwargs) -> widgets.VBox:
    """Render ``text`` with :func:`render_turn` and display it."""
    box = render_turn(text, **kwargs)
    display(box)
    return box
