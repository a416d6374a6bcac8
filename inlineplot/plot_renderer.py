"""Rendering boundary for plot directives.

:func:`render_plot` is what a host calls for every ``[PLOT: ...]`` it finds.
It always returns a :class:`PlotView` and never raises, so one malformed
directive cannot break the rest of a conversation turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from .PlotRenderResult import (
    PlotFailure,
    PlotNothing,
    PlotRenderResult,
    PlotSuccess,
    evaluate_directive,
)
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions
from .plot_svg import assemble_svg, error_panel_html, plot_card_html

__all__ = ["PlotView", "render_plot"]

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class PlotView:
    """Renderable outcome of one directive.

    Parameters
    ----------
    kind : {"plot", "error", "empty"}
        What the view shows.
    html : str
        Markup to embed; empty for ``"empty"`` views.
    svg : str or None
        The bare SVG document for ``"plot"`` views.
    message : str or None
        Error text for ``"error"`` views.
    result : PlotRenderResult or None
        The evaluation this view was built from, when there was one.
    """

    kind: Literal["plot", "error", "empty"]
    html: str = ""
    svg: Optional[str] = None
    message: Optional[str] = None
    result: Optional[PlotRenderResult] = None

    def __bool__(self) -> bool:
        return self.kind != "empty"

    def _repr_html_(self) -> str:
        return self.html


def _view_for(result: PlotRenderResult, color: Optional[str], options: PlotOptions) -> PlotView:
    if isinstance(result, PlotSuccess):
        svg = assemble_svg(result, color, options)
        return PlotView(kind="plot", html=plot_card_html(svg, result), svg=svg, result=result)
    if isinstance(result, PlotFailure):
        return PlotView(kind="error", html=error_panel_html(result.message), message=result.message, result=result)
    if isinstance(result, PlotNothing):
        return PlotView(kind="empty", result=result)
    raise TypeError(f"Unexpected plot result {type(result).__name__}")


def render_plot(
    payload: str,
    color: Optional[str] = None,
    options: PlotOptions = DEFAULT_PLOT_OPTIONS,
) -> PlotView:
    """Turn a directive payload into a :class:`PlotView`.

    Parameters
    ----------
    payload : str
        Directive content, e.g. ``"x^2, -2, 2"``.
    color : str or None, optional
        Accent color of the curve (cosmetic only). Defaults to
        ``options.color``.
    options : PlotOptions, optional
        Renderer constants.

    Returns
    -------
    PlotView
        ``"plot"`` on success, ``"error"`` for bad expressions or domains,
        ``"empty"`` for blank directives and curves with fewer than two
        usable samples.

    Examples
    --------
    >>> render_plot("x^2").kind
    'plot'
    >>> render_plot("a*x").kind
    'error'
    """
    try:
        return _view_for(evaluate_directive(payload, options), color, options)
    except Exception as exc:
        logger.exception("render_plot(%r) failed", payload)
        message = f"Unexpected error while plotting: {type(exc).__name__}: {exc}"
        return PlotView(kind="error", html=error_panel_html(message), message=message)
