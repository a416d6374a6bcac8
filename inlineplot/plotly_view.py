"""Plotly rendering of a successful plot evaluation.

Notebook hosts that prefer an interactive chart can hand a
:class:`~inlineplot.PlotRenderResult.PlotSuccess` to :func:`to_plotly_figure`.
The figure shows the same samples, clamp window, and dashed zero guides as
the SVG card.
"""

from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

from .PlotRenderResult import PlotRenderResult, PlotSuccess
from .plot_coordinates import CoordinateMapper
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions

__all__ = ["to_plotly_figure"]


def to_plotly_figure(
    result: PlotRenderResult,
    color: Optional[str] = None,
    options: PlotOptions = DEFAULT_PLOT_OPTIONS,
) -> go.Figure:
    """Build a :class:`plotly.graph_objects.Figure` for ``result``.

    Raises
    ------
    ValueError
        If ``result`` is not a :class:`PlotSuccess`.
    """
    if not isinstance(result, PlotSuccess):
        raise ValueError(f"to_plotly_figure() needs a PlotSuccess, got {type(result).__name__}")

    mapper = CoordinateMapper(result.bounds, options)
    b = result.bounds
    source = result.directive.source
    fig = go.Figure()
    fig.add_scatter(
        x=[p.x for p in result.points],
        y=[mapper.clamp_y(p.y) for p in result.points],
        mode="lines",
        name=f"y = {source}",
        line={"color": color or options.color, "width": 3},
    )
    fig.add_hline(y=0, line_dash="dash", line_color="#cbd5e1", line_width=1)
    if b.min_x <= 0.0 <= b.max_x:
        fig.add_vline(x=0, line_dash="dash", line_color="#cbd5e1", line_width=1)
    fig.update_layout(
        title={"text": f"y = {source}", "font": {"size": 11}},
        width=options.width,
        height=options.height,
        margin={"l": options.padding, "r": options.padding, "t": options.padding, "b": options.padding},
        showlegend=False,
        plot_bgcolor="white",
    )
    fig.update_xaxes(range=[b.min_x, b.max_x], title_text="x", showgrid=False, zeroline=False)
    fig.update_yaxes(range=[b.min_y, b.max_y], title_text="y", showgrid=False, zeroline=False)
    return fig
