"""SVG and HTML assembly for inline plots.

Pure layout: everything numeric has already happened in
:mod:`inlineplot.plot_coordinates`. The output is a standalone SVG document
plus an HTML card around it, and a separate alert panel for errors. All
user-derived text is escaped.
"""

from __future__ import annotations

import html
from typing import Optional

from .PlotRenderResult import PlotSuccess
from .plot_coordinates import CoordinateMapper
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions

__all__ = ["assemble_svg", "plot_card_html", "error_panel_html"]

_GUIDE_STYLE = 'stroke="#cbd5e1" stroke-width="1" stroke-dasharray="4 3"'
_TICK_STYLE = 'font-size="9" fill="#94a3b8" font-weight="bold" font-family="sans-serif"'


def _num(value: float) -> str:
    return f"{value:.2f}"


def assemble_svg(
    result: PlotSuccess,
    color: Optional[str] = None,
    options: PlotOptions = DEFAULT_PLOT_OPTIONS,
) -> str:
    """Compose the polyline, zero guides, tick labels, and label into one SVG.

    The horizontal guide at ``y = 0`` is always inside the clamp window. The
    vertical guide at ``x = 0`` is drawn only when zero lies in the domain.
    """
    mapper = CoordinateMapper(result.bounds, options)
    b = result.bounds
    stroke = html.escape(color or options.color, quote=True)

    left, right = mapper.map_x(b.min_x), mapper.map_x(b.max_x)
    top, bottom = mapper.map_y(b.max_y), mapper.map_y(b.min_y)
    zero_y = mapper.map_y(0.0)
    has_y_axis = b.min_x <= 0.0 <= b.max_x
    axis_x = mapper.map_x(0.0) if has_y_axis else left

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {options.width} {options.height}" '
        f'width="{options.width}" height="{options.height}" class="inlineplot">',
        f'<line class="guide-x" x1="{_num(left)}" y1="{_num(zero_y)}" x2="{_num(right)}" y2="{_num(zero_y)}" {_GUIDE_STYLE}/>',
    ]
    if has_y_axis:
        parts.append(
            f'<line class="guide-y" x1="{_num(axis_x)}" y1="{_num(top)}" x2="{_num(axis_x)}" y2="{_num(bottom)}" {_GUIDE_STYLE}/>'
        )
    parts.extend(
        [
            f'<text x="{_num(right - 5)}" y="{_num(zero_y + 12)}" text-anchor="end" {_TICK_STYLE}>x</text>',
            f'<text x="{_num(axis_x + 5)}" y="{_num(top + 5)}" {_TICK_STYLE}>y</text>',
            f'<text class="label" x="{options.padding}" y="{_num(options.padding * 0.6)}" '
            f'font-size="11" fill="{stroke}" font-family="monospace">y = {html.escape(result.directive.source)}</text>',
            f'<path d="{mapper.path_data(result.points)}" fill="none" stroke="{stroke}" stroke-width="3" '
            'stroke-linecap="round" stroke-linejoin="round"/>',
            "</svg>",
        ]
    )
    return "\n".join(parts)


def plot_card_html(svg: str, result: PlotSuccess) -> str:
    """Wrap an assembled SVG in a card with the expression and domain caption."""
    d = result.directive
    return (
        '<div class="inlineplot-card" style="border:1px solid #e2e8f0;border-radius:16px;'
        'padding:12px;margin:12px 0;background:#fff">'
        '<div style="font-size:10px;font-weight:800;color:#64748b;letter-spacing:.1em;'
        'text-transform:uppercase">Interactive Plot</div>'
        f"{svg}"
        '<div style="text-align:center;font-size:9px;font-weight:700;color:#94a3b8">'
        f"Range: [{d.domain_min:g}, {d.domain_max:g}]</div>"
        "</div>"
    )


def error_panel_html(message: str) -> str:
    """Return an alert-styled panel carrying ``message``."""
    return (
        '<div class="inlineplot-error" role="alert" style="padding:12px;margin:12px 0;'
        "background:#fef2f2;color:#dc2626;border:1px solid #fee2e2;border-radius:12px;"
        'font-family:monospace;font-size:11px;white-space:pre-wrap">'
        f"Plotting Error: {html.escape(message)}</div>"
    )
