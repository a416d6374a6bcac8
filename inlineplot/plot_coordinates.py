"""Data-space to canvas-space mapping for inline plots.

Purpose
-------
Given the surviving samples and the directive's domain, compute the visible
vertical window and map every sample onto the padded drawing area of the
canvas. Canvas ``y`` grows downwards, so the vertical map is inverted.

Clamp window
------------
The vertical window always contains ``[-min_half_span, min_half_span]`` (zero
stays on screen for flat curves) and never exceeds
``[-max_abs_y, max_abs_y]`` (a single sample next to a pole cannot squash the
rest of the curve into a flat line). Samples outside the window are pinned to
its edge so the path stays on the canvas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions
from .plot_sampling import SamplePoint

__all__ = ["ViewBounds", "CoordinateMapper", "compute_view_bounds"]


@dataclass(frozen=True)
class ViewBounds:
    """Visible data-space rectangle of a plot."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float


def compute_view_bounds(
    points: Sequence[SamplePoint],
    domain_min: float,
    domain_max: float,
    options: PlotOptions = DEFAULT_PLOT_OPTIONS,
) -> ViewBounds:
    """Derive :class:`ViewBounds` from samples and the directive's domain.

    Raises
    ------
    ValueError
        If ``points`` is empty.
    """
    if not points:
        raise ValueError("compute_view_bounds() needs at least one sample")
    ys = [p.y for p in points]
    k1, k2 = options.min_half_span, options.max_abs_y
    min_y = max(min(min(ys), -k1), -k2)
    max_y = min(max(max(ys), k1), k2)
    return ViewBounds(min_x=float(domain_min), max_x=float(domain_max), min_y=min_y, max_y=max_y)


class CoordinateMapper:
    """Linear maps from a :class:`ViewBounds` onto the padded canvas."""

    def __init__(self, bounds: ViewBounds, options: PlotOptions = DEFAULT_PLOT_OPTIONS) -> None:
        if not bounds.min_x < bounds.max_x or not bounds.min_y < bounds.max_y:
            raise ValueError(f"Degenerate view bounds: {bounds!r}")
        self.bounds = bounds
        self.options = options

    def clamp_y(self, y: float) -> float:
        return max(self.bounds.min_y, min(self.bounds.max_y, y))

    def map_x(self, x: float) -> float:
        b, o = self.bounds, self.options
        return o.padding + (x - b.min_x) / (b.max_x - b.min_x) * o.inner_width

    def map_y(self, y: float) -> float:
        b, o = self.bounds, self.options
        return o.height - o.padding - (self.clamp_y(y) - b.min_y) / (b.max_y - b.min_y) * o.inner_height

    def map_point(self, point: SamplePoint) -> tuple[float, float]:
        return (self.map_x(point.x), self.map_y(point.y))

    def map_points(self, points: Sequence[SamplePoint]) -> tuple[tuple[float, float], ...]:
        """Map samples to device space, preserving order."""
        return tuple(self.map_point(p) for p in points)

    def path_data(self, points: Sequence[SamplePoint]) -> str:
        """Return an SVG path: move to the first point, line to the rest."""
        return " ".join(
            f"{'M' if i == 0 else 'L'} {px:.2f} {py:.2f}"
            for i, (px, py) in enumerate(self.map_points(points))
        )
