"""Renderer constants shared by parsing, sampling, mapping, and assembly.

All numeric knobs of the inline plot pipeline live on :class:`PlotOptions`.
Callers that do not care pass nothing and get :data:`DEFAULT_PLOT_OPTIONS`;
callers that do (tests, hosts with a different canvas) build their own
instance. Nothing in the pipeline reads options from module globals other than
this default.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["PlotOptions", "DEFAULT_PLOT_OPTIONS"]


@dataclass(frozen=True)
class PlotOptions:
    """Configuration knobs for the inline plot renderer.

    Parameters
    ----------
    sample_count : int, optional
        Number of evenly spaced samples, both domain endpoints included.
    default_domain : tuple[float, float], optional
        Domain used when a directive omits its bounds.
    min_half_span : float, optional
        The vertical window always covers ``[-min_half_span, min_half_span]``
        so zero stays visible for near-constant functions.
    max_abs_y : float, optional
        The vertical window never extends beyond ``[-max_abs_y, max_abs_y]``.
    width, height : int, optional
        Canvas size in device units.
    padding : int, optional
        Inset of the drawing area from every canvas edge.
    color : str, optional
        Default accent color of the curve.
    deep_dive_color : str, optional
        Accent color used while the conversation is in deep-dive mode.
    """

    sample_count: int = 121
    default_domain: tuple[float, float] = (-5.0, 5.0)
    min_half_span: float = 0.5
    max_abs_y: float = 20.0
    width: int = 300
    height: int = 200
    padding: int = 25
    color: str = "#6366f1"
    deep_dive_color: str = "#a855f7"

    def __post_init__(self) -> None:
        """Validate option values so every derived map is well defined."""
        if self.sample_count < 2:
            raise ValueError("sample_count must be >= 2")
        lo, hi = self.default_domain
        if not (math.isfinite(lo) and math.isfinite(hi)) or lo >= hi:
            raise ValueError("default_domain must be a finite (min, max) with min < max")
        if not 0 < self.min_half_span <= self.max_abs_y:
            raise ValueError("require 0 < min_half_span <= max_abs_y")
        if self.padding < 0 or 2 * self.padding >= min(self.width, self.height):
            raise ValueError("padding must leave a non-empty drawing area")

    @property
    def inner_width(self) -> int:
        return self.width - 2 * self.padding

    @property
    def inner_height(self) -> int:
        return self.height - 2 * self.padding


DEFAULT_PLOT_OPTIONS = PlotOptions()
