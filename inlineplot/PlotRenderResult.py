"""Outcome of evaluating one plot directive.

Evaluation has exactly three outcomes, each its own immutable type:

- :class:`PlotSuccess` - at least two usable samples plus their view bounds,
- :class:`PlotFailure` - an error worth showing inline (bad expression or
  bad domain) with a human-readable message,
- :class:`PlotNothing` - nothing to draw and nothing worth saying (blank
  directive, or fewer than two usable samples).

:func:`evaluate_directive` maps any payload string to one of them and never
raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, TypeAlias, Union

from .NumericExpression import NumericExpression
from .ParseExpression import CompileError
from .PlotDirective import InvalidDomainError, ParseError, PlotDirective, parse_directive
from .plot_coordinates import ViewBounds, compute_view_bounds
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions
from .plot_sampling import SamplePoint, sample_expression

__all__ = [
    "PlotSuccess",
    "PlotFailure",
    "PlotNothing",
    "PlotRenderResult",
    "evaluate_directive",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class PlotSuccess:
    """Usable point set for one directive."""

    directive: PlotDirective
    points: tuple[SamplePoint, ...]
    bounds: ViewBounds


@dataclass(frozen=True)
class PlotFailure:
    """Inline error for one directive."""

    kind: Literal["compile", "domain"]
    message: str
    directive: Optional[PlotDirective] = None


@dataclass(frozen=True)
class PlotNothing:
    """Directive that renders as nothing."""

    reason: Literal["parse", "insufficient_data"]
    directive: Optional[PlotDirective] = None


PlotRenderResult: TypeAlias = Union[PlotSuccess, PlotFailure, PlotNothing]


def evaluate_directive(payload: str, options: PlotOptions = DEFAULT_PLOT_OPTIONS) -> PlotRenderResult:
    """Parse, compile, and sample ``payload``.

    Parameters
    ----------
    payload : str
        Directive content, e.g. ``"sin(x), -3.14, 3.14"``.
    options : PlotOptions, optional
        Sample count, default domain, and clamp constants.

    Returns
    -------
    PlotRenderResult
        Same payload and options always give an equal result.
    """
    try:
        directive = parse_directive(payload, options)
    except InvalidDomainError as exc:
        logger.info("plot directive rejected: %s", exc)
        return PlotFailure(kind="domain", message=str(exc))
    except ParseError as exc:
        logger.debug("plot directive ignored: %s", exc)
        return PlotNothing(reason="parse")

    try:
        expr = NumericExpression.compile(directive.expression)
    except CompileError as exc:
        logger.info("plot expression %r did not compile: %s", directive.source, exc)
        return PlotFailure(kind="compile", message=str(exc), directive=directive)

    points = sample_expression(expr, directive.domain_min, directive.domain_max, options.sample_count)
    if len(points) < 2:
        logger.debug("plot %r has %d usable sample(s); drawing nothing", directive.source, len(points))
        return PlotNothing(reason="insufficient_data", directive=directive)

    bounds = compute_view_bounds(points, directive.domain_min, directive.domain_max, options)
    return PlotSuccess(directive=directive, points=points, bounds=bounds)
