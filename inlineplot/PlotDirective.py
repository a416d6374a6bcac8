"""Plot directive model and parser.

A directive payload is the text between ``[PLOT:`` and ``]`` in tutor output,
for example ``sin(x), -3.14, 3.14`` or ``x^2``. It carries an expression and
an optional domain.

Examples
--------
>>> parse_directive("x^2")
PlotDirective(source='x^2', domain=(-5.0, 5.0))
>>> parse_directive("log(x, 2), 0.1, 8").domain
(0.1, 8.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .InputConvert import InputConvert
from .ParseExpression import normalize_expression
from .plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions

__all__ = [
    "ParseError",
    "InvalidDomainError",
    "PlotDirective",
    "parse_directive",
    "split_fields",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class ParseError(ValueError):
    """Raised when a directive payload has no usable expression field."""


class InvalidDomainError(ParseError):
    """Raised when a directive's domain does not satisfy ``min < max``."""


@dataclass(frozen=True)
class PlotDirective:
    """Immutable record of one parsed plot directive.

    Parameters
    ----------
    source : str
        Expression as written (trimmed); used for labels.
    expression : str
        Normalized expression handed to the evaluator.
    domain_min, domain_max : float
        Inclusive evaluation bounds, ``domain_min < domain_max``.
    """

    source: str
    expression: str
    domain_min: float
    domain_max: float

    @property
    def domain(self) -> tuple[float, float]:
        return (self.domain_min, self.domain_max)

    def __repr__(self) -> str:
        return f"PlotDirective(source={self.source!r}, domain={self.domain!r})"


def split_fields(payload: str, *, max_fields: int = 3) -> list[str]:
    """Split ``payload`` on commas that are not nested inside brackets.

    At most ``max_fields`` fields are returned; anything after them is
    dropped.
    """
    fields: list[str] = []
    depth: list[str] = []
    current: list[str] = []
    for ch in payload:
        if ch in _OPENERS:
            depth.append(ch)
        elif ch in _CLOSERS and depth and depth[-1] == _CLOSERS[ch]:
            depth.pop()
        elif ch == "," and not depth:
            fields.append("".join(current))
            current = []
            continue
        current.append(ch)
    fields.append("".join(current))
    if len(fields) > max_fields:
        logger.debug("split_fields: ignoring %d extra field(s) in %r", len(fields) - max_fields, payload)
    return [f.strip() for f in fields[:max_fields]]


def _bound(field: str | None, default: float, role: str) -> float:
    if not field:
        return default
    try:
        return InputConvert(field, float)
    except ValueError as exc:
        logger.debug("parse_directive: unusable %s %r, using %s (%s)", role, field, default, exc)
        return default


def parse_directive(payload: str, options: PlotOptions = DEFAULT_PLOT_OPTIONS) -> PlotDirective:
    """Parse a directive payload ``expression[, min[, max]]``.

    Parameters
    ----------
    payload : str
        Directive content without the surrounding ``[PLOT:`` / ``]``.
    options : PlotOptions, optional
        Supplies the default domain.

    Returns
    -------
    PlotDirective

    Raises
    ------
    ParseError
        If the expression field is missing or blank.
    InvalidDomainError
        If the resulting bounds do not satisfy ``min < max``.

    Notes
    -----
    Bounds that cannot be read as numbers fall back to the default domain
    without an error; bounds may be constant expressions such as ``-pi``.
    """
    fields = split_fields(payload or "")
    source = fields[0]
    if not source:
        raise ParseError(f"Plot directive {payload!r} has no expression")
    expression = normalize_expression(source)
    if not expression:
        raise ParseError(f"Plot directive {payload!r} has no expression")

    lo_default, hi_default = options.default_domain
    domain_min = _bound(fields[1] if len(fields) > 1 else None, lo_default, "min")
    domain_max = _bound(fields[2] if len(fields) > 2 else None, hi_default, "max")
    if not domain_min < domain_max:
        raise InvalidDomainError(
            f"Invalid domain [{domain_min:g}, {domain_max:g}] for {source!r}: min must be less than max"
        )
    return PlotDirective(source=source, expression=expression, domain_min=domain_min, domain_max=domain_max)
