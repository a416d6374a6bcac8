"""Domain sampling of compiled plot expressions.

Each sample is independent: a sample that fails to evaluate, or evaluates to
something that is not a finite real number, is dropped and the rest of the
curve survives. Poles and undefined regions therefore show up as gaps in the
polyline rather than as errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

__all__ = ["SamplePoint", "sample_grid", "sample_expression"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Imaginary parts at or below this magnitude count as real.
_IMAG_TOL = 1e-12


@dataclass(frozen=True)
class SamplePoint:
    """One successfully evaluated ``(x, y)`` pair."""

    x: float
    y: float


def sample_grid(domain_min: float, domain_max: float, count: int) -> np.ndarray:
    """Return ``count`` evenly spaced x-values, both endpoints included."""
    if count < 2:
        raise ValueError("count must be >= 2")
    return np.linspace(float(domain_min), float(domain_max), num=int(count))


def _evaluate_vectorized(fn: Callable[[Any], Any], xs: np.ndarray) -> np.ndarray:
    ys = np.asarray(fn(xs))
    if ys.dtype.kind not in "biufc":
        ys = ys.astype(complex)
    return np.broadcast_to(ys, xs.shape)


def _real_values(ys: np.ndarray) -> np.ndarray:
    """Return ``ys`` as floats, with non-real entries set to NaN."""
    if np.iscomplexobj(ys):
        real = np.abs(ys.imag) <= _IMAG_TOL
        ys = np.where(real, ys.real, np.nan)
    return ys.astype(float)


def _evaluate_pointwise(fn: Callable[[Any], Any], xs: np.ndarray) -> np.ndarray:
    ys = np.full(xs.shape, np.nan, dtype=complex)
    for i, x in enumerate(xs):
        try:
            ys[i] = complex(fn(float(x)))
        except Exception:
            continue
    return ys


def sample_expression(
    fn: Callable[[Any], Any],
    domain_min: float,
    domain_max: float,
    count: int,
) -> tuple[SamplePoint, ...]:
    """Evaluate ``fn`` on an even grid and keep the finite real samples.

    Parameters
    ----------
    fn : callable
        Compiled expression; called with a NumPy array first and, if that
        raises or returns values that are not numbers, once per grid value.
    domain_min, domain_max : float
        Inclusive bounds of the grid.
    count : int
        Number of grid values.

    Returns
    -------
    tuple[SamplePoint, ...]
        Surviving samples in ascending ``x`` order. May hold fewer than two
        points; deciding what to do with that is up to the caller.
    """
    xs = sample_grid(domain_min, domain_max, count)
    with np.errstate(all="ignore"):
        try:
            ys = _real_values(_evaluate_vectorized(fn, xs))
        except Exception as exc:
            logger.debug("sample_expression: vectorized evaluation failed (%s); sampling pointwise", exc)
            ys = _real_values(_evaluate_pointwise(fn, xs))
        keep = np.isfinite(ys)

    points = tuple(SamplePoint(float(x), float(y)) for x, y in zip(xs[keep], ys[keep]))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("sample_expression: kept %d of %d samples", len(points), count)
    return points
