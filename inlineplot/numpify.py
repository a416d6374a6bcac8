"""
numpify: Compile single-variable SymPy expressions to NumPy callables
=====================================================================

Purpose
-------
Turn a SymPy expression in one variable into a Python function that evaluates
with NumPy, so a plot expression is parsed and compiled once and then sampled
as a whole array (or point by point) without touching SymPy again.

Public API
----------
- :func:`numpify`
- :func:`numpify_cached`
- :class:`NumpifiedFunction`

Generated code
--------------
SymPy's :class:`~sympy.printing.numpy.NumPyPrinter` prints the expression as a
NumPy source fragment, which is wrapped into ``def _generated(x): ...`` and
executed in a namespace that only contains ``numpy``. Functions that have no
NumPy spelling would print as bare calls; those are rejected before code
generation so the error surfaces at compile time, not at sampling time.

Examples
--------
>>> import numpy as np
>>> import sympy as sp
>>> x = sp.Symbol("x")
>>> f = numpify(x**2, var=x)
>>> f(np.array([1.0, 2.0, 3.0]))
array([1., 4., 9.])

Constants broadcast against the input:

>>> numpify(sp.Integer(5), var=x)(np.array([1.0, 2.0]))
array([5., 5.])

Logging
-------
This module is silent by default. To see compile timings:

>>> import logging
>>> logging.getLogger("inlineplot.numpify").setLevel(logging.DEBUG)  # doctest: +SKIP
"""

from __future__ import annotations

import builtins
import functools
import keyword
import logging
import textwrap
import time
from functools import lru_cache
from typing import Any, Callable, Dict, cast

import numpy as np
import sympy as sp
from sympy.printing.numpy import NumPyPrinter

__all__ = ["numpify", "numpify_cached", "NumpifiedFunction"]


logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class NumpifiedFunction:
    """Compiled SymPy->NumPy callable of one variable."""

    __slots__ = ("_fn", "symbolic", "var", "source")

    def __init__(self, fn: Callable[[Any], Any], symbolic: sp.Basic, var: sp.Symbol, source: str) -> None:
        self._fn = fn
        self.symbolic = symbolic
        self.var = var
        self.source = source

    def __call__(self, x: Any) -> Any:
        return self._fn(x)

    def __repr__(self) -> str:
        return f"NumpifiedFunction({self.symbolic!r}, var={self.var.name})"


def numpify(expr: Any, *, var: sp.Symbol, vectorize: bool = True, cache: bool = True) -> NumpifiedFunction:
    """Compile a SymPy expression into a NumPy-evaluable function of ``var``.

    By default this uses the same LRU-backed cache as :func:`numpify_cached`.
    Pass ``cache=False`` to force a fresh compile.
    """
    if cache:
        return numpify_cached(expr, var=var, vectorize=vectorize)
    return _numpify_uncached(expr, var=var, vectorize=vectorize)


def _argument_name(var: sp.Symbol) -> str:
    reserved = set(keyword.kwlist) | set(dir(builtins)) | {"numpy", "np"}
    name = var.name
    if not name.isidentifier() or keyword.iskeyword(name):
        name = "".join(ch if (ch == "_" or ch.isalnum()) else "_" for ch in name) or "_arg"
        if name[0].isdigit():
            name = f"_{name}"
    while name in reserved:
        name = f"{name}_"
    return name


def _numpify_uncached(expr: Any, *, var: sp.Symbol, vectorize: bool = True) -> NumpifiedFunction:
    """Compile a SymPy expression into a NumPy-evaluable Python function (uncached).

    Parameters
    ----------
    expr:
        A SymPy expression or anything convertible via :func:`sympy.sympify`.
    var:
        The single positional argument of the compiled function.
    vectorize:
        If True, the argument is converted via ``numpy.asarray`` and constant
        expressions broadcast to the argument's shape.

    Raises
    ------
    TypeError
        If ``expr`` is not SymPy-compatible or ``var`` is not a Symbol.
    ValueError
        If ``expr`` has free symbols other than ``var`` or calls a function
        without a NumPy implementation.

    Notes
    -----
    This function uses ``exec`` on source printed from a SymPy tree. The tree
    itself must come from a trusted parser (see :mod:`inlineplot.ParseExpression`).
    """
    try:
        expr_sym = sp.sympify(expr)
    except Exception as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify expects a SymPy expression, got {type(expr_sym)}")
    if not isinstance(var, sp.Symbol):
        raise TypeError(f"var must be a SymPy Symbol, got {type(var)}")
    expr = cast(sp.Basic, expr_sym)

    missing = sorted(s.name for s in expr.free_symbols if s != var)
    if missing:
        raise ValueError(f"Expression contains unbound symbols: {', '.join(missing)} (only {var.name} is free)")

    log_debug = logger.isEnabledFor(logging.DEBUG)
    t0 = time.perf_counter() if log_debug else None

    printer = NumPyPrinter(settings={"user_functions": {}, "allow_unknown_functions": True})
    _require_numpy_functions(expr, printer)

    arg = _argument_name(var)
    expr_code = printer.doprint(expr.xreplace({var: sp.Symbol(arg)}))

    lines = [f"def _generated({arg}):"]
    if vectorize:
        lines.append(f"    {arg} = numpy.asarray({arg})")
    if vectorize and var not in expr.free_symbols:
        lines.append(f"    return ({expr_code}) + numpy.zeros(numpy.shape({arg}))")
    else:
        lines.append(f"    return {expr_code}")
    src = "\n".join(lines)

    glb: Dict[str, Any] = {"numpy": np, "functools": functools}
    loc: Dict[str, Any] = {}
    exec(src, glb, loc)
    fn = cast(Callable[[Any], Any], loc["_generated"])
    fn.__doc__ = textwrap.dedent(
        f"""
        Auto-generated NumPy function from SymPy expression.

        expr: {expr!r}
        var: {arg}
        """
    ).strip()

    if t0 is not None:
        logger.debug("numpify: compiled %s in %.2f ms", expr, 1000.0 * (time.perf_counter() - t0))

    return NumpifiedFunction(fn=fn, symbolic=expr, var=var, source=src)


def _require_numpy_functions(expr: sp.Basic, printer: NumPyPrinter) -> None:
    """Ensure no function prints as a *bare* call that NumPy cannot resolve."""
    missing: set[str] = set()

    for app in expr.atoms(sp.Function):
        name = app.func.__name__
        try:
            code = printer.doprint(app).strip()
        except Exception:
            missing.add(name)
            continue
        if code.startswith(f"{name}("):
            missing.add(name)

    if missing:
        raise ValueError(
            "Expression contains function(s) without a NumPy implementation: "
            + ", ".join(sorted(missing))
        )


# ---------------------------------------------------------------------------
# Cached compilation
# ---------------------------------------------------------------------------

_NUMPIFY_CACHE_MAXSIZE = 256


@lru_cache(maxsize=_NUMPIFY_CACHE_MAXSIZE)
def _numpify_cached_impl(expr: sp.Basic, var: sp.Symbol, vectorize: bool) -> NumpifiedFunction:
    """Compile an expression on cache misses for :func:`numpify_cached`."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("numpify_cached: cache MISS (var=%s, vectorize=%s)", var.name, vectorize)
    return _numpify_uncached(expr, var=var, vectorize=vectorize)


def numpify_cached(expr: Any, *, var: sp.Symbol, vectorize: bool = True) -> NumpifiedFunction:
    """Cached version of :func:`numpify`.

    The cache key is the sympified expression, the variable, and
    ``vectorize``. Compiled functions are immutable, so sharing them across
    callers is safe. Use ``numpify_cached.cache_clear()`` to drop the cache.
    """
    expr_sym = sp.sympify(expr)
    if not isinstance(expr_sym, sp.Basic):
        raise TypeError(f"numpify_cached expects a SymPy expression, got {type(expr_sym)}")
    return _numpify_cached_impl(expr_sym, var, vectorize)


numpify_cached.cache_info = _numpify_cached_impl.cache_info  # type: ignore[attr-defined]
numpify_cached.cache_clear = _numpify_cached_impl.cache_clear  # type: ignore[attr-defined]
