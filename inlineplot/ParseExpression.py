"""Parsing of plot expressions into SymPy with a restricted vocabulary.

Plot directives come from model output, so the text is treated as untrusted:
only arithmetic characters are accepted and every identifier must be the
plotting variable ``x``, a known constant, or a known function. Anything that
survives that check is handed to SymPy's ``parse_expr`` with ``^`` as power
and implicit multiplication (``2x``) enabled.

Expressions that still contain LaTeX commands after normalization (for
example ``\\frac{1}{x}``) go through SymPy's LaTeX parser instead, which
prefers the ``lark`` backend and falls back to ``antlr``.

Both parsers build the tree unevaluated; it is then evaluated bottom-up so
that numeric powers too large to compute exactly (``9^9^9``) are taken in
floating point and overflow to ``oo`` instead of stalling the caller.

Examples
--------
>>> parse_expression("x^2 + 2x")
x**2 + 2*x
>>> normalize_expression(r"2 \\times {x + 1}")
'2 * (x + 1)'
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

import numpy as np
import sympy as sp
from sympy import Basic
from sympy.core.parameters import evaluate as _evaluate
from sympy.parsing.latex import parse_latex as _sympy_parse_latex
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

__all__ = [
    "X",
    "CompileError",
    "LatexParseError",
    "normalize_expression",
    "parse_expression",
    "parse_latex",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

X = sp.Symbol("x")


class CompileError(ValueError):
    """Raised when an expression is not a valid mathematical expression in ``x``."""


class LatexParseError(RuntimeError):
    """Raised when both configured SymPy LaTeX backends fail to parse input."""


def _real_cbrt(arg: Any, **_kwargs: Any) -> sp.Expr:
    return sp.sign(arg) * sp.Abs(arg) ** sp.Rational(1, 3)


# Unevaluated parsing calls some of these with ``evaluate=False``.
_FUNCTIONS: dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "sec": lambda a, **_: 1 / sp.cos(a),
    "csc": lambda a, **_: 1 / sp.sin(a),
    "cot": lambda a, **_: sp.cos(a) / sp.sin(a),
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "arcsin": sp.asin,
    "arccos": sp.acos,
    "arctan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "asinh": sp.asinh,
    "acosh": sp.acosh,
    "atanh": sp.atanh,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "log10": lambda a, **_: sp.log(a, 10),
    "log2": lambda a, **_: sp.log(a, 2),
    "sqrt": sp.sqrt,
    "cbrt": _real_cbrt,
    "abs": sp.Abs,
    "floor": sp.floor,
    "ceil": sp.ceiling,
    "sign": sp.sign,
    "min": sp.Min,
    "max": sp.Max,
}

_CONSTANTS: dict[str, Any] = {
    "pi": sp.pi,
    "tau": 2 * sp.pi,
    "e": sp.E,
    "E": sp.E,
}

_LOCALS: dict[str, Any] = {"x": X, **_CONSTANTS, **_FUNCTIONS}

_TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)

_ALLOWED_TEXT = re.compile(r"[0-9A-Za-z_\s.+\-*/^%(),]*\Z")
_TOKEN = re.compile(
    r"(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)|(?P<name>[A-Za-z_]\w*)"
)

# Operator spellings, applied in order.
_OPERATOR_REWRITES: tuple[tuple[str, str], ...] = (
    (r"\times", "*"),
    (r"\cdot", "*"),
    (r"\ast", "*"),
    (r"\div", "/"),
    ("×", "*"),
    ("·", "*"),
    ("∗", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("π", "pi"),
)
_LATEX_SPACING = re.compile(r"\\[,;:! ]")
_LATEX_SIZING = re.compile(r"\\(?:left|right)(?![A-Za-z])")
_LATEX_NAMES = re.compile(
    r"\\(" + "|".join(sorted(list(_FUNCTIONS) + list(_CONSTANTS), key=len, reverse=True)) + r")(?![A-Za-z])"
)


def normalize_expression(text: str) -> str:
    """Rewrite alternate multiplication and grouping notations into plain syntax.

    Backslash-escaped operators become ``*`` or ``/``, backslash-escaped
    function and constant names lose their backslash, and ``{...}`` grouping
    becomes ``(...)`` once no other LaTeX command remains. Text that still
    carries a LaTeX command keeps its braces for the LaTeX parser.
    """
    out = text.strip()
    for needle, replacement in _OPERATOR_REWRITES:
        out = out.replace(needle, f" {replacement} " if replacement in "*/" else replacement)
    out = _LATEX_SPACING.sub(" ", out)
    out = _LATEX_SIZING.sub("", out)
    out = _LATEX_NAMES.sub(r"\1", out)
    if "\\" not in out:
        out = out.replace("{", "(").replace("}", ")")
    return " ".join(out.split())


def parse_latex(tex: str, *args: Any, **kwargs: Any):
    """Parse a LaTeX string into a SymPy expression with backend fallback.

    Parameters
    ----------
    tex : str
        LaTeX input expression.
    *args, **kwargs : Any
        Forwarded to SymPy's parser. If ``backend`` is supplied explicitly,
        the fallback flow is bypassed.

    Raises
    ------
    LatexParseError
        If fallback mode is active and both ``lark`` and ``antlr`` fail.
    """
    backend = kwargs.get("backend", None)

    if backend is not None:
        return _sympy_parse_latex(tex, *args, **kwargs)

    lark_err = None
    try:
        lark_result = _sympy_parse_latex(tex, *args, backend="lark", **kwargs)
        if isinstance(lark_result, Basic):
            return lark_result
        raise TypeError(
            "lark backend returned non-SymPy result "
            f"({type(lark_result).__name__})"
        )
    except Exception as e:
        lark_err = e

    try:
        return _sympy_parse_latex(tex, *args, backend="antlr", **kwargs)
    except Exception as antlr_err:
        raise LatexParseError(
            "Failed to parse LaTeX with both backends.\n"
            f"Input: {tex!r}\n"
            f"Lark error: {type(lark_err).__name__}: {lark_err}\n"
            f"ANTLR error: {type(antlr_err).__name__}: {antlr_err}"
        ) from antlr_err


def _check_vocabulary(text: str) -> None:
    if not _ALLOWED_TEXT.match(text):
        bad = sorted({ch for ch in text if not _ALLOWED_TEXT.match(ch)})
        raise CompileError(f"Unsupported character(s) {''.join(bad)!r} in {text!r}")
    unknown = [
        m.group("name")
        for m in _TOKEN.finditer(text)
        if m.group("name") is not None and m.group("name") not in _LOCALS
    ]
    if unknown:
        names = ", ".join(dict.fromkeys(unknown))
        raise CompileError(
            f"Unknown name(s) {names} in {text!r}; only 'x', constants and standard functions are allowed"
        )


# Numeric powers whose exact value would need more bits than this are
# computed in double precision instead, so 9^9^9 becomes oo, not a huge int.
_EXACT_POW_BITS = 10_000


def _as_float(num: sp.Expr) -> float:
    try:
        return float(num)
    except OverflowError:
        return math.inf if num.is_positive else -math.inf


def _log2_magnitude(num: sp.Expr) -> float:
    if num.is_Rational:
        p, q = abs(int(num.p)), int(num.q)
        return max(math.log2(p) if p else 0.0, math.log2(q))
    value = abs(_as_float(num))
    return abs(math.log2(value)) if value else 0.0


def _float_power(base: sp.Expr, exp: sp.Expr) -> sp.Expr:
    with np.errstate(all="ignore"):
        value = float(np.power(np.float64(_as_float(base)), np.float64(_as_float(exp))))
    if math.isnan(value):
        return sp.nan
    if math.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    return sp.Float(value)


def _evaluate_tree(expr: Basic) -> Basic:
    """Evaluate an unevaluated SymPy tree bottom-up.

    Every node is rebuilt from its evaluated arguments. A power of two numbers
    whose exact result would exceed ``_EXACT_POW_BITS`` bits is evaluated in
    floating point, where it overflows to ``oo`` or underflows to ``0``.
    """
    if not expr.args:
        return expr
    args = [_evaluate_tree(arg) for arg in expr.args]
    if isinstance(expr, sp.Pow):
        base, exp = args
        if base.is_Number and exp.is_Number:
            bits = _log2_magnitude(base) * abs(_as_float(exp))
            if bits > _EXACT_POW_BITS:
                logger.debug("parse_expression: %s^%s evaluated in floating point", base, exp)
                return _float_power(base, exp)
    return expr.func(*args)


def parse_expression(text: str) -> sp.Expr:
    """Parse ``text`` into a SymPy expression in the single variable ``x``.

    Raises
    ------
    CompileError
        If the text is empty, uses unsupported syntax or names, or does not
        denote a numeric expression.
    """
    source = normalize_expression(text)
    if not source:
        raise CompileError("Expression is empty")

    if "\\" in source:
        try:
            with _evaluate(False):
                expr = parse_latex(source)
        except LatexParseError as exc:
            raise CompileError(str(exc)) from exc
    else:
        _check_vocabulary(source)
        try:
            expr = parse_expr(
                source, local_dict=dict(_LOCALS), transformations=_TRANSFORMATIONS, evaluate=False
            )
        except Exception as exc:
            detail = str(exc) or type(exc).__name__
            raise CompileError(f"Could not parse {source!r}: {detail}") from exc

    if isinstance(expr, Basic):
        try:
            expr = _evaluate_tree(expr)
        except Exception as exc:
            detail = str(exc) or type(exc).__name__
            raise CompileError(f"Could not evaluate {source!r}: {detail}") from exc
    if not isinstance(expr, sp.Expr):
        raise CompileError(f"{source!r} is not a numeric expression")
    if expr.has(sp.AccumBounds):
        raise CompileError(f"{source!r} has no single value at some x")
    extra = sorted(str(s) for s in expr.free_symbols if s != X)
    if extra:
        raise CompileError(f"Unknown variable(s) {', '.join(extra)} in {source!r}; only 'x' may vary")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("parse_expression: %r -> %s", source, expr)
    return expr
