"""Compiled plot expressions.

A ``NumericExpression`` is the parse-once / compile-once form of a directive's
expression: the SymPy tree plus its NumPy callable. Sampling calls it many
times and never re-parses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import sympy as sp

from .ParseExpression import X, CompileError, parse_expression
from .numpify import NumpifiedFunction, numpify_cached


@dataclass(frozen=True)
class NumericExpression:
    """Expression in ``x`` with its compiled NumPy evaluator."""

    source: str
    symbolic: sp.Expr
    numeric: NumpifiedFunction

    @classmethod
    def compile(cls, text: str) -> "NumericExpression":
        """Parse and compile ``text``; raise :class:`CompileError` on failure."""
        symbolic = parse_expression(text)
        try:
            numeric = numpify_cached(symbolic, var=X)
        except (TypeError, ValueError) as exc:
            raise CompileError(str(exc)) from exc
        return cls(source=text, symbolic=symbolic, numeric=numeric)

    @property
    def is_constant(self) -> bool:
        return X not in self.symbolic.free_symbols

    def __call__(self, x: Any) -> Any:
        """Evaluate at a scalar or an array of ``x`` values."""
        return self.numeric(x)
