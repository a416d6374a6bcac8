# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

from .ParseExpression import CompileError, parse_expression

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, truncate: bool = True) -> T:
    """
    Convert `obj` to a finite `dest_type`.

    Supported destination types:
    - float
    - int

    Rules:
    - If `obj` is a number: cast via dest_type(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else parse it as a constant plot expression (e.g. "-pi", "2*pi",
           "\\pi/2") and evaluate it.

    Truncation Rules (`truncate`), Float -> Int only:
    - If `truncate=True`: Truncate decimal part (e.g., 3.9 -> 3).
    - If `truncate=False`: Require exact integer (e.g., 3.0 -> 3, 3.1 -> Error).

    Raises
    ------
    NotImplementedError
        If dest_type is unsupported.
    ValueError
        If conversion fails, the value is not finite, or it violates the
        truncation rule.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    def _coerce_real(value: float) -> T:
        if not math.isfinite(value):
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: value is not finite.")
        if dest_type is float:
            return float(value)  # type: ignore[return-value]
        if not float(value).is_integer() and not truncate:
            raise ValueError(f"Could not convert {obj!r} to int: value is not an exact integer.")
        return int(value)  # type: ignore[return-value]

    # Fast path: numeric types (exclude bool)
    if isinstance(obj, (int, float)) and not isinstance(obj, bool):
        return _coerce_real(float(obj))

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")

        try:
            return _coerce_real(float(s))
        except ValueError:
            pass

        try:
            expr = parse_expression(s)
        except CompileError as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: {e}") from e
        if expr.free_symbols:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: expression is not constant.")
        try:
            value = complex(sp.N(expr))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e
        if value.imag != 0:
            raise ValueError(f"Could not convert non-real {obj!r} to {dest_type.__name__}.")
        return _coerce_real(value.real)

    raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.")

# === END OF SECTION: InputConvert [id: InputConvert]===
