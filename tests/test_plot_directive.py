from __future__ import annotations

import math

import pytest

from inlineplot.PlotDirective import InvalidDomainError, ParseError, PlotDirective, parse_directive, split_fields
from inlineplot.plot_options import PlotOptions


def test_expression_only_uses_default_domain() -> None:
    d = parse_directive("x^2")
    assert d.source == "x^2"
    assert d.domain == (-5.0, 5.0)


def test_explicit_domain() -> None:
    d = parse_directive(" sin(x) , -3.14 , 3.14 ")
    assert d.source == "sin(x)"
    assert d.domain == (-3.14, 3.14)


def test_missing_max_uses_default_max() -> None:
    assert parse_directive("x, -1").domain == (-1.0, 5.0)


def test_default_domain_comes_from_options() -> None:
    d = parse_directive("x", PlotOptions(default_domain=(0.0, 1.0)))
    assert d.domain == (0.0, 1.0)


def test_symbolic_bounds_are_accepted() -> None:
    d = parse_directive("sin(x), -pi, 2pi")
    assert d.domain_min == pytest.approx(-math.pi)
    assert d.domain_max == pytest.approx(2 * math.pi)


@pytest.mark.parametrize("payload", ["x, nan, inf", "x, abc, xyz", "x, , "])
def test_unreadable_bounds_fall_back_to_defaults(payload: str) -> None:
    assert parse_directive(payload).domain == (-5.0, 5.0)


def test_commas_inside_calls_do_not_split_fields() -> None:
    assert split_fields("log(x, 2), 0.1, 8") == ["log(x, 2)", "0.1", "8"]
    d = parse_directive("max(x, 1), 0, 2")
    assert d.source == "max(x, 1)"
    assert d.domain == (0.0, 2.0)


def test_extra_fields_are_ignored() -> None:
    assert parse_directive("x, 0, 1, 7, 9").domain == (0.0, 1.0)


@pytest.mark.parametrize("payload", ["x, 10", "x, 2, 2", "x, 3, -3"])
def test_inverted_or_empty_domain_is_rejected(payload: str) -> None:
    with pytest.raises(InvalidDomainError, match="min must be less than max"):
        parse_directive(payload)


@pytest.mark.parametrize("payload", ["", "   ", ", 1, 2"])
def test_missing_expression_is_a_parse_error(payload: str) -> None:
    with pytest.raises(ParseError):
        parse_directive(payload)


def test_invalid_domain_is_a_parse_error() -> None:
    assert issubclass(InvalidDomainError, ParseError)


def test_expression_is_normalized_but_source_is_kept() -> None:
    d = parse_directive(r"2 \cdot x, 0, 1")
    assert d.source == r"2 \cdot x"
    assert d.expression == "2 * x"


def test_directive_is_immutable_and_repr_is_short() -> None:
    d = parse_directive("x, 0, 1")
    assert isinstance(d, PlotDirective)
    assert repr(d) == "PlotDirective(source='x', domain=(0.0, 1.0))"
    with pytest.raises(AttributeError):
        d.domain_min = 2.0  # type: ignore[misc]


def test_overflowing_bound_falls_back_to_default() -> None:
    assert parse_directive("x, -1, 9^9^9").domain == (-1.0, 5.0)
