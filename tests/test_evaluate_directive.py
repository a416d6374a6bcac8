from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from inlineplot.PlotRenderResult import PlotFailure, PlotNothing, PlotSuccess, evaluate_directive
from inlineplot.plot_coordinates import CoordinateMapper
from inlineplot.plot_options import DEFAULT_PLOT_OPTIONS, PlotOptions


@pytest.mark.parametrize("payload", ["sin(x), -3.14, 3.14", "1/x, -2, 2", "a*x", "x, 3, 1", "sqrt(-1-x^2)"])
def test_evaluation_is_deterministic(payload: str) -> None:
    assert evaluate_directive(payload) == evaluate_directive(payload)


def test_expression_only_uses_default_domain_and_draws() -> None:
    result = evaluate_directive("x^2")
    assert isinstance(result, PlotSuccess)
    assert result.directive.domain == (-5.0, 5.0)
    assert len(result.points) == 121
    assert result.bounds.max_y == 20.0
    assert result.bounds.min_y == -0.5


def test_pole_leaves_both_branches() -> None:
    result = evaluate_directive("1/x, -2, 2")
    assert isinstance(result, PlotSuccess)
    assert any(p.x < 0 for p in result.points)
    assert any(p.x > 0 for p in result.points)


def test_near_pole_is_clamped() -> None:
    result = evaluate_directive("1/(x-0.001), -1, 1")
    assert isinstance(result, PlotSuccess)
    assert result.bounds.min_y == -20.0
    assert result.bounds.max_y == 20.0


def test_malformed_expression_is_a_compile_failure() -> None:
    result = evaluate_directive("x +* 2")
    assert isinstance(result, PlotFailure)
    assert result.kind == "compile"
    assert result.message
    assert result.directive is not None and result.directive.source == "x +* 2"


def test_unknown_variable_is_a_compile_failure() -> None:
    result = evaluate_directive("k*x")
    assert isinstance(result, PlotFailure)
    assert "k" in result.message


def test_nowhere_real_expression_draws_nothing() -> None:
    result = evaluate_directive("sqrt(-1-x^2)")
    assert result == PlotNothing(reason="insufficient_data", directive=result.directive)


def test_single_surviving_sample_draws_nothing() -> None:
    result = evaluate_directive("sqrt(-x^2), -1, 1", PlotOptions(sample_count=3))
    assert isinstance(result, PlotNothing)
    assert result.reason == "insufficient_data"


def test_invalid_domain_is_reported() -> None:
    result = evaluate_directive("x, 10")
    assert isinstance(result, PlotFailure)
    assert result.kind == "domain"
    assert "min must be less than max" in result.message


@pytest.mark.parametrize("payload", ["", "   ", ", -1, 1"])
def test_blank_directive_draws_nothing(payload: str) -> None:
    assert evaluate_directive(payload) == PlotNothing(reason="parse")


def test_constant_curve_keeps_zero_in_view() -> None:
    result = evaluate_directive("3, 0, 1")
    assert isinstance(result, PlotSuccess)
    assert {p.y for p in result.points} == {3.0}
    assert (result.bounds.min_y, result.bounds.max_y) == (-0.5, 3.0)


def test_partial_domain_keeps_defined_samples() -> None:
    result = evaluate_directive("log(x), -1, 1")
    assert isinstance(result, PlotSuccess)
    assert all(p.x > 0 for p in result.points)


def test_piecewise_functions_sample_through_fallback() -> None:
    result = evaluate_directive("max(x, 0), -1, 1")
    assert isinstance(result, PlotSuccess)
    assert len(result.points) == 121
    assert min(p.y for p in result.points) == 0.0


_EXPRESSIONS = ["x^2", "1/x", "tan(x)", "exp(x)", "log(x)", "sqrt(x)", "sin(x)/x", "x^3 - 4x", "1/(x-0.001)"]


@settings(max_examples=60, deadline=None)
@given(
    expr=st.sampled_from(_EXPRESSIONS),
    lo=st.floats(min_value=-50, max_value=49, allow_nan=False),
    span=st.floats(min_value=0.01, max_value=100, allow_nan=False),
)
def test_every_mapped_point_is_on_the_canvas(expr: str, lo: float, span: float) -> None:
    result = evaluate_directive(f"{expr}, {lo!r}, {lo + span!r}")
    if not isinstance(result, PlotSuccess):
        assert isinstance(result, PlotNothing)
        return
    o = DEFAULT_PLOT_OPTIONS
    assert -o.max_abs_y <= result.bounds.min_y <= -o.min_half_span
    assert o.min_half_span <= result.bounds.max_y <= o.max_abs_y
    for px, py in CoordinateMapper(result.bounds).map_points(result.points):
        assert o.padding - 1e-9 <= px <= o.width - o.padding + 1e-9
        assert o.padding - 1e-9 <= py <= o.height - o.padding + 1e-9
