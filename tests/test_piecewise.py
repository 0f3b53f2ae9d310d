import numpy as np
import pulp
import pytest

from pwl_transportation.config import FORMULATION_METHODS
from pwl_transportation.formulations import FORMULATIONS, piecewise_linear


def _table(num_segments):
    """Nonconvex zig-zag table with num_segments pieces."""
    breakpoints = [float(v) for v in range(num_segments + 1)]
    values = [float((3 * v) % 5) + 0.5 * v for v in range(num_segments + 1)]
    return breakpoints, values


def _solve_at(method, breakpoints, values, x_value, sense, cbc):
    model = pulp.LpProblem("pwl_check", sense)
    x = pulp.LpVariable("x")
    z = piecewise_linear(model, x, breakpoints, values, method=method, name="f")
    model += z, "obj"
    model += x == x_value, "fix_x"
    model.solve(cbc)
    return model, x, z


def test_all_methods_registered():
    assert set(FORMULATIONS) == set(FORMULATION_METHODS)


@pytest.mark.parametrize("method", FORMULATION_METHODS)
@pytest.mark.parametrize("num_segments", [1, 2, 3, 5])
@pytest.mark.parametrize("sense", [pulp.LpMinimize, pulp.LpMaximize])
def test_formulation_reproduces_function_value(method, num_segments, sense, cbc):
    breakpoints, values = _table(num_segments)
    x_value = num_segments * 0.6

    model, x, z = _solve_at(method, breakpoints, values, x_value, sense, cbc)

    assert model.status == pulp.LpStatusOptimal
    assert z.varValue == pytest.approx(np.interp(x_value, breakpoints, values), abs=1e-6)


@pytest.mark.parametrize("method", FORMULATION_METHODS)
def test_formulation_finds_global_minimum_of_nonconvex_function(method, nonconvex_function, cbc):
    model = pulp.LpProblem("pwl_min", pulp.LpMinimize)
    x = pulp.LpVariable("x")
    z = piecewise_linear(
        model, x, nonconvex_function.breakpoints, nonconvex_function.values, method=method
    )
    model += z, "obj"
    model.solve(cbc)

    assert model.status == pulp.LpStatusOptimal
    assert z.varValue == pytest.approx(0.5, abs=1e-6)
    assert x.varValue == pytest.approx(4.0, abs=1e-6)


@pytest.mark.parametrize("method", FORMULATION_METHODS)
def test_x_restricted_to_domain(method, cbc):
    breakpoints, values = _table(4)
    model, _, _ = _solve_at(method, breakpoints, values, 4.5, pulp.LpMinimize, cbc)

    assert model.status == pulp.LpStatusInfeasible


@pytest.mark.parametrize("method,num_segments,expected", [
    ("CC", 8, 8),
    ("MC", 8, 8),
    ("Incremental", 8, 7),
    ("Logarithmic", 8, 3),
    ("DisaggLogarithmic", 8, 3),
    ("ZigZag", 8, 3),
    ("ZigZagInteger", 8, 3),
    ("Logarithmic", 5, 3),
    ("Logarithmic", 1, 0),
])
def test_number_of_integer_variables(method, num_segments, expected):
    breakpoints, values = _table(num_segments)
    model = pulp.LpProblem("count", pulp.LpMinimize)
    x = pulp.LpVariable("x")
    z = piecewise_linear(model, x, breakpoints, values, method=method)
    model += z

    integer_vars = [v for v in model.variables() if v.cat == pulp.LpInteger]
    assert len(integer_vars) == expected


def test_zigzag_integer_bounds():
    breakpoints, values = _table(8)
    model = pulp.LpProblem("bounds", pulp.LpMinimize)
    x = pulp.LpVariable("x")
    z = piecewise_linear(model, x, breakpoints, values, method="ZigZagInteger", name="g")
    model += z

    bounds = {v.name: v.upBound for v in model.variables() if v.cat == pulp.LpInteger}
    assert bounds == {"g_zzi_y_0": 4, "g_zzi_y_1": 2, "g_zzi_y_2": 1}


def test_unknown_method_raises():
    model = pulp.LpProblem("bad", pulp.LpMinimize)
    with pytest.raises(ValueError):
        piecewise_linear(model, pulp.LpVariable("x"), [0, 1], [0, 1], method="SOS2")


@pytest.mark.parametrize("breakpoints,values", [
    ([0.0, 1.0], [0.0, 1.0, 2.0]),
    ([0.0], [0.0]),
    ([0.0, 1.0, 1.0], [0.0, 1.0, 2.0]),
    ([1.0, 0.0], [0.0, 1.0]),
])
def test_malformed_table_raises(breakpoints, values):
    model = pulp.LpProblem("bad", pulp.LpMinimize)
    with pytest.raises(ValueError):
        piecewise_linear(model, pulp.LpVariable("x"), breakpoints, values, method="CC")
