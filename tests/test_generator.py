import numpy as np
import pytest

from pwl_transportation.data.generator import generate_data, instance_seed


DIMENSIONS = [(1, 1, 1), (1, 1, 3), (2, 5, 4), (4, 3, 7), (6, 6, 10)]


@pytest.mark.parametrize("dims", DIMENSIONS)
def test_supply_and_demand_are_balanced(dims):
    instance = generate_data(*dims)

    assert instance.is_balanced()
    assert instance.total_supply == pytest.approx(instance.total_demand, rel=1e-12)
    assert np.all(instance.supply > 0)
    assert np.all(instance.demand > 0)


@pytest.mark.parametrize("dims", DIMENSIONS)
def test_breakpoints_span_arc_capacity(dims):
    instance = generate_data(*dims)
    num_segments = dims[2]

    for i, j in instance.arcs():
        f = instance.get_function(i, j)
        assert len(f.breakpoints) == num_segments + 1
        assert f.breakpoints[0] == 0.0
        assert f.breakpoints[-1] == pytest.approx(min(instance.supply[i], instance.demand[j]))
        assert np.all(np.diff(f.breakpoints) >= 0)
        assert np.allclose(np.diff(f.breakpoints), f.breakpoints[-1] / num_segments)


@pytest.mark.parametrize("dims", DIMENSIONS)
def test_values_accumulate_sorted_slopes(dims):
    instance = generate_data(*dims)

    for i, j in instance.arcs():
        f = instance.get_function(i, j)
        assert f.values[0] == 0.0
        assert np.all(np.diff(f.slopes) <= 0)
        assert np.all((f.slopes >= 0) & (f.slopes < 1))
        assert np.allclose(np.diff(f.values), f.slopes * np.diff(f.breakpoints))
        assert np.all(np.diff(f.values) >= 0)


def test_generated_functions_are_concave(small_instance):
    for i, j in small_instance.arcs():
        assert small_instance.get_function(i, j).is_concave


def test_same_dimensions_give_identical_instances():
    first = generate_data(4, 3, 5)
    np.random.seed(12345)  # Global state must not leak into generation
    second = generate_data(4, 3, 5)

    assert first.seed == second.seed
    np.testing.assert_array_equal(first.supply, second.supply)
    np.testing.assert_array_equal(first.demand, second.demand)
    np.testing.assert_array_equal(first.linear_cost, second.linear_cost)
    for arc in first.arcs():
        np.testing.assert_array_equal(first.functions[arc].breakpoints, second.functions[arc].breakpoints)
        np.testing.assert_array_equal(first.functions[arc].values, second.functions[arc].values)


def test_seed_is_derived_from_dimensions():
    assert generate_data(2, 3, 4).seed == instance_seed(2, 3, 4)
    assert instance_seed(2, 3, 4) == hash((2, 3, 4)) % (2 ** 32)
    assert instance_seed(2, 3, 4) != instance_seed(3, 2, 4)


def test_explicit_seed_overrides_dimension_seed():
    a = generate_data(3, 3, 2, random_seed=7)
    b = generate_data(3, 3, 2, random_seed=8)

    assert a.seed == 7
    assert not np.array_equal(a.supply, b.supply)


def test_single_arc_three_segments():
    instance = generate_data(1, 1, 3)
    f = instance.get_function(0, 0)

    assert len(f.breakpoints) == 4
    assert f.breakpoints[0] == 0.0
    assert f.breakpoints[-1] == pytest.approx(min(instance.supply[0], instance.demand[0]))
    assert len(f.slopes) == 3
    assert f.slopes[0] >= f.slopes[1] >= f.slopes[2]


def test_linear_cost_matrix_shape():
    instance = generate_data(2, 5, 3)
    assert instance.linear_cost.shape == (2, 5)


@pytest.mark.parametrize("dims", [(0, 3, 3), (3, 0, 3), (3, 3, 0), (-1, 2, 2), (2.5, 2, 2), (True, 2, 2)])
def test_invalid_dimensions_raise(dims):
    with pytest.raises(ValueError):
        generate_data(*dims)
