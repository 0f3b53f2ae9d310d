# tests/conftest.py

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pulp
import pytest

from pwl_transportation.config import create_small_config
from pwl_transportation.data.generator import generate_data
from pwl_transportation.data.models import PiecewiseLinearFunction, TransportationInstance


@pytest.fixture
def small_config():
    """Small benchmark configuration using the bundled Cbc solver only."""
    return create_small_config()


@pytest.fixture
def small_instance():
    """3 x 3 instance with 4 segments per arc."""
    return generate_data(3, 3, 4)


@pytest.fixture
def nonconvex_function():
    """Five-segment function that is neither convex nor concave."""
    return PiecewiseLinearFunction(
        breakpoints=[0.0, 1.0, 2.0, 3.5, 4.0, 6.0],
        values=[1.0, 3.0, 2.0, 4.0, 0.5, 2.5],
    )


@pytest.fixture
def two_by_two_instance():
    """Hand-built instance whose optimum is easy to check by hand."""
    supply = np.array([1.0, 1.0])
    demand = np.array([1.0, 1.0])
    functions = {
        (i, j): PiecewiseLinearFunction(
            breakpoints=[0.0, 0.5, 1.0],
            values=[0.0, slope, slope * 1.5],
        )
        for (i, j), slope in {(0, 0): 1.0, (0, 1): 4.0, (1, 0): 4.0, (1, 1): 1.0}.items()
    }
    linear_cost = np.array([[1.0, 3.0], [3.0, 1.0]])
    return TransportationInstance(
        supply=supply, demand=demand, functions=functions, linear_cost=linear_cost
    )


@pytest.fixture
def cbc():
    """Silent Cbc solver bundled with PuLP."""
    return pulp.PULP_CBC_CMD(msg=False)
