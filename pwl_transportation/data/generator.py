"""
Random instance generator for the transportation benchmark.

Generates supply s_i, rescaled demand d_j and a piecewise-linear cost f_{i,j}
for every arc.
"""

import logging
import numbers
from typing import Dict, Optional, Tuple
import numpy as np

from .models import PiecewiseLinearFunction, TransportationInstance


logger = logging.getLogger(__name__)


def instance_seed(num_supply: int, num_demand: int, num_segments: int) -> int:
    """
    Derive a reproducible seed from the instance dimensions.

    Tuples of ints hash identically across interpreter runs, so the same
    dimensions always give the same instance.
    """
    return hash((num_supply, num_demand, num_segments)) % (2 ** 32)


def _check_dimension(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def generate_data(
    num_supply: int,
    num_demand: int,
    num_segments: int,
    random_seed: Optional[int] = None
) -> TransportationInstance:
    """
    Generate a balanced transportation instance.

    - Supply and demand are drawn uniformly from (0, 1); demand is rescaled by
      sum(supply) / sum(demand) so the problem is exactly balanced.
    - Arc (i, j) gets breakpoints equally spaced on [0, min(s_i, d_j)] and
      slopes drawn uniformly, sorted in descending order and accumulated.
      Decreasing slopes make every arc cost concave (economies of scale).
    - A linear cost matrix is drawn for the LP baseline.

    Args:
        num_supply: Number of supply nodes
        num_demand: Number of demand nodes
        num_segments: Number of linear pieces per arc function
        random_seed: Random seed; derived from the dimensions if None

    Returns:
        TransportationInstance with one function per arc
    """
    _check_dimension("num_supply", num_supply)
    _check_dimension("num_demand", num_demand)
    _check_dimension("num_segments", num_segments)

    if random_seed is None:
        random_seed = instance_seed(num_supply, num_demand, num_segments)
    np.random.seed(random_seed)

    supply = np.random.rand(num_supply)
    demand = np.random.rand(num_demand)
    demand = demand * (np.sum(supply) / np.sum(demand))

    functions: Dict[Tuple[int, int], PiecewiseLinearFunction] = {}
    for i in range(num_supply):
        for j in range(num_demand):
            functions[(i, j)] = _generate_arc_function(
                upper=min(supply[i], demand[j]),
                num_segments=num_segments
            )

    linear_cost = np.random.rand(num_supply, num_demand)

    logger.debug(
        "Generated %dx%d instance with %d segments (seed=%d)",
        num_supply, num_demand, num_segments, random_seed
    )

    return TransportationInstance(
        supply=supply,
        demand=demand,
        functions=functions,
        linear_cost=linear_cost,
        seed=random_seed
    )


def _generate_arc_function(upper: float, num_segments: int) -> PiecewiseLinearFunction:
    """
    Generate one arc cost function on [0, upper].

    Args:
        upper: Right end of the domain, min(s_i, d_j)
        num_segments: Number of equal-width segments

    Returns:
        PiecewiseLinearFunction starting at f(0) = 0
    """
    breakpoints = np.linspace(0.0, upper, num_segments + 1)
    slopes = np.sort(np.random.rand(num_segments))[::-1]
    values = np.concatenate(([0.0], np.cumsum(slopes * np.diff(breakpoints))))

    return PiecewiseLinearFunction(
        breakpoints=breakpoints,
        values=values,
        slopes=slopes
    )
