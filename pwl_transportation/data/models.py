"""
Data models for transportation instances.

Defines the piecewise-linear arc cost function and the complete instance.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import numpy as np


DOMAIN_TOLERANCE = 1e-9


@dataclass
class PiecewiseLinearFunction:
    """
    Univariate piecewise-linear function given by its breakpoints.

    Attributes:
        breakpoints: x-values of the breakpoints, non-decreasing
        values: f(x) at each breakpoint
        slopes: generating slope of each segment (len(breakpoints) - 1 entries)
    """
    breakpoints: np.ndarray
    values: np.ndarray
    slopes: Optional[np.ndarray] = None

    def __post_init__(self):
        """Validate the breakpoint table."""
        self.breakpoints = np.asarray(self.breakpoints, dtype=float)
        self.values = np.asarray(self.values, dtype=float)

        if self.breakpoints.ndim != 1 or self.values.ndim != 1:
            raise ValueError("Breakpoints and values must be one-dimensional")
        if len(self.breakpoints) != len(self.values):
            raise ValueError(
                f"Got {len(self.breakpoints)} breakpoints but {len(self.values)} values"
            )
        if len(self.breakpoints) < 2:
            raise ValueError("A piecewise-linear function needs at least two breakpoints")
        if np.any(np.diff(self.breakpoints) < 0):
            raise ValueError("Breakpoints must be non-decreasing")

        if self.slopes is None:
            self.slopes = self.segment_slopes()
        else:
            self.slopes = np.asarray(self.slopes, dtype=float)
            if len(self.slopes) != self.num_segments:
                raise ValueError(
                    f"Expected {self.num_segments} slopes, got {len(self.slopes)}"
                )

    @property
    def num_segments(self) -> int:
        """Number of linear pieces."""
        return len(self.breakpoints) - 1

    @property
    def domain(self) -> Tuple[float, float]:
        """Interval [x_0, x_K] on which the function is defined."""
        return float(self.breakpoints[0]), float(self.breakpoints[-1])

    def __call__(self, x: float) -> float:
        """Evaluate f(x) by linear interpolation between breakpoints."""
        lo, hi = self.domain
        if x < lo - DOMAIN_TOLERANCE or x > hi + DOMAIN_TOLERANCE:
            raise ValueError(f"x={x} lies outside the domain [{lo}, {hi}]")
        return float(np.interp(min(max(x, lo), hi), self.breakpoints, self.values))

    def segment_slopes(self) -> np.ndarray:
        """Slopes recovered from the table (zero on zero-width segments)."""
        dx = np.diff(self.breakpoints)
        dy = np.diff(self.values)
        slopes = np.zeros_like(dx)
        nonzero = dx > 0
        slopes[nonzero] = dy[nonzero] / dx[nonzero]
        return slopes

    @property
    def is_convex(self) -> bool:
        """True if segment slopes are non-decreasing."""
        return bool(np.all(np.diff(self.segment_slopes()) >= -DOMAIN_TOLERANCE))

    @property
    def is_concave(self) -> bool:
        """True if segment slopes are non-increasing."""
        return bool(np.all(np.diff(self.segment_slopes()) <= DOMAIN_TOLERANCE))


@dataclass
class TransportationInstance:
    """
    Balanced transportation instance with piecewise-linear arc costs.

    Notation:
        S: supply nodes, index i
        D: demand nodes, index j
        f_{i,j}: cost of shipping along arc (i, j)
    """
    supply: np.ndarray
    demand: np.ndarray
    functions: Dict[Tuple[int, int], PiecewiseLinearFunction] = field(default_factory=dict)
    linear_cost: Optional[np.ndarray] = None  # |S| x |D|
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate dimensions of the instance."""
        self.supply = np.asarray(self.supply, dtype=float)
        self.demand = np.asarray(self.demand, dtype=float)

        if len(self.supply) == 0 or len(self.demand) == 0:
            raise ValueError("Instance needs at least one supply and one demand node")
        if np.any(self.supply < 0) or np.any(self.demand < 0):
            raise ValueError("Supply and demand must be non-negative")
        if self.linear_cost is not None:
            self.linear_cost = np.asarray(self.linear_cost, dtype=float)
            if self.linear_cost.shape != (self.num_supply, self.num_demand):
                raise ValueError(
                    f"Linear cost matrix has shape {self.linear_cost.shape}, "
                    f"expected {(self.num_supply, self.num_demand)}"
                )

    @property
    def num_supply(self) -> int:
        """Number of supply nodes |S|."""
        return len(self.supply)

    @property
    def num_demand(self) -> int:
        """Number of demand nodes |D|."""
        return len(self.demand)

    @property
    def num_segments(self) -> int:
        """Segments per arc function (0 when no functions are attached)."""
        if not self.functions:
            return 0
        return max(f.num_segments for f in self.functions.values())

    @property
    def total_supply(self) -> float:
        return float(np.sum(self.supply))

    @property
    def total_demand(self) -> float:
        return float(np.sum(self.demand))

    def is_balanced(self, tol: float = 1e-9) -> bool:
        """Check sum(supply) == sum(demand) up to a relative tolerance."""
        return abs(self.total_supply - self.total_demand) <= tol * max(1.0, self.total_supply)

    def arcs(self) -> Iterator[Tuple[int, int]]:
        """Iterate over all (supply, demand) pairs in row-major order."""
        for i in range(self.num_supply):
            for j in range(self.num_demand):
                yield i, j

    def get_function(self, i: int, j: int) -> PiecewiseLinearFunction:
        """Get the cost function of arc (i, j)."""
        try:
            return self.functions[(i, j)]
        except KeyError:
            raise KeyError(f"No cost function for arc ({i}, {j})") from None

    def piecewise_cost(self, flows: Dict[Tuple[int, int], float]) -> float:
        """Total piecewise-linear cost of a flow assignment."""
        return sum(self.get_function(i, j)(flows.get((i, j), 0.0)) for i, j in self.arcs())

    def linear_cost_of(self, flows: Dict[Tuple[int, int], float]) -> float:
        """Total linear cost of a flow assignment."""
        if self.linear_cost is None:
            raise ValueError("Instance has no linear cost matrix")
        return float(sum(
            self.linear_cost[i, j] * flows.get((i, j), 0.0) for i, j in self.arcs()
        ))

    def summary(self) -> List[str]:
        """Short human-readable description of the instance."""
        return [
            f"Supply nodes: {self.num_supply}",
            f"Demand nodes: {self.num_demand}",
            f"Segments per arc: {self.num_segments}",
            f"Total supply: {self.total_supply:.4f}",
            f"Total demand: {self.total_demand:.4f}",
            f"Seed: {self.seed}",
        ]
