"""
Configuration module for the piecewise-linear transportation benchmark.

Contains instance sizes, solver settings and the formulation methods to compare.
"""

from dataclasses import dataclass, field
from typing import List, Optional


# MIP formulations for univariate piecewise-linear functions, in report order
FORMULATION_METHODS = (
    "CC",
    "MC",
    "Incremental",
    "Logarithmic",
    "DisaggLogarithmic",
    "ZigZag",
    "ZigZagInteger",
)

CBC_SOLVER = "PULP_CBC_CMD"
GUROBI_SOLVER = "GUROBI_CMD"


@dataclass
class InstanceConfig:
    """Random instance dimensions."""
    num_supply: int = 10    # S: supply nodes
    num_demand: int = 10    # D: demand nodes
    num_segments: int = 10  # K: linear pieces per arc cost function
    random_seed: Optional[int] = None  # None: derive seed from the dimensions


@dataclass
class SolverConfig:
    """Settings passed through to the external MIP solver."""
    name: str = CBC_SOLVER
    time_limit: int = 60  # Seconds per solve
    verbose: bool = False  # Solver log output


@dataclass
class BenchmarkConfig:
    """Which formulations and solvers to compare."""
    methods: List[str] = field(default_factory=lambda: list(FORMULATION_METHODS))
    solvers: List[str] = field(default_factory=lambda: [CBC_SOLVER, GUROBI_SOLVER])
    include_linear_baseline: bool = True  # Also solve the LP with linear costs
    skip_unavailable: bool = True  # Skip solvers whose binary is not installed


@dataclass
class TransportationConfig:
    """Master configuration for a benchmark run."""
    instance: InstanceConfig = field(default_factory=InstanceConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)

    def __post_init__(self):
        """Reject unknown formulation names early."""
        unknown = [m for m in self.benchmark.methods if m not in FORMULATION_METHODS]
        if unknown:
            raise ValueError(
                f"Unknown formulation method(s) {unknown}; "
                f"expected one of {list(FORMULATION_METHODS)}"
            )


def create_default_config() -> TransportationConfig:
    """Create the default benchmark configuration."""
    return TransportationConfig()


def create_small_config() -> TransportationConfig:
    """Create a small configuration for quick runs and tests."""
    return TransportationConfig(
        instance=InstanceConfig(
            num_supply=3,
            num_demand=3,
            num_segments=4,
        ),
        solver=SolverConfig(
            time_limit=30,
        ),
        benchmark=BenchmarkConfig(
            solvers=[CBC_SOLVER],
        ),
    )
