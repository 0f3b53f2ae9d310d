# MILP Package
"""
Transportation model and formulation benchmark driver.

Decisions:
- x_{i,j}: flow supply i→demand j
- z_{i,j}: arc cost f_{i,j}(x_{i,j}), encoded by a piecewise formulation
"""

from .transport_model import SolveResult, SolveStatus, TransportationModel, get_solver
from .solver import FormulationBenchmark

__all__ = [
    "SolveResult",
    "SolveStatus",
    "TransportationModel",
    "get_solver",
    "FormulationBenchmark",
]
