"""
Transportation MILP with linear or piecewise-linear arc costs.

    min  sum_{i,j} f_{i,j}(x_{i,j})
    s.t. sum_j x_{i,j} = s_i   for every supply node i
         sum_i x_{i,j} = d_j   for every demand node j
         x_{i,j} >= 0
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple
import pulp

from ..config import CBC_SOLVER
from ..data.models import TransportationInstance
from ..formulations import FORMULATIONS, piecewise_linear


logger = logging.getLogger(__name__)

LINEAR_LABEL = "Linear"


class SolveStatus(Enum):
    """Outcome of a solver call."""
    OPTIMAL = "Optimal"
    INFEASIBLE = "Infeasible"
    UNBOUNDED = "Unbounded"
    TIME_LIMIT = "TimeLimit"
    ERROR = "Error"


@dataclass
class SolveResult:
    """Status, cost and timing of one (solver, formulation) run."""
    method: str
    solver: str
    status: SolveStatus
    objective_value: float  # inf when no feasible solution is available
    solve_time: float       # Wall-clock seconds spent in the solver call
    build_time: float = 0.0
    num_variables: int = 0
    num_integer_variables: int = 0
    num_constraints: int = 0

    @property
    def has_solution(self) -> bool:
        return self.objective_value != float('inf')

    def format_row(self) -> str:
        cost = f"{self.objective_value:>12.6f}" if self.has_solution else f"{'-':>12}"
        return (
            f"{self.solver:<14} {self.method:<18} {self.status.value:<11} "
            f"{cost} {self.solve_time:>9.3f}s"
        )


def get_solver(name: Optional[str] = None, time_limit: int = 60, verbose: bool = False):
    """
    Create a PuLP solver by name.

    Args:
        name: 'PULP_CBC_CMD' (or 'cbc'), 'GUROBI_CMD', or 'GUROBI' for gurobipy
        time_limit: Time limit in seconds
        verbose: Show the solver log

    Returns:
        PuLP solver object
    """
    key = (name or CBC_SOLVER).upper()

    if key in ("PULP_CBC_CMD", "CBC"):
        return pulp.PULP_CBC_CMD(msg=verbose, timeLimit=time_limit)
    elif key == "GUROBI_CMD":
        return pulp.GUROBI_CMD(msg=verbose, timeLimit=time_limit)
    elif key == "GUROBI":
        return pulp.GUROBI(msg=verbose, timeLimit=time_limit)

    raise ValueError(
        f"Unknown solver {name!r}; expected 'PULP_CBC_CMD', 'GUROBI_CMD' or 'GUROBI'"
    )


def _solve_status(model: pulp.LpProblem) -> SolveStatus:
    """Translate PuLP status codes into a SolveStatus."""
    if model.sol_status == pulp.LpSolutionOptimal:
        return SolveStatus.OPTIMAL
    if model.sol_status == pulp.LpSolutionIntegerFeasible:
        # Stopped with an incumbent that is not proven optimal
        return SolveStatus.TIME_LIMIT
    if model.status == pulp.LpStatusOptimal:
        return SolveStatus.OPTIMAL
    if model.status == pulp.LpStatusInfeasible:
        return SolveStatus.INFEASIBLE
    if model.status == pulp.LpStatusUnbounded:
        return SolveStatus.UNBOUNDED
    if model.status == pulp.LpStatusNotSolved:
        return SolveStatus.TIME_LIMIT
    return SolveStatus.ERROR


class TransportationModel:
    """
    Balanced transportation model.

    With method=None the objective is the linear cost sum c_{i,j} x_{i,j};
    otherwise every arc cost f_{i,j} is encoded with the named formulation.
    """

    def __init__(self, instance: TransportationInstance, method: Optional[str] = None):
        """
        Initialize the transportation model.

        Args:
            instance: Supply, demand and arc cost data
            method: Piecewise formulation name, or None for linear costs
        """
        if method is not None and method not in FORMULATIONS:
            raise ValueError(
                f"Unknown piecewise formulation {method!r}; expected one of {list(FORMULATIONS)}"
            )
        if method is None and instance.linear_cost is None:
            raise ValueError("Linear objective requested but instance has no linear cost matrix")

        self.instance = instance
        self.method = method

        # PuLP model
        self.model: Optional[pulp.LpProblem] = None

        # Decision variables
        self.x: Dict[Tuple[int, int], pulp.LpVariable] = {}     # Flow i→j
        self.cost: Dict[Tuple[int, int], pulp.LpVariable] = {}  # f_{i,j}(x_{i,j})

        # Results
        self.build_time: float = 0.0
        self.result: Optional[SolveResult] = None

    @property
    def label(self) -> str:
        return self.method or LINEAR_LABEL

    def build_model(self) -> pulp.LpProblem:
        """
        Build the complete model.

        Returns:
            PuLP LpProblem object
        """
        start = time.time()
        self.model = pulp.LpProblem(f"Transportation_{self.label}", pulp.LpMinimize)

        self._create_variables()
        self._set_objective()
        self._add_supply_constraints()
        self._add_demand_constraints()

        self.build_time = time.time() - start
        logger.debug(
            "Built %s model: %d variables, %d constraints in %.3fs",
            self.label, len(self.model.variables()), len(self.model.constraints), self.build_time
        )
        return self.model

    def _create_variables(self):
        """x_{i,j}: continuous flow, bounded by the smaller of s_i and d_j."""
        for i, j in self.instance.arcs():
            self.x[(i, j)] = pulp.LpVariable(
                f"x_{i}_{j}",
                lowBound=0,
                upBound=float(min(self.instance.supply[i], self.instance.demand[j])),
                cat=pulp.LpContinuous
            )

    def _set_objective(self):
        """Minimize total linear or piecewise-linear transportation cost."""
        if self.method is None:
            c = self.instance.linear_cost
            self.model += (
                pulp.lpSum(c[i, j] * self.x[(i, j)] for i, j in self.instance.arcs()),
                "TotalCost"
            )
            return

        terms = []
        for i, j in self.instance.arcs():
            f = self.instance.get_function(i, j)
            lo, hi = f.domain
            if hi <= lo:
                # Zero-width domain: the flow is fixed and costs f(x_0)
                self.model += self.x[(i, j)] == lo, f"Fixed_{i}_{j}"
                terms.append(float(f.values[0]))
                continue
            self.cost[(i, j)] = piecewise_linear(
                self.model,
                self.x[(i, j)],
                f.breakpoints,
                f.values,
                method=self.method,
                name=f"f_{i}_{j}"
            )
            terms.append(self.cost[(i, j)])

        self.model += pulp.lpSum(terms), "TotalCost"

    def _add_supply_constraints(self):
        """sum_j x_{i,j} = s_i"""
        for i in range(self.instance.num_supply):
            self.model += (
                pulp.lpSum(self.x[(i, j)] for j in range(self.instance.num_demand))
                == float(self.instance.supply[i]),
                f"Supply_{i}"
            )

    def _add_demand_constraints(self):
        """sum_i x_{i,j} = d_j"""
        for j in range(self.instance.num_demand):
            self.model += (
                pulp.lpSum(self.x[(i, j)] for i in range(self.instance.num_supply))
                == float(self.instance.demand[j]),
                f"Demand_{j}"
            )

    def solve(
        self,
        solver: Optional[str] = None,
        time_limit: int = 60,
        verbose: bool = False
    ) -> SolveResult:
        """
        Solve the model; only the solver call is timed.

        Args:
            solver: Solver name ('PULP_CBC_CMD', 'GUROBI_CMD', 'GUROBI')
            time_limit: Time limit in seconds
            verbose: Show the solver log

        Returns:
            SolveResult for this run

        Raises:
            pulp.PulpSolverError: if the solver fails to run
        """
        if self.model is None:
            self.build_model()

        lp_solver = get_solver(solver, time_limit=time_limit, verbose=verbose)

        start = time.time()
        self.model.solve(lp_solver)
        solve_time = time.time() - start

        status = _solve_status(self.model)
        objective = None
        if status in (SolveStatus.OPTIMAL, SolveStatus.TIME_LIMIT):
            objective = pulp.value(self.model.objective)

        variables = self.model.variables()
        self.result = SolveResult(
            method=self.label,
            solver=solver or CBC_SOLVER,
            status=status,
            objective_value=float(objective) if objective is not None else float('inf'),
            solve_time=solve_time,
            build_time=self.build_time,
            num_variables=len(variables),
            num_integer_variables=sum(1 for v in variables if v.cat == pulp.LpInteger),
            num_constraints=len(self.model.constraints),
        )
        return self.result

    def get_solution(self) -> Dict[Tuple[int, int], float]:
        """
        Extract flow values.

        Returns:
            Dict (i, j) -> x_{i,j}; empty if no solution is available
        """
        if self.result is None or not self.result.has_solution:
            return {}

        return {k: (v.varValue or 0.0) for k, v in self.x.items()}

    def true_cost(self) -> float:
        """
        Cost of the current solution evaluated directly on the arc data.

        Flows are clipped to each arc's domain to absorb solver tolerances.
        """
        flows = self.get_solution()
        if not flows:
            return float('inf')

        if self.method is None:
            return self.instance.linear_cost_of(flows)

        clipped = {}
        for (i, j), value in flows.items():
            lo, hi = self.instance.get_function(i, j).domain
            clipped[(i, j)] = min(max(value, lo), hi)
        return self.instance.piecewise_cost(clipped)
