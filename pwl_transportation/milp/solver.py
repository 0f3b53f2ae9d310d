"""
Benchmark driver comparing piecewise formulations across solvers.

Solves the same instance once per (solver, formulation) pair, sequentially,
and reports status, cost and solve time.
"""

import logging
from typing import Dict, List, Optional
import pandas as pd
import pulp

from ..config import TransportationConfig
from ..data.models import TransportationInstance
from .transport_model import (
    LINEAR_LABEL,
    SolveResult,
    SolveStatus,
    TransportationModel,
    get_solver,
)


logger = logging.getLogger(__name__)


class FormulationBenchmark:
    """
    Runs every configured formulation on one instance.

    Solves are sequential so that wall-clock times are comparable.
    """

    def __init__(self, instance: TransportationInstance, config: TransportationConfig):
        """
        Initialize the benchmark.

        Args:
            instance: Transportation instance shared by every run
            config: Solver and benchmark settings
        """
        self.instance = instance
        self.config = config

        # Results storage
        self.results: List[SolveResult] = []
        self.models: Dict[tuple, TransportationModel] = {}
        self.skipped_solvers: List[str] = []

    def run(
        self,
        methods: Optional[List[str]] = None,
        solvers: Optional[List[str]] = None
    ) -> List[SolveResult]:
        """
        Solve the instance with each solver and formulation.

        Args:
            methods: Formulations to run (defaults to the configured list)
            solvers: Solver names (defaults to the configured list)

        Returns:
            One SolveResult per run, in execution order
        """
        methods = list(methods if methods is not None else self.config.benchmark.methods)
        solvers = list(solvers if solvers is not None else self.config.benchmark.solvers)

        labels: List[Optional[str]] = []
        if self.config.benchmark.include_linear_baseline:
            labels.append(None)
        labels.extend(methods)

        for solver in solvers:
            if not self._solver_available(solver):
                continue

            print(f"\n[Solver: {solver}]")
            for method in labels:
                result = self._solve_single(method, solver)
                self.results.append(result)
                print(f"  {result.format_row()}")

        return self.results

    def _solver_available(self, solver: str) -> bool:
        """Check availability; unavailable solvers are skipped or rejected."""
        lp_solver = get_solver(solver, time_limit=self.config.solver.time_limit)
        if lp_solver.available():
            return True

        if self.config.benchmark.skip_unavailable:
            print(f"\n[Solver: {solver}] not available, skipping")
            logger.warning("Solver %s is not available", solver)
            self.skipped_solvers.append(solver)
            return False
        raise pulp.PulpSolverError(f"Solver {solver} is not available")

    def _solve_single(self, method: Optional[str], solver: str) -> SolveResult:
        """Build and solve one formulation; solver failures become ERROR results."""
        model = TransportationModel(self.instance, method=method)
        model.build_model()
        self.models[(solver, model.label)] = model

        try:
            return model.solve(
                solver=solver,
                time_limit=self.config.solver.time_limit,
                verbose=self.config.solver.verbose
            )
        except pulp.PulpSolverError as e:
            logger.error("%s with %s failed: %s", model.label, solver, e)
            return SolveResult(
                method=model.label,
                solver=solver,
                status=SolveStatus.ERROR,
                objective_value=float('inf'),
                solve_time=0.0,
                build_time=model.build_time
            )

    def get_model(self, solver: str, method: Optional[str] = None) -> TransportationModel:
        """Get the solved model of a run (method=None for the linear baseline)."""
        return self.models[(solver, method or LINEAR_LABEL)]

    def best_result(self) -> Optional[SolveResult]:
        """
        Fastest optimal piecewise run.

        Returns:
            SolveResult, or None if no piecewise run reached optimality
        """
        optimal = [
            r for r in self.results
            if r.status == SolveStatus.OPTIMAL and r.method != LINEAR_LABEL
        ]
        if not optimal:
            return None
        return min(optimal, key=lambda r: r.solve_time)

    def objective_spread(self) -> Dict[str, float]:
        """
        Largest objective gap between optimal piecewise runs, per solver.

        Every formulation is exact, so the spread should be at solver tolerance.
        """
        spread = {}
        for solver in {r.solver for r in self.results}:
            values = [
                r.objective_value for r in self.results
                if r.solver == solver
                and r.method != LINEAR_LABEL
                and r.status == SolveStatus.OPTIMAL
            ]
            if values:
                spread[solver] = max(values) - min(values)
        return spread

    def to_dataframe(self) -> pd.DataFrame:
        """
        Results as a table.

        Returns:
            DataFrame with one row per run
        """
        columns = [
            "solver", "method", "status", "objective", "solve_time",
            "build_time", "variables", "integer_variables", "constraints",
        ]
        rows = [
            {
                "solver": r.solver,
                "method": r.method,
                "status": r.status.value,
                "objective": r.objective_value,
                "solve_time": r.solve_time,
                "build_time": r.build_time,
                "variables": r.num_variables,
                "integer_variables": r.num_integer_variables,
                "constraints": r.num_constraints,
            }
            for r in self.results
        ]
        return pd.DataFrame(rows, columns=columns)

    def print_summary(self):
        """Print a comparison table of all runs."""
        print("\n" + "=" * 72)
        print("FORMULATION COMPARISON")
        print("=" * 72)

        if not self.results:
            print("  No results.")
            return

        print(f"{'Solver':<14} {'Method':<18} {'Status':<11} {'Cost':>12} {'Time':>10}")
        print("-" * 72)
        for result in self.results:
            print(result.format_row())

        best = self.best_result()
        if best is not None:
            print(f"\nFastest optimal formulation: {best.method} "
                  f"with {best.solver} ({best.solve_time:.3f}s)")

        for solver, gap in sorted(self.objective_spread().items()):
            print(f"Objective spread across formulations ({solver}): {gap:.2e}")
