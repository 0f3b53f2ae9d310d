"""
Scalability Benchmark for the piecewise formulations.

Solves growing instances with every formulation to measure:
- Solve time
- Model size (variables, integer variables, constraints)
- Status within the time limit
"""

import json
import time
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import List

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from pwl_transportation.config import (
    FORMULATION_METHODS,
    BenchmarkConfig,
    InstanceConfig,
    SolverConfig,
    TransportationConfig,
)
from pwl_transportation.data.generator import generate_data
from pwl_transportation.milp.solver import FormulationBenchmark


@dataclass
class ScaleConfig:
    """Instance size for a benchmark run."""
    name: str
    num_supply: int
    num_demand: int
    num_segments: int

    @property
    def num_arcs(self) -> int:
        return self.num_supply * self.num_demand


@dataclass
class ScaleResult:
    """One formulation solved at one instance size."""
    config_name: str
    method: str
    solver: str
    status: str
    objective_value: float
    solve_time_seconds: float
    num_variables: int
    num_integer_variables: int
    num_constraints: int


# Benchmark configurations
SCALE_CONFIGS = [
    ScaleConfig("Tiny", 2, 2, 4),
    ScaleConfig("Small", 4, 4, 8),
    ScaleConfig("Medium", 8, 8, 10),
    ScaleConfig("Large", 10, 10, 16),
]


def run_single_scale(
    scale: ScaleConfig,
    solver: str = "PULP_CBC_CMD",
    time_limit: int = 60
) -> List[ScaleResult]:
    """
    Run all formulations on one instance size.

    Args:
        scale: Instance size
        solver: Solver name
        time_limit: Time limit per solve

    Returns:
        ScaleResult per formulation
    """
    print(f"\n{'='*60}")
    print(f"Running: {scale.name} ({scale.num_arcs} arcs, {scale.num_segments} segments) - {solver}")
    print(f"{'='*60}")

    config = TransportationConfig(
        instance=InstanceConfig(
            num_supply=scale.num_supply,
            num_demand=scale.num_demand,
            num_segments=scale.num_segments,
        ),
        solver=SolverConfig(name=solver, time_limit=time_limit),
        benchmark=BenchmarkConfig(
            methods=list(FORMULATION_METHODS),
            solvers=[solver],
            include_linear_baseline=False,
        ),
    )

    instance = generate_data(scale.num_supply, scale.num_demand, scale.num_segments)
    benchmark = FormulationBenchmark(instance, config)
    benchmark.run()

    return [
        ScaleResult(
            config_name=scale.name,
            method=r.method,
            solver=r.solver,
            status=r.status.value,
            objective_value=r.objective_value,
            solve_time_seconds=r.solve_time,
            num_variables=r.num_variables,
            num_integer_variables=r.num_integer_variables,
            num_constraints=r.num_constraints,
        )
        for r in benchmark.results
    ]


def run_all_benchmarks(
    configs: List[ScaleConfig] = None,
    solver: str = "PULP_CBC_CMD",
    time_limit: int = 60,
    output_dir: str = "results"
) -> List[ScaleResult]:
    """
    Run the scalability benchmark and save results to JSON.

    Args:
        configs: Instance sizes (defaults to SCALE_CONFIGS)
        solver: Solver name
        time_limit: Time limit per solve
        output_dir: Directory for the JSON report

    Returns:
        All ScaleResults
    """
    configs = configs or SCALE_CONFIGS
    results = []

    start = time.time()
    for scale in configs:
        results.extend(run_single_scale(scale, solver=solver, time_limit=time_limit))
    total = time.time() - start

    # Print summary table
    print(f"\n{'='*80}")
    print("SCALABILITY SUMMARY")
    print(f"{'='*80}")
    print(f"{'Size':<8} {'Method':<18} {'Status':<11} {'Time (s)':>9} {'Vars':>7} {'Int':>6} {'Cons':>7}")
    print("-" * 80)
    for r in results:
        print(f"{r.config_name:<8} {r.method:<18} {r.status:<11} {r.solve_time_seconds:>9.3f} "
              f"{r.num_variables:>7} {r.num_integer_variables:>6} {r.num_constraints:>7}")
    print(f"\nTotal benchmark time: {total:.1f}s")

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    with open(output_path / "scalability_results.json", "w") as f:
        json.dump([asdict(r) for r in results], f, indent=2)
    print(f"Results saved to {output_path / 'scalability_results.json'}")

    return results


if __name__ == "__main__":
    run_all_benchmarks()
