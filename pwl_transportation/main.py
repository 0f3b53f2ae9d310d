"""
Main entry point for the piecewise-linear transportation benchmark.

Run with: uv run python -m pwl_transportation.main
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import FORMULATION_METHODS, create_default_config, create_small_config
from .data.generator import generate_data
from .milp.solver import FormulationBenchmark
from .milp.transport_model import TransportationModel, get_solver


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Compare MIP formulations for piecewise-linear transportation costs"
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Run with small test configuration"
    )
    parser.add_argument(
        "--supply",
        type=int,
        default=None,
        help="Number of supply nodes"
    )
    parser.add_argument(
        "--demand",
        type=int,
        default=None,
        help="Number of demand nodes"
    )
    parser.add_argument(
        "--segments",
        type=int,
        default=None,
        help="Number of linear pieces per arc cost function"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: derived from the dimensions)"
    )
    parser.add_argument(
        "--methods",
        nargs="+",
        choices=FORMULATION_METHODS,
        default=None,
        help="Formulations to compare (default: all)"
    )
    parser.add_argument(
        "--solvers",
        nargs="+",
        default=None,
        help="Solvers to use: PULP_CBC_CMD, GUROBI_CMD, GUROBI"
    )
    parser.add_argument(
        "--time-limit",
        type=int,
        default=None,
        help="Time limit per solve in seconds"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show solver logs and debug messages"
    )
    parser.add_argument(
        "--no-linear",
        action="store_true",
        help="Skip the linear-cost LP baseline"
    )
    parser.add_argument(
        "--print-model",
        action="store_true",
        help="Print the linear-cost model before solving"
    )
    parser.add_argument(
        "--plot-function",
        action="store_true",
        help="Show the cost function of arc (0, 0)"
    )
    parser.add_argument(
        "--save-plots",
        type=str,
        default=None,
        help="Directory to save plots"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write results to this CSV file"
    )
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    print("\n" + "=" * 60)
    print("PIECEWISE-LINEAR TRANSPORTATION BENCHMARK")
    print("MIP formulations: " + ", ".join(FORMULATION_METHODS))
    print("=" * 60)

    # Create configuration
    config = create_small_config() if args.test_mode else create_default_config()
    if args.test_mode:
        print("\n[Config] Using small test configuration")
    if args.supply is not None:
        config.instance.num_supply = args.supply
    if args.demand is not None:
        config.instance.num_demand = args.demand
    if args.segments is not None:
        config.instance.num_segments = args.segments
    if args.seed is not None:
        config.instance.random_seed = args.seed
    if args.methods is not None:
        config.benchmark.methods = list(args.methods)
    if args.solvers is not None:
        config.benchmark.solvers = list(args.solvers)
    if args.time_limit is not None:
        config.solver.time_limit = args.time_limit
    if args.no_linear:
        config.benchmark.include_linear_baseline = False
    config.solver.verbose = args.verbose

    for name in config.benchmark.solvers:
        try:
            get_solver(name)
        except ValueError as e:
            print(f"\n{e}")
            return 2

    # Generate instance
    print("\n[Generating Instance]")
    try:
        instance = generate_data(
            config.instance.num_supply,
            config.instance.num_demand,
            config.instance.num_segments,
            random_seed=config.instance.random_seed
        )
    except ValueError as e:
        print(f"  Invalid instance dimensions: {e}")
        return 2

    for line in instance.summary():
        print(f"  {line}")
    print(f"  Time limit: {config.solver.time_limit}s")
    print(f"  Solvers: {', '.join(config.benchmark.solvers)}")

    if args.print_model:
        print("\n[Linear-Cost Model]")
        print(TransportationModel(instance).build_model())

    if args.plot_function:
        import matplotlib.pyplot as plt
        from .utils.visualization import plot_piecewise_function
        plot_piecewise_function(instance.get_function(0, 0), title="Cost function of arc (0, 0)")
        plt.show()

    # Run benchmark
    benchmark = FormulationBenchmark(instance, config)
    benchmark.run()
    benchmark.print_summary()

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        benchmark.to_dataframe().to_csv(args.output, index=False)
        print(f"\n[Results written to {args.output}]")

    if args.save_plots:
        from .utils.visualization import plot_results
        print(f"\n[Saving plots to {args.save_plots}]")
        Path(args.save_plots).mkdir(parents=True, exist_ok=True)
        plot_results(instance, benchmark, save_dir=args.save_plots)

    print("\n" + "=" * 60)
    print("BENCHMARK COMPLETE")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
