# Utilities Package
"""Utility functions for visualization."""

from .visualization import (
    BenchmarkVisualizer,
    plot_piecewise_function,
    plot_results,
    plot_solve_times,
)

__all__ = [
    "BenchmarkVisualizer",
    "plot_piecewise_function",
    "plot_results",
    "plot_solve_times",
]
