"""
Visualization utilities for instances and benchmark results.
"""

from typing import Dict, List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx

from ..data.models import PiecewiseLinearFunction, TransportationInstance
from ..milp.solver import FormulationBenchmark
from ..milp.transport_model import SolveResult, SolveStatus


class BenchmarkVisualizer:
    """Visualize arc cost functions, optimal flows and solve times."""

    def __init__(self, instance: TransportationInstance):
        """
        Initialize visualizer.

        Args:
            instance: Transportation instance
        """
        self.instance = instance

    def plot_function(
        self,
        i: int = 0,
        j: int = 0,
        figsize: Tuple[int, int] = (7, 5),
        save_path: Optional[str] = None
    ) -> plt.Figure:
        """Plot the cost function of arc (i, j)."""
        return plot_piecewise_function(
            self.instance.get_function(i, j),
            title=f"Cost function of arc ({i}, {j})",
            figsize=figsize,
            save_path=save_path
        )

    def plot_flow_network(
        self,
        flows: Dict[Tuple[int, int], float],
        title: str = "Optimal Transportation Flows",
        figsize: Tuple[int, int] = (10, 8),
        save_path: Optional[str] = None
    ) -> plt.Figure:
        """
        Plot the bipartite supply/demand network with edge width by flow.

        Args:
            flows: Flow per arc (i, j)
            title: Plot title
            figsize: Figure size
            save_path: Path to save figure

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=figsize)

        G = nx.DiGraph()
        for i, s in enumerate(self.instance.supply):
            G.add_node(f"S{i}", pos=(0.0, -i), node_type="supply", amount=s)
        for j, d in enumerate(self.instance.demand):
            G.add_node(f"D{j}", pos=(1.0, -j), node_type="demand", amount=d)

        for (i, j), value in flows.items():
            if value > 1e-9:
                G.add_edge(f"S{i}", f"D{j}", flow=value)

        pos = nx.get_node_attributes(G, 'pos')

        node_colors = {
            "supply": "#3498db",  # Blue
            "demand": "#27ae60",  # Green
        }
        for node_type, color in node_colors.items():
            nodes = [n for n, d in G.nodes(data=True) if d.get('node_type') == node_type]
            sizes = [300 + 1200 * G.nodes[n]['amount'] for n in nodes]
            nx.draw_networkx_nodes(G, pos, nodelist=nodes, node_color=color, node_size=sizes, ax=ax)

        edges = list(G.edges(data=True))
        if edges:
            max_flow = max(d['flow'] for _, _, d in edges)
            widths = [0.5 + 5.0 * d['flow'] / max_flow for _, _, d in edges]
            nx.draw_networkx_edges(
                G, pos, edgelist=[(u, v) for u, v, _ in edges],
                width=widths, edge_color='#7f8c8d', alpha=0.7,
                arrows=True, arrowsize=12, ax=ax
            )

        nx.draw_networkx_labels(G, pos, font_size=8, ax=ax)

        legend_elements = [
            mpatches.Patch(color='#3498db', label='Supply nodes'),
            mpatches.Patch(color='#27ae60', label='Demand nodes'),
        ]
        ax.legend(handles=legend_elements, loc='upper right')
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.axis('off')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        return fig


def plot_piecewise_function(
    func: PiecewiseLinearFunction,
    title: str = "Piecewise-linear cost",
    figsize: Tuple[int, int] = (7, 5),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Plot a piecewise-linear function with its breakpoints.

    Args:
        func: Function to plot
        title: Plot title
        figsize: Figure size
        save_path: Path to save figure

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    ax.plot(func.breakpoints, func.values, color='#3498db', linewidth=2)
    ax.scatter(func.breakpoints, func.values, color='#e74c3c', zorder=3, label='Breakpoints')

    # Chord from first to last breakpoint shows concavity/convexity
    ax.plot(
        [func.breakpoints[0], func.breakpoints[-1]],
        [func.values[0], func.values[-1]],
        color='#95a5a6', linestyle='--', label='Chord'
    )

    shape = "concave" if func.is_concave else ("convex" if func.is_convex else "nonconvex")
    ax.set_title(f"{title} ({shape})", fontsize=12, fontweight='bold')
    ax.set_xlabel('Flow')
    ax.set_ylabel('Cost')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_solve_times(
    results: List[SolveResult],
    figsize: Tuple[int, int] = (12, 5),
    save_path: Optional[str] = None
) -> plt.Figure:
    """
    Grouped bar chart of solve time per formulation and solver.

    Runs that did not reach optimality are hatched.
    """
    fig, ax = plt.subplots(figsize=figsize)

    methods = list(dict.fromkeys(r.method for r in results))
    solvers = list(dict.fromkeys(r.solver for r in results))
    x = np.arange(len(methods))
    width = 0.8 / max(1, len(solvers))
    colors = ['#3498db', '#e74c3c', '#27ae60', '#f39c12']

    for k, solver in enumerate(solvers):
        by_method = {r.method: r for r in results if r.solver == solver}
        times = [by_method[m].solve_time if m in by_method else 0.0 for m in methods]
        bars = ax.bar(
            x + k * width, times, width,
            label=solver, color=colors[k % len(colors)], alpha=0.8
        )
        for bar, m in zip(bars, methods):
            if m in by_method and by_method[m].status != SolveStatus.OPTIMAL:
                bar.set_hatch('//')

    ax.set_xticks(x + width * (len(solvers) - 1) / 2)
    ax.set_xticklabels(methods, rotation=30, ha='right')
    ax.set_ylabel('Solve time (s)')
    ax.set_title('Solve Time by Formulation', fontweight='bold')
    ax.legend()
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_results(
    instance: TransportationInstance,
    benchmark: FormulationBenchmark,
    save_dir: Optional[str] = None
) -> List[plt.Figure]:
    """
    Plot all result visualizations.

    Args:
        instance: Transportation instance
        benchmark: Benchmark that has been run
        save_dir: Directory to save figures

    Returns:
        List of figures
    """
    viz = BenchmarkVisualizer(instance)
    figures = []

    figures.append(viz.plot_function(
        0, 0,
        save_path=f"{save_dir}/cost_function.png" if save_dir else None
    ))

    if benchmark.results:
        figures.append(plot_solve_times(
            benchmark.results,
            save_path=f"{save_dir}/solve_times.png" if save_dir else None
        ))

    best = benchmark.best_result()
    if best is not None:
        flows = benchmark.get_model(best.solver, best.method).get_solution()
        figures.append(viz.plot_flow_network(
            flows,
            title=f"Optimal Flows ({best.method}, {best.solver})",
            save_path=f"{save_dir}/flows.png" if save_dir else None
        ))

    return figures
