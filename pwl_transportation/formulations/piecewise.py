"""
MIP formulations of univariate piecewise-linear functions for PuLP models.

Each formulation adds auxiliary variables and constraints that force
z == f(x) for a function f given by breakpoints (x_0, ..., x_d) and
values (f_0, ..., f_d).
"""

import logging
from typing import Dict, List, Sequence, Tuple
import pulp

from .codes import (
    dot,
    integer_zigzag_codes,
    num_code_bits,
    reflected_gray_codes,
    unit_vector_hyperplanes,
    zigzag_codes,
    zigzag_hyperplanes,
)


logger = logging.getLogger(__name__)


def _check_table(breakpoints: Sequence[float], values: Sequence[float]) -> Tuple[List[float], List[float]]:
    x_pts = [float(v) for v in breakpoints]
    y_pts = [float(v) for v in values]
    if len(x_pts) != len(y_pts):
        raise ValueError(
            f"Got {len(x_pts)} breakpoints but {len(y_pts)} values"
        )
    if len(x_pts) < 2:
        raise ValueError("A piecewise-linear function needs at least two breakpoints")
    if any(b <= a for a, b in zip(x_pts, x_pts[1:])):
        raise ValueError("Breakpoints must be strictly increasing")
    return x_pts, y_pts


class _Formulation:
    """
    Base class of the piecewise formulations.

    Subclasses implement construct(model, x, z) using self.x_pts, self.y_pts
    and self.name as a prefix for every variable and constraint they create.
    """

    def __init__(self, x_pts: List[float], y_pts: List[float], name: str):
        self.x_pts = x_pts
        self.y_pts = y_pts
        self.name = name

    @property
    def num_segments(self) -> int:
        return len(self.x_pts) - 1

    def _var(self, suffix: str, lowBound=None, upBound=None, cat=pulp.LpContinuous) -> pulp.LpVariable:
        return pulp.LpVariable(f"{self.name}_{suffix}", lowBound=lowBound, upBound=upBound, cat=cat)

    def _add(self, model: pulp.LpProblem, constraint, suffix: str) -> None:
        model += constraint, f"{self.name}_{suffix}"

    def construct(self, model: pulp.LpProblem, x: pulp.LpVariable, z: pulp.LpVariable) -> None:
        raise NotImplementedError


class _LambdaFormulation(_Formulation):
    """Convex combination of the vertices: x = sum lambda_v x_v, z = sum lambda_v f_v."""

    def _add_lambda(self, model, x, z, tag: str) -> Dict[int, pulp.LpVariable]:
        vertices = range(len(self.x_pts))
        lmda = {v: self._var(f"{tag}_lambda_{v}", lowBound=0) for v in vertices}

        self._add(model, x == pulp.lpSum(lmda[v] * self.x_pts[v] for v in vertices), f"{tag}_x")
        self._add(model, z == pulp.lpSum(lmda[v] * self.y_pts[v] for v in vertices), f"{tag}_z")
        self._add(model, pulp.lpSum(lmda.values()) == 1, f"{tag}_convex")
        return lmda


class CCFormulation(_LambdaFormulation):
    """Convex combination with one binary per segment."""

    def construct(self, model, x, z):
        lmda = self._add_lambda(model, x, z, "cc")
        segments = range(self.num_segments)
        bin_y = {p: self._var(f"cc_y_{p}", cat=pulp.LpBinary) for p in segments}

        # lambda_v may be positive only if an adjacent segment is selected
        for v in lmda:
            adjacent = [p for p in (v - 1, v) if 0 <= p < self.num_segments]
            self._add(model, lmda[v] <= pulp.lpSum(bin_y[p] for p in adjacent), f"cc_vertex_{v}")
        self._add(model, pulp.lpSum(bin_y.values()) == 1, "cc_select")


class MCFormulation(_Formulation):
    """Multiple choice: a copy of x per segment, scaled by the segment binary."""

    def construct(self, model, x, z):
        segments = range(self.num_segments)
        slope = {
            p: (self.y_pts[p + 1] - self.y_pts[p]) / (self.x_pts[p + 1] - self.x_pts[p])
            for p in segments
        }
        intercept = {p: self.y_pts[p] - slope[p] * self.x_pts[p] for p in segments}

        poly_x = {p: self._var(f"mc_x_{p}") for p in segments}
        bin_y = {p: self._var(f"mc_y_{p}", cat=pulp.LpBinary) for p in segments}

        self._add(model, x == pulp.lpSum(poly_x.values()), "mc_x")
        self._add(
            model,
            z == pulp.lpSum(slope[p] * poly_x[p] + intercept[p] * bin_y[p] for p in segments),
            "mc_z"
        )
        for p in segments:
            self._add(model, self.x_pts[p] * bin_y[p] <= poly_x[p], f"mc_lower_{p}")
            self._add(model, poly_x[p] <= self.x_pts[p + 1] * bin_y[p], f"mc_upper_{p}")
        self._add(model, pulp.lpSum(bin_y.values()) == 1, "mc_select")


class IncrementalFormulation(_Formulation):
    """Incremental (delta) method: segments are filled in order."""

    def construct(self, model, x, z):
        segments = range(self.num_segments)
        delta = {p: self._var(f"inc_delta_{p}", lowBound=0, upBound=1) for p in segments}
        bin_y = {p: self._var(f"inc_y_{p}", cat=pulp.LpBinary) for p in range(self.num_segments - 1)}

        self._add(
            model,
            x == self.x_pts[0] + pulp.lpSum(
                delta[p] * (self.x_pts[p + 1] - self.x_pts[p]) for p in segments
            ),
            "inc_x"
        )
        self._add(
            model,
            z == self.y_pts[0] + pulp.lpSum(
                delta[p] * (self.y_pts[p + 1] - self.y_pts[p]) for p in segments
            ),
            "inc_z"
        )
        # delta_{p+1} > 0 only once segment p is full
        for p in bin_y:
            self._add(model, delta[p + 1] <= bin_y[p], f"inc_fill_{p}")
            self._add(model, bin_y[p] <= delta[p], f"inc_order_{p}")


class _EncodingFormulation(_LambdaFormulation):
    """
    SOS2 on lambda through an integer encoding of the active segment.

    For every hyperplane b the value b.y is bounded by the smallest and largest
    b.h over the segments adjacent to each vertex carrying weight.
    """

    tag = ""
    cat = pulp.LpBinary

    def codes(self, k: int) -> List[List[int]]:
        raise NotImplementedError

    def hyperplanes(self, k: int) -> List[List[int]]:
        return unit_vector_hyperplanes(k)

    def upper_bound(self, k: int, i: int) -> int:
        return 1

    def construct(self, model, x, z):
        lmda = self._add_lambda(model, x, z, self.tag)
        k = num_code_bits(self.num_segments)
        if k == 0:
            return

        codes = self.codes(k)[:self.num_segments]
        y = {
            i: self._var(f"{self.tag}_y_{i}", lowBound=0, upBound=self.upper_bound(k, i), cat=self.cat)
            for i in range(k)
        }
        last = self.num_segments - 1

        for n, b in enumerate(self.hyperplanes(k)):
            lower, upper = [], []
            for v in lmda:
                adjacent = [dot(b, codes[p]) for p in (v - 1, v) if 0 <= p <= last]
                lower.append(min(adjacent) * lmda[v])
                upper.append(max(adjacent) * lmda[v])
            by = pulp.lpSum(coef * y[i] for i, coef in enumerate(b) if coef)
            self._add(model, pulp.lpSum(lower) <= by, f"{self.tag}_lower_{n}")
            self._add(model, by <= pulp.lpSum(upper), f"{self.tag}_upper_{n}")


class LogarithmicFormulation(_EncodingFormulation):
    """Logarithmic branching on a reflected Gray code."""

    tag = "log"

    def codes(self, k):
        return reflected_gray_codes(k)


class ZigZagFormulation(_EncodingFormulation):
    """Binary zig-zag formulation."""

    tag = "zz"

    def codes(self, k):
        return zigzag_codes(k)

    def hyperplanes(self, k):
        return zigzag_hyperplanes(k)


class ZigZagIntegerFormulation(_EncodingFormulation):
    """Zig-zag formulation with general integer variables."""

    tag = "zzi"
    cat = pulp.LpInteger

    def codes(self, k):
        return integer_zigzag_codes(k)

    def upper_bound(self, k, i):
        return 2 ** (k - 1 - i)


class DisaggLogarithmicFormulation(_Formulation):
    """Disaggregated convex combination with a Gray-code label per segment."""

    def construct(self, model, x, z):
        segments = range(self.num_segments)
        # gamma[p, 0] weights the left end of segment p, gamma[p, 1] the right end
        gamma = {
            (p, e): self._var(f"dlog_gamma_{p}_{e}", lowBound=0)
            for p in segments for e in (0, 1)
        }

        self._add(
            model,
            x == pulp.lpSum(gamma[p, e] * self.x_pts[p + e] for (p, e) in gamma),
            "dlog_x"
        )
        self._add(
            model,
            z == pulp.lpSum(gamma[p, e] * self.y_pts[p + e] for (p, e) in gamma),
            "dlog_z"
        )
        self._add(model, pulp.lpSum(gamma.values()) == 1, "dlog_convex")

        k = num_code_bits(self.num_segments)
        codes = reflected_gray_codes(k)[:self.num_segments]
        for i in range(k):
            y_i = self._var(f"dlog_y_{i}", cat=pulp.LpBinary)
            self._add(
                model,
                pulp.lpSum(
                    gamma[p, 0] + gamma[p, 1] for p in segments if codes[p][i]
                ) == y_i,
                f"dlog_code_{i}"
            )


FORMULATIONS = {
    "CC": CCFormulation,
    "MC": MCFormulation,
    "Incremental": IncrementalFormulation,
    "Logarithmic": LogarithmicFormulation,
    "DisaggLogarithmic": DisaggLogarithmicFormulation,
    "ZigZag": ZigZagFormulation,
    "ZigZagInteger": ZigZagIntegerFormulation,
}


def piecewise_linear(
    model: pulp.LpProblem,
    x: pulp.LpVariable,
    breakpoints: Sequence[float],
    values: Sequence[float],
    method: str = "Logarithmic",
    name: str = "pwl"
) -> pulp.LpVariable:
    """
    Add z = f(x) to a PuLP model using the chosen formulation.

    Args:
        model: Model receiving the auxiliary variables and constraints
        x: Argument variable; it is restricted to [x_0, x_d]
        breakpoints: Strictly increasing x-values x_0, ..., x_d
        values: Function values f_0, ..., f_d
        method: One of FORMULATIONS
        name: Unique prefix for generated variables and constraints

    Returns:
        Variable z equal to f(x) in every feasible solution
    """
    x_pts, y_pts = _check_table(breakpoints, values)

    try:
        formulation_cls = FORMULATIONS[method]
    except KeyError:
        raise ValueError(
            f"Unknown piecewise formulation {method!r}; expected one of {list(FORMULATIONS)}"
        ) from None

    z = pulp.LpVariable(f"{name}_z")
    formulation_cls(x_pts, y_pts, name).construct(model, x, z)
    logger.debug("Added %s formulation for %s with %d segments", method, name, len(x_pts) - 1)
    return z
