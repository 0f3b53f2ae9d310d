# Piecewise Formulations Package
"""
MIP encodings of univariate piecewise-linear functions.

Given breakpoints (x_v, f_v), each formulation links a flow variable x to a
cost variable z = f(x):
- CC, MC, Incremental: one binary per segment
- Logarithmic, DisaggLogarithmic, ZigZag, ZigZagInteger: ceil(log2 d) integers
"""

from .piecewise import FORMULATIONS, piecewise_linear

__all__ = [
    "FORMULATIONS",
    "piecewise_linear",
]
