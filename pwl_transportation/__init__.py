# Piecewise-Linear Transportation Package
"""
Benchmark of MIP formulations for piecewise-linear transportation costs:
- Data: random balanced instances with concave per-arc cost functions
- Formulations: CC, MC, Incremental, Logarithmic, DisaggLogarithmic, ZigZag, ZigZagInteger
- MILP: PuLP models solved with Cbc or Gurobi
"""

__version__ = "0.1.0"
