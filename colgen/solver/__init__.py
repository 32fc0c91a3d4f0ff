"""
Solver module - Column Generation algorithm implementation.

This module provides:
- ColumnGeneration: Main algorithm controller
- generate: One-call form of the loop
- CGConfig: Configuration options
- CGSolution: Solution data structure
- CGStatus: Solution status enum
- CGIteration: Per-iteration information

Usage:
------
    >>> from colgen.solver import generate
    >>> solution = generate(master, oracle, tolerance=1e-6, max_iterations=100)
    >>> solution.converged, solution.iterations
    (True, 7)

With callbacks for monitoring:

    >>> def progress_callback(cg, iteration):
    ...     print(f"Iter {iteration.iteration}: obj={iteration.master_objective:.2f}")
    ...     return iteration.iteration < 50  # Stop after 50 iterations
    >>>
    >>> cg = ColumnGeneration(master, oracle)
    >>> cg.add_callback(progress_callback)
    >>> solution = cg.solve()
"""

from colgen.solver.column_generation import CGCallback, CGConfig, ColumnGeneration, generate
from colgen.solver.solution import CGIteration, CGSolution, CGStatus

__all__ = [
    # Main class
    'ColumnGeneration',
    'generate',

    # Configuration
    'CGConfig',
    'CGCallback',

    # Solution
    'CGSolution',
    'CGStatus',
    'CGIteration',
]
