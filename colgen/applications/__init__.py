"""
Application-specific implementations.

- Cutting Stock Problem (1D): instance definition, knapsack and SPPRC
  pricing, and a one-call solve function.

Usage:
------
    from colgen.applications import CuttingStockInstance, solve_cutting_stock
    instance = CuttingStockInstance(widths=[45, 36], demands=[10, 20], capacity=100)
    solution = solve_cutting_stock(instance)
"""

from colgen.applications.cutting_stock import (
    CuttingStockInstance,
    CuttingStockSolution,
    build_knapsack_network,
    create_pricing,
    solve_cutting_stock,
)

__all__ = [
    'CuttingStockInstance',
    'CuttingStockSolution',
    'build_knapsack_network',
    'create_pricing',
    'solve_cutting_stock',
]
