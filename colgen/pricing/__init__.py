"""
Pricing subproblem module - oracles proposing improving columns.

The pricing problem finds a pattern with negative reduced cost for the
current duals of the master problem.

This module provides:
- PricingProblem: Abstract base class shared by all oracles
- KnapsackPricing: Unbounded knapsack DP (single resource)
- LabelingAlgorithm: SPPRC label-setting with dominance (graph pricing)
- Label / LabelPool: Label arena and dominance engine
- PricingSolution / PricingStatus / PricingConfig

Usage:
------
    >>> from colgen.pricing import KnapsackPricing
    >>> oracle = KnapsackPricing(widths=[20, 35, 50], capacity=100)
    >>> solution = oracle.price(master.dual_vector())
    >>> if solution.is_improving():
    ...     master.add_column(solution.column)
"""

from colgen.pricing.base import (
    PricingConfig,
    PricingProblem,
    PricingSolution,
    PricingStatus,
)
from colgen.pricing.knapsack import KnapsackPricing
from colgen.pricing.label import Label, LabelPool
from colgen.pricing.labeling import LabelingAlgorithm

__all__ = [
    # Base classes
    "PricingProblem",
    "PricingSolution",
    "PricingStatus",
    "PricingConfig",
    # Oracles
    "KnapsackPricing",
    "LabelingAlgorithm",
    # Labels
    "Label",
    "LabelPool",
]
