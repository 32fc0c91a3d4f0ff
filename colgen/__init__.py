"""
colgen: Column Generation for covering problems

Solves large set-covering problems (exemplified by 1D cutting stock) by
column generation over a HiGHS master, with an unbounded-knapsack and an
SPPRC labeling pricing oracle.
"""

import logging

__version__ = "0.1.0"

# Applications (ready-to-use solvers for common problems)
from colgen.applications import (
    CuttingStockInstance,
    CuttingStockSolution,
    build_knapsack_network,
    solve_cutting_stock,
)

# Configuration
from colgen.config import config, setup_logging

# Core classes - these are the main user-facing API
from colgen.core import Arc, Column, ColumnPool, Item, Network, ResourceWindow, make_items

# Master problem
from colgen.master import (
    HIGHS_AVAILABLE,
    CoveringMaster,
    HiGHSMasterProblem,
    MasterProblem,
    MasterSolution,
    SolutionStatus,
    SolverError,
)

# Pricing problem
from colgen.pricing import (
    KnapsackPricing,
    Label,
    LabelingAlgorithm,
    LabelPool,
    PricingConfig,
    PricingProblem,
    PricingSolution,
    PricingStatus,
)

# Column generation solver
from colgen.solver import (
    CGConfig,
    CGIteration,
    CGSolution,
    CGStatus,
    ColumnGeneration,
    generate,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Configuration
    "config",
    "setup_logging",
    # Core classes
    "Item",
    "make_items",
    "Arc",
    "Network",
    "ResourceWindow",
    "Column",
    "ColumnPool",
    # Master problem
    "MasterProblem",
    "CoveringMaster",
    "MasterSolution",
    "SolutionStatus",
    "SolverError",
    "HiGHSMasterProblem",
    "HIGHS_AVAILABLE",
    # Pricing problem
    "PricingProblem",
    "PricingConfig",
    "PricingSolution",
    "PricingStatus",
    "KnapsackPricing",
    "LabelingAlgorithm",
    "Label",
    "LabelPool",
    # Column generation solver
    "ColumnGeneration",
    "generate",
    "CGConfig",
    "CGIteration",
    "CGSolution",
    "CGStatus",
    # Applications - Cutting Stock
    "CuttingStockInstance",
    "CuttingStockSolution",
    "build_knapsack_network",
    "solve_cutting_stock",
]
