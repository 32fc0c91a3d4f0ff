"""
Cutting Stock Problem (1D) via Column Generation.

The Cutting Stock Problem (CSP) asks: given a set of items with widths and
demands, and rolls of fixed width, find the minimum number of rolls needed
to cut all items.

This is the classic application of column generation where:
- Master problem: Select patterns (columns) to minimize roll usage
- Pricing problem: Knapsack to find patterns with negative reduced cost

Mathematical Formulation:
------------------------
Master Problem (Set Covering):
    min  sum_p x_p                    (minimize number of rolls)
    s.t. sum_p a_ip * x_p >= d_i      (meet demand for item i)
         x_p >= 0

Pricing Subproblem (Unbounded Knapsack):
    max  sum_i pi_i * y_i             (maximize dual value)
    s.t. sum_i w_i * y_i <= W         (respect roll width)
         y_i >= 0 integer

A pattern has negative reduced cost if: 1 - sum_i pi_i * y_i < 0

The same pricing problem can be posed as an SPPRC on a small staged
network (see build_knapsack_network), which lets both oracles be
compared on one instance.

Usage:
------
    from colgen.applications import CuttingStockInstance, solve_cutting_stock

    instance = CuttingStockInstance(
        widths=[20, 35, 50],
        demands=[40, 30, 20],
        capacity=100,
    )
    solution = solve_cutting_stock(instance)
    print(f"Rolls needed (LP): {solution.num_rolls:.2f}")
    for pattern, count in solution.patterns:
        print(f"  Use pattern {pattern} x {count:.2f}")
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from colgen.core.item import Item, make_items
from colgen.core.network import Network
from colgen.core.resource import ResourceWindow
from colgen.master.base import MasterProblem
from colgen.master.covering import CoveringMaster
from colgen.pricing.base import PricingConfig, PricingProblem
from colgen.pricing.knapsack import KnapsackPricing
from colgen.pricing.labeling import LabelingAlgorithm
from colgen.solver.column_generation import CGConfig, ColumnGeneration

logger = logging.getLogger(__name__)


@dataclass
class CuttingStockInstance:
    """
    A Cutting Stock Problem instance.

    Attributes:
        widths: Width of each item type (positive integers)
        demands: Number of each item type needed (non-negative integers)
        capacity: Width of each roll (positive integer)
        names: Optional names for items
        name: Optional instance name
    """
    widths: List[int]
    demands: List[int]
    capacity: int
    names: Optional[List[str]] = None
    name: Optional[str] = None
    items: List[Item] = field(init=False, repr=False)

    def __post_init__(self):
        if isinstance(self.capacity, bool) or int(self.capacity) != self.capacity \
                or self.capacity <= 0:
            raise ValueError(f"Capacity must be a positive integer, got {self.capacity!r}")
        self.capacity = int(self.capacity)

        self.items = make_items(self.widths, self.demands, self.names)
        self.widths = [item.width for item in self.items]
        self.demands = [item.demand for item in self.items]
        self.names = [item.name for item in self.items]

        for item in self.items:
            if item.width > self.capacity:
                raise ValueError(
                    f"Item '{item.name}' (width {item.width}) does not fit "
                    f"in a roll of width {self.capacity}"
                )

    @property
    def num_items(self) -> int:
        """Number of item types."""
        return len(self.items)

    @property
    def total_demand(self) -> int:
        """Total number of items demanded."""
        return sum(self.demands)

    @property
    def continuous_lower_bound(self) -> float:
        """sum_i w_i * d_i / W, a lower bound on the LP optimum."""
        return sum(w * d for w, d in zip(self.widths, self.demands)) / self.capacity

    def max_copies(self, item_idx: int) -> int:
        """Maximum copies of an item that fit in one roll."""
        return self.items[item_idx].max_copies(self.capacity)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CuttingStockInstance':
        """
        Build an instance from plain data.

        Example:
            >>> CuttingStockInstance.from_dict(
            ...     {"widths": [20, 35, 50], "demands": [40, 30, 20], "capacity": 100}
            ... ).continuous_lower_bound
            28.5
        """
        for key in ("widths", "demands", "capacity"):
            if key not in data:
                raise ValueError(f"Cutting stock data is missing '{key}'")
        return cls(
            widths=list(data["widths"]),
            demands=list(data["demands"]),
            capacity=data["capacity"],
            names=data.get("names"),
            name=data.get("name"),
        )


def build_knapsack_network(instance: CuttingStockInstance) -> Network:
    """
    Pose the knapsack pricing problem as an SPPRC.

    Nodes 0..n form a chain of stages; node n is the sink. Stage i has a
    self-loop "cut one piece of item i" (consumes w_i, covers item i) and
    a free arc to stage i+1. The single resource is the used roll width,
    bounded by [0, W].

    Args:
        instance: The cutting stock instance

    Returns:
        Network with source = stage 0 and sink = stage n
    """
    network = Network(windows=[ResourceWindow(0, instance.capacity, name="width")])

    stages = [network.add_node(f"stage_{i}") for i in range(instance.num_items)]
    sink = network.add_node("end")

    for i, width in enumerate(instance.widths):
        network.add_arc(stages[i], stages[i], cost=0.0, consumption=(width,), item=i)
        next_node = stages[i + 1] if i + 1 < instance.num_items else sink
        network.add_arc(stages[i], next_node, cost=0.0, consumption=(0,))

    network.set_source(stages[0])
    network.set_sink(sink)
    return network


def create_pricing(
    instance: CuttingStockInstance,
    method: str = "knapsack",
    config: Optional[PricingConfig] = None,
) -> PricingProblem:
    """
    Create the pricing oracle for an instance.

    Args:
        instance: The cutting stock instance
        method: 'knapsack' (dynamic program) or 'spprc' (labeling)
        config: Pricing configuration

    Raises:
        ValueError: On an unknown method
    """
    if method == "knapsack":
        return KnapsackPricing(instance.widths, instance.capacity, config)
    if method == "spprc":
        return LabelingAlgorithm(
            build_knapsack_network(instance),
            num_items=instance.num_items,
            config=config,
        )
    raise ValueError(f"Unknown pricing method '{method}' (expected 'knapsack' or 'spprc')")


@dataclass
class CuttingStockSolution:
    """Solution to a cutting stock problem."""
    num_rolls: float  # LP relaxation may be fractional
    num_rolls_ip: Optional[int]  # Integer restriction, if solved
    patterns: List[Tuple[Dict[int, int], float]]  # (pattern, usage)
    ip_patterns: List[Tuple[Dict[int, int], int]]
    converged: bool
    iterations: int
    num_columns: int
    solve_time: float
    lower_bound: float

    def summary(self) -> str:
        lines = [
            "Cutting Stock Solution:",
            f"  LP rolls: {self.num_rolls:.4f} (lower bound {self.lower_bound:.4f})",
        ]
        if self.num_rolls_ip is not None:
            lines.append(f"  IP rolls: {self.num_rolls_ip}")
        lines.extend([
            f"  Converged: {self.converged} after {self.iterations} iterations",
            f"  Columns: {self.num_columns}",
            f"  Solve time: {self.solve_time:.3f}s",
        ])
        return "\n".join(lines)


def solve_cutting_stock(
    instance: CuttingStockInstance,
    pricing: str = "knapsack",
    max_iterations: Optional[int] = None,
    tolerance: Optional[float] = None,
    solve_ip: bool = False,
    verbose: bool = False,
    adapter: Optional[MasterProblem] = None,
) -> CuttingStockSolution:
    """
    Solve a cutting stock problem using column generation.

    Args:
        instance: The problem instance
        pricing: 'knapsack' or 'spprc'
        max_iterations: Maximum CG iterations (default from global config)
        tolerance: Reduced-cost tolerance (default from global config)
        solve_ip: Whether to solve the integer restriction after CG
        verbose: Log progress at INFO and enable HiGHS output
            (otherwise HiGHS follows config.solver_verbosity)
        adapter: Master adapter (default: HiGHS)

    Returns:
        CuttingStockSolution with results
    """
    start_time = time.time()

    master = CoveringMaster(
        instance.items,
        adapter=adapter,
        name=instance.name or "CuttingStock",
        verbosity=1 if verbose else None,
    )
    oracle = create_pricing(instance, pricing)

    options: Dict[str, Any] = {"solve_ip": solve_ip, "verbose": verbose}
    if max_iterations is not None:
        options["max_iterations"] = max_iterations
    if tolerance is not None:
        options["optimality_tolerance"] = tolerance

    cg_solution = ColumnGeneration(master, oracle, CGConfig(**options)).solve()

    logger.info(
        "Cutting stock: LP=%.4f, lower bound=%.4f, %d columns",
        cg_solution.objective_value, instance.continuous_lower_bound,
        cg_solution.total_columns,
    )

    ip_rolls = None
    if cg_solution.ip_objective is not None:
        ip_rolls = int(round(cg_solution.ip_objective))

    return CuttingStockSolution(
        num_rolls=cg_solution.objective_value,
        num_rolls_ip=ip_rolls,
        patterns=[(col.as_dict(), col.value) for col in cg_solution.columns],
        ip_patterns=[(col.as_dict(), int(round(col.value))) for col in cg_solution.ip_columns],
        converged=cg_solution.converged,
        iterations=cg_solution.iterations,
        num_columns=cg_solution.total_columns,
        solve_time=time.time() - start_time,
        lower_bound=instance.continuous_lower_bound,
    )
