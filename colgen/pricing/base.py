"""
Pricing problem abstract base class.

This module defines the interface that all pricing oracles implement.
The column generation loop depends only on this interface; the knapsack
oracle and the SPPRC labeling oracle are interchangeable behind it.

The pricing problem finds a pattern (column) with negative reduced cost.
The reduced cost of a pattern is: c_j - sum_i(pi_i * a_ij)
where:
- c_j is the column's cost (1.0 per roll in cutting stock)
- pi_i is the dual value for covering row i
- a_ij is the count of item i in the pattern

Customization Guide:
-------------------
To create a custom pricing oracle:

1. Subclass PricingProblem
2. Implement _price_impl
3. Optionally override hooks for custom behavior
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence

from colgen.core.column import Column


class PricingStatus(Enum):
    """
    Status of a pricing call.
    """
    OPTIMAL = auto()          # Search completed, best pattern returned
    ITERATION_LIMIT = auto()  # Label limit reached, best pattern so far
    INFEASIBLE = auto()       # No feasible pattern (empty pattern returned)


@dataclass
class PricingSolution:
    """
    Result of one pricing call.

    ``reduced_cost`` always equals
    ``column.cost - sum_i duals[i] * column.counts[i]``.

    An empty pattern whose reduced cost is its unit cost means "nothing
    improving"; it is a normal result, not a failure.

    Attributes:
        column: Best pattern found
        reduced_cost: Its reduced cost
        status: Solution status
        num_labels_created: Total labels created during search (SPPRC)
        num_labels_dominated: Labels pruned by dominance (SPPRC)
        nodes_processed: Worklist pops (SPPRC)
        solve_time: Time spent solving in seconds
    """
    column: Column
    reduced_cost: float
    status: PricingStatus = PricingStatus.OPTIMAL
    num_labels_created: int = 0
    num_labels_dominated: int = 0
    nodes_processed: int = 0
    solve_time: float = 0.0

    @property
    def pattern(self) -> dict[int, int]:
        """Sparse {item_index: count} view of the priced pattern."""
        return self.column.as_dict()

    @property
    def value(self) -> float:
        """Dual-weighted value of the pattern (cost - reduced cost)."""
        return self.column.cost - self.reduced_cost

    def is_improving(self, tolerance: float = 1e-6) -> bool:
        """Check if the pattern has reduced cost below -tolerance."""
        return self.reduced_cost < -tolerance

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            "PricingSolution:",
            f"  Status: {self.status.name}",
            f"  Pattern: {self.pattern}",
            f"  Reduced cost: {self.reduced_cost:.6f}",
        ]
        if self.num_labels_created:
            lines.extend([
                f"  Labels created: {self.num_labels_created}",
                f"  Labels dominated: {self.num_labels_dominated}",
            ])
        lines.append(f"  Solve time: {self.solve_time:.3f}s")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PricingSolution({self.status.name}, {self.pattern}, "
            f"rc={self.reduced_cost:.4f})"
        )


@dataclass
class PricingConfig:
    """
    Configuration for pricing.

    Attributes:
        unit_cost: Objective coefficient of a pattern before arc costs
        max_labels: Maximum labels to create in SPPRC (0 = unlimited)
        use_dominance: Whether SPPRC uses dominance pruning
    """
    unit_cost: float = 1.0
    max_labels: int = 0
    use_dominance: bool = True


class PricingProblem(ABC):
    """
    Abstract base class for pricing oracles.

    Lifecycle:
    ---------
    1. Create: oracle = KnapsackPricing(widths, capacity)
    2. Price: solution = oracle.price(master.dual_vector())
    3. If solution.is_improving(tol): add solution.column to the master
    4. Repeat with the new duals

    Attributes:
        num_items: Length of the dual vectors this oracle accepts
        config: Pricing configuration
    """

    def __init__(self, num_items: int, config: Optional[PricingConfig] = None):
        if num_items < 0:
            raise ValueError(f"num_items must be non-negative, got {num_items}")
        self._num_items = num_items
        self._config = config or PricingConfig()

    @property
    def num_items(self) -> int:
        return self._num_items

    @property
    def config(self) -> PricingConfig:
        """Pricing configuration."""
        return self._config

    @property
    def unit_cost(self) -> float:
        return self._config.unit_cost

    # =========================================================================
    # Public API
    # =========================================================================

    def price(self, duals: Sequence[float]) -> PricingSolution:
        """
        Find the best pattern for a dual vector.

        The dual vector is copied; the caller's sequence is never touched.

        Args:
            duals: One dual value per item

        Returns:
            PricingSolution with the best pattern and its reduced cost

        Raises:
            ValueError: If the dual vector length differs from num_items
        """
        if len(duals) != self._num_items:
            raise ValueError(
                f"Dual vector has {len(duals)} entries, expected {self._num_items}"
            )
        duals = tuple(float(d) for d in duals)

        start_time = time.time()
        self._before_solve(duals)
        solution = self._price_impl(duals)
        solution = self._after_solve(solution)
        solution.solve_time = time.time() - start_time
        return solution

    def empty_solution(self, status: PricingStatus = PricingStatus.OPTIMAL) -> PricingSolution:
        """The "nothing improving" result: empty pattern, rc = unit cost."""
        column = Column.empty(self._num_items, cost=self.unit_cost)
        return PricingSolution(
            column=column.with_reduced_cost(self.unit_cost),
            reduced_cost=self.unit_cost,
            status=status,
        )

    # =========================================================================
    # Abstract Methods
    # =========================================================================

    @abstractmethod
    def _price_impl(self, duals: tuple) -> PricingSolution:
        """
        Implementation of the pricing algorithm.

        Args:
            duals: Validated, private copy of the dual vector

        Returns:
            PricingSolution with the best pattern
        """
        pass

    # =========================================================================
    # Hooks (override for custom behavior)
    # =========================================================================

    def _before_solve(self, duals: tuple) -> None:
        """Hook called before solving."""
        pass

    def _after_solve(self, solution: PricingSolution) -> PricingSolution:
        """Hook called after solving; may modify the solution."""
        return solution
