"""
Knapsack pricing for single-resource covering problems.

For cutting stock, the pricing problem is an unbounded knapsack:

    max  sum_i pi_i * a_i
    s.t. sum_i w_i * a_i <= W
         a_i >= 0 integer

solved by dynamic programming over capacities 0..W. Capacities are
scanned in increasing order, which lets the same item be reused within
one fill.
"""

import logging
from typing import Optional, Sequence

from colgen.core.column import Column
from colgen.pricing.base import PricingConfig, PricingProblem, PricingSolution, PricingStatus

logger = logging.getLogger(__name__)


class KnapsackPricing(PricingProblem):
    """
    Unbounded knapsack dynamic program.

    dp[w] is the best dual value of a fill of total width w (0 if nothing
    improves on the empty fill); choice[w] is the last item that improved
    dp[w]. The best value is max_w dp[w], not dp[W]: under-filling the
    roll can be optimal when no combination fills it exactly.

    Ties are resolved by scan order: the smallest width reaching the best
    value wins, and within one width the last improving item is kept.

    Example:
        >>> oracle = KnapsackPricing(widths=[20, 35, 50], capacity=100)
        >>> solution = oracle.price([0.25, 0.0, 0.0])
        >>> solution.pattern
        {0: 5}
        >>> solution.reduced_cost
        -0.25
    """

    def __init__(
        self,
        widths: Sequence[int],
        capacity: int,
        config: Optional[PricingConfig] = None,
    ):
        """
        Args:
            widths: Item widths (positive integers)
            capacity: Roll width W (non-negative integer)
            config: Pricing configuration (unit_cost is used)

        Raises:
            ValueError: On non-positive widths or negative capacity
        """
        for i, w in enumerate(widths):
            if isinstance(w, bool) or int(w) != w or w <= 0:
                raise ValueError(f"Width of item {i} must be a positive integer, got {w!r}")
        if isinstance(capacity, bool) or int(capacity) != capacity or capacity < 0:
            raise ValueError(f"Capacity must be a non-negative integer, got {capacity!r}")

        super().__init__(len(widths), config)
        self._widths = tuple(int(w) for w in widths)
        self._capacity = int(capacity)

    @property
    def widths(self) -> tuple:
        return self._widths

    @property
    def capacity(self) -> int:
        return self._capacity

    def _price_impl(self, duals: tuple) -> PricingSolution:
        capacity = self._capacity
        widths = self._widths

        dp = [0.0] * (capacity + 1)
        choice = [-1] * (capacity + 1)

        for w in range(1, capacity + 1):
            for i, width in enumerate(widths):
                if width <= w and dp[w - width] + duals[i] > dp[w]:
                    dp[w] = dp[w - width] + duals[i]
                    choice[w] = i

        best_w = 0
        for w in range(1, capacity + 1):
            if dp[w] > dp[best_w]:
                best_w = w

        counts = [0] * self.num_items
        w = best_w
        while w > 0 and choice[w] >= 0:
            item = choice[w]
            counts[item] += 1
            w -= widths[item]

        column = Column(counts=tuple(counts), cost=self.unit_cost)
        reduced_cost = column.compute_reduced_cost(duals)

        logger.debug(
            "Knapsack: best value %.6f at width %d, pattern %s",
            dp[best_w], best_w, column.as_dict(),
        )

        return PricingSolution(
            column=column.with_reduced_cost(reduced_cost),
            reduced_cost=reduced_cost,
            status=PricingStatus.OPTIMAL,
        )

    def __repr__(self) -> str:
        return f"KnapsackPricing(items={self.num_items}, capacity={self._capacity})"
