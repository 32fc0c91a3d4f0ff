"""
Labeling algorithm for SPPRC (Shortest Path Problem with Resource Constraints).

This module implements the mono-directional label-setting algorithm used
as a graph-structured pricing oracle.

Algorithm Overview:
------------------
1. Create the source label (zero cost, zero resources)
2. While the worklist of active nodes is not empty:
   a. Pop a node (FIFO)
   b. Extend each of its live labels not yet extended along every
      outgoing arc, discarding resource-infeasible extensions at once
   c. Insert each extension at its target with two-sided dominance;
      targets that gained a label become active
   d. Run an intra-node dominance sweep on the popped node
3. Return the lowest-cost label at the sink as a pattern

Arc costs are dual-adjusted: an arc covering item i costs
``arc.cost - dual[i]``. Without dominance the search is exponential in
the path length; the resource windows and dominance are applied right
after each extension.

References:
----------
- Irnich, S., & Desaulniers, G. (2005). Shortest path problems with resource
  constraints. In Column generation (pp. 33-65). Springer.
"""

import logging
from collections import deque
from typing import Optional

from colgen.core.column import Column
from colgen.core.network import Network
from colgen.core.resource import extend_resources, is_within_windows
from colgen.pricing.base import (
    PricingConfig,
    PricingProblem,
    PricingSolution,
    PricingStatus,
)
from colgen.pricing.label import Label, LabelPool

logger = logging.getLogger(__name__)


class LabelingAlgorithm(PricingProblem):
    """
    Label-setting SPPRC pricing oracle.

    The priced pattern counts, for every item, the arcs covering it along
    the best source-sink path. The column's cost is ``unit_cost`` plus the
    arc costs of the path, so its reduced cost is ``unit_cost + label.cost``.

    Label pools are rebuilt on every call: duals change between calls and
    labels of an earlier call are meaningless.

    Example:
        >>> from colgen.applications import CuttingStockInstance, build_knapsack_network
        >>> instance = CuttingStockInstance([20, 35, 50], [40, 30, 20], capacity=100)
        >>> pricing = LabelingAlgorithm(build_knapsack_network(instance), num_items=3)
        >>> solution = pricing.price([0.25, 0.0, 0.0])
        >>> solution.pattern
        {0: 5}
        >>> solution.reduced_cost
        -0.25
    """

    def __init__(
        self,
        network: Network,
        num_items: Optional[int] = None,
        config: Optional[PricingConfig] = None
    ):
        """
        Initialize the labeling algorithm.

        Args:
            network: Network with source, sink and resource windows
            num_items: Length of the dual vector (default: largest arc
                item index + 1)
            config: Optional configuration

        Raises:
            ValueError: If the network has no source/sink or an arc
                refers to an item outside [0, num_items)
        """
        if network.source is None:
            raise ValueError("Network has no source node")
        if network.sink is None:
            raise ValueError("Network has no sink node")

        max_item = network.max_item_index()
        if num_items is None:
            num_items = max_item + 1
        elif max_item >= num_items:
            raise ValueError(
                f"Arc covers item {max_item}, but only {num_items} items are priced"
            )

        super().__init__(num_items, config)
        self._network = network

        # Pool of the last call (kept for inspection)
        self._label_pool: Optional[LabelPool] = None

    @property
    def network(self) -> Network:
        return self._network

    @property
    def label_pool(self) -> Optional[LabelPool]:
        """Labels of the most recent call, or None before the first call."""
        return self._label_pool

    # =========================================================================
    # Main Algorithm
    # =========================================================================

    def _price_impl(self, duals: tuple) -> PricingSolution:
        network = self._network
        windows = network.windows
        use_dominance = self._config.use_dominance
        max_labels = self._config.max_labels

        arc_costs = [arc.reduced_cost(duals) for arc in network.arcs]

        pool = LabelPool(network.num_nodes)
        self._label_pool = pool

        # The source label is exempt from the window check
        source = pool.create(network.source, (0.0,) * network.num_resources, 0.0)
        pool.insert(source, use_dominance)

        worklist = deque([network.source])
        in_worklist = [False] * network.num_nodes
        in_worklist[network.source] = True
        extended = set()

        nodes_processed = 0
        limit_hit = False

        while worklist and not limit_hit:
            node = worklist.popleft()
            in_worklist[node] = False
            nodes_processed += 1

            for label in pool.live_labels(node):
                if label.dominated or label.label_id in extended:
                    continue
                extended.add(label.label_id)

                for arc in network.outgoing_arcs(node):
                    resources = extend_resources(label.resources, arc.consumption)
                    if not is_within_windows(resources, windows):
                        continue

                    if max_labels > 0 and pool.total_created >= max_labels:
                        limit_hit = True
                        break

                    new_label = pool.create(
                        arc.target,
                        resources,
                        label.cost + arc_costs[arc.index],
                        predecessor=label.label_id,
                        arc_index=arc.index,
                    )
                    if pool.insert(new_label, use_dominance) and not in_worklist[arc.target]:
                        worklist.append(arc.target)
                        in_worklist[arc.target] = True

                if limit_hit:
                    break

            if use_dominance:
                pool.sweep(node)

        if limit_hit:
            logger.warning("Labeling stopped at the label limit (%d)", max_labels)

        solution = self._build_solution(pool, duals, limit_hit)
        solution.nodes_processed = nodes_processed
        solution.num_labels_created = pool.total_created
        solution.num_labels_dominated = pool.total_dominated

        logger.debug(
            "Labeling: %d labels created, %d dominated, %d node pops, rc=%.6f",
            pool.total_created, pool.total_dominated, nodes_processed,
            solution.reduced_cost,
        )
        return solution

    def _build_solution(
        self,
        pool: LabelPool,
        duals: tuple,
        limit_hit: bool,
    ) -> PricingSolution:
        sink_labels = pool.live_labels(self._network.sink)
        if not sink_labels:
            status = PricingStatus.ITERATION_LIMIT if limit_hit else PricingStatus.INFEASIBLE
            return self.empty_solution(status)

        best = min(sink_labels, key=lambda label: (label.cost, label.label_id))
        column = self._create_column_from_label(pool, best)
        reduced_cost = column.compute_reduced_cost(duals)

        return PricingSolution(
            column=column.with_reduced_cost(reduced_cost),
            reduced_cost=reduced_cost,
            status=PricingStatus.ITERATION_LIMIT if limit_hit else PricingStatus.OPTIMAL,
        )

    def _create_column_from_label(self, pool: LabelPool, label: Label) -> Column:
        """
        Translate a sink label into a pattern via its predecessor chain.

        Override to customize column creation.
        """
        counts = [0] * self.num_items
        path_cost = 0.0
        arc_indices = pool.arc_path(label)
        for arc_index in arc_indices:
            arc = self._network.get_arc(arc_index)
            path_cost += arc.cost
            if arc.item is not None:
                counts[arc.item] += 1

        return Column(
            counts=tuple(counts),
            cost=self.unit_cost + path_cost,
            attributes={
                'arc_indices': arc_indices,
                'resources': label.resources,
            },
        )

    def __repr__(self) -> str:
        return f"LabelingAlgorithm({self._network!r}, items={self.num_items})"
