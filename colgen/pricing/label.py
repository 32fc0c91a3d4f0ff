"""
Label module for the SPPRC labeling algorithm.

In the labeling algorithm for SPPRC, a "label" represents a partial path
from the source node to some node. Each label tracks:
- The node it sits at
- The accumulated (dual-adjusted) cost
- The resource vector at that node
- Its predecessor label and the arc used to reach it

Labels are extended along arcs to create new labels. Dominated labels
are pruned to keep the algorithm efficient.

Design Notes:
------------
- Labels live in an arena (LabelPool) and are referred to by integer id
- Predecessor links are ids, so extension never copies a path
- A label never changes after creation, except its dominated flag,
  which only ever goes from False to True
- Per-node live lists shrink by swap-and-pop when a label is dominated
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class Label:
    """
    A label representing a partial path in SPPRC.

    Attributes:
        label_id: Position of the label in its pool's arena
        node: Index of the node this label is at
        resources: Resource vector at the node
        cost: Accumulated dual-adjusted cost of the path
        predecessor: label_id of the previous label (None for source)
        arc_index: Index of the arc used to reach this label
        dominated: True once the label has been pruned (never reset)

    Example:
        >>> a = Label(0, node=3, resources=(40,), cost=-0.8)
        >>> b = Label(1, node=3, resources=(50,), cost=-0.5)
        >>> a.dominates(b)
        True
        >>> b.dominates(a)
        False
    """
    label_id: int
    node: int
    resources: tuple
    cost: float
    predecessor: Optional[int] = None
    arc_index: Optional[int] = None
    dominated: bool = False

    @property
    def is_source_label(self) -> bool:
        """Check if this is the source label (no predecessor)."""
        return self.predecessor is None

    def dominates(self, other: 'Label') -> bool:
        """
        Check if this label dominates another.

        L1 dominates L2 iff L1.cost <= L2.cost and L1.resources[k] <=
        L2.resources[k] for every resource k. The relation is reflexive
        and transitive (a preorder), so identical labels dominate each
        other.
        """
        if self.cost > other.cost:
            return False
        for mine, theirs in zip(self.resources, other.resources):
            if mine > theirs:
                return False
        return True

    def mark_dominated(self) -> None:
        self.dominated = True

    def __repr__(self) -> str:
        flag = ", dominated" if self.dominated else ""
        return (
            f"Label(#{self.label_id}, node={self.node}, cost={self.cost:.4f}, "
            f"res={self.resources}{flag})"
        )


class LabelPool:
    """
    Arena and per-node live sets of labels for one SPPRC call.

    The LabelPool provides:
    - Creation of labels with consecutive integer ids
    - Two-sided dominance on insertion
    - An intra-node dominance sweep
    - Path reconstruction through predecessor ids

    Live labels at a node never dominate one another after an insert or
    a sweep.
    """

    def __init__(self, num_nodes: int):
        """
        Create a label pool.

        Args:
            num_nodes: Number of nodes in the network
        """
        self._num_nodes = num_nodes
        self._arena: list[Label] = []
        # node -> ids of live (non-dominated) labels
        self._live: list[list[int]] = [[] for _ in range(num_nodes)]
        self._total_dominated: int = 0

    @property
    def num_nodes(self) -> int:
        return self._num_nodes

    @property
    def total_labels(self) -> int:
        """Total number of live labels."""
        return sum(len(ids) for ids in self._live)

    @property
    def total_created(self) -> int:
        """Total labels created (the arena size)."""
        return len(self._arena)

    @property
    def total_dominated(self) -> int:
        """Total labels pruned by dominance."""
        return self._total_dominated

    # =========================================================================
    # Arena
    # =========================================================================

    def create(
        self,
        node: int,
        resources: tuple,
        cost: float,
        predecessor: Optional[int] = None,
        arc_index: Optional[int] = None,
    ) -> Label:
        """Create a label in the arena (not yet live)."""
        label = Label(
            label_id=len(self._arena),
            node=node,
            resources=tuple(resources),
            cost=cost,
            predecessor=predecessor,
            arc_index=arc_index,
        )
        self._arena.append(label)
        return label

    def get(self, label_id: int) -> Label:
        return self._arena[label_id]

    def live_labels(self, node: int) -> list[Label]:
        """Snapshot of the live labels at a node."""
        return [self._arena[i] for i in self._live[node]]

    # =========================================================================
    # Dominance
    # =========================================================================

    def insert(self, label: Label, check_dominance: bool = True) -> bool:
        """
        Make a label live at its node, applying two-sided dominance.

        Returns:
            True if label was inserted, False if a live label dominates it
        """
        live = self._live[label.node]

        if not check_dominance:
            live.append(label.label_id)
            return True

        for label_id in live:
            if self._arena[label_id].dominates(label):
                label.mark_dominated()
                self._total_dominated += 1
                return False

        i = 0
        while i < len(live):
            other = self._arena[live[i]]
            if label.dominates(other):
                self._remove_at(live, i)
            else:
                i += 1

        live.append(label.label_id)
        return True

    def sweep(self, node: int) -> int:
        """
        Remove every live label at a node dominated by another live label.

        Returns:
            Number of labels removed
        """
        live = self._live[node]
        removed = 0
        i = 0
        while i < len(live):
            label = self._arena[live[i]]
            dominated = any(
                self._arena[other_id].dominates(label)
                for j, other_id in enumerate(live) if j != i
            )
            if dominated:
                self._remove_at(live, i)
                removed += 1
            else:
                i += 1
        return removed

    def _remove_at(self, live: list[int], position: int) -> None:
        """Flag the label at ``position`` and swap-and-pop it."""
        self._arena[live[position]].mark_dominated()
        self._total_dominated += 1
        live[position] = live[-1]
        live.pop()

    # =========================================================================
    # Paths
    # =========================================================================

    def arc_path(self, label: Label) -> tuple[int, ...]:
        """Arc indices from the source to this label."""
        arcs = []
        current: Optional[Label] = label
        while current is not None and current.predecessor is not None:
            arcs.append(current.arc_index)
            current = self._arena[current.predecessor]
        arcs.reverse()
        return tuple(arcs)

    def node_path(self, label: Label) -> tuple[int, ...]:
        """Node indices from the source to this label."""
        nodes = [label.node]
        current = label
        while current.predecessor is not None:
            current = self._arena[current.predecessor]
            nodes.append(current.node)
        nodes.reverse()
        return tuple(nodes)

    def statistics(self) -> dict[str, Any]:
        """
        Get statistics about the label pool.

        Returns:
            Dictionary with statistics
        """
        labels_per_node = [len(ids) for ids in self._live]
        return {
            'total_labels': self.total_labels,
            'total_created': self.total_created,
            'total_dominated': self._total_dominated,
            'dominance_rate': (
                self._total_dominated / self.total_created
                if self.total_created > 0 else 0.0
            ),
            'max_labels_at_node': max(labels_per_node) if labels_per_node else 0,
        }

    def clear(self) -> None:
        """Drop every label."""
        self._arena = []
        self._live = [[] for _ in range(self._num_nodes)]
        self._total_dominated = 0

    def __repr__(self) -> str:
        return f"LabelPool(nodes={self._num_nodes}, labels={self.total_labels})"
