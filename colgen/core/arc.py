"""
Arc module - represents arcs (edges) in the pricing network.

Arcs connect nodes and carry:
- Cost: contribution to the column's objective coefficient
- Resource consumption: one value per resource dimension
- Item: the item one traversal of the arc contributes to the pattern

Arcs are immutable once created. Node endpoints are stored as indices,
not node objects, so the network stays a plain indexed structure.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Arc:
    """
    Represents an arc (directed edge) in the network.

    Attributes:
        index: Unique integer identifier
        source: Index of the source node
        target: Index of the target node
        cost: Cost of traversing this arc (before dual adjustment)
        consumption: Resource consumption vector (one entry per resource)
        item: Index of the item covered once by this arc, or None
        attributes: Flexible dictionary for additional data

    Pricing Cost:
        During pricing, the cost of traversing the arc is
        ``cost - dual[item]`` (or just ``cost`` if the arc covers no item).

    Example:
        >>> # "cut one piece of item 2 (width 50)"
        >>> arc = Arc(index=0, source=3, target=3, cost=0.0,
        ...           consumption=(50,), item=2)
        >>> arc.reduced_cost([0.2, 0.35, 0.5])
        -0.5
    """
    index: int
    source: int
    target: int
    cost: float = 0.0
    consumption: Tuple[float, ...] = ()
    item: Optional[int] = None
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not isinstance(self.consumption, tuple):
            object.__setattr__(self, 'consumption', tuple(self.consumption))

    @property
    def covers_item(self) -> bool:
        """Check if traversing this arc adds an item to the pattern."""
        return self.item is not None

    @property
    def is_loop(self) -> bool:
        """Check if this arc starts and ends at the same node."""
        return self.source == self.target

    def get_consumption(self, resource_index: int, default: float = 0.0) -> float:
        """
        Get consumption of a resource dimension.

        Args:
            resource_index: Position of the resource
            default: Value to return if the vector is shorter

        Returns:
            Consumption value for the resource
        """
        if resource_index < len(self.consumption):
            return self.consumption[resource_index]
        return default

    def reduced_cost(self, duals) -> float:
        """Arc cost minus the dual of the item it covers."""
        if self.item is None:
            return self.cost
        return self.cost - duals[self.item]

    def get_attribute(self, key: str, default: Any = None) -> Any:
        """Get an attribute value with a default."""
        return self.attributes.get(key, default)

    def __hash__(self) -> int:
        """Hash by index for use in sets/dicts."""
        return hash(self.index)

    def __eq__(self, other: object) -> bool:
        """Equality by index."""
        if not isinstance(other, Arc):
            return NotImplemented
        return self.index == other.index

    def __repr__(self) -> str:
        item_str = f", item={self.item}" if self.item is not None else ""
        return (
            f"Arc({self.index}, {self.source}->{self.target}, "
            f"cost={self.cost}, use={self.consumption}{item_str})"
        )
