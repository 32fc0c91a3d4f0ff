"""
Column module - represents a column (pattern) in the column generation framework.

In column generation, a "column" is a feasible solution to the pricing
subproblem. For cutting stock, a column is a cutting pattern: how many
copies of each item are cut from one roll.

This module provides:
- Column: Immutable pattern with its objective coefficient
- ColumnPool: Container for all generated columns

Design Notes:
------------
- Counts are stored densely, one non-negative integer per item
- Columns are immutable once created (hashable for use in sets)
- The reduced cost is computed during pricing, stored for convenience

Column Lifecycle:
----------------
1. Created by a pricing oracle (pattern with negative reduced cost)
2. Owned by the column generation loop until added to the master
3. Added to master problem (becomes a variable)
4. May be part of the optimal solution (variable has positive value)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Column:
    """
    Represents a column (pattern) in column generation.

    Attributes:
        counts: Tuple with one non-negative integer count per item
        cost: Objective coefficient of the column (1.0 = one roll)
        column_id: Optional unique identifier
        reduced_cost: Reduced cost (set during pricing)
        value: Value in the solution (set after solving master)
        attributes: Additional attributes (e.g., arc path, origin)

    Example:
        >>> column = Column(counts=(5, 0, 0), cost=1.0)
        >>> column.count(0)
        5
        >>> column.width([20, 35, 50])
        100
    """
    counts: Tuple[int, ...]
    cost: float = 1.0

    column_id: Optional[int] = None

    reduced_cost: Optional[float] = None
    value: Optional[float] = None

    attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Ensure counts is a tuple of non-negative integers."""
        counts = tuple(self.counts)
        for i, c in enumerate(counts):
            if isinstance(c, bool) or int(c) != c or c < 0:
                raise ValueError(
                    f"Pattern count for item {i} must be a non-negative integer, got {c!r}"
                )
        object.__setattr__(self, 'counts', tuple(int(c) for c in counts))
        if not isinstance(self.attributes, dict):
            object.__setattr__(self, 'attributes', dict(self.attributes))

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_mapping(
        cls,
        pattern: Mapping[int, int],
        num_items: int,
        cost: float = 1.0,
        **kwargs
    ) -> 'Column':
        """
        Build a column from a sparse {item_index: count} mapping.

        Raises:
            ValueError: If an item index is out of range
        """
        counts = [0] * num_items
        for item_idx, count in pattern.items():
            if item_idx < 0 or item_idx >= num_items:
                raise ValueError(f"Item index {item_idx} out of range [0, {num_items})")
            counts[item_idx] = count
        return cls(counts=tuple(counts), cost=cost, **kwargs)

    @classmethod
    def empty(cls, num_items: int, cost: float = 1.0) -> 'Column':
        """The empty pattern (covers nothing)."""
        return cls(counts=(0,) * num_items, cost=cost)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def num_items(self) -> int:
        """Length of the count vector."""
        return len(self.counts)

    @property
    def is_empty(self) -> bool:
        """True if no item is used."""
        return not any(self.counts)

    @property
    def covered_items(self) -> frozenset:
        """Indices of items with a positive count."""
        return frozenset(i for i, c in enumerate(self.counts) if c > 0)

    @property
    def is_in_solution(self) -> bool:
        """Check if this column is part of the solution (value > 0)."""
        return self.value is not None and self.value > 1e-6

    # =========================================================================
    # Methods
    # =========================================================================

    def count(self, item: int) -> int:
        """Number of copies of an item in this pattern."""
        return self.counts[item]

    def as_dict(self) -> Dict[int, int]:
        """Sparse {item_index: count} view of the pattern."""
        return {i: c for i, c in enumerate(self.counts) if c > 0}

    def width(self, widths: Sequence[int]) -> int:
        """Total consumption sum(count[i] * width[i])."""
        return sum(c * w for c, w in zip(self.counts, widths))

    def fits(self, widths: Sequence[int], capacity: int) -> bool:
        """Check the capacity constraint of the pattern."""
        return self.width(widths) <= capacity

    def dual_value(self, duals: Sequence[float]) -> float:
        """Dual-weighted value sum(dual[i] * count[i])."""
        if len(duals) != len(self.counts):
            raise ValueError(
                f"Dual vector has {len(duals)} entries, pattern has {len(self.counts)} items"
            )
        return sum(d * c for d, c in zip(duals, self.counts))

    def compute_reduced_cost(self, duals: Sequence[float]) -> float:
        """
        Reduced cost against a dual vector.

        reduced_cost = cost - sum_i (dual_i * count_i)
        """
        return self.cost - self.dual_value(duals)

    def get_attribute(self, key: str, default: Any = None) -> Any:
        """Get an attribute value."""
        return self.attributes.get(key, default)

    def with_reduced_cost(self, reduced_cost: float) -> 'Column':
        """Create a copy with reduced_cost set."""
        return Column(
            counts=self.counts,
            cost=self.cost,
            column_id=self.column_id,
            reduced_cost=reduced_cost,
            value=self.value,
            attributes=self.attributes,
        )

    def with_value(self, value: float) -> 'Column':
        """Create a copy with value set."""
        return Column(
            counts=self.counts,
            cost=self.cost,
            column_id=self.column_id,
            reduced_cost=self.reduced_cost,
            value=value,
            attributes=self.attributes,
        )

    def with_id(self, column_id: int) -> 'Column':
        """Create a copy with column_id set."""
        return Column(
            counts=self.counts,
            cost=self.cost,
            column_id=column_id,
            reduced_cost=self.reduced_cost,
            value=self.value,
            attributes=self.attributes,
        )

    def __hash__(self) -> int:
        """Hash based on pattern (patterns are unique by their counts)."""
        return hash((self.counts, self.cost))

    def __eq__(self, other: object) -> bool:
        """Equality based on pattern and cost."""
        if not isinstance(other, Column):
            return NotImplemented
        return self.counts == other.counts and self.cost == other.cost

    def __repr__(self) -> str:
        value_str = f", value={self.value:.4f}" if self.value is not None else ""
        rc_str = f", rc={self.reduced_cost:.4f}" if self.reduced_cost is not None else ""
        return f"Column({self.as_dict()}, cost={self.cost:.2f}{value_str}{rc_str})"


# =============================================================================
# Column Pool
# =============================================================================


class ColumnPool:
    """
    Container for storing and managing columns.

    The ColumnPool provides:
    - Storage of columns in insertion order
    - Lookup by column_id and by pattern
    - Filtering by coverage

    Columns are only ever appended; the pool mirrors the master problem,
    which never loses a variable.

    Example:
        >>> pool = ColumnPool()
        >>> col = pool.add(Column(counts=(1, 0)))
        >>> col.column_id
        0
        >>> col in pool
        True
    """

    def __init__(self):
        """Create an empty column pool."""
        self._columns: List[Column] = []
        self._id_to_index: Dict[int, int] = {}
        self._patterns: set = set()
        self._next_id: int = 0

    @property
    def size(self) -> int:
        """Number of columns in the pool."""
        return len(self._columns)

    @property
    def next_id(self) -> int:
        """The id the next column without one will receive."""
        return self._next_id

    def add(self, column: Column) -> Column:
        """
        Add a column to the pool.

        If the column doesn't have an ID, one is assigned.

        Args:
            column: Column to add

        Returns:
            Column with ID assigned

        Raises:
            ValueError: If the column_id is already taken
        """
        if column.column_id is None:
            column = column.with_id(self._next_id)
        elif column.column_id in self._id_to_index:
            raise ValueError(f"Column id {column.column_id} already in pool")
        self._next_id = max(self._next_id, column.column_id + 1)

        index = len(self._columns)
        self._columns.append(column)
        self._id_to_index[column.column_id] = index
        self._patterns.add((column.counts, column.cost))

        return column

    def get(self, column_id: int) -> Optional[Column]:
        """Get a column by ID, or None if not found."""
        index = self._id_to_index.get(column_id)
        if index is None:
            return None
        return self._columns[index]

    def all_columns(self) -> List[Column]:
        """Get all columns in the pool."""
        return self._columns.copy()

    def columns_covering(self, item: int) -> List[Column]:
        """Get columns that use a specific item."""
        return [col for col in self._columns if col.count(item) > 0]

    def __contains__(self, column: object) -> bool:
        if not isinstance(column, Column):
            return False
        return (column.counts, column.cost) in self._patterns

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __repr__(self) -> str:
        return f"ColumnPool(size={self.size})"
