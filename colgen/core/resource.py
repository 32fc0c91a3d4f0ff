"""
Resource module - feasibility windows for SPPRC.

In the Shortest Path Problem with Resource Constraints (SPPRC), a
"resource" is any quantity that:
1. Starts at zero at the source node
2. Gets "extended" (increased by the arc's consumption) when traversing an arc
3. Must stay inside a [min, max] window

Resources are indexed by position: arc consumption vectors, label resource
vectors and the window list all use the same ordering.

This module provides:
- ResourceWindow: The [min, max] bound of one resource dimension
- is_within_windows: Vector feasibility check
- extend_resources: Component-wise resource extension
"""

import math
from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class ResourceWindow:
    """
    Feasibility bound of one resource dimension.

    A resource value r is feasible iff min_value <= r <= max_value.
    Windows are immutable for the duration of a solve.

    Attributes:
        min_value: Lower bound (inclusive)
        max_value: Upper bound (inclusive)
        name: Optional resource name (for display)

    Example:
        >>> capacity = ResourceWindow(0, 100, name="width")
        >>> capacity.contains(100)
        True
        >>> capacity.contains(101)
        False
    """
    min_value: float = 0.0
    max_value: float = math.inf
    name: str = ""

    def __post_init__(self):
        if math.isnan(self.min_value) or math.isnan(self.max_value):
            raise ValueError("Resource window bounds must not be NaN")
        if self.min_value > self.max_value:
            raise ValueError(
                f"Empty resource window [{self.min_value}, {self.max_value}]"
            )

    def contains(self, value: float) -> bool:
        """Check if a resource value lies inside the window."""
        return self.min_value <= value <= self.max_value

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[float]]) -> list['ResourceWindow']:
        """
        Build windows from (min, max) pairs, e.g. read from configuration.

        Example:
            >>> ResourceWindow.from_pairs([(0, 100), (0, 8)])
            [ResourceWindow([0, 100]), ResourceWindow([0, 8])]
        """
        windows = []
        for pair in pairs:
            if len(pair) != 2:
                raise ValueError(f"Resource window must be a (min, max) pair, got {pair!r}")
            windows.append(cls(pair[0], pair[1]))
        return windows

    def __repr__(self) -> str:
        name_str = f"'{self.name}', " if self.name else ""
        return f"ResourceWindow({name_str}[{self.min_value}, {self.max_value}])"


def is_within_windows(
    resources: Sequence[float],
    windows: Sequence[ResourceWindow],
) -> bool:
    """
    Check that every resource dimension lies inside its window.

    Args:
        resources: Resource vector
        windows: One window per dimension

    Returns:
        True if the vector is feasible
    """
    for value, window in zip(resources, windows):
        if not window.contains(value):
            return False
    return True


def extend_resources(
    resources: Sequence[float],
    consumption: Sequence[float],
) -> tuple:
    """Component-wise sum of a resource vector and an arc consumption."""
    return tuple(r + c for r, c in zip(resources, consumption))
