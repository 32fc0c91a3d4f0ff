"""
Item module - demand units of a covering problem.

An item is something the master problem must cover: in cutting stock, an
ordered piece of a given width that has to be cut ``demand`` times. Items
are immutable once loaded; their position in the item list is the index
used everywhere else (dual vectors, pattern counts, covering rows).
"""

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Item:
    """
    A demand unit with integer resource consumption.

    Attributes:
        width: Resource consumption of one copy (positive integer)
        demand: Minimum number of copies to cover (non-negative integer)
        name: Optional human-readable name

    Example:
        >>> item = Item(width=35, demand=30)
        >>> item.max_copies(100)
        2
    """
    width: int
    demand: int
    name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.width, bool) or int(self.width) != self.width:
            raise ValueError(f"Item width must be an integer, got {self.width!r}")
        if isinstance(self.demand, bool) or int(self.demand) != self.demand:
            raise ValueError(f"Item demand must be an integer, got {self.demand!r}")
        if self.width <= 0:
            raise ValueError(f"Item width must be positive, got {self.width}")
        if self.demand < 0:
            raise ValueError(f"Item demand must be non-negative, got {self.demand}")
        object.__setattr__(self, 'width', int(self.width))
        object.__setattr__(self, 'demand', int(self.demand))

    def max_copies(self, capacity: int) -> int:
        """Maximum copies of this item that fit in one unit of capacity."""
        return capacity // self.width

    def __repr__(self) -> str:
        name_str = f"'{self.name}', " if self.name else ""
        return f"Item({name_str}width={self.width}, demand={self.demand})"


def make_items(
    widths: Sequence[int],
    demands: Sequence[int],
    names: Optional[Sequence[str]] = None,
) -> list[Item]:
    """
    Build the ordered item list from parallel sequences.

    Args:
        widths: Item widths
        demands: Item demands (same length as widths)
        names: Optional item names (same length as widths)

    Returns:
        List of items, index i built from widths[i] and demands[i]

    Raises:
        ValueError: If the sequences have different lengths
    """
    if len(widths) != len(demands):
        raise ValueError(
            f"widths and demands must have same length "
            f"({len(widths)} != {len(demands)})"
        )
    if names is not None and len(names) != len(widths):
        raise ValueError("names must have same length as widths")

    return [
        Item(width=w, demand=d, name=names[i] if names is not None else f"item_{i}")
        for i, (w, d) in enumerate(zip(widths, demands))
    ]
