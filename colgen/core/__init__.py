"""
Core module - fundamental data structures for column generation.

Components:
----------
- Item: A demand unit (width, demand) of a covering problem
- Column: A pattern (item counts) produced by pricing
- ColumnPool: Append-only container of columns
- Arc: Directed edge with cost, resource consumption and covered item
- ResourceWindow: [min, max] bound of one resource dimension
- Network: The graph structure holding nodes, arcs and windows
"""

from colgen.core.arc import Arc
from colgen.core.column import Column, ColumnPool
from colgen.core.item import Item, make_items
from colgen.core.network import Network
from colgen.core.resource import ResourceWindow, extend_resources, is_within_windows

__all__ = [
    # Problem data
    "Item",
    "make_items",
    # Network components
    "Arc",
    "Network",
    "ResourceWindow",
    "extend_resources",
    "is_within_windows",
    # Solution representation
    "Column",
    "ColumnPool",
]
