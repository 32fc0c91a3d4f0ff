"""
Network module - the graph structure for SPPRC pricing.

The Network is the container that holds nodes, arcs and the resource
windows, and provides the access patterns needed by the labeling
algorithm (forward traversal from the source).

This module provides:
- Network: The graph class with add/get methods

Design Notes:
------------
- Nodes are plain integer indices with an optional name
- Arcs are stored in a list, indexed by their index attribute
- Adjacency is stored as outgoing arc indices per node
- Every arc carries one consumption value per resource window
- The source and sink nodes have special handling
"""

from collections.abc import Iterator
from typing import Any, Optional, Sequence

from colgen.core.arc import Arc
from colgen.core.resource import ResourceWindow


class Network:
    """
    Graph structure for resource-constrained shortest path pricing.

    Attributes:
        num_nodes: Number of nodes
        arcs: List of all arcs (indexed by arc.index)
        windows: One ResourceWindow per resource dimension
        source: Index of the source node (or None)
        sink: Index of the sink node (or None)

    Example:
        >>> network = Network(windows=[ResourceWindow(0, 10)])
        >>> s = network.add_source()
        >>> t = network.add_sink()
        >>> network.add_arc(s, t, cost=2.0, consumption=(4,))
        0
        >>> [arc.target for arc in network.outgoing_arcs(s)]
        [1]
    """

    def __init__(self, windows: Optional[Sequence[ResourceWindow]] = None):
        self._windows: tuple = tuple(windows or ())
        self._node_names: list[str] = []
        self._name_to_index: dict[str, int] = {}
        self._arcs: list[Arc] = []
        self._outgoing: list[list[int]] = []

        self._source_index: Optional[int] = None
        self._sink_index: Optional[int] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def num_nodes(self) -> int:
        """Number of nodes in the network."""
        return len(self._node_names)

    @property
    def num_arcs(self) -> int:
        """Number of arcs in the network."""
        return len(self._arcs)

    @property
    def num_resources(self) -> int:
        """Number of resource dimensions."""
        return len(self._windows)

    @property
    def windows(self) -> tuple:
        """Resource windows (read-only)."""
        return self._windows

    @property
    def arcs(self) -> list[Arc]:
        """List of all arcs (read-only view)."""
        return self._arcs

    @property
    def source(self) -> Optional[int]:
        return self._source_index

    @property
    def sink(self) -> Optional[int]:
        return self._sink_index

    # =========================================================================
    # Node Operations
    # =========================================================================

    def add_node(self, name: Optional[str] = None) -> int:
        """
        Add a node to the network.

        Args:
            name: Unique name for the node (default: its index)

        Returns:
            Index of the newly created node

        Raises:
            ValueError: If a node with this name already exists
        """
        index = len(self._node_names)
        if name is None:
            name = str(index)
        if name in self._name_to_index:
            raise ValueError(f"Node with name '{name}' already exists")

        self._node_names.append(name)
        self._name_to_index[name] = index
        self._outgoing.append([])
        return index

    def add_source(self, name: str = "__SOURCE__") -> int:
        """
        Add the source node, where all paths begin.

        Raises:
            ValueError: If source already exists
        """
        if self._source_index is not None:
            raise ValueError("Source node already exists")
        self._source_index = self.add_node(name)
        return self._source_index

    def add_sink(self, name: str = "__SINK__") -> int:
        """
        Add the sink node, where all priced paths end.

        Raises:
            ValueError: If sink already exists
        """
        if self._sink_index is not None:
            raise ValueError("Sink node already exists")
        self._sink_index = self.add_node(name)
        return self._sink_index

    def set_source(self, node: int) -> None:
        """Designate an existing node as the source."""
        self._check_node(node, "Source")
        self._source_index = node

    def set_sink(self, node: int) -> None:
        """Designate an existing node as the sink."""
        self._check_node(node, "Sink")
        self._sink_index = node

    def node_name(self, index: int) -> str:
        return self._node_names[index]

    def get_node_index(self, name: str) -> Optional[int]:
        """Get node index by name, or None if not found."""
        return self._name_to_index.get(name)

    # =========================================================================
    # Arc Operations
    # =========================================================================

    def add_arc(
        self,
        source: int,
        target: int,
        cost: float = 0.0,
        consumption: Optional[Sequence[float]] = None,
        item: Optional[int] = None,
        **attributes
    ) -> int:
        """
        Add an arc to the network.

        Args:
            source: Index of source node
            target: Index of target node
            cost: Cost of the arc (before dual adjustment)
            consumption: One value per resource (default: all zero)
            item: Item covered by one traversal, or None
            **attributes: Additional arc attributes

        Returns:
            Index of the newly created arc

        Raises:
            ValueError: If an endpoint doesn't exist or the consumption
                vector doesn't match the number of resources
        """
        self._check_node(source, "Source")
        self._check_node(target, "Target")

        if consumption is None:
            consumption = (0.0,) * self.num_resources
        consumption = tuple(consumption)
        if len(consumption) != self.num_resources:
            raise ValueError(
                f"Arc consumption has {len(consumption)} entries, "
                f"network has {self.num_resources} resources"
            )
        if item is not None and item < 0:
            raise ValueError(f"Item index must be non-negative, got {item}")

        index = len(self._arcs)
        arc = Arc(
            index=index,
            source=source,
            target=target,
            cost=cost,
            consumption=consumption,
            item=item,
            attributes=dict(attributes),
        )
        self._arcs.append(arc)
        self._outgoing[source].append(index)
        return index

    def get_arc(self, index: int) -> Arc:
        return self._arcs[index]

    def _check_node(self, node: int, role: str) -> None:
        if node < 0 or node >= len(self._node_names):
            raise ValueError(f"{role} node index {node} out of bounds")

    # =========================================================================
    # Traversal Operations
    # =========================================================================

    def outgoing_arcs(self, node: int) -> Iterator[Arc]:
        """
        Iterate over outgoing arcs from a node.

        This is the primary traversal method used in SPPRC.
        """
        for arc_index in self._outgoing[node]:
            yield self._arcs[arc_index]

    def max_item_index(self) -> int:
        """Largest item index carried by an arc, or -1 if none."""
        items = [arc.item for arc in self._arcs if arc.item is not None]
        return max(items) if items else -1

    def validate(self) -> list[str]:
        """
        Check the network for structural problems.

        Returns:
            List of problems (empty if the network is usable for pricing)
        """
        issues = []
        if self._source_index is None:
            issues.append("Network has no source node")
        if self._sink_index is None:
            issues.append("Network has no sink node")
        if self._source_index is not None and not self._outgoing[self._source_index]:
            issues.append("Source node has no outgoing arcs")
        return issues

    # =========================================================================
    # Construction from configuration
    # =========================================================================

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Network':
        """
        Build a network from plain data.

        Expected keys:
            nodes: Number of nodes, or list of node names
            arcs: List of dicts with source, target, cost, consumption, item
            windows: List of (min, max) pairs, one per resource
            source: Source node (index or name)
            sink: Sink node (index or name)

        Example:
            >>> net = Network.from_dict({
            ...     "nodes": ["s", "t"],
            ...     "arcs": [{"source": "s", "target": "t", "cost": 1.0,
            ...               "consumption": [3], "item": 0}],
            ...     "windows": [[0, 5]],
            ...     "source": "s", "sink": "t",
            ... })
            >>> net.num_arcs
            1
        """
        network = cls(windows=ResourceWindow.from_pairs(data.get("windows", [])))

        nodes = data.get("nodes", 0)
        if isinstance(nodes, int):
            for _ in range(nodes):
                network.add_node()
        else:
            for name in nodes:
                network.add_node(str(name))

        def resolve(ref) -> int:
            if isinstance(ref, str):
                index = network.get_node_index(ref)
                if index is None:
                    raise ValueError(f"Unknown node '{ref}'")
                return index
            return int(ref)

        for arc in data.get("arcs", []):
            network.add_arc(
                resolve(arc["source"]),
                resolve(arc["target"]),
                cost=float(arc.get("cost", 0.0)),
                consumption=arc.get("consumption"),
                item=arc.get("item"),
            )

        if "source" not in data or "sink" not in data:
            raise ValueError("Network data must name a source and a sink")
        network.set_source(resolve(data["source"]))
        network.set_sink(resolve(data["sink"]))
        return network

    def __repr__(self) -> str:
        return (
            f"Network(nodes={self.num_nodes}, arcs={self.num_arcs}, "
            f"resources={self.num_resources})"
        )
