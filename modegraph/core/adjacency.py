"""
Adjacency Store
===============

Weighted, directed node-to-node connections for one mode of travel.

Storage is private; callers only use the query methods, so the layout can
change without touching the builder or the route search. A store is filled by
`GraphBuilder`, then frozen and shared read-only between search workers.
"""

from typing import Any, Callable, Iterator, TypeVar

import networkx as nx

from modegraph.core.schema import NodeId
from modegraph.errors import GraphConsistencyError, GraphFrozenError


IMPASSABLE: float = 0.0
"""Weight at or below which a connection cannot be used."""

T = TypeVar("T")


class AdjacencyStore:
    """
    Directed weighted adjacency for a single travel mode.

    A connection from A to B says nothing about B to A.

    Example
    -------
    >>> store = AdjacencyStore("car")
    >>> store.add(1, 2, 2.0)
    True
    >>> store.weight(1, 2), store.weight(2, 1)
    (2.0, 0.0)
    """

    def __init__(self, travel_mode: str = ""):
        self._items: dict[NodeId, dict[NodeId, float]] = {}
        self._frozen = False
        self.travel_mode = travel_mode

    def __len__(self) -> int:
        """Number of nodes with at least one outgoing connection."""
        return len(self._items)

    def __contains__(self, node: NodeId) -> bool:
        return node in self._items

    def __repr__(self) -> str:
        return (
            f"AdjacencyStore(mode={self.travel_mode!r}, nodes={len(self)}, "
            f"edges={self.edge_count()}, frozen={self._frozen})"
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "AdjacencyStore":
        """Make the store read-only. Returns the store for chaining."""
        self._frozen = True
        return self

    def add(self, origin: NodeId, destination: NodeId, weight: float) -> bool:
        """
        Set the weight of the connection from `origin` to `destination`.

        An existing weight for the same pair is replaced. Impassable weights
        are not stored.

        Returns
        -------
        bool
            True if the connection was stored
        """
        if self._frozen:
            raise GraphFrozenError(
                f"Cannot add {origin}->{destination}: {self.travel_mode or 'graph'} is frozen"
            )
        if weight <= IMPASSABLE:
            return False

        self._items.setdefault(origin, {})[destination] = weight
        return True

    def has(self, node: NodeId) -> bool:
        """Whether `node` has any outgoing connection."""
        return node in self._items

    def has_connection(self, origin: NodeId, destination: NodeId) -> bool:
        """Whether `origin` exists and connects directly to `destination`."""
        connections = self._items.get(origin)
        return connections is not None and destination in connections

    def weight(self, origin: NodeId, destination: NodeId) -> float:
        """Connection weight, or `IMPASSABLE` if the nodes aren't connected."""
        connections = self._items.get(origin)
        if connections is None:
            return IMPASSABLE
        return connections.get(destination, IMPASSABLE)

    def edges(self, node: NodeId) -> list[tuple[float, NodeId]]:
        """All `(weight, neighbor)` pairs leaving `node`, in no particular order."""
        connections = self._items.get(node)
        if connections is None:
            return []
        return [(weight, neighbor) for neighbor, weight in connections.items()]

    def neighbors(self, node: NodeId) -> list[NodeId]:
        return list(self._items.get(node, ()))

    def map(self, node: NodeId, fn: Callable[[float, NodeId], T]) -> list[T]:
        """
        Apply `fn(weight, neighbor)` to every connection leaving `node`.

        Used, for example, to turn a node's connections into candidate route
        extensions for a search frontier.
        """
        return [fn(weight, neighbor) for weight, neighbor in self.edges(node)]

    def nodes(self) -> Iterator[NodeId]:
        """Origin nodes."""
        return iter(self._items)

    def edge_count(self) -> int:
        return sum(len(connections) for connections in self._items.values())

    def ensure(self, *nodes: NodeId) -> None:
        """
        Fail if any of `nodes` is not an origin in the graph.

        Raises
        ------
        GraphConsistencyError
            Naming the first missing node
        """
        for node in nodes:
            if node not in self._items:
                raise GraphConsistencyError(f"Node {node} does not exist in the graph")

    def to_networkx(self) -> nx.DiGraph:
        """
        Copy the connections into a `networkx.DiGraph` with a `weight` attribute.

        Destination-only nodes appear in the DiGraph as well.
        """
        graph = nx.DiGraph(travel_mode=self.travel_mode)
        for origin, connections in self._items.items():
            for destination, weight in connections.items():
                graph.add_edge(origin, destination, weight=weight)
        return graph

    def to_dict(self) -> dict[Any, dict[Any, float]]:
        """Plain nested-dict copy of the connections."""
        return {origin: dict(connections) for origin, connections in self._items.items()}
