"""
modegraph Core: Per-Mode Routing Graph Construction
===================================================

Turns tagged OSM ways into directed, weighted adjacency for a single travel
mode. The route search that consumes the graph lives elsewhere.

Public API:
- GraphBuilder: Ingests ways into an AdjacencyStore
- AdjacencyStore: Read queries over a finished graph
- is_allowed: Access tag precedence resolver
- Restrictions: Turn restriction node sequences
- Way / Relation: Input models
"""

from modegraph.core.schema import (
    NodeId,
    Relation,
    RelationMember,
    Role,
    Status,
    Tag,
    TaggedSegment,
    TravelMode,
    Way,
    WayType,
)
from modegraph.core.access import AccessVerdict, classify_access, is_allowed
from modegraph.core.adjacency import IMPASSABLE, AdjacencyStore
from modegraph.core.builder import BuildStats, GraphBuilder, build_graph, build_graphs
from modegraph.core.restriction import Restrictions, Sequence

__all__ = [
    "NodeId",
    "Relation",
    "RelationMember",
    "Role",
    "Status",
    "Tag",
    "TaggedSegment",
    "TravelMode",
    "Way",
    "WayType",
    "AccessVerdict",
    "classify_access",
    "is_allowed",
    "IMPASSABLE",
    "AdjacencyStore",
    "BuildStats",
    "GraphBuilder",
    "build_graph",
    "build_graphs",
    "Restrictions",
    "Sequence",
]
