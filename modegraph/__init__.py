"""
modegraph
=========

Per-travel-mode weighted routing graphs from tagged OSM ways.

>>> from modegraph import Way, build_graph
>>> graph = build_graph([Way(nodes=(1, 2), tags={"highway": "primary"})], "car")
>>> graph.weight(1, 2)
2.0
"""

from modegraph.core import (
    IMPASSABLE,
    AccessVerdict,
    AdjacencyStore,
    BuildStats,
    GraphBuilder,
    Relation,
    RelationMember,
    Restrictions,
    Role,
    Status,
    Tag,
    TaggedSegment,
    TravelMode,
    Way,
    WayType,
    build_graph,
    build_graphs,
    classify_access,
    is_allowed,
)
from modegraph.modes import DEFAULT_PROFILES, TravelModeProfile, TravelModeRegistry
from modegraph.errors import (
    GraphConsistencyError,
    GraphFrozenError,
    ModegraphError,
    ProfileConfigError,
    UnknownTravelModeError,
)

__version__ = "0.1.0"

__all__ = [
    "IMPASSABLE",
    "AccessVerdict",
    "AdjacencyStore",
    "BuildStats",
    "GraphBuilder",
    "Relation",
    "RelationMember",
    "Restrictions",
    "Role",
    "Status",
    "Tag",
    "TaggedSegment",
    "TravelMode",
    "Way",
    "WayType",
    "build_graph",
    "build_graphs",
    "classify_access",
    "is_allowed",
    "DEFAULT_PROFILES",
    "TravelModeProfile",
    "TravelModeRegistry",
    "GraphConsistencyError",
    "GraphFrozenError",
    "ModegraphError",
    "ProfileConfigError",
    "UnknownTravelModeError",
]
