"""
Graph Builder
=============

Folds tagged ways into a weighted, directed `AdjacencyStore` for one travel
mode.

For every way the builder:
1. Reads (or infers) its one-way restriction
2. Drops the restriction for pedestrians or an explicit `oneway:<mode>=no`
3. Weighs it by road class, falling back to rail class
4. Rejects it if unweighted or if access tags forbid the mode
5. Connects each consecutive pair of nodes in the allowed direction(s)

See https://wiki.openstreetmap.org/wiki/Key:oneway
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional

from modegraph.core.access import is_allowed
from modegraph.core.adjacency import IMPASSABLE, AdjacencyStore
from modegraph.core.schema import Tag, TaggedSegment, TravelMode, WayType
from modegraph.errors import UnknownTravelModeError
from modegraph.modes.profile import TravelModeProfile
from modegraph.modes.registry import TravelModeRegistry


logger = logging.getLogger(__name__)

# One-way restriction against node order
REVERSE = frozenset({"-1", "reverse"})
# One-way restriction in node order
FORWARD = frozenset({"yes", "true", "1"})
# Any one-way restriction
IS_ONE_WAY = FORWARD | REVERSE

CIRCULAR_JUNCTIONS = frozenset({"roundabout", "circular"})


@dataclass
class BuildStats:
    """Counts of how ways fared during a build."""

    seen: int = 0
    accepted: int = 0
    rejected_weight: int = 0
    rejected_access: int = 0
    degenerate: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "seen": self.seen,
            "accepted": self.accepted,
            "rejected_weight": self.rejected_weight,
            "rejected_access": self.rejected_access,
            "degenerate": self.degenerate,
        }


class GraphBuilder:
    """
    Builds the adjacency store for one travel mode.

    Example
    -------
    >>> from modegraph.core.schema import Way
    >>> builder = GraphBuilder("car")
    >>> builder.ingest(Way(nodes=(1, 2), tags={"highway": "primary"}))
    True
    >>> builder.store.weight(2, 1)
    2.0
    """

    def __init__(
        self,
        mode: str,
        registry: Optional[TravelModeRegistry] = None,
        store: Optional[AdjacencyStore] = None,
    ):
        """
        Parameters
        ----------
        mode : str
            Travel mode name, e.g. "car"
        registry : TravelModeRegistry, optional
            Profiles to choose from. Defaults to the built-in table.
        store : AdjacencyStore, optional
            Store to fill. A new one is created if omitted.

        Raises
        ------
        UnknownTravelModeError
            If `registry` has no profile for `mode`
        """
        registry = registry if registry is not None else TravelModeRegistry.default()
        profile = registry.get_profile(mode)
        if profile is None:
            raise UnknownTravelModeError(mode)

        self.mode = profile.name
        self.profile: TravelModeProfile = profile
        self.store = store if store is not None else AdjacencyStore(self.mode)
        self.stats = BuildStats()

    def one_way(self, segment: TaggedSegment) -> str:
        """
        Effective one-way value of `segment` for this mode.

        Returns "no" when both directions are usable, otherwise the tag value
        (explicit or inferred).
        """
        oneway = segment.get_tag(Tag.ONE_WAY) or ""

        if not oneway and (
            segment.get_tag(Tag.JUNCTION_TYPE) in CIRCULAR_JUNCTIONS
            or segment.get_tag(Tag.ROAD_TYPE) == WayType.FREEWAY
        ):
            oneway = "yes"

        if self.mode == TravelMode.FOOT.value or (
            oneway in IS_ONE_WAY
            and segment.get_tag(f"{Tag.ONE_WAY}:{self.mode}") == "no"
        ):
            oneway = "no"

        return oneway

    def base_weight(self, segment: TaggedSegment) -> float:
        """Road class weight, or the rail class weight if the road class is unusable."""
        weight = self.profile.weight_for(segment.get_tag(Tag.ROAD_TYPE))

        if weight <= IMPASSABLE:
            # TODO: confirm rail fallback against mixed road/rail ways (tram tracks on streets)
            weight = self.profile.weight_for(segment.get_tag(Tag.RAIL_TYPE))

        return weight

    def ingest(self, segment: TaggedSegment) -> bool:
        """
        Add weighted connections for each node pair in `segment`.

        Returns
        -------
        bool
            True if at least one connection was added
        """
        self.stats.seen += 1
        nodes = segment.nodes

        oneway = self.one_way(segment)
        weight = self.base_weight(segment)

        if weight <= IMPASSABLE:
            self.stats.rejected_weight += 1
            return False

        if not is_allowed(segment, self.profile.can_use):
            self.stats.rejected_access += 1
            logger.debug("Way %s not accessible by %s", getattr(segment, "id", "?"), self.mode)
            return False

        if len(nodes) < 2:
            self.stats.degenerate += 1
            return False

        forward = oneway not in REVERSE
        backward = oneway not in FORWARD

        added = False
        for n1, n2 in zip(nodes, nodes[1:]):
            if forward:
                added = self.store.add(n1, n2, weight) or added
            if backward:
                added = self.store.add(n2, n1, weight) or added

        if added:
            self.stats.accepted += 1
        return added

    def ingest_many(self, segments: Iterable[TaggedSegment]) -> int:
        """Ingest every segment; returns how many of them added a connection."""
        return sum(1 for segment in segments if self.ingest(segment))

    def finish(self) -> AdjacencyStore:
        """Freeze and return the store, logging a build summary."""
        logger.info(
            "Built %s graph: %d nodes, %d edges from %d ways (%s)",
            self.mode,
            len(self.store),
            self.store.edge_count(),
            self.stats.seen,
            ", ".join(f"{k}={v}" for k, v in self.stats.to_dict().items() if k != "seen"),
        )
        return self.store.freeze()


def build_graph(
    segments: Iterable[TaggedSegment],
    mode: str,
    registry: Optional[TravelModeRegistry] = None,
) -> AdjacencyStore:
    """Build the frozen graph for one travel mode."""
    builder = GraphBuilder(mode, registry)
    builder.ingest_many(segments)
    return builder.finish()


def build_graphs(
    segments: Iterable[TaggedSegment],
    modes: Optional[Iterable[str]] = None,
    registry: Optional[TravelModeRegistry] = None,
    max_workers: Optional[int] = None,
) -> dict[str, AdjacencyStore]:
    """
    Build one frozen graph per travel mode, concurrently.

    Each mode gets its own builder and store; nothing is shared between builds
    except the read-only input.

    Parameters
    ----------
    segments : iterable of TaggedSegment
        Ways to ingest. Consumed once.
    modes : iterable of str, optional
        Modes to build. Defaults to every mode in `registry`.
    registry : TravelModeRegistry, optional
        Defaults to the built-in table.
    max_workers : int, optional
        Thread pool size. Defaults to one thread per mode.

    Raises
    ------
    UnknownTravelModeError
        If any requested mode is not registered (checked before building)
    """
    registry = registry if registry is not None else TravelModeRegistry.default()
    mode_list = list(modes) if modes is not None else registry.modes()
    ways = tuple(segments)

    builders = {mode: GraphBuilder(mode, registry) for mode in mode_list}
    if not builders:
        return {}

    def run(builder: GraphBuilder) -> AdjacencyStore:
        builder.ingest_many(ways)
        return builder.finish()

    with ThreadPoolExecutor(max_workers=max_workers or len(builders)) as pool:
        futures = {mode: pool.submit(run, builder) for mode, builder in builders.items()}
        return {mode: future.result() for mode, future in futures.items()}
