"""
Turn Restrictions
=================

Required and forbidden node sequences for a travel mode, collected from OSM
restriction relations.

If the restriction value starts with `no_` the route may not pass from the
`from` member to the `to` member. If it starts with `only_` the only route
leaving the `from` member leads through `via` to `to`. This holds for both
direction and turn restrictions.

See https://wiki.openstreetmap.org/wiki/Relation:restriction
"""

import logging
from typing import Any, Optional

from modegraph.core.schema import Relation, Role, Tag, TravelMode
from modegraph.errors import UnknownTravelModeError
from modegraph.modes.registry import TravelModeRegistry


logger = logging.getLogger(__name__)

FORBID_PREFIX = "no_"
REQUIRE_PREFIX = "only_"


def shared_node(nodes1: list[Any], nodes2: list[Any]) -> Optional[Any]:
    """First node of `nodes1` that also appears in `nodes2`."""
    return next((n for n in nodes1 if n in nodes2), None)


def sort_node_sets(node_sets: list[list[Any]]) -> bool:
    """
    Orient node sets in place so each set starts where the previous one ends.

    Example: `[[b, a], [c, b], [c, d]]` becomes `[[a, b], [b, c], [c, d]]`.

    Returns
    -------
    bool
        False if two neighbouring sets share no node, or can't be made adjacent
    """
    for i in range(len(node_sets) - 1):
        j = i + 1
        common = shared_node(node_sets[i], node_sets[j])

        if common is None:
            logger.warning("No common node connecting relation members")
            return False

        if node_sets[j][0] != common:
            node_sets[j] = node_sets[j][::-1]

        # only the "from" set may be flipped here, otherwise a via set could
        # be reversed twice (as member i and member i + 1)
        if i == 0 and node_sets[i][-1] != common:
            node_sets[i] = node_sets[i][::-1]

        if node_sets[i][-1] != node_sets[j][0]:
            logger.warning("Relation member common nodes are not adjacent")
            return False

    return True


class Sequence:
    """
    Relation member nodes grouped into one `from` set, any number of `via`
    sets and one `to` set.
    """

    def __init__(self, relation: Relation):
        from_member = next((m for m in relation.members if m.role == Role.FROM), None)
        to_member = next((m for m in relation.members if m.role == Role.TO), None)

        self._nodes: list[list[Any]] = []
        self.valid = from_member is not None and to_member is not None

        if self.valid:
            self._nodes.append(list(from_member.nodes))
            self._nodes.extend(list(m.nodes) for m in relation.members if m.role == Role.VIA)
            self._nodes.append(list(to_member.nodes))
            # from and to need two nodes to give a direction; a via may be a single node
            self.valid = (
                len(self._nodes[0]) >= 2
                and len(self._nodes[-1]) >= 2
                and all(self._nodes[1:-1])
            )

    def __len__(self) -> int:
        return len(self._nodes)

    def sort(self) -> "Sequence":
        """Orient node sets so shared nodes are adjacent."""
        if self.valid:
            self.valid = sort_node_sets(self._nodes)
        return self

    @property
    def from_nodes(self) -> list[Any]:
        """Last unique node of the `from` set followed by the first `via` node."""
        return [self._nodes[0][-2], self._nodes[1][0]]

    @property
    def via_nodes(self) -> list[Any]:
        """Nodes of the `via` sets, without the connecting nodes they share."""
        via = []
        for nodes in self._nodes[1:-1]:
            via.extend(nodes[1:])
        return via

    @property
    def to_node(self) -> Any:
        """First unique node of the `to` set."""
        return self._nodes[-1][1]

    @property
    def all_nodes(self) -> list[Any]:
        return [*self.from_nodes, *self.via_nodes, self.to_node]


class Restrictions:
    """
    Forbidden and mandatory node sequences for one travel mode.

    Example
    -------
    >>> from modegraph.core.schema import Relation, RelationMember
    >>> no_left_turn = Relation(
    ...     members=(
    ...         RelationMember(role="from", nodes=(1, 10)),
    ...         RelationMember(role="to", nodes=(10, 20)),
    ...     ),
    ...     tags={"type": "restriction", "restriction": "no_left_turn"},
    ... )
    >>> rules = Restrictions("car")
    >>> rules.from_relation(no_left_turn)
    True
    >>> rules.forbids([1, 10, 20])
    True
    """

    def __init__(self, mode: str, registry: Optional[TravelModeRegistry] = None):
        registry = registry if registry is not None else TravelModeRegistry.default()
        profile = registry.get_profile(mode)
        if profile is None:
            raise UnknownTravelModeError(mode)

        self.mode = profile.name
        self._can_use = frozenset(profile.can_use)
        # required continuation keyed to the "from" node pair
        self._required: dict[tuple[Any, ...], list[Any]] = {}
        self._forbidden: list[tuple[Any, ...]] = []

    def restriction_type(self, relation: Relation) -> Optional[str]:
        """
        Restriction value that applies to this mode, or None.

        e.g. no_right_turn, no_left_turn, no_u_turn, no_straight_on,
        only_right_turn, only_left_turn, only_straight_on, no_entry, no_exit
        """
        exceptions = (relation.get_tag(Tag.EXCEPTION) or "").split(";")

        # ignore restrictions the mode is exempted from
        if self._can_use.intersection(e.strip() for e in exceptions):
            return None

        mode_key = f"{Tag.RESTRICTION}:{self.mode}"

        if (
            self.mode == TravelMode.FOOT.value
            and relation.get_tag(Tag.TYPE) != mode_key
            and relation.get_tag(mode_key) is None
        ):
            # walking restrictions apply only when explicit
            return None

        value = relation.get_tag(mode_key) or relation.get_tag(Tag.RESTRICTION)

        if value is None or not value.startswith((FORBID_PREFIX, REQUIRE_PREFIX)):
            return None

        return value

    def from_relation(self, relation: Relation) -> bool:
        """
        Record the rule in `relation` if it applies to this mode.

        Returns
        -------
        bool
            True if a rule was recorded
        """
        value = self.restriction_type(relation)
        if value is None:
            return False

        sequence = Sequence(relation).sort()
        if not sequence.valid:
            logger.warning("Relation %s could not be processed", relation.id)
            return False

        if value.startswith(FORBID_PREFIX):
            self._forbidden.append(tuple(sequence.all_nodes))
        else:
            self._required[tuple(sequence.from_nodes)] = [*sequence.via_nodes, sequence.to_node]
        return True

    def forbidden_patterns(self) -> list[tuple[Any, ...]]:
        return list(self._forbidden)

    def mandatory_patterns(self) -> list[tuple[tuple[Any, ...], list[Any]]]:
        return [(pattern, list(nodes)) for pattern, nodes in self._required.items()]

    def forbids(self, nodes: list[Any]) -> bool:
        """Whether `nodes` contains a forbidden sequence as a contiguous run."""
        return any(_contains_run(nodes, pattern) for pattern in self._forbidden)

    def required_after(self, nodes: list[Any]) -> list[Any]:
        """
        Nodes that must follow `nodes` because of an `only_*` rule.

        Empty if `nodes` doesn't end with a mandatory pattern.
        """
        for pattern, required in self._required.items():
            if len(nodes) >= len(pattern) and tuple(nodes[-len(pattern):]) == pattern:
                return list(required)
        return []


def _contains_run(nodes: list[Any], pattern: tuple[Any, ...]) -> bool:
    size = len(pattern)
    return any(tuple(nodes[i:i + size]) == pattern for i in range(len(nodes) - size + 1))
