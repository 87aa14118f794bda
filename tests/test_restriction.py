"""
Turn Restriction Tests
======================

Forbidden (`no_*`) and mandatory (`only_*`) node sequences from restriction
relations.
"""

import logging

import pytest

from modegraph.core.restriction import Restrictions, Sequence, sort_node_sets
from modegraph.core.schema import Relation, RelationMember, Role, Tag
from modegraph.errors import UnknownTravelModeError


# ============================================================================
# Fixtures
# ============================================================================


def restriction(value: str, *members: RelationMember, relation_id: int = 1, **tags: str) -> Relation:
    all_tags = {Tag.TYPE: Tag.RESTRICTION, Tag.RESTRICTION: value}
    all_tags.update(tags)
    return Relation(id=relation_id, members=members, tags=all_tags)


@pytest.fixture
def no_left_turn() -> Relation:
    """
    Left turn from 2 -> 10 onto 10 -> 20 is forbidden.

        1 -- 2 -- 10 -- 21
                   |
                   20
    """
    return restriction(
        "no_left_turn",
        RelationMember(role=Role.FROM, nodes=(10, 2, 1)),
        RelationMember(role=Role.VIA, nodes=(10,)),
        RelationMember(role=Role.TO, nodes=(21, 20, 10)),
        **{Tag.EXCEPTION: "psv;bicycle"},
    )


@pytest.fixture
def only_straight_on() -> Relation:
    return restriction(
        "only_straight_on",
        RelationMember(role=Role.FROM, nodes=(1, 2, 10)),
        RelationMember(role=Role.VIA, nodes=(10, 11, 12)),
        RelationMember(role=Role.TO, nodes=(12, 13)),
        relation_id=2,
    )


# ============================================================================
# Sequences
# ============================================================================


class TestSequence:
    """Tests for ordering relation member nodes."""

    def test_sort_orients_sets(self):
        sets = [[2, 1], [3, 2], [3, 4]]
        assert sort_node_sets(sets) is True
        assert sets == [[1, 2], [2, 3], [3, 4]]

    def test_sort_fails_without_common_node(self):
        assert sort_node_sets([[1, 2], [3, 4]]) is False

    def test_node_groups(self, only_straight_on):
        sequence = Sequence(only_straight_on).sort()
        assert sequence.valid
        assert len(sequence) == 3
        assert sequence.from_nodes == [2, 10]
        assert sequence.via_nodes == [11, 12]
        assert sequence.to_node == 13
        assert sequence.all_nodes == [2, 10, 11, 12, 13]

    def test_via_node_member(self, no_left_turn):
        sequence = Sequence(no_left_turn).sort()
        assert sequence.all_nodes == [2, 10, 20]

    def test_missing_to_member_invalid(self):
        relation = restriction("no_u_turn", RelationMember(role=Role.FROM, nodes=(1, 2)))
        assert Sequence(relation).valid is False


# ============================================================================
# Restrictions
# ============================================================================


class TestRestrictions:
    """Tests for collecting and querying restrictions."""

    def test_forbids_pattern(self, no_left_turn):
        car = Restrictions("car")
        assert car.from_relation(no_left_turn) is True

        assert car.forbids([2, 10, 20]) is True
        # additional nodes don't change the result
        assert car.forbids([1, 2, 10, 20]) is True
        # reverse direction allowed
        assert car.forbids([20, 10, 2]) is False
        assert car.forbids([2, 10, 21]) is False

    def test_excepted_mode_unaffected(self, no_left_turn):
        bus = Restrictions("bus")
        assert bus.from_relation(no_left_turn) is False
        assert bus.forbids([2, 10, 20]) is False

    def test_requires_nodes_after_only_rule(self, only_straight_on):
        car = Restrictions("car")
        car.from_relation(only_straight_on)

        assert car.required_after([2, 10]) == [11, 12, 13]
        assert car.required_after([-999, 1, 2, 10]) == [11, 12, 13]
        assert car.required_after([2, 10, -999]) == []
        assert car.mandatory_patterns() == [((2, 10), [11, 12, 13])]

    def test_foot_ignores_general_restrictions(self, no_left_turn):
        foot = Restrictions("foot")
        assert foot.from_relation(no_left_turn) is False

    def test_foot_uses_explicit_restrictions(self):
        relation = restriction(
            "no_straight_on",
            RelationMember(role=Role.FROM, nodes=(1, 2)),
            RelationMember(role=Role.TO, nodes=(2, 3)),
            **{"restriction:foot": "no_straight_on"},
        )
        foot = Restrictions("foot")
        assert foot.from_relation(relation) is True
        assert foot.forbidden_patterns() == [(1, 2, 3)]

    def test_mode_specific_value_preferred(self):
        relation = restriction(
            "only_right_turn",
            RelationMember(role=Role.FROM, nodes=(1, 2)),
            RelationMember(role=Role.TO, nodes=(2, 3)),
            **{"restriction:bus": "no_right_turn"},
        )
        bus = Restrictions("bus")
        bus.from_relation(relation)
        assert bus.forbids([1, 2, 3])
        assert bus.required_after([1, 2]) == []

    def test_non_rule_value_ignored(self):
        relation = restriction(
            "give_way",
            RelationMember(role=Role.FROM, nodes=(1, 2)),
            RelationMember(role=Role.TO, nodes=(2, 3)),
        )
        assert Restrictions("car").from_relation(relation) is False

    def test_unsortable_relation_logged(self, caplog):
        relation = restriction(
            "no_u_turn",
            RelationMember(role=Role.FROM, nodes=(1, 2)),
            RelationMember(role=Role.TO, nodes=(3, 4)),
            relation_id=77,
        )
        car = Restrictions("car")
        with caplog.at_level(logging.WARNING, logger="modegraph.core.restriction"):
            assert car.from_relation(relation) is False
        assert "Relation 77 could not be processed" in caplog.text
        assert car.forbidden_patterns() == []

    def test_unknown_mode(self):
        with pytest.raises(UnknownTravelModeError):
            Restrictions("zeppelin")

    def test_docstring_example(self):
        import doctest
        from modegraph.core import restriction

        result = doctest.testmod(restriction)
        assert result.attempted > 0
        assert result.failed == 0
