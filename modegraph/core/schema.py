"""
Graph Input Schema
==================

Data models and vocabulary shared by the graph builder, the access resolver
and the turn restriction rules.

Contents:
- Tag: OSM tag keys the builder reads
- WayType: road and rail classification codes
- TravelMode: the supported modes of travel
- Status: outcome contract of the external route search
- TaggedSegment: structural protocol for builder input
- Way / Relation: concrete input models
"""

from enum import Enum
from typing import Any, Hashable, Mapping, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


NodeId = Hashable
"""Opaque, stable node identifier (OSM ids are ints, negative for new edits)."""


class Tag:
    """OSM tag keys."""

    ACCESS = "access"
    VEHICLE = "vehicle"
    MOTOR_VEHICLE = "motor_vehicle"
    MOTOR_CAR = "motorcar"
    SERVICE_VEHICLE = "psv"
    BUS = "bus"
    BICYCLE = "bicycle"
    HORSE = "horse"
    FOOT = "foot"

    ONE_WAY = "oneway"
    ROAD_TYPE = "highway"
    RAIL_TYPE = "railway"
    JUNCTION_TYPE = "junction"

    TYPE = "type"
    RESTRICTION = "restriction"
    EXCEPTION = "except"


class WayType:
    """Road (`highway=*`) and rail (`railway=*`) classification codes."""

    FREEWAY = "motorway"
    TRUNK = "trunk"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    MINOR = "unclassified"
    RESIDENTIAL = "residential"
    LIVING_STREET = "living_street"
    TWO_TRACK = "track"
    SERVICE_ROAD = "service"
    PEDESTRIAN = "pedestrian"
    BICYCLE_PATH = "cycleway"
    HORSE_PATH = "bridleway"
    FOOT_PATH = "footway"
    STAIRS = "steps"
    PATH = "path"

    TRAM = "tram"
    LIGHT_RAIL = "light_rail"
    RAIL = "rail"
    SUBWAY = "subway"
    NARROW_GAUGE = "narrow_gauge"


class TravelMode(str, Enum):
    """Modes of travel with a built-in preference profile."""

    CAR = "car"
    BUS = "bus"
    BICYCLE = "bicycle"
    HORSE = "horse"
    TRAM = "tram"
    TRAIN = "train"
    FOOT = "foot"
    """Pedestrians ignore one-way restrictions."""


class Status(str, Enum):
    """Result of a route search over a finished graph."""

    NO_ROUTE = "no_route"
    """Start and end nodes are not connected."""

    SUCCESS = "success"
    """Found a series of nodes connecting start to end."""

    GAVE_UP = "gave_up"
    """Search budget exhausted before start and end were connected."""


@runtime_checkable
class TaggedSegment(Protocol):
    """Anything the graph builder can ingest: ordered nodes plus a tag lookup."""

    @property
    def nodes(self) -> Sequence[NodeId]: ...

    def get_tag(self, key: str) -> Optional[str]: ...


def get_tag(entity: Any, key: str) -> Optional[str]:
    """Read a tag from a tagged entity or from a plain tag mapping."""
    if isinstance(entity, Mapping):
        return entity.get(key)
    return entity.get_tag(key)


class Way(BaseModel):
    """
    An ordered run of nodes with classification and access tags.

    Examples
    --------
    >>> way = Way(id=7, nodes=(1, 2, 3), tags={"highway": "primary"})
    >>> way.get_tag("highway")
    'primary'
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    nodes: tuple[Any, ...] = ()
    tags: dict[str, str] = Field(default_factory=dict)

    def get_tag(self, key: str) -> Optional[str]:
        return self.tags.get(key)


class Role:
    """Relation member roles used by turn restrictions."""

    FROM = "from"
    VIA = "via"
    TO = "to"


class RelationMember(BaseModel):
    """A way (or node) taking part in a relation, resolved to its node ids."""

    model_config = ConfigDict(frozen=True)

    role: str
    nodes: tuple[Any, ...]


class Relation(BaseModel):
    """
    A tagged group of members; only `type=restriction` relations are used.

    See https://wiki.openstreetmap.org/wiki/Relation:restriction
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    members: tuple[RelationMember, ...] = ()
    tags: dict[str, str] = Field(default_factory=dict)

    def get_tag(self, key: str) -> Optional[str]:
        return self.tags.get(key)
