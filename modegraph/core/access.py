"""
Access Resolver
===============

Decides whether a tagged way (or any tagged entity) may be used by a mode of
travel, given the mode's access tag keys ordered from most general to most
specific.

See https://wiki.openstreetmap.org/wiki/Key:access
"""

import logging
from enum import Enum
from typing import Any, Iterable, Optional

from modegraph.core.schema import get_tag


logger = logging.getLogger(__name__)


class AccessVerdict(str, Enum):
    """Classification of a single access tag value."""

    DENY = "deny"
    GRANT = "grant"
    UNRECOGNIZED = "unrecognized"
    """Not a known value; treated as a grant."""


DENIAL_VALUES = frozenset({"no", "private"})

GRANT_VALUES = frozenset({
    "yes",
    "permissive",
    "designated",
    "destination",
    "delivery",
    "customers",
    "official",
    "agricultural",
    "forestry",
    "use_sidepath",
    "discouraged",
    "permit",
})

# "no;destination", "private_use" and similar still deny
_DENIAL_SEPARATORS = (";", "_", ":", "-", " ")


def classify_access(value: str) -> AccessVerdict:
    """
    Classify an access tag value.

    Examples
    --------
    >>> classify_access("private")
    <AccessVerdict.DENY: 'deny'>
    >>> classify_access("designated")
    <AccessVerdict.GRANT: 'grant'>
    """
    normalized = value.strip().lower()

    if normalized in DENIAL_VALUES:
        return AccessVerdict.DENY

    for word in DENIAL_VALUES:
        if normalized.startswith(word) and normalized[len(word):len(word) + 1] in _DENIAL_SEPARATORS:
            return AccessVerdict.DENY

    if normalized in GRANT_VALUES:
        return AccessVerdict.GRANT

    return AccessVerdict.UNRECOGNIZED


def is_allowed(entity: Any, ordered_access_keys: Iterable[str]) -> bool:
    """
    Whether the travel mode described by `ordered_access_keys` may use `entity`.

    Every key present on the entity replaces the decision so far, so the last
    present key wins. Keys must run from general (`access`) to specific
    (`motorcar`) for specific tags to override general ones.

    Parameters
    ----------
    entity : TaggedSegment or Mapping[str, str]
        Tagged element, or its tags
    ordered_access_keys : iterable of str
        Access tag keys, general to specific

    Returns
    -------
    bool
        True if no present key denies, or a later key grants again
    """
    allowed = True

    for key in ordered_access_keys:
        value: Optional[str] = get_tag(entity, key)
        if value is None:
            continue

        verdict = classify_access(value)
        if verdict is AccessVerdict.UNRECOGNIZED:
            logger.debug("Unrecognized access value %s=%r treated as grant", key, value)

        allowed = verdict is not AccessVerdict.DENY

    return allowed
