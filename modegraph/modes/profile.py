"""
Travel Mode Profile
===================

Routing preferences for one mode of travel: how strongly each road or rail
class is preferred, and which access tags decide whether the mode may use a
way at all.
"""

import math
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TravelModeProfile(BaseModel):
    """
    Weights and access tag precedence for one travel mode.

    Examples
    --------
    >>> car = TravelModeProfile(
    ...     name="car",
    ...     weights={"primary": 2.0, "residential": 0.7},
    ...     can_use=("access", "vehicle", "motor_vehicle", "motorcar"),
    ... )
    >>> car.weight_for("primary")
    2.0
    >>> car.weight_for("footway")
    0.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    """Travel mode name, also the suffix of mode-specific tags (`oneway:bicycle`)."""

    weights: Mapping[str, float] = Field(default_factory=dict, validate_default=True)
    """
    Weights keyed to road or rail classification. Larger numbers indicate
    stronger preference; zero or less means the class is unusable.
    """

    can_use: tuple[str, ...] = Field(min_length=1)
    """
    Usable access tag keys ordered by specificity. The first item should be
    most general and the last most specific so later keys can override
    earlier ones.
    """

    @field_validator("weights")
    @classmethod
    def _validate_weights(cls, weights: Mapping[str, float]) -> Mapping[str, float]:
        for way_type, weight in weights.items():
            if not math.isfinite(weight):
                raise ValueError(f"weight for {way_type!r} must be finite, got {weight}")
        # profiles are shared between registries, so store a read-only copy
        return MappingProxyType(dict(weights))

    def weight_for(self, way_type: Optional[str]) -> float:
        """Weight for a classification code, zero if unknown or missing."""
        if way_type is None:
            return 0.0
        return self.weights.get(way_type, 0.0)
