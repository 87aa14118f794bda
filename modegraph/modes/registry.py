"""
Travel Mode Registry
====================

Immutable lookup of travel mode profiles.

A registry is an ordinary value handed to the graph builder, so several
configurations (the built-in table, a JSON file, a test fixture) can be used
side by side in one process.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional

from pydantic import ValidationError

from modegraph.core.schema import Tag, TravelMode, WayType
from modegraph.errors import ProfileConfigError
from modegraph.modes.profile import TravelModeProfile


# =============================================================================
# Built-in preferences
# =============================================================================


DEFAULT_PROFILES: tuple[TravelModeProfile, ...] = (
    TravelModeProfile(
        name=TravelMode.CAR.value,
        weights={
            WayType.FREEWAY: 10.0,
            WayType.TRUNK: 10.0,
            WayType.PRIMARY: 2.0,
            WayType.SECONDARY: 1.5,
            WayType.TERTIARY: 1.0,
            WayType.MINOR: 1.0,
            WayType.RESIDENTIAL: 0.7,
            WayType.TWO_TRACK: 0.5,
            WayType.SERVICE_ROAD: 0.5,
        },
        can_use=(Tag.ACCESS, Tag.VEHICLE, Tag.MOTOR_VEHICLE, Tag.MOTOR_CAR),
    ),
    TravelModeProfile(
        name=TravelMode.BUS.value,
        weights={
            WayType.FREEWAY: 10.0,
            WayType.TRUNK: 10.0,
            WayType.PRIMARY: 2.0,
            WayType.SECONDARY: 1.5,
            WayType.TERTIARY: 1.0,
            WayType.MINOR: 1.0,
            WayType.RESIDENTIAL: 0.8,
            WayType.TWO_TRACK: 0.3,
            WayType.SERVICE_ROAD: 0.9,
        },
        can_use=(Tag.ACCESS, Tag.VEHICLE, Tag.MOTOR_VEHICLE, Tag.SERVICE_VEHICLE, Tag.BUS),
    ),
    TravelModeProfile(
        name=TravelMode.BICYCLE.value,
        weights={
            WayType.TRUNK: 0.05,
            WayType.PRIMARY: 0.3,
            WayType.SECONDARY: 0.9,
            WayType.TERTIARY: 1.0,
            WayType.MINOR: 1.0,
            WayType.BICYCLE_PATH: 2.0,
            WayType.RESIDENTIAL: 2.5,
            WayType.TWO_TRACK: 1.0,
            WayType.SERVICE_ROAD: 1.0,
            WayType.HORSE_PATH: 0.8,
            WayType.FOOT_PATH: 0.8,
            WayType.STAIRS: 0.5,
            WayType.PATH: 1.0,
        },
        can_use=(Tag.ACCESS, Tag.VEHICLE, Tag.BICYCLE),
    ),
    TravelModeProfile(
        name=TravelMode.HORSE.value,
        weights={
            WayType.PRIMARY: 0.05,
            WayType.SECONDARY: 0.15,
            WayType.TERTIARY: 0.3,
            WayType.MINOR: 1.0,
            WayType.RESIDENTIAL: 1.0,
            WayType.TWO_TRACK: 1.0,
            WayType.SERVICE_ROAD: 1.0,
            WayType.HORSE_PATH: 1.0,
            WayType.FOOT_PATH: 1.2,
            WayType.STAIRS: 1.15,
            WayType.PATH: 1.2,
        },
        can_use=(Tag.ACCESS, Tag.HORSE),
    ),
    TravelModeProfile(
        name=TravelMode.TRAM.value,
        weights={
            WayType.TRAM: 1.0,
            WayType.LIGHT_RAIL: 1.0,
        },
        can_use=(Tag.ACCESS,),
    ),
    TravelModeProfile(
        name=TravelMode.TRAIN.value,
        weights={
            WayType.RAIL: 1.0,
            WayType.LIGHT_RAIL: 1.0,
            WayType.SUBWAY: 1.0,
            WayType.NARROW_GAUGE: 1.0,
        },
        can_use=(Tag.ACCESS,),
    ),
    TravelModeProfile(
        name=TravelMode.FOOT.value,
        weights={
            WayType.PRIMARY: 1.0,
            WayType.SECONDARY: 1.0,
            WayType.TERTIARY: 1.0,
            WayType.MINOR: 1.0,
            WayType.RESIDENTIAL: 1.0,
            WayType.LIVING_STREET: 1.0,
            WayType.TWO_TRACK: 1.0,
            WayType.SERVICE_ROAD: 1.0,
            WayType.PEDESTRIAN: 1.0,
            WayType.BICYCLE_PATH: 0.2,
            WayType.HORSE_PATH: 1.0,
            WayType.FOOT_PATH: 1.0,
            WayType.STAIRS: 1.0,
            WayType.PATH: 1.0,
        },
        can_use=(Tag.ACCESS, Tag.FOOT),
    ),
)


# =============================================================================
# Registry
# =============================================================================


class TravelModeRegistry:
    """
    Travel mode profiles keyed by mode name.

    Usage
    -----
    ```python
    registry = TravelModeRegistry.default()
    car = registry.get_profile("car")

    custom = registry.with_profile(
        TravelModeProfile(name="scooter", weights={"cycleway": 1.0}, can_use=("access",))
    )
    ```
    """

    def __init__(self, profiles: Iterable[TravelModeProfile] = ()):
        self._profiles: dict[str, TravelModeProfile] = {}
        for profile in profiles:
            if profile.name in self._profiles:
                raise ProfileConfigError(f"Duplicate travel mode profile {profile.name!r}")
            self._profiles[profile.name] = profile

    @classmethod
    def default(cls) -> "TravelModeRegistry":
        """Registry with the built-in car, bus, bicycle, horse, tram, train and foot profiles."""
        return cls(DEFAULT_PROFILES)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TravelModeRegistry":
        """
        Build a registry from declarative configuration.

        Parameters
        ----------
        data : Mapping
            `{mode: {"weights": {way_type: weight}, "can_use": [tag, ...]}}`

        Raises
        ------
        ProfileConfigError
            If the structure or any profile is invalid
        """
        if not isinstance(data, Mapping):
            raise ProfileConfigError("Profile configuration must be a mapping of mode names")

        profiles = []
        for mode, body in data.items():
            if not isinstance(body, Mapping):
                raise ProfileConfigError(f"Profile {mode!r} must be a mapping")
            try:
                profiles.append(TravelModeProfile(name=mode, **body))
            except (ValidationError, TypeError) as e:
                raise ProfileConfigError(f"Invalid profile {mode!r}: {e}") from e

        return cls(profiles)

    @classmethod
    def from_json_file(cls, path: Path | str) -> "TravelModeRegistry":
        """Load profiles from a JSON file (same shape as `from_dict`)."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProfileConfigError(f"Profile file {path} is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def get_profile(self, mode_name: str) -> Optional[TravelModeProfile]:
        """Profile for `mode_name`, or None if the mode isn't registered."""
        return self._profiles.get(mode_name)

    def with_profile(self, profile: TravelModeProfile) -> "TravelModeRegistry":
        """Copy of this registry with `profile` added or replaced."""
        profiles = dict(self._profiles)
        profiles[profile.name] = profile
        return TravelModeRegistry(profiles.values())

    def modes(self) -> list[str]:
        return list(self._profiles)

    def __contains__(self, mode_name: object) -> bool:
        return mode_name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[TravelModeProfile]:
        return iter(self._profiles.values())

    def __repr__(self) -> str:
        return f"TravelModeRegistry({', '.join(self._profiles)})"
