"""
Travel mode profiles and the registry that holds them.
"""

from modegraph.modes.profile import TravelModeProfile
from modegraph.modes.registry import DEFAULT_PROFILES, TravelModeRegistry

__all__ = [
    "TravelModeProfile",
    "TravelModeRegistry",
    "DEFAULT_PROFILES",
]
