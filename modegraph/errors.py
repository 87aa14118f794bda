"""
Exceptions
==========

Errors raised by the graph builder and the travel mode registry.

Bad geometry and unexpected tag values are routine in bulk map data and are
never raised; only configuration mistakes and broken internal invariants are.
"""


class ModegraphError(Exception):
    """Base class for all modegraph errors."""


class ProfileConfigError(ModegraphError, ValueError):
    """A travel mode profile (or a file of them) is malformed."""


class UnknownTravelModeError(ModegraphError, KeyError):
    """A graph was requested for a travel mode with no registered profile."""

    def __init__(self, mode: str):
        super().__init__(mode)
        self.mode = mode

    def __str__(self) -> str:
        return f"No travel mode profile registered for {self.mode!r}"


class GraphFrozenError(ModegraphError, RuntimeError):
    """An adjacency store was modified after it was frozen."""


class GraphConsistencyError(AssertionError):
    """A node expected in the graph is missing (programming error)."""
