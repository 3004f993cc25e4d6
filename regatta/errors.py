"""
Error types raised by the performance and path engine.

Degenerate inputs with a defined fallback (zero-distance legs, zero boat
speed) never raise; they are handled where they occur.
"""


class RegattaError(Exception):
    """Base class for engine errors."""


class ConfigurationError(RegattaError, ValueError):
    """Wind, polar or course snapshot is empty or malformed."""


class NotFoundError(RegattaError, LookupError):
    """A referenced buoy or leg does not exist in the course graph."""

    def __init__(self, name: str, kind: str = "Buoy"):
        self.name = name
        self.kind = kind
        super().__init__(f"{kind} '{name}' not found")


class DegenerateInputError(RegattaError, ValueError):
    """Query input that has no defined fallback (e.g. a non-finite time)."""
