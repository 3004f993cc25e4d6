"""
Race course data model.

Buoys (course marks and start-line endpoints) are the nodes of a directed
course graph whose edges are legs. Start-line legs are structurally the
same as course legs; they only carry ``is_start=True``.

The graph is built once by the data loader and is read-only afterwards.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from regatta.errors import ConfigurationError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    """A position in decimal degrees."""
    lat: float
    lon: float

    def __post_init__(self):
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            raise ConfigurationError(f"Non-finite coordinate ({self.lat}, {self.lon})")
        if not -90.0 <= self.lat <= 90.0:
            raise ConfigurationError(f"Latitude {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lon <= 180.0:
            raise ConfigurationError(f"Longitude {self.lon} outside [-180, 180]")


@dataclass(frozen=True)
class Buoy:
    """A named course mark or start-line endpoint."""
    name: str
    coordinate: Coordinate
    buoy_type: Optional[str] = None   # e.g. "Startboei"
    description: Optional[str] = None

    @property
    def lat(self) -> float:
        return self.coordinate.lat

    @property
    def lon(self) -> float:
        return self.coordinate.lon


@dataclass(frozen=True)
class Leg:
    """
    A directed course segment between two buoys.

    ``max_number`` is how often the race rules allow the leg to be sailed.
    It is kept as course data only; path search never reads it, since a
    simple path cannot sail the same leg twice anyway.
    """
    from_buoy: str
    to_buoy: str
    distance_nm: float
    max_number: int = 1
    is_start: bool = False

    def __post_init__(self):
        if not math.isfinite(self.distance_nm) or self.distance_nm < 0:
            raise ConfigurationError(
                f"Leg {self.from_buoy} -> {self.to_buoy}: invalid distance {self.distance_nm}"
            )

    def reversed(self) -> "Leg":
        """Same leg sailed the other way."""
        return Leg(
            from_buoy=self.to_buoy,
            to_buoy=self.from_buoy,
            distance_nm=self.distance_nm,
            max_number=self.max_number,
            is_start=self.is_start,
        )


class CourseGraph:
    """
    Directed course graph keyed by buoy name.

    Outgoing legs keep insertion order so traversal is deterministic.
    """

    def __init__(self, buoys: Iterable[Buoy], legs: Iterable[Leg] = ()):
        self._buoys: Dict[str, Buoy] = {}
        for buoy in buoys:
            if buoy.name in self._buoys:
                raise ConfigurationError(f"Duplicate buoy name '{buoy.name}'")
            self._buoys[buoy.name] = buoy

        outgoing: Dict[str, List[Leg]] = {name: [] for name in self._buoys}
        leg_count = 0
        for leg in legs:
            for endpoint in (leg.from_buoy, leg.to_buoy):
                if endpoint not in self._buoys:
                    raise ConfigurationError(
                        f"Leg {leg.from_buoy} -> {leg.to_buoy} references unknown buoy '{endpoint}'"
                    )
            outgoing[leg.from_buoy].append(leg)
            leg_count += 1

        self._outgoing: Dict[str, Tuple[Leg, ...]] = {
            name: tuple(legs_out) for name, legs_out in outgoing.items()
        }
        self._leg_count = leg_count

        logger.info(f"CourseGraph built: {len(self._buoys)} buoys, {leg_count} legs")

    def has_buoy(self, name: str) -> bool:
        return name in self._buoys

    def buoy(self, name: str) -> Buoy:
        """Return the buoy called ``name`` or raise NotFoundError."""
        try:
            return self._buoys[name]
        except KeyError:
            raise NotFoundError(name) from None

    def outgoing(self, name: str) -> Tuple[Leg, ...]:
        """Legs leaving ``name``, in insertion order."""
        if name not in self._outgoing:
            raise NotFoundError(name)
        return self._outgoing[name]

    def leg(self, from_name: str, to_name: str) -> Leg:
        """First leg from ``from_name`` to ``to_name``."""
        for leg in self.outgoing(from_name):
            if leg.to_buoy == to_name:
                return leg
        self.buoy(to_name)
        raise NotFoundError(f"{from_name} -> {to_name}", kind="Leg")

    def buoys_by_type(self, buoy_type: str) -> List[Buoy]:
        return [b for b in self._buoys.values() if b.buoy_type == buoy_type]

    @property
    def buoys(self) -> List[Buoy]:
        return list(self._buoys.values())

    @property
    def legs(self) -> List[Leg]:
        return [leg for legs_out in self._outgoing.values() for leg in legs_out]

    @property
    def buoy_count(self) -> int:
        return len(self._buoys)

    @property
    def leg_count(self) -> int:
        return self._leg_count
