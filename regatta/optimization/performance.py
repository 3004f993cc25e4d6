"""
Leg performance estimation.

Combines course geometry, the wind model and the boat polar to estimate
the speed a boat can sail between two coordinates at a given race hour,
and labels the point of sail the leg puts the boat on.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from regatta.errors import ConfigurationError
from regatta.optimization.polar_model import PolarModel
from regatta.optimization.wind_model import WindModel
from regatta.routes.course import Coordinate
from regatta.routes.geometry import haversine_distance, initial_bearing, relative_bearing

logger = logging.getLogger(__name__)

# Endpoints closer than this (nm) are one position
COINCIDENT_NM = 1e-6


class SailingMode(str, Enum):
    """Point of sail, from head to wind to dead downwind."""
    BEATING = "beating"
    CLOSE_HAULED = "close_hauled"
    CLOSE_REACH = "close_reach"
    BEAM_REACH = "beam_reach"
    BROAD_REACH = "broad_reach"
    RUNNING = "running"


@dataclass(frozen=True)
class SailingModeThresholds:
    """
    Upper bounds (exclusive, degrees of relative bearing) of each mode band.

    Anything at or above ``broad_reach_max`` is running. Bounds must be
    strictly increasing and lie in (0, 180].
    """
    beating_max: float = 35.0
    close_hauled_max: float = 60.0
    close_reach_max: float = 80.0
    beam_reach_max: float = 100.0
    broad_reach_max: float = 160.0

    def __post_init__(self):
        bounds = self.as_list()
        if not all(math.isfinite(b) and 0.0 < b <= 180.0 for b in bounds):
            raise ConfigurationError(f"Sailing mode thresholds must lie in (0, 180]: {bounds}")
        if any(b >= nxt for b, nxt in zip(bounds, bounds[1:])):
            raise ConfigurationError(f"Sailing mode thresholds must be strictly increasing: {bounds}")

    def as_list(self):
        return [
            self.beating_max,
            self.close_hauled_max,
            self.close_reach_max,
            self.beam_reach_max,
            self.broad_reach_max,
        ]

    def classify(self, rel_bearing: float) -> SailingMode:
        """Map a relative bearing in [0, 180] onto its sailing mode."""
        if math.isnan(rel_bearing):
            raise ValueError("Cannot classify a NaN relative bearing")
        if rel_bearing < self.beating_max:
            return SailingMode.BEATING
        if rel_bearing < self.close_hauled_max:
            return SailingMode.CLOSE_HAULED
        if rel_bearing < self.close_reach_max:
            return SailingMode.CLOSE_REACH
        if rel_bearing < self.beam_reach_max:
            return SailingMode.BEAM_REACH
        if rel_bearing < self.broad_reach_max:
            return SailingMode.BROAD_REACH
        return SailingMode.RUNNING


DEFAULT_THRESHOLDS = SailingModeThresholds()


@dataclass(frozen=True)
class EstimateResult:
    """Performance estimate for one leg at one time."""
    estimated_speed: float   # kts
    course_bearing: float    # deg, 0-360
    wind_direction: float    # deg, 0-360 (FROM)
    relative_bearing: float  # deg, 0-180
    wind_speed: float        # kts
    sailing_mode: SailingMode
    is_zero_distance: bool = field(default=False)

    def to_dict(self) -> Dict:
        return {
            "estimated_speed": self.estimated_speed,
            "course_bearing": self.course_bearing,
            "wind_direction": self.wind_direction,
            "relative_bearing": self.relative_bearing,
            "wind_speed": self.wind_speed,
            "sailing_mode": self.sailing_mode.value,
            "is_zero_distance": self.is_zero_distance,
        }


def estimate_performance(
    from_coord: Coordinate,
    to_coord: Coordinate,
    time: float,
    wind_model: WindModel,
    polar_model: PolarModel,
    thresholds: Optional[SailingModeThresholds] = None,
) -> EstimateResult:
    """
    Estimate boat speed from ``from_coord`` to ``to_coord`` at race hour ``time``.

    Steps:
    1. initial bearing of the course
    2. wind at ``time``
    3. angle between course and wind
    4. boat speed from the polar at that wind speed and angle
    5. sailing mode from the angle

    Coincident endpoints have no bearing. That includes two records of one
    physical point, such as different longitudes at a pole or 180/-180 on
    the antimeridian. The course is then taken as the canonical 0° heading
    and the result is flagged ``is_zero_distance``.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS

    distance = haversine_distance(from_coord.lat, from_coord.lon, to_coord.lat, to_coord.lon)
    is_zero_distance = distance < COINCIDENT_NM
    if is_zero_distance:
        course_bearing = 0.0
    else:
        course_bearing = initial_bearing(from_coord.lat, from_coord.lon,
                                         to_coord.lat, to_coord.lon)

    wind = wind_model.wind_at(time)
    rel_bearing = relative_bearing(course_bearing, wind.direction_deg)
    boat_speed = polar_model.boat_speed(wind.speed_kts, rel_bearing)

    return EstimateResult(
        estimated_speed=boat_speed,
        course_bearing=course_bearing,
        wind_direction=wind.direction_deg,
        relative_bearing=rel_bearing,
        wind_speed=wind.speed_kts,
        sailing_mode=thresholds.classify(rel_bearing),
        is_zero_distance=is_zero_distance,
    )
