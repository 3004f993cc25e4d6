"""
Course geometry.

Bearing and angular-difference helpers on decimal-degree coordinates and
compass angles. All functions are pure; NaN inputs come back as NaN.
"""

import math

EARTH_RADIUS_NM = 3440.065


def normalize_angle(angle: float) -> float:
    """
    Normalize a compass angle into [0, 360).

    Float modulo can round a tiny negative input up to exactly 360.0, and
    -0.0 survives a plain modulo, so both are folded onto 0.0.
    """
    result = angle % 360.0
    if result >= 360.0:
        return 0.0
    return result + 0.0


def signed_angle_delta(from_deg: float, to_deg: float) -> float:
    """Shortest signed rotation from ``from_deg`` to ``to_deg``, in [-180, 180)."""
    return (to_deg - from_deg + 180.0) % 360.0 - 180.0


def relative_bearing(a: float, b: float) -> float:
    """
    Smallest angle between two compass directions, in [0, 180].

    Used with the course bearing and the wind FROM direction, this is the
    true wind angle: 0 = head to wind, 180 = dead downwind.
    """
    # abs(a - b) is bit-identical for either argument order
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff) + 0.0


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle course leaving point 1 towards point 2, degrees in [0, 360) clockwise from north."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlon = math.radians(lon2 - lon1)

    x = math.sin(dlon) * math.cos(lat2_rad)
    y = (math.cos(lat1_rad) * math.sin(lat2_rad) -
         math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(dlon))

    return normalize_angle(math.degrees(math.atan2(x, y)))


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_NM * c
