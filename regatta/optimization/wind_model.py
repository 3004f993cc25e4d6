"""
Time-varying wind for a race.

Stores wind samples keyed by race hour and interpolates between the two
bracketing samples. Speed blends linearly; direction blends along the
shortest arc so that 350° and 10° meet at 0°, not at 180°.

Queries outside the sampled window clamp to the nearest sample instead of
extrapolating.
"""

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from regatta.errors import ConfigurationError
from regatta.routes.geometry import normalize_angle, signed_angle_delta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindSample:
    """Wind at one race hour."""
    hour: float
    speed_kts: float
    direction_deg: float  # direction the wind blows FROM

    def __post_init__(self):
        for label, value in (("hour", self.hour), ("speed", self.speed_kts),
                             ("direction", self.direction_deg)):
            if not math.isfinite(value):
                raise ConfigurationError(f"Wind sample {label} is not finite: {value}")
        if self.hour < 0:
            raise ConfigurationError(f"Wind sample hour must be non-negative, got {self.hour}")
        if self.speed_kts < 0:
            raise ConfigurationError(f"Wind speed must be non-negative, got {self.speed_kts}")
        object.__setattr__(self, "direction_deg", normalize_angle(self.direction_deg))


class WindModel:
    """Wind samples sorted by hour with wrap-aware temporal interpolation.

    Constructor args:
        samples: Wind samples in any order. Hours must be unique.
    """

    def __init__(self, samples: Iterable[WindSample]):
        ordered = sorted(samples, key=lambda s: s.hour)
        if not ordered:
            raise ConfigurationError("Wind model needs at least one sample")

        for prev, cur in zip(ordered, ordered[1:]):
            if cur.hour == prev.hour:
                raise ConfigurationError(f"Duplicate wind sample for hour {cur.hour}")

        self._samples: Tuple[WindSample, ...] = tuple(ordered)
        self._hours: Tuple[float, ...] = tuple(s.hour for s in ordered)

        logger.info(
            f"WindModel initialized: {len(self._samples)} samples, "
            f"hours [{self._hours[0]:g}, {self._hours[-1]:g}]"
        )

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def hours(self) -> List[float]:
        return list(self._hours)

    @property
    def samples(self) -> Tuple[WindSample, ...]:
        return self._samples

    @property
    def time_range(self) -> Tuple[float, float]:
        return self._hours[0], self._hours[-1]

    def sample(self, hour: float) -> Optional[WindSample]:
        """Return the sample recorded exactly at ``hour``, if any."""
        idx = bisect.bisect_left(self._hours, hour)
        if idx < len(self._hours) and self._hours[idx] == hour:
            return self._samples[idx]
        return None

    def wind_at(self, time: float) -> WindSample:
        """Wind at ``time`` (hours since race start).

        An exact hit returns the stored sample unchanged. Outside the sampled
        window the nearest edge sample is returned.
        """
        # Index of the first sample strictly after ``time``
        idx = bisect.bisect_right(self._hours, time)

        if idx == 0:
            return self._samples[0]
        if idx == len(self._hours):
            return self._samples[-1]

        before = self._samples[idx - 1]
        if before.hour == time:
            return before
        after = self._samples[idx]

        alpha = (time - before.hour) / (after.hour - before.hour)
        speed = before.speed_kts + alpha * (after.speed_kts - before.speed_kts)
        delta = signed_angle_delta(before.direction_deg, after.direction_deg)
        direction = normalize_angle(before.direction_deg + alpha * delta)

        return WindSample(hour=time, speed_kts=speed, direction_deg=direction)
