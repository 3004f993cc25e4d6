"""
Boat polar performance table.

Maps (true wind speed, true wind angle) -> boat speed over an irregular
grid. Angles run 0-180° only; the table is symmetric port/starboard.

Lookup is bilinear over the (wind speed, angle) grid through scipy's
RegularGridInterpolator. Queries outside the table are clipped onto its
edges first, except below the smallest tabulated angle. That is the no-go
zone and the boat makes no way there.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from regatta.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolarEntry:
    """One cell of a polar table."""
    wind_speed_kts: float
    twa_deg: float
    boat_speed_kts: float


class PolarModel:
    """Bilinear polar lookup over a pre-sorted grid.

    Constructor args:
        wind_speeds: True wind speeds (kts), one per table column.
        wind_angles: True wind angles (deg, 0-180), one per table row.
        boat_speeds: Boat speeds indexed ``[angle][wind_speed]``, the layout
            of a polar CSV (angles down, wind speeds across).
    """

    def __init__(
        self,
        wind_speeds: Sequence[float],
        wind_angles: Sequence[float],
        boat_speeds: Sequence[Sequence[float]],
    ):
        speeds_axis = np.asarray(wind_speeds, dtype=np.float64)
        angles_axis = np.asarray(wind_angles, dtype=np.float64)

        if speeds_axis.ndim != 1 or len(speeds_axis) < 2:
            raise ConfigurationError("Polar table needs at least two wind speed columns")
        if angles_axis.ndim != 1 or len(angles_axis) < 2:
            raise ConfigurationError("Polar table needs at least two wind angle rows")

        rows = [list(row) for row in boat_speeds]
        if len(rows) != len(angles_axis) or any(len(r) != len(speeds_axis) for r in rows):
            raise ConfigurationError(
                f"Polar table shape mismatch: expected {len(angles_axis)} rows "
                f"of {len(speeds_axis)} values"
            )
        table = np.asarray(rows, dtype=np.float64)

        if not (np.all(np.isfinite(speeds_axis)) and np.all(np.isfinite(angles_axis))
                and np.all(np.isfinite(table))):
            raise ConfigurationError("Polar table contains non-finite values")
        if np.any(speeds_axis < 0):
            raise ConfigurationError("Polar wind speeds must be non-negative")
        if np.any(angles_axis < 0) or np.any(angles_axis > 180):
            raise ConfigurationError("Polar wind angles must lie within [0, 180]")
        if np.any(table < 0):
            raise ConfigurationError("Polar boat speeds must be non-negative")
        if len(np.unique(speeds_axis)) != len(speeds_axis):
            raise ConfigurationError("Polar table has duplicate wind speed columns")
        if len(np.unique(angles_axis)) != len(angles_axis):
            raise ConfigurationError("Polar table has duplicate wind angle rows")

        speed_order = np.argsort(speeds_axis)
        angle_order = np.argsort(angles_axis)

        self._wind_speeds = speeds_axis[speed_order]
        self._wind_angles = angles_axis[angle_order]
        # Stored [wind_speed][angle] so each wind speed row is contiguous
        self._table = table[angle_order][:, speed_order].T.copy()

        # Private copies: the exposed arrays are frozen below
        self._interp = RegularGridInterpolator(
            (self._wind_speeds.copy(), self._wind_angles.copy()),
            self._table.copy(),
            method='linear',
            bounds_error=False,
            fill_value=None,
        )

        self._lower = np.array([self._wind_speeds[0], self._wind_angles[0]])
        self._upper = np.array([self._wind_speeds[-1], self._wind_angles[-1]])

        for arr in (self._wind_speeds, self._wind_angles, self._table):
            arr.setflags(write=False)

        logger.info(
            f"PolarModel initialized: {len(self._wind_speeds)} wind speeds "
            f"[{self._wind_speeds[0]:g}-{self._wind_speeds[-1]:g} kts], "
            f"{len(self._wind_angles)} angles [{self._wind_angles[0]:g}-{self._wind_angles[-1]:g}°]"
        )

    @classmethod
    def from_entries(cls, entries: Iterable[PolarEntry]) -> "PolarModel":
        """Build a model from individual cells. Every grid cell must be present."""
        cells: Dict[Tuple[float, float], float] = {}
        for entry in entries:
            key = (float(entry.wind_speed_kts), float(entry.twa_deg))
            if key in cells:
                raise ConfigurationError(
                    f"Duplicate polar entry for {key[0]:g} kts / {key[1]:g}°"
                )
            cells[key] = float(entry.boat_speed_kts)

        if not cells:
            raise ConfigurationError("Polar table is empty")

        wind_speeds = sorted({ws for ws, _ in cells})
        wind_angles = sorted({twa for _, twa in cells})
        boat_speeds = []
        for twa in wind_angles:
            row = []
            for ws in wind_speeds:
                if (ws, twa) not in cells:
                    raise ConfigurationError(f"Polar table missing cell {ws:g} kts / {twa:g}°")
                row.append(cells[(ws, twa)])
            boat_speeds.append(row)

        return cls(wind_speeds, wind_angles, boat_speeds)

    @property
    def wind_speeds(self) -> np.ndarray:
        return self._wind_speeds

    @property
    def wind_angles(self) -> np.ndarray:
        return self._wind_angles

    @property
    def min_angle(self) -> float:
        """Smallest tabulated angle; anything closer to the wind is no-go."""
        return float(self._wind_angles[0])

    def is_no_go(self, twa: float) -> bool:
        return twa < self._wind_angles[0]

    def tabulated(self, wind_speed: float, twa: float) -> float:
        """Boat speed stored at an exact grid point (KeyError if absent)."""
        si = np.flatnonzero(self._wind_speeds == wind_speed)
        ai = np.flatnonzero(self._wind_angles == twa)
        if len(si) == 0 or len(ai) == 0:
            raise KeyError((wind_speed, twa))
        return float(self._table[si[0], ai[0]])

    def boat_speed(self, wind_speed: float, twa: float) -> float:
        """Interpolated boat speed (kts) at ``wind_speed`` kts and ``twa`` degrees."""
        if math.isnan(wind_speed) or math.isnan(twa):
            return math.nan
        if self.is_no_go(twa):
            return 0.0

        point = np.clip([wind_speed, twa], self._lower, self._upper)
        return float(self._interp(point[np.newaxis, :])[0])

    def best_speed(self, wind_speed: float) -> Tuple[float, float]:
        """(twa, boat_speed) of the fastest tabulated angle at ``wind_speed``."""
        speeds = [self.boat_speed(wind_speed, float(a)) for a in self._wind_angles]
        idx = int(np.argmax(speeds))
        return float(self._wind_angles[idx]), speeds[idx]

