"""
Regatta performance engine.

One immutable snapshot (course graph, wind model, polar model, sailing
mode thresholds) behind the three operations presentation layers call:
``estimate``, ``explore`` and ``find_target``.
"""

import logging
import math
from typing import List, Optional

from regatta.errors import DegenerateInputError
from regatta.optimization.path_explorer import Path, PathExplorer
from regatta.optimization.performance import (
    DEFAULT_THRESHOLDS,
    EstimateResult,
    SailingModeThresholds,
    estimate_performance,
)
from regatta.optimization.polar_model import PolarModel
from regatta.optimization.wind_model import WindModel
from regatta.routes.course import CourseGraph, Leg

logger = logging.getLogger(__name__)


class RegattaEngine:
    """
    Speed estimation and path search over a fixed course, wind and polar.

    Args:
        graph: Course graph (buoys and legs)
        wind_model: Wind over race time
        polar_model: Boat polar
        thresholds: Sailing mode bands (defaults if None)
    """

    def __init__(
        self,
        graph: CourseGraph,
        wind_model: WindModel,
        polar_model: PolarModel,
        thresholds: Optional[SailingModeThresholds] = None,
    ):
        self.graph = graph
        self.wind_model = wind_model
        self.polar_model = polar_model
        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self._explorer = PathExplorer(graph, self._estimate_leg)

    def estimate(self, from_name: str, to_name: str, time: float) -> EstimateResult:
        """Estimate performance sailing from one buoy to another at race hour ``time``."""
        self._check_time(time)
        source = self.graph.buoy(from_name)
        dest = self.graph.buoy(to_name)
        return estimate_performance(
            source.coordinate, dest.coordinate, time,
            self.wind_model, self.polar_model, self.thresholds,
        )

    def estimate_leg(
        self,
        from_name: str,
        to_name: str,
        time: float,
        reverse: bool = False,
    ) -> EstimateResult:
        """Like ``estimate``; ``reverse`` sails the pair the other way round."""
        if reverse:
            from_name, to_name = to_name, from_name
        return self.estimate(from_name, to_name, time)

    def explore(
        self,
        start: str,
        time: float,
        max_steps: int,
        max_paths: Optional[int] = None,
    ) -> List[Path]:
        self._check_time(time)
        return self._explorer.explore(start, time, max_steps, max_paths)

    def find_target(
        self,
        start: str,
        target: str,
        time: float,
        max_steps: int,
        max_paths: Optional[int] = None,
    ) -> List[Path]:
        self._check_time(time)
        return self._explorer.find_target(start, target, time, max_steps, max_paths)

    def _estimate_leg(self, leg: Leg, time: float) -> EstimateResult:
        return self.estimate(leg.from_buoy, leg.to_buoy, time)

    @staticmethod
    def _check_time(time: float) -> None:
        if not math.isfinite(time) or time < 0:
            raise DegenerateInputError(f"Race time must be a finite, non-negative hour, got {time}")
