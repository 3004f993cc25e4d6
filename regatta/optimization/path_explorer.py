"""
Depth-bounded path search over the course graph.

Two modes share one depth-first traversal core:

- ``explore``: every simple path of 1..max_steps legs from a start buoy
- ``find_target``: only those simple paths that end on a target buoy

A buoy never repeats within one path. Each leg is timed with the speed
estimate at the moment the boat starts sailing it, so the wind a leg sees
depends on how long the legs before it took.

This is exhaustive enumeration within the step budget, not a shortest-path
search. The cost grows combinatorially with ``max_steps`` on dense graphs;
``max_paths`` caps the number of results collected.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from regatta.optimization.performance import EstimateResult
from regatta.routes.course import CourseGraph, Leg

logger = logging.getLogger(__name__)

# (leg, departure time) -> estimate for that leg
LegEstimator = Callable[[Leg, float], EstimateResult]


@dataclass(frozen=True)
class PathStep:
    """One traversed leg with its timing."""
    leg: Leg
    speed_kts: float
    elapsed_hours: float
    start_time: float             # hours since race start
    end_time: float
    cumulative_hours: float       # since path start
    cumulative_distance_nm: float
    estimate: EstimateResult

    def to_dict(self) -> Dict:
        return {
            "from": self.leg.from_buoy,
            "to": self.leg.to_buoy,
            "distance": self.leg.distance_nm,
            "speed": self.speed_kts,
            "elapsed_hours": self.elapsed_hours,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "cumulative_hours": self.cumulative_hours,
            "cumulative_distance": self.cumulative_distance_nm,
            "sailing_mode": self.estimate.sailing_mode.value,
        }


@dataclass(frozen=True)
class Path:
    """An ordered, immutable sequence of steps from a common start."""
    start: str
    start_time: float
    steps: Tuple[PathStep, ...] = ()

    @property
    def end(self) -> str:
        return self.steps[-1].leg.to_buoy if self.steps else self.start

    @property
    def buoys(self) -> List[str]:
        return [self.start] + [s.leg.to_buoy for s in self.steps]

    @property
    def total_hours(self) -> float:
        return self.steps[-1].cumulative_hours if self.steps else 0.0

    @property
    def total_distance_nm(self) -> float:
        return self.steps[-1].cumulative_distance_nm if self.steps else 0.0

    @property
    def end_time(self) -> float:
        return self.start_time + self.total_hours

    def __len__(self) -> int:
        return len(self.steps)

    def to_dict(self) -> Dict:
        return {
            "start": self.start,
            "end": self.end,
            "buoys": self.buoys,
            "steps": [s.to_dict() for s in self.steps],
            "total_distance": self.total_distance_nm,
            "total_hours": self.total_hours,
            "end_time": self.end_time,
        }


def rank_paths(paths: List[Path]) -> List[Path]:
    """Order paths fastest first, shorter distance breaking ties."""
    return sorted(paths, key=lambda p: (p.total_hours, p.total_distance_nm, len(p)))


class PathExplorer:
    """
    Depth-first path enumeration with a per-call visited set.

    The explorer holds only read-only references; every call owns its own
    traversal state, so one instance can serve concurrent callers.
    """

    def __init__(self, graph: CourseGraph, estimator: LegEstimator):
        self.graph = graph
        self.estimator = estimator

    def explore(
        self,
        start: str,
        start_time: float,
        max_steps: int,
        max_paths: Optional[int] = None,
    ) -> List[Path]:
        """All simple paths of 1..``max_steps`` legs leaving ``start``."""
        self.graph.buoy(start)
        self._check_budget(max_steps, max_paths)

        results: List[Path] = []
        if max_steps == 0:
            return results

        self._search(start, start_time, max_steps, max_paths, target=None, results=results)
        logger.info(
            f"explore from {start} at t={start_time:g}h, max_steps={max_steps}: "
            f"{len(results)} paths"
        )
        return results

    def find_target(
        self,
        start: str,
        target: str,
        start_time: float,
        max_steps: int,
        max_paths: Optional[int] = None,
    ) -> List[Path]:
        """Simple paths of at most ``max_steps`` legs from ``start`` ending on ``target``.

        ``target == start`` yields one zero-length path.
        """
        self.graph.buoy(start)
        self.graph.buoy(target)
        self._check_budget(max_steps, max_paths)

        results: List[Path] = []
        if max_steps == 0:
            return results
        if start == target:
            results.append(Path(start=start, start_time=start_time))
            return results

        self._search(start, start_time, max_steps, max_paths, target=target, results=results)
        logger.info(
            f"find_target {start} -> {target} at t={start_time:g}h, max_steps={max_steps}: "
            f"{len(results)} paths"
        )
        return results

    # ------------------------------------------------------------------
    # Traversal core
    # ------------------------------------------------------------------

    @staticmethod
    def _check_budget(max_steps: int, max_paths: Optional[int]) -> None:
        if max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        if max_paths is not None and max_paths < 1:
            raise ValueError(f"max_paths must be at least 1, got {max_paths}")

    def _search(
        self,
        start: str,
        start_time: float,
        max_steps: int,
        max_paths: Optional[int],
        target: Optional[str],
        results: List[Path],
    ) -> None:
        visited: Set[str] = {start}
        steps: List[PathStep] = []

        def full() -> bool:
            return max_paths is not None and len(results) >= max_paths

        def extend(current: str, time: float, hours: float, distance: float) -> None:
            for leg in self.graph.outgoing(current):
                if full():
                    return
                if leg.to_buoy in visited:
                    continue

                step = self._step(leg, time, hours, distance)
                if step is None:
                    continue

                steps.append(step)
                visited.add(leg.to_buoy)
                try:
                    if target is None or leg.to_buoy == target:
                        results.append(Path(start, start_time, tuple(steps)))
                    # Buoys cannot repeat, so a branch that reached the target ends there
                    if len(steps) < max_steps and leg.to_buoy != target:
                        extend(leg.to_buoy, step.end_time,
                               step.cumulative_hours, step.cumulative_distance_nm)
                finally:
                    visited.discard(leg.to_buoy)
                    steps.pop()

        extend(start, start_time, 0.0, 0.0)

    def _step(self, leg: Leg, time: float, hours: float, distance: float) -> Optional[PathStep]:
        """Time one leg departing at ``time``; None prunes the branch."""
        estimate = self.estimator(leg, time)
        speed = estimate.estimated_speed

        if leg.distance_nm == 0:
            elapsed = 0.0
        elif not math.isfinite(speed) or speed <= 0:
            logger.debug(
                f"Pruned {leg.from_buoy} -> {leg.to_buoy} at t={time:g}h: "
                f"speed {speed} ({estimate.sailing_mode.value})"
            )
            return None
        else:
            elapsed = leg.distance_nm / speed

        return PathStep(
            leg=leg,
            speed_kts=speed,
            elapsed_hours=elapsed,
            start_time=time,
            end_time=time + elapsed,
            cumulative_hours=hours + elapsed,
            cumulative_distance_nm=distance + leg.distance_nm,
            estimate=estimate,
        )
