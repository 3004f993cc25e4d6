"""
Course API router.

Handles buoy listing, performance estimates between buoys, and
path exploration / targeted path search over the course graph.
"""

import asyncio
import logging
import math
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from api.schemas import (
    BuoyListResponse,
    BuoyModel,
    EstimateResponse,
    PathModel,
    PathSearchResponse,
    PathStepModel,
    Position,
)
from api.state import get_race_state
from regatta.config import settings as regatta_settings
from regatta.errors import ConfigurationError, DegenerateInputError, NotFoundError
from regatta.optimization.engine import RegattaEngine
from regatta.optimization.path_explorer import Path
from regatta.optimization.performance import EstimateResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Course"])

_TIME_QUERY = dict(ge=0, le=regatta_settings.max_race_hours, description="Race hour")
_STEPS_QUERY = dict(ge=1, le=regatta_settings.max_steps_limit, description="Maximum number of legs per path")
_MAX_PATHS_QUERY = dict(ge=1, le=regatta_settings.max_paths_limit, description="Maximum number of paths returned")


def _safe_round(value: float, ndigits: int = 2, fallback: float = 0.0) -> float:
    """Round value, replacing NaN/Inf with fallback to prevent JSON serialization errors."""
    if math.isnan(value) or math.isinf(value):
        return fallback
    return round(value, ndigits)


def _get_engine() -> RegattaEngine:
    try:
        return get_race_state().engine
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=f"Regatta data unavailable: {e}")


def _run(func, *args):
    """Call an engine operation, mapping domain errors to HTTP errors."""
    try:
        return func(*args)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (DegenerateInputError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _estimate_response(from_name: str, to_name: str, time: float, result: EstimateResult) -> EstimateResponse:
    return EstimateResponse(
        from_buoy=from_name,
        to_buoy=to_name,
        time=time,
        estimated_speed=_safe_round(result.estimated_speed),
        course_bearing=_safe_round(result.course_bearing, 1),
        wind_direction=_safe_round(result.wind_direction, 1),
        relative_bearing=_safe_round(result.relative_bearing, 1),
        wind_speed=_safe_round(result.wind_speed),
        sailing_mode=result.sailing_mode.value,
        is_zero_distance=result.is_zero_distance,
    )


def _path_model(path: Path) -> PathModel:
    return PathModel(
        start=path.start,
        end=path.end,
        buoys=path.buoys,
        steps=[
            PathStepModel(
                from_buoy=step.leg.from_buoy,
                to_buoy=step.leg.to_buoy,
                distance=_safe_round(step.leg.distance_nm),
                speed=_safe_round(step.speed_kts),
                elapsed_hours=_safe_round(step.elapsed_hours, 3),
                start_time=_safe_round(step.start_time, 3),
                end_time=_safe_round(step.end_time, 3),
                cumulative_hours=_safe_round(step.cumulative_hours, 3),
                cumulative_distance=_safe_round(step.cumulative_distance_nm),
                sailing_mode=step.estimate.sailing_mode.value,
            )
            for step in path.steps
        ],
        total_distance=_safe_round(path.total_distance_nm),
        total_hours=_safe_round(path.total_hours, 3),
        end_time=_safe_round(path.end_time, 3),
    )


def _search_response(
    start: str,
    target: Optional[str],
    time: float,
    steps: int,
    max_paths: int,
    paths: List[Path],
) -> PathSearchResponse:
    """Build the response; ``paths`` holds up to one path past the cap."""
    truncated = len(paths) > max_paths
    paths = paths[:max_paths]
    return PathSearchResponse(
        start=start,
        target=target,
        time=time,
        steps=steps,
        max_paths=max_paths,
        count=len(paths),
        truncated=truncated,
        paths=[_path_model(p) for p in paths],
    )


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/api/buoys", response_model=BuoyListResponse)
async def list_buoys():
    """List all buoys of the loaded course."""
    engine = _get_engine()
    buoys = [
        BuoyModel(
            name=b.name,
            position=Position(lat=b.lat, lon=b.lon),
            buoy_type=b.buoy_type,
            description=b.description,
        )
        for b in engine.graph.buoys
    ]
    return BuoyListResponse(count=len(buoys), buoys=buoys)


@router.get("/api/estimate", response_model=EstimateResponse)
async def estimate(
    from_: str = Query(..., alias="from", description="Buoy to sail from"),
    to: str = Query(..., description="Buoy to sail to"),
    time: float = Query(..., **_TIME_QUERY),
):
    """
    Estimate boat speed sailing from one buoy towards another.

    The wind at ``time`` is interpolated from the wind schedule and the
    boat speed looked up in the polar at the resulting relative bearing.
    """
    engine = _get_engine()
    result = _run(engine.estimate, from_, to, time)
    return _estimate_response(from_, to, time, result)


@router.get("/api/estimate-leg", response_model=EstimateResponse)
async def estimate_leg(
    from_: str = Query(..., alias="from", description="First buoy of the leg"),
    to: str = Query(..., description="Second buoy of the leg"),
    time: float = Query(..., **_TIME_QUERY),
    reverse: bool = Query(False, description="Sail the leg from 'to' towards 'from'"),
):
    """Estimate a leg in either direction."""
    engine = _get_engine()
    result = _run(engine.estimate_leg, from_, to, time, reverse)
    if reverse:
        return _estimate_response(to, from_, time, result)
    return _estimate_response(from_, to, time, result)


@router.get("/api/find-paths", response_model=PathSearchResponse)
async def find_paths(
    start: str = Query(..., description="Buoy to start from"),
    time: float = Query(..., **_TIME_QUERY),
    steps: int = Query(..., **_STEPS_QUERY),
    max_paths: int = Query(regatta_settings.max_paths_limit, **_MAX_PATHS_QUERY),
):
    """
    Enumerate every simple path of 1 to ``steps`` legs from ``start``.

    Runs in a worker thread; large searches are cut off at ``max_paths``.
    """
    engine = _get_engine()
    # One path past the cap tells whether the search was cut off
    paths = await asyncio.to_thread(_run, engine.explore, start, time, steps, max_paths + 1)
    logger.info(f"find-paths start={start} time={time} steps={steps}: {min(len(paths), max_paths)} paths")
    return _search_response(start, None, time, steps, max_paths, paths)


@router.get("/api/find-targets", response_model=PathSearchResponse)
async def find_targets(
    start: str = Query(..., description="Buoy to start from"),
    target: str = Query(..., description="Buoy the paths must end at"),
    time: float = Query(..., **_TIME_QUERY),
    steps: int = Query(..., **_STEPS_QUERY),
    max_paths: int = Query(regatta_settings.max_paths_limit, **_MAX_PATHS_QUERY),
):
    """Enumerate simple paths from ``start`` that end at ``target``."""
    engine = _get_engine()
    paths = await asyncio.to_thread(_run, engine.find_target, start, target, time, steps, max_paths + 1)
    logger.info(f"find-targets {start}->{target} time={time} steps={steps}: {min(len(paths), max_paths)} paths")
    return _search_response(start, target, time, steps, max_paths, paths)
