"""Performance estimate and path search API schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import BuoyModel


class BuoyListResponse(BaseModel):
    count: int
    buoys: List[BuoyModel]


class EstimateResponse(BaseModel):
    """Boat performance sailing between two buoys at a race hour."""
    from_buoy: str
    to_buoy: str
    time: float
    estimated_speed: float = Field(..., description="Boat speed in knots")
    course_bearing: float = Field(..., description="Initial course bearing in degrees")
    wind_direction: float = Field(..., description="Direction the wind comes from, degrees")
    relative_bearing: float = Field(..., description="Angle between course and wind, 0-180")
    wind_speed: float = Field(..., description="Wind speed in knots")
    sailing_mode: str
    is_zero_distance: bool = False


class PathStepModel(BaseModel):
    from_buoy: str
    to_buoy: str
    distance: float
    speed: float
    elapsed_hours: float
    start_time: float
    end_time: float
    cumulative_hours: float
    cumulative_distance: float
    sailing_mode: str


class PathModel(BaseModel):
    start: str
    end: str
    buoys: List[str]
    steps: List[PathStepModel]
    total_distance: float
    total_hours: float
    end_time: float


class PathSearchResponse(BaseModel):
    """Result of a path exploration or targeted path search."""
    start: str
    target: Optional[str] = None
    time: float
    steps: int
    max_paths: int
    count: int
    truncated: bool = Field(False, description="True when more paths existed than max_paths allowed")
    paths: List[PathModel]
