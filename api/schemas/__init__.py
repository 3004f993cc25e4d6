"""
Regatta API Pydantic schemas.

Re-exports all schema classes for imports like:
    from api.schemas import Position, EstimateResponse, ...
"""

# Common
from .common import Position, BuoyModel  # noqa: F401

# Estimates and path search
from .course import (  # noqa: F401
    BuoyListResponse,
    EstimateResponse,
    PathStepModel,
    PathModel,
    PathSearchResponse,
)
