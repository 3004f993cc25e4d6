"""Performance estimation and path exploration over a regatta course."""

from .wind_model import WindModel, WindSample
from .polar_model import PolarModel, PolarEntry
from .performance import (
    EstimateResult,
    SailingMode,
    SailingModeThresholds,
    estimate_performance,
)
from .path_explorer import Path, PathExplorer, PathStep, rank_paths
from .engine import RegattaEngine

__all__ = [
    "WindModel",
    "WindSample",
    "PolarModel",
    "PolarEntry",
    "EstimateResult",
    "SailingMode",
    "SailingModeThresholds",
    "estimate_performance",
    "Path",
    "PathExplorer",
    "PathStep",
    "rank_paths",
    "RegattaEngine",
]
