"""
Shared pytest fixtures for Regatta tests.

The reference course puts buoy A at (0°, 0°) and buoy B at (0°, 1°), so
the course A -> B runs due east (bearing 90°). The reference polar has a
0° row of zeros and 6.0 kts at 10 kts / 90°.
"""

import os
from pathlib import Path as FsPath
from typing import List

import pytest

os.environ.setdefault("ENVIRONMENT", "development")

from regatta.data.loader import RegattaData, build_course_graph  # noqa: E402
from regatta.optimization.performance import EstimateResult, SailingMode  # noqa: E402
from regatta.optimization.polar_model import PolarModel  # noqa: E402
from regatta.optimization.wind_model import WindModel, WindSample  # noqa: E402
from regatta.routes.course import Buoy, Coordinate, CourseGraph, Leg  # noqa: E402


# ---------------------------------------------------------------------------
# Buoys and course graphs
# ---------------------------------------------------------------------------

@pytest.fixture
def buoy_a() -> Buoy:
    return Buoy("A", Coordinate(0.0, 0.0), buoy_type="Startboei")


@pytest.fixture
def buoy_b() -> Buoy:
    return Buoy("B", Coordinate(0.0, 1.0), buoy_type="Boei")


@pytest.fixture
def two_buoy_graph(buoy_a, buoy_b) -> CourseGraph:
    """A <-> B, 60 nm each way."""
    leg = Leg("A", "B", 60.0)
    return CourseGraph([buoy_a, buoy_b], [leg, leg.reversed()])


def _complete_graph(names: List[str], distance: float = 1.0) -> CourseGraph:
    """Every ordered pair of buoys joined by a leg, buoys on a small grid."""
    buoys = [Buoy(n, Coordinate(0.1 * (i // 2), 0.1 * (i % 2))) for i, n in enumerate(names)]
    legs = [Leg(a, b, distance) for a in names for b in names if a != b]
    return CourseGraph(buoys, legs)


@pytest.fixture
def four_node_graph() -> CourseGraph:
    return _complete_graph(["A", "B", "C", "D"])


@pytest.fixture
def complete_graph():
    """Factory for fully connected course graphs."""
    return _complete_graph


# ---------------------------------------------------------------------------
# Wind and polar
# ---------------------------------------------------------------------------

@pytest.fixture
def polar() -> PolarModel:
    return PolarModel(
        wind_speeds=[6.0, 10.0, 14.0],
        wind_angles=[0.0, 45.0, 90.0, 135.0, 180.0],
        boat_speeds=[
            [0.0, 0.0, 0.0],
            [3.0, 4.5, 5.0],
            [4.0, 6.0, 7.0],
            [3.5, 5.5, 6.5],
            [2.5, 4.0, 5.0],
        ],
    )


@pytest.fixture
def wind_from_east() -> WindModel:
    return WindModel([WindSample(hour=0.0, speed_kts=10.0, direction_deg=90.0)])


@pytest.fixture
def wind_from_north() -> WindModel:
    return WindModel([WindSample(hour=0.0, speed_kts=10.0, direction_deg=0.0)])


def _make_estimate(speed: float, mode: SailingMode = SailingMode.BEAM_REACH) -> EstimateResult:
    return EstimateResult(
        estimated_speed=speed,
        course_bearing=90.0,
        wind_direction=0.0,
        relative_bearing=90.0,
        wind_speed=10.0,
        sailing_mode=mode,
    )


@pytest.fixture
def make_estimate():
    """Factory for estimates with a given boat speed."""
    return _make_estimate


@pytest.fixture
def constant_estimator():
    """Factory for leg estimators that sail every leg at one speed."""
    def factory(speed: float):
        def estimator(leg: Leg, time: float) -> EstimateResult:
            return _make_estimate(speed)
        return estimator
    return factory


# ---------------------------------------------------------------------------
# Race data snapshots
# ---------------------------------------------------------------------------

@pytest.fixture
def race_data(buoy_a, buoy_b, polar, wind_from_north) -> RegattaData:
    """A/B course with a third buoy C north of A; start line S -> A from the west."""
    buoy_c = Buoy("C", Coordinate(1.0, 0.0), buoy_type="Boei")
    buoy_s = Buoy("S", Coordinate(0.0, -0.1), buoy_type="Startboei")
    buoys = [buoy_a, buoy_b, buoy_c, buoy_s]
    starts = [Leg("S", "A", 6.0, is_start=True)]
    legs = [Leg("A", "B", 60.0), Leg("B", "C", 85.0), Leg("A", "C", 60.0)]
    return RegattaData(
        buoys=buoys,
        starts=starts,
        legs=legs,
        wind_model=wind_from_north,
        polar_model=polar,
        graph=build_course_graph(buoys, starts, legs),
    )


@pytest.fixture
def race_data_dir(tmp_path) -> FsPath:
    """The data files of a small race written the way race committees ship them."""
    (tmp_path / "buoys.csv").write_text(
        "Name,Type,Description,Lat_min,Long_min\n"
        "START,Startschip,Committee boat,\"53° 10,520'\",\"5° 23,100'\"\n"
        "VL1,Lateral,Vliestroom,\"53° 12,040'\",\"5° 20,290'\"\n"
        "TS12,Lateral,Texelstroom,\"53° 5,020'\",\"5° 20,293'\"\n"
        "GHOST,Lateral,Not yet laid,,\n",
        encoding="utf-8",
    )
    (tmp_path / "starts.csv").write_text(
        "From,To,Distance,MaxNumber\n"
        "START,VL1,\"2,1\",1\n",
        encoding="utf-8",
    )
    (tmp_path / "legs.csv").write_text(
        "From,To,Distance,MaxNumber\n"
        "VL1,TS12,\"7,2\",2\n"
        "TS12,NOWHERE,\"1,0\",1\n",
        encoding="utf-8",
    )
    (tmp_path / "wind.csv").write_text(
        "Hour,WindSpeed,WindDirection\n"
        "2,12,10\n"
        "0,8,350\n",
        encoding="utf-8",
    )
    (tmp_path / "polars.csv").write_text(
        "twa/tws;6;10;14;\n"
        "0;0;0;0;\n"
        "52;4,72;6,19;6,67\n"
        "90;5,41;7,19;7,62\n"
        "bad;row\n"
        "180;3,34;5,16;6,51\n",
        encoding="utf-8",
    )
    return tmp_path
