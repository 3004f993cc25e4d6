"""Regatta data loading (CSV files -> engine snapshots)."""

from .loader import (
    RegattaData,
    build_course_graph,
    load_buoys,
    load_legs,
    load_polar,
    load_regatta_data,
    load_wind,
    parse_coordinate,
    parse_decimal,
)

__all__ = [
    'RegattaData',
    'build_course_graph',
    'load_buoys',
    'load_legs',
    'load_polar',
    'load_regatta_data',
    'load_wind',
    'parse_coordinate',
    'parse_decimal',
]
