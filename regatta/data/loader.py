"""
Regatta CSV loader.

Reads the race data files and turns them into the immutable snapshots the
engine works on:

- buoys.csv    Name, Type, Description, Lat_min, Long_min
- starts.csv   From, To, Distance, MaxNumber   (start-line legs, one-way)
- legs.csv     From, To, Distance, MaxNumber   (course legs, both ways)
- wind.csv     Hour, WindSpeed, WindDirection
- polars.csv   semicolon table, header ``twa/tws;6;8;...``, one row per TWA

Coordinates are written as degrees and decimal minutes (``53° 5,020'``) or
degrees, minutes and seconds (``53° 5' 1.20'``). Decimal commas are
accepted everywhere.
"""

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from regatta.errors import ConfigurationError
from regatta.optimization.engine import RegattaEngine
from regatta.optimization.performance import SailingModeThresholds
from regatta.optimization.polar_model import PolarModel
from regatta.optimization.wind_model import WindModel, WindSample
from regatta.routes.course import Buoy, Coordinate, CourseGraph, Leg

logger = logging.getLogger(__name__)

BUOYS_FILE = "buoys.csv"
STARTS_FILE = "starts.csv"
LEGS_FILE = "legs.csv"
WIND_FILE = "wind.csv"
POLARS_FILE = "polars.csv"

# Minutes+seconds form: 20' 17.64'
_MIN_SEC_RE = re.compile(r"^(?P<min>[\d.,]+)\s*'\s+(?P<sec>[\d.,]+)\s*['\"]*$")


def parse_decimal(value: Any) -> float:
    """Parse a number that may use a decimal comma (``"1,5"`` -> 1.5)."""
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            raise ConfigurationError("Empty numeric field")
        try:
            result = float(text)
        except ValueError:
            raise ConfigurationError(f"Invalid number: {value!r}") from None
    if not math.isfinite(result):
        raise ConfigurationError(f"Non-finite number: {value!r}")
    return result


def parse_coordinate(text: str) -> float:
    """
    Parse ``53° 5,020'`` or ``53° 5' 1.20'`` into decimal degrees.

    A leading minus sign applies to the whole value.
    """
    cleaned = str(text).strip().strip('"')
    parts = cleaned.split("°")
    if len(parts) != 2:
        raise ConfigurationError(f"Invalid coordinate format: {text!r}")

    degrees_str, minutes_part = parts[0].strip(), parts[1].strip()
    degrees = parse_decimal(degrees_str)
    negative = degrees_str.startswith("-")

    match = _MIN_SEC_RE.match(minutes_part)
    if match:
        minutes = parse_decimal(match.group("min")) + parse_decimal(match.group("sec")) / 60.0
    else:
        minutes = parse_decimal(minutes_part.rstrip("'").strip() or "0")

    value = abs(degrees) + minutes / 60.0
    return -value if negative else value


def _safe_str(value: Any) -> Optional[str]:
    """Convert value to stripped string, returning None for NaN/empty."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    s = str(value).strip()
    return s if s else None


# Decimal-minute columns win over minute-second columns when both are filled
_LAT_COLUMNS = ("Lat_min", "Lat_min_sec")
_LON_COLUMNS = ("Long_min", "Long_min_sec", "Long_min_sec)")


def _first_value(row: Dict[str, Any], columns: List[str]) -> Optional[str]:
    for column in columns:
        value = _safe_str(row.get(column))
        if value is not None:
            return value
    return None


def _read_table(path: Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Regatta data file not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [c.strip() for c in df.columns]
    return df


def _require_columns(df: pd.DataFrame, path: Path, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ConfigurationError(f"{Path(path).name}: missing columns {missing}")


def load_buoys(path: Path) -> List[Buoy]:
    """Load buoys; rows without coordinates are skipped with a warning."""
    df = _read_table(path)
    _require_columns(df, path, ["Name"])

    lat_cols = [c for c in _LAT_COLUMNS if c in df.columns]
    lon_cols = [c for c in _LON_COLUMNS if c in df.columns]
    if not lat_cols or not lon_cols:
        raise ConfigurationError(f"{Path(path).name}: no latitude/longitude columns")

    buoys: List[Buoy] = []
    for row_idx, row in enumerate(df.to_dict("records")):
        name = _safe_str(row.get("Name"))
        lat_text = _first_value(row, lat_cols)
        lon_text = _first_value(row, lon_cols)
        if name is None:
            logger.warning(f"{Path(path).name} row {row_idx}: skipped (no name)")
            continue
        if lat_text is None or lon_text is None:
            logger.warning(f"Buoy {name}: skipped (no coordinates)")
            continue
        try:
            coordinate = Coordinate(parse_coordinate(lat_text), parse_coordinate(lon_text))
        except ConfigurationError as e:
            raise ConfigurationError(f"Buoy {name}: {e}") from e

        buoys.append(Buoy(
            name=name,
            coordinate=coordinate,
            buoy_type=_safe_str(row.get("Type")),
            description=_safe_str(row.get("Description")),
        ))

    logger.info(f"Loaded {len(buoys)} buoys from {path}")
    return buoys


def load_legs(path: Path, is_start: bool = False) -> List[Leg]:
    """Load start lines or course legs as written in the file (one direction)."""
    df = _read_table(path)
    _require_columns(df, path, ["From", "To", "Distance"])

    legs: List[Leg] = []
    for row in df.to_dict("records"):
        from_name, to_name = _safe_str(row["From"]), _safe_str(row["To"])
        if from_name is None or to_name is None:
            logger.warning(f"{Path(path).name}: skipped row without endpoints: {row}")
            continue
        max_number = _safe_str(row.get("MaxNumber"))
        legs.append(Leg(
            from_buoy=from_name,
            to_buoy=to_name,
            distance_nm=parse_decimal(row["Distance"]),
            max_number=int(parse_decimal(max_number)) if max_number else 1,
            is_start=is_start,
        ))

    logger.info(f"Loaded {len(legs)} {'start lines' if is_start else 'legs'} from {path}")
    return legs


def load_wind(path: Path) -> WindModel:
    df = _read_table(path)
    _require_columns(df, path, ["Hour", "WindSpeed", "WindDirection"])

    samples = [
        WindSample(
            hour=parse_decimal(row["Hour"]),
            speed_kts=parse_decimal(row["WindSpeed"]),
            direction_deg=parse_decimal(row["WindDirection"]),
        )
        for row in df.to_dict("records")
    ]
    return WindModel(samples)


def load_polar(path: Path) -> PolarModel:
    """Load a semicolon-separated polar table. Malformed rows are skipped."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Polar file not found: {path}")

    df = pd.read_csv(path, sep=";", header=None, dtype=str, keep_default_na=False,
                     engine="python", on_bad_lines=_skip_bad_polar_line)
    if df.empty:
        raise ConfigurationError(f"Empty polar data file: {path}")

    header = _trim_cells(df.iloc[0].tolist())
    wind_speeds = [parse_decimal(v) for v in header[1:] if v]

    wind_angles: List[float] = []
    boat_speeds: List[List[float]] = []
    for row_idx in range(1, len(df)):
        cells = _trim_cells(df.iloc[row_idx].tolist())
        if not cells:
            continue
        if len(cells) != len(wind_speeds) + 1 or any(c is None for c in cells):
            logger.warning(f"{path.name} row {row_idx}: skipped (expected {len(wind_speeds) + 1} fields)")
            continue
        wind_angles.append(parse_decimal(cells[0]))
        boat_speeds.append([parse_decimal(c) for c in cells[1:]])

    return PolarModel(wind_speeds, wind_angles, boat_speeds)


def _trim_cells(values: List[Any]) -> List[Optional[str]]:
    """Stripped cells with trailing blanks (from a trailing ``;``) removed."""
    cells = [_safe_str(v) for v in values]
    while cells and cells[-1] is None:
        cells.pop()
    return cells


def _skip_bad_polar_line(fields: List[str]) -> None:
    logger.warning(f"Polar table: skipped malformed line {fields}")
    return None


def build_course_graph(
    buoys: List[Buoy],
    starts: List[Leg],
    legs: List[Leg],
) -> CourseGraph:
    """
    Build the directed course graph.

    Start lines become one-way edges; course legs can be sailed both ways.
    Records naming unknown buoys are skipped with a warning.
    """
    known = {b.name for b in buoys}
    edges: List[Leg] = []

    def usable(leg: Leg) -> bool:
        if leg.from_buoy in known and leg.to_buoy in known:
            return True
        logger.warning(f"Skipped leg {leg.from_buoy} -> {leg.to_buoy}: unknown buoy")
        return False

    for start in starts:
        if usable(start):
            edges.append(start)
    for leg in legs:
        if usable(leg):
            edges.append(leg)
            edges.append(leg.reversed())

    return CourseGraph(buoys, edges)


@dataclass
class RegattaData:
    """Everything loaded for one race."""
    buoys: List[Buoy]
    starts: List[Leg]
    legs: List[Leg]
    wind_model: WindModel
    polar_model: PolarModel
    graph: CourseGraph

    def engine(self, thresholds: Optional[SailingModeThresholds] = None) -> RegattaEngine:
        return RegattaEngine(self.graph, self.wind_model, self.polar_model, thresholds)

    def summary(self) -> Dict[str, Any]:
        return {
            "buoys": len(self.buoys),
            "start_lines": len(self.starts),
            "legs": len(self.legs),
            "graph_edges": self.graph.leg_count,
            "wind_samples": len(self.wind_model),
            "polar_wind_speeds": len(self.polar_model.wind_speeds),
            "polar_wind_angles": len(self.polar_model.wind_angles),
        }


def load_regatta_data(data_dir: Path) -> RegattaData:
    """Load all race files from ``data_dir``."""
    data_dir = Path(data_dir)
    logger.info(f"Loading regatta data from {data_dir}")

    buoys = load_buoys(data_dir / BUOYS_FILE)
    starts = load_legs(data_dir / STARTS_FILE, is_start=True)
    legs = load_legs(data_dir / LEGS_FILE)

    return RegattaData(
        buoys=buoys,
        starts=starts,
        legs=legs,
        wind_model=load_wind(data_dir / WIND_FILE),
        polar_model=load_polar(data_dir / POLARS_FILE),
        graph=build_course_graph(buoys, starts, legs),
    )
