#!/usr/bin/env python3
"""
Regatta CLI Tool.

Command-line interface over the race data:
- Data summary
- Performance estimates between buoys
- Path exploration and targeted path search
- Running the API server

Usage:
    python -m api.cli show
    python -m api.cli estimate START FINISH --time 2.5
    python -m api.cli paths START --time 0 --steps 3
    python -m api.cli target START FINISH --time 0 --steps 4
    python -m api.cli serve --port 8000
"""
import argparse
import sys
from typing import List, Optional

# Ensure imports work
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from regatta.config import settings as regatta_settings
from regatta.data.loader import RegattaData, load_regatta_data
from regatta.errors import RegattaError
from regatta.optimization.path_explorer import Path as SailedPath, rank_paths
from regatta.routes.geometry import haversine_distance


def _load(data_dir: str) -> RegattaData:
    return load_regatta_data(Path(data_dir))


def show(data_dir: str) -> None:
    """Print a summary of the race data."""
    data = _load(data_dir)

    print("\n" + "=" * 60)
    print(f"REGATTA DATA ({data_dir})")
    print("=" * 60)
    for key, value in data.summary().items():
        print(f"{key.replace('_', ' ').capitalize():<20} {value}")
    start, end = data.wind_model.time_range
    print(f"{'Wind window':<20} {start:g}h - {end:g}h")
    print("-" * 60)
    print(f"{'Buoy':<20} {'Type':<16} {'Lat':>10} {'Lon':>10}")
    for buoy in data.buoys:
        print(f"{buoy.name[:18]:<20} {(buoy.buoy_type or '-')[:14]:<16} {buoy.lat:>10.5f} {buoy.lon:>10.5f}")
    print("=" * 60 + "\n")


def estimate(data_dir: str, from_name: str, to_name: str, time: float, reverse: bool = False) -> None:
    """Print the performance estimate for one leg."""
    engine = _load(data_dir).engine(regatta_settings.sailing_mode_thresholds())
    result = engine.estimate_leg(from_name, to_name, time, reverse=reverse)
    if reverse:
        from_name, to_name = to_name, from_name
    source, dest = engine.graph.buoy(from_name), engine.graph.buoy(to_name)
    distance = haversine_distance(source.lat, source.lon, dest.lat, dest.lon)

    print(f"\n{from_name} -> {to_name} at {time:g}h")
    print(f"  Distance:         {distance:6.2f} nm (great circle)")
    print(f"  Course bearing:   {result.course_bearing:6.1f} deg")
    print(f"  Wind:             {result.wind_speed:6.1f} kts from {result.wind_direction:.1f} deg")
    print(f"  Relative bearing: {result.relative_bearing:6.1f} deg")
    print(f"  Sailing mode:     {result.sailing_mode.value}")
    print(f"  Boat speed:       {result.estimated_speed:6.2f} kts\n")


def _print_paths(paths: List[SailedPath], limit: int) -> None:
    ranked = rank_paths(paths)
    print(f"\n{len(paths)} path(s) found, fastest {min(limit, len(ranked))}:")
    print("-" * 80)
    for path in ranked[:limit]:
        print(f"{path.total_hours:7.2f}h {path.total_distance_nm:7.2f}nm  {' -> '.join(path.buoys)}")
    print("-" * 80 + "\n")


def paths(data_dir: str, start: str, time: float, steps: int, max_paths: int, show_count: int) -> None:
    """Enumerate paths from a buoy."""
    engine = _load(data_dir).engine(regatta_settings.sailing_mode_thresholds())
    _print_paths(engine.explore(start, time, steps, max_paths), show_count)


def target(data_dir: str, start: str, target_name: str, time: float, steps: int,
           max_paths: int, show_count: int) -> None:
    """Enumerate paths from a buoy that end at a target buoy."""
    engine = _load(data_dir).engine(regatta_settings.sailing_mode_thresholds())
    _print_paths(engine.find_target(start, target_name, time, steps, max_paths), show_count)


def serve(host: str, port: int) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port)


def _add_search_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--time", type=float, default=0.0, help="Race hour (default: 0)")
    parser.add_argument(
        "--steps",
        type=int,
        default=3,
        help=f"Maximum legs per path, 1-{regatta_settings.max_steps_limit} (default: 3)"
    )
    parser.add_argument(
        "--max-paths",
        type=int,
        default=regatta_settings.max_paths_limit,
        help=f"Stop after this many paths (default: {regatta_settings.max_paths_limit})"
    )
    parser.add_argument("--show", type=int, default=10, help="Number of fastest paths to print (default: 10)")


def main(argv: Optional[List[str]] = None) -> None:
    from api.config import settings as api_settings

    parser = argparse.ArgumentParser(
        description="Regatta CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Summarize the race data:
    python -m api.cli show

  Estimate a leg at race hour 2.5:
    python -m api.cli estimate START FINISH --time 2.5

  Fastest paths of up to 4 legs ending at FINISH:
    python -m api.cli target START FINISH --time 0 --steps 4

  Run the API server:
    python -m api.cli serve --port 8000
        """
    )
    parser.add_argument(
        "--data-dir",
        default=regatta_settings.data_dir,
        help=f"Race data directory (default: {regatta_settings.data_dir})"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # show
    subparsers.add_parser("show", help="Summarize the race data")

    # estimate
    estimate_parser = subparsers.add_parser("estimate", help="Estimate a leg")
    estimate_parser.add_argument("from_buoy", metavar="FROM", help="Buoy to sail from")
    estimate_parser.add_argument("to_buoy", metavar="TO", help="Buoy to sail to")
    estimate_parser.add_argument("--time", type=float, default=0.0, help="Race hour (default: 0)")
    estimate_parser.add_argument("--reverse", action="store_true", help="Sail the leg from TO to FROM")

    # paths
    paths_parser = subparsers.add_parser("paths", help="Enumerate paths from a buoy")
    paths_parser.add_argument("start", help="Buoy to start from")
    _add_search_arguments(paths_parser)

    # target
    target_parser = subparsers.add_parser("target", help="Enumerate paths ending at a buoy")
    target_parser.add_argument("start", help="Buoy to start from")
    target_parser.add_argument("target", help="Buoy the paths must end at")
    _add_search_arguments(target_parser)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=api_settings.api_host, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=api_settings.api_port, help="Port")

    args = parser.parse_args(argv)
    regatta_settings.configure_logging()

    try:
        if args.command == "show":
            show(args.data_dir)
        elif args.command == "estimate":
            estimate(args.data_dir, args.from_buoy, args.to_buoy, args.time, args.reverse)
        elif args.command == "paths":
            paths(args.data_dir, args.start, args.time, args.steps, args.max_paths, args.show)
        elif args.command == "target":
            target(args.data_dir, args.start, args.target, args.time, args.steps,
                   args.max_paths, args.show)
        elif args.command == "serve":
            serve(args.host, args.port)
        else:
            parser.print_help()
            sys.exit(1)
    except (RegattaError, FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
