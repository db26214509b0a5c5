"""
Command line solver for key/lock grids.

Usage:
    python -m scripts.solve <grid_file> [--trace] [--no-prune] [--show-path] [--stats]

Examples:
    python -m scripts.solve grids/sample.txt
    echo '@.a' | python -m scripts.solve
    python -m scripts.solve grids/sample.txt --show-path --stats

The grid file holds one row per line: '#' wall, '.' free, '@' start,
'A'-'Z' locks and 'a'-'z' keys. Prints the minimum number of moves that
collects every key, or -1 when no walk does.
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from keygrid.grid import GridError
from keygrid.metrics import StageTimer
from keygrid.settings import settings
from keygrid.solver import load_grid, parse_grid, solve_grid

logger = logging.getLogger("keygrid")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Shortest walk collecting all keys")
    parser.add_argument("grid", nargs="?", default="-",
                        help="Path to a grid file, '-' or omitted for stdin")
    parser.add_argument("--trace", action="store_true",
                        help="Log every visit and skip of the search at DEBUG level")
    parser.add_argument("--no-prune", action="store_true",
                        help="Explore the whole search space instead of abandoning non-improving branches")
    parser.add_argument("--show-path", action="store_true",
                        help="Print the cells of the best walk after the move count")
    parser.add_argument("--stats", action="store_true",
                        help="Print search counters and stage timings")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.trace else settings.LOG_LEVEL
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s", stream=sys.stderr)

    timer = StageTimer()
    try:
        with timer.stage("parse"):
            if args.grid == "-":
                rows = parse_grid(sys.stdin.read())
            else:
                grid_path = Path(args.grid)
                if not grid_path.exists():
                    print(f"Error: {grid_path} does not exist", file=sys.stderr)
                    return 1
                rows = load_grid(str(grid_path))

        with timer.stage("search"):
            result = solve_grid(rows, settings, prune=False if args.no_prune else None, trace=args.trace or None)
    except GridError as e:
        print(f"Invalid grid: {e}", file=sys.stderr)
        return 2

    print(result.moves)

    if args.show_path and result.found:
        print(" ".join(f"({cell.row},{cell.col})" for cell in result.path))

    if args.stats:
        for name, value in result.stats.summary().items():
            print(f"  {name}: {value}")
        for name, ms in timer.summary().items():
            print(f"  {name}_ms: {ms}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
