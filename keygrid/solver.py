from __future__ import annotations

import json
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field

from keygrid.grid import Cell, GridError, GridModel
from keygrid.metrics import SearchStats
from keygrid.neighbors import Direction, neighbors
from keygrid.path import PathSnapshot, SearchPath
from keygrid.settings import Settings, settings

logger = logging.getLogger("keygrid")


def parse_grid(text: str) -> list[str]:
    """Split grid text into rows. A JSON array of strings is accepted too."""
    stripped = text.strip()
    if stripped.startswith("["):
        try:
            rows = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise GridError(f"invalid JSON grid: {e}") from e
        if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
            raise GridError("JSON grid must be an array of strings")
        return rows

    rows = [line.rstrip() for line in text.splitlines()]
    # Drop blank lines at either end only; a blank line inside is a bad row
    while rows and not rows[0]:
        rows.pop(0)
    while rows and not rows[-1]:
        rows.pop()
    return rows


def load_grid(path: str) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_grid(f.read())


@dataclass
class SolveResult:
    moves: int
    path: tuple[Cell, ...] = ()
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def found(self) -> bool:
        return self.moves >= 0


# The recursion limit is process-wide; concurrent searches share one raised limit
# and the original is put back only when the last of them finishes.
_limit_lock = threading.Lock()
_active_searches = 0
_saved_limit = 0


@contextmanager
def _recursion_limit(depth: int):
    global _active_searches, _saved_limit
    with _limit_lock:
        if _active_searches == 0:
            _saved_limit = sys.getrecursionlimit()
        _active_searches += 1
        if depth > sys.getrecursionlimit():
            sys.setrecursionlimit(depth)
    try:
        yield
    finally:
        with _limit_lock:
            _active_searches -= 1
            if _active_searches == 0:
                sys.setrecursionlimit(_saved_limit)


class Solver:
    """Exhaustive backtracking search for the shortest walk collecting every key.

    A walk may revisit cells, but never enters the same cell moving in the
    same direction twice while that entry is still on the stack. Locks are
    passable only while their key has been visited on the current walk.
    """

    def __init__(self, grid: GridModel, cfg: Settings = settings, prune: bool | None = None, trace: bool | None = None):
        if grid.rows * grid.cols > cfg.MAX_GRID_CELLS:
            raise GridError(f"grid has {grid.rows * grid.cols} cells, limit is {cfg.MAX_GRID_CELLS}")
        self.grid = grid
        self.cfg = cfg
        self.prune = cfg.PRUNE_NON_IMPROVING if prune is None else prune
        self.trace = cfg.TRACE_SEARCH if trace is None else trace
        self.stats = SearchStats()
        self._path = SearchPath(grid)
        self._best: PathSnapshot | None = None

    @property
    def best(self) -> PathSnapshot | None:
        return self._best

    def solve(self) -> SolveResult:
        grid = self.grid
        # One frame per live move; at most one move per (direction, cell) plus the start
        max_depth = 4 * grid.rows * grid.cols + 1
        with _recursion_limit(max_depth + self.cfg.RECURSION_HEADROOM):
            self._recurse(grid.start, Direction.NONE)

        if self._best is None:
            logger.info("No path collects all %d keys (%d visits)", grid.num_keys, self.stats.visits)
            return SolveResult(-1, (), self.stats)

        moves = self._best.step_count() - 1
        logger.info("Shortest path collecting %d keys: %d moves (%d visits)", grid.num_keys, moves, self.stats.visits)
        return SolveResult(moves, tuple(self._best.cells()), self.stats)

    def _recurse(self, cell: Cell, direction: Direction):
        path = self._path
        stats = self.stats
        trace = self.trace

        if trace:
            logger.debug("Visit %s via %s", tuple(cell), direction.name)
        path.visit(cell, direction)
        stats.visits += 1
        depth = path.step_count()
        if depth > stats.max_depth:
            stats.max_depth = depth

        if path.is_complete():
            stats.completions += 1
            if self._best is None or path < self._best:
                if trace:
                    logger.debug("New best path with %d steps", depth)
                self._best = path.snapshot()
                stats.best_updates += 1
        elif self.prune and self._best is not None and depth + 1 >= self._best.step_count():
            # Any completion from here has at least depth + 1 steps
            stats.pruned += 1
        else:
            grid = self.grid
            for child_dir, child in neighbors(cell, grid.rows, grid.cols):
                if path.visited(child, child_dir):
                    stats.skipped_visited += 1
                    if trace:
                        logger.debug("Skip %s via %s: visited", tuple(child), child_dir.name)
                    continue
                if grid.is_wall(child):
                    stats.skipped_wall += 1
                    if trace:
                        logger.debug("Skip %s: wall", tuple(child))
                    continue
                if grid.is_lock(child) and not path.key_currently_collected_for_lock(child):
                    stats.skipped_lock += 1
                    if trace:
                        logger.debug("Skip %s: lock %s without key", tuple(child), grid.char_at(child))
                    continue
                self._recurse(child, child_dir)

        path.unvisit()
        if trace:
            logger.debug("Unvisit %s", tuple(cell))


def solve_grid(rows, cfg: Settings = settings, prune: bool | None = None, trace: bool | None = None) -> SolveResult:
    grid = GridModel(rows, cfg.STRICT_KEY_PAIRING)
    return Solver(grid, cfg, prune=prune, trace=trace).solve()


def shortest_path_all_keys(rows) -> int:
    """Minimum number of moves that collects every key, or -1."""
    return solve_grid(rows).moves
