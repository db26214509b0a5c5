from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from keygrid.grid import NUM_LETTERS, Cell, GridModel, key_index, lock_index
from keygrid.neighbors import STEP_DIRECTIONS, Direction


class PathInvariantError(AssertionError):
    """The search pushed or popped a move its own filters should have rejected."""


@dataclass(frozen=True)
class PathSnapshot:
    """Immutable copy of a search path, kept as the best-known result."""

    moves: tuple[tuple[Cell, Direction], ...]

    def step_count(self) -> int:
        return len(self.moves)

    def cells(self) -> list[Cell]:
        return [cell for cell, _ in self.moves]

    def __lt__(self, other) -> bool:
        return self.step_count() < other.step_count()


class SearchPath:
    """The live stack of the depth-first search.

    Every visit() pushes one (cell, direction) move and unvisit() pops it,
    restoring the direction markers and the key counters exactly. A key is
    collected while at least one visit to its cell is still on the stack.
    """

    def __init__(self, grid: GridModel):
        self._grid = grid
        self._moves: list[tuple[Cell, Direction]] = []
        self._markers = np.zeros((len(STEP_DIRECTIONS), grid.rows, grid.cols), dtype=bool)
        self._key_hits = [0] * NUM_LETTERS
        self._keys_collected = 0

    def __len__(self) -> int:
        return len(self._moves)

    def __lt__(self, other) -> bool:
        return self.step_count() < other.step_count()

    @property
    def keys_collected(self) -> int:
        return self._keys_collected

    def key_hits(self) -> tuple[int, ...]:
        return tuple(self._key_hits)

    def markers(self) -> np.ndarray:
        return self._markers.copy()

    def moves(self) -> tuple[tuple[Cell, Direction], ...]:
        return tuple(self._moves)

    def visit(self, cell: Cell, direction: Direction):
        self._moves.append((cell, direction))

        if direction is not Direction.NONE:
            if self._markers[direction, cell.row, cell.col]:
                raise PathInvariantError(f"{tuple(cell)} entered twice moving {direction.name}")
            self._markers[direction, cell.row, cell.col] = True

        if self._grid.is_key(cell):
            idx = key_index(self._grid.char_at(cell))
            if self._key_hits[idx] < 0:
                raise PathInvariantError(f"negative hit count for key at {tuple(cell)}")
            self._key_hits[idx] += 1
            if self._key_hits[idx] == 1:
                self._keys_collected += 1

    def unvisit(self):
        if not self._moves:
            raise PathInvariantError("unvisit on an empty path")

        cell, direction = self._moves.pop()

        # The start entry never sets a marker
        if direction is not Direction.NONE:
            if not self._markers[direction, cell.row, cell.col]:
                raise PathInvariantError(f"{tuple(cell)} has no {direction.name} marker to clear")
            self._markers[direction, cell.row, cell.col] = False

        if self._grid.is_key(cell):
            idx = key_index(self._grid.char_at(cell))
            if self._key_hits[idx] <= 0:
                raise PathInvariantError(f"hit count underflow for key at {tuple(cell)}")
            self._key_hits[idx] -= 1
            if self._key_hits[idx] == 0:
                self._keys_collected -= 1

    def visited(self, cell: Cell, direction: Direction) -> bool:
        return bool(self._markers[direction, cell.row, cell.col])

    def key_currently_collected_for_lock(self, lock_cell: Cell) -> bool:
        return self._key_hits[lock_index(self._grid.char_at(lock_cell))] > 0

    def is_complete(self) -> bool:
        return self._keys_collected == self._grid.num_keys

    def step_count(self) -> int:
        return len(self._moves)

    def snapshot(self) -> PathSnapshot:
        return PathSnapshot(tuple(self._moves))
