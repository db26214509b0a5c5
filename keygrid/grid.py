from __future__ import annotations

from enum import Enum
from typing import Iterator, NamedTuple

NUM_LETTERS = 26

WALL_CHAR = "#"
FREE_CHAR = "."
START_CHAR = "@"


class GridError(ValueError):
    """Raised when a grid violates one of the construction constraints."""


class Cell(NamedTuple):
    row: int
    col: int

    def is_valid(self) -> bool:
        return self.row >= 0


NO_CELL = Cell(-1, -1)


class CellKind(Enum):
    WALL = "wall"
    FREE = "free"
    START = "start"
    LOCK = "lock"
    KEY = "key"


def is_lock_char(ch: str) -> bool:
    return "A" <= ch <= "Z"


def is_key_char(ch: str) -> bool:
    return "a" <= ch <= "z"


def lock_index(ch: str) -> int:
    if not is_lock_char(ch):
        raise GridError(f"{ch!r} is not a lock letter")
    return ord(ch) - ord("A")


def key_index(ch: str) -> int:
    if not is_key_char(ch):
        raise GridError(f"{ch!r} is not a key letter")
    return ord(ch) - ord("a")


def _kind_of(ch: str) -> CellKind | None:
    if ch == WALL_CHAR:
        return CellKind.WALL
    if ch == FREE_CHAR:
        return CellKind.FREE
    if ch == START_CHAR:
        return CellKind.START
    if is_lock_char(ch):
        return CellKind.LOCK
    if is_key_char(ch):
        return CellKind.KEY
    return None


class GridModel:
    """Read-only classification of a rectangular character grid.

    Rows are given as strings (or sequences of single characters). The
    constructor validates the whole grid and raises GridError on the first
    violated constraint: shape, alphabet, a single start cell, at most one
    cell per key letter and a key for every lock letter. With strict_pairing
    every key letter must have a lock as well.
    """

    __slots__ = ("_rows", "_num_rows", "_num_cols", "_start", "_lock_cells", "_key_cells", "_num_keys", "_num_locks")

    def __init__(self, rows, strict_pairing: bool = False):
        if isinstance(rows, str):
            raise GridError("rows must be a sequence of row strings, not a single string")
        if not rows:
            raise GridError("grid has no rows")

        self._rows: tuple[str, ...] = tuple("".join(r) for r in rows)
        self._num_rows = len(self._rows)
        self._num_cols = len(self._rows[0])
        if self._num_cols == 0:
            raise GridError("grid has no columns")

        for r, row in enumerate(self._rows):
            if len(row) != self._num_cols:
                raise GridError(
                    f"grid is not rectangular: row {r} has {len(row)} columns, expected {self._num_cols}"
                )

        self._start = NO_CELL
        self._lock_cells: list[Cell] = [NO_CELL] * NUM_LETTERS
        self._key_cells: list[Cell] = [NO_CELL] * NUM_LETTERS

        for cell in self.cells():
            if not self.is_legal(cell):
                raise GridError(f"illegal character {self.char_at(cell)!r} at {tuple(cell)}")
            ch = self.char_at(cell)
            kind = _kind_of(ch)
            if kind is CellKind.START:
                if self._start.is_valid():
                    raise GridError(f"grid has more than one start cell: {tuple(self._start)} and {tuple(cell)}")
                self._start = cell
            elif kind is CellKind.LOCK:
                idx = lock_index(ch)
                # First occurrence in row-major order wins
                if not self._lock_cells[idx].is_valid():
                    self._lock_cells[idx] = cell
            elif kind is CellKind.KEY:
                idx = key_index(ch)
                if self._key_cells[idx].is_valid():
                    raise GridError(f"key {ch!r} appears more than once: {tuple(self._key_cells[idx])} and {tuple(cell)}")
                self._key_cells[idx] = cell

        if not self._start.is_valid():
            raise GridError(f"grid has no start cell {START_CHAR!r}")

        locks = {chr(ord("a") + i) for i, c in enumerate(self._lock_cells) if c.is_valid()}
        keys = {chr(ord("a") + i) for i, c in enumerate(self._key_cells) if c.is_valid()}
        unmatched_locks = "".join(sorted(locks - keys)).upper()
        unmatched_keys = "".join(sorted(keys - locks))
        if unmatched_locks or (strict_pairing and unmatched_keys):
            raise GridError(
                f"lock and key letters do not match (locks without key: {unmatched_locks or '-'}, "
                f"keys without lock: {unmatched_keys or '-'})"
            )

        self._num_keys = len(keys)
        self._num_locks = len(locks)

    def __repr__(self) -> str:
        return f"GridModel({self._num_rows}x{self._num_cols}, keys={self._num_keys})"

    @property
    def rows(self) -> int:
        return self._num_rows

    @property
    def cols(self) -> int:
        return self._num_cols

    @property
    def start(self) -> Cell:
        return self._start

    @property
    def num_keys(self) -> int:
        return self._num_keys

    @property
    def num_locks(self) -> int:
        return self._num_locks

    def row_strings(self) -> tuple[str, ...]:
        return self._rows

    def cells(self) -> Iterator[Cell]:
        for r in range(self._num_rows):
            for c in range(self._num_cols):
                yield Cell(r, c)

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.row < self._num_rows and 0 <= cell.col < self._num_cols

    def char_at(self, cell: Cell) -> str:
        return self._rows[cell.row][cell.col]

    def classify(self, cell: Cell) -> CellKind:
        kind = _kind_of(self.char_at(cell))
        if kind is None:
            raise GridError(f"illegal character {self.char_at(cell)!r} at {tuple(cell)}")
        return kind

    def is_legal(self, cell: Cell) -> bool:
        return _kind_of(self.char_at(cell)) is not None

    def is_wall(self, cell: Cell) -> bool:
        return self.char_at(cell) == WALL_CHAR

    def is_free(self, cell: Cell) -> bool:
        return self.char_at(cell) == FREE_CHAR

    def is_start(self, cell: Cell) -> bool:
        return self.char_at(cell) == START_CHAR

    def is_lock(self, cell: Cell) -> bool:
        return is_lock_char(self.char_at(cell))

    def is_key(self, cell: Cell) -> bool:
        return is_key_char(self.char_at(cell))

    def lock_cell(self, letter: str) -> Cell:
        return self._lock_cells[lock_index(letter.upper())]

    def key_cell(self, letter: str) -> Cell:
        return self._key_cells[key_index(letter.lower())]

    def matching_key_for_lock(self, lock_cell: Cell) -> Cell:
        return self._key_cells[lock_index(self.char_at(lock_cell))]
