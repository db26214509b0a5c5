from __future__ import annotations

from enum import IntEnum

from keygrid.grid import Cell


class Direction(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    # Entry direction of the synthetic first visit; never produced by neighbors()
    NONE = 4


STEP_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

_OFFSETS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


def neighbors(cell: Cell, rows: int, cols: int) -> list[tuple[Direction, Cell]]:
    """Orthogonal neighbours of cell inside a rows x cols grid, in up/down/left/right order."""
    result = []
    for direction in STEP_DIRECTIONS:
        dr, dc = _OFFSETS[direction]
        nr, nc = cell.row + dr, cell.col + dc
        if 0 <= nr < rows and 0 <= nc < cols:
            result.append((direction, Cell(nr, nc)))
    return result
