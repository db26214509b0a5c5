import pytest
from keygrid.grid import NO_CELL, Cell, CellKind, GridError, GridModel, key_index, lock_index


def test_classify_all_kinds():
    grid = GridModel(["@.#", "aA."])
    assert grid.classify(Cell(0, 0)) is CellKind.START
    assert grid.classify(Cell(0, 1)) is CellKind.FREE
    assert grid.classify(Cell(0, 2)) is CellKind.WALL
    assert grid.classify(Cell(1, 0)) is CellKind.KEY
    assert grid.classify(Cell(1, 1)) is CellKind.LOCK
    assert all(grid.is_legal(c) for c in grid.cells())


def test_dimensions_and_start():
    grid = GridModel(["@.a..", "###.#", "b.A.B"])
    assert grid.rows == 3
    assert grid.cols == 5
    assert grid.start == Cell(0, 0)
    assert grid.num_keys == 2
    assert grid.num_locks == 2


def test_matching_key_for_lock():
    grid = GridModel(["@.a..", "###.#", "b.A.B"])
    assert grid.matching_key_for_lock(Cell(2, 2)) == Cell(0, 2)
    assert grid.matching_key_for_lock(Cell(2, 4)) == Cell(2, 0)
    assert grid.key_cell("b") == Cell(2, 0)
    assert grid.lock_cell("A") == Cell(2, 2)


def test_unused_letters_have_no_cell():
    grid = GridModel(["@aA"])
    assert grid.key_cell("z") == NO_CELL
    assert not grid.lock_cell("Z").is_valid()


def test_rows_as_character_lists():
    grid = GridModel([["@", ".", "a"]])
    assert grid.char_at(Cell(0, 2)) == "a"


def test_letter_indices():
    assert lock_index("A") == 0
    assert lock_index("Z") == 25
    assert key_index("a") == 0
    assert key_index("z") == 25
    with pytest.raises(GridError):
        lock_index("a")
    with pytest.raises(GridError):
        key_index("A")


def test_duplicate_lock_letter_keeps_first():
    grid = GridModel(["@aA", "..A"])
    assert grid.lock_cell("A") == Cell(0, 2)
    assert grid.num_locks == 1


@pytest.mark.parametrize("rows, message", [
    ([], "no rows"),
    ([""], "no columns"),
    (["@..", ".."], "not rectangular"),
    (["@.?"], "illegal character"),
    (["@1a"], "illegal character"),
    (["..a", "..A"], "no start"),
    (["@.@"], "more than one start"),
    (["@.A"], "do not match"),
    (["@aB", "..A"], "locks without key: B"),
    (["@aa", "A.."], "more than once"),
])
def test_validation_errors(rows, message):
    with pytest.raises(GridError, match=message):
        GridModel(rows)


def test_grid_error_is_value_error():
    with pytest.raises(ValueError):
        GridModel(["#"])


def test_key_without_lock_allowed_by_default():
    grid = GridModel(["@.a"])
    assert grid.num_keys == 1
    assert grid.num_locks == 0


def test_strict_pairing_rejects_key_without_lock():
    with pytest.raises(GridError, match="keys without lock: a"):
        GridModel(["@.a"], strict_pairing=True)
    grid = GridModel(["@.a", "..A"], strict_pairing=True)
    assert grid.num_keys == grid.num_locks == 1


def test_single_string_is_not_a_grid():
    with pytest.raises(GridError, match="not a single string"):
        GridModel("@.a")
