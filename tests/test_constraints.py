# tests/test_constraints.py
import pytest

from autosolve.constraints import ConstraintTracker
from autosolve.solver_core import block_cells, block_index, peers


@pytest.mark.parametrize(
    "row,col,expected",
    [(0, 0, 0), (0, 8, 2), (4, 4, 4), (5, 2, 3), (8, 0, 6), (8, 8, 8), (2, 3, 1)],
)
def test_block_index(row, col, expected):
    assert block_index(row, col) == expected
    assert ConstraintTracker.block_index(row, col) == expected


def test_blocks_partition_the_grid():
    seen = [cell for b in range(9) for cell in block_cells(b)]
    assert len(seen) == 81
    assert len(set(seen)) == 81
    assert all(block_index(r, c) == b for b in range(9) for r, c in block_cells(b))


def test_peers_count():
    ps = peers(4, 4)
    assert len(ps) == 20
    assert (4, 4) not in ps


def test_initialize_collects_sets(solution):
    solution[4][4] = 0
    tracker = ConstraintTracker(solution)
    assert tracker.ok
    assert tracker.rows[4] == {1, 2, 3, 4, 6, 7, 8, 9}
    assert tracker.cols[4] == {1, 2, 3, 4, 6, 7, 8, 9}
    assert tracker.blocks[4] == {1, 2, 3, 4, 6, 7, 8, 9}
    assert tracker.valid_numbers(4, 4) == {5}
    assert tracker.empty_cells() == [(4, 4)]


def test_initialize_reports_duplicates(empty):
    empty[0][0] = 5
    empty[0][7] = 5
    tracker = ConstraintTracker(empty)
    assert tracker.ok is False
    assert tracker.initialize([[0] * 9 for _ in range(9)]) is True
    assert tracker.ok


def test_valid_numbers_does_not_mutate(empty):
    empty[0][0] = 1
    empty[1][4] = 2
    empty[6][2] = 3
    tracker = ConstraintTracker(empty)
    # row 0 excludes 1, box 0 excludes 1, column 2 excludes 3
    assert tracker.valid_numbers(0, 2) == {2, 4, 5, 6, 7, 8, 9}
    assert tracker.valid_numbers(0, 2) == {2, 4, 5, 6, 7, 8, 9}
    assert tracker.is_empty(0, 2)


def test_place_and_unplace_round_trip(empty):
    tracker = ConstraintTracker(empty)
    tracker.place(3, 4, 7)
    assert tracker.value(3, 4) == 7
    assert tracker.row_has(3, 7) and tracker.col_has(4, 7) and tracker.block_has(4, 7)
    assert 7 not in tracker.valid_numbers(3, 0)
    tracker.unplace(3, 4, 7)
    assert tracker.is_empty(3, 4)
    assert not tracker.row_has(3, 7)
    assert tracker.valid_numbers(3, 0) == set(range(1, 10))


def test_tracker_owns_its_grid(empty):
    tracker = ConstraintTracker(empty)
    tracker.place(0, 0, 9)
    assert empty[0][0] == 0
    snapshot = tracker.grid
    snapshot[0][0] = 1
    assert tracker.value(0, 0) == 9
