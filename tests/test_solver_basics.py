# tests/test_solver_basics.py
import pytest

from autosolve.errors import InvalidGridError, SearchBudgetExceeded
from autosolve.propagator import Propagator
from autosolve.sudoku_tools import (
    INVALID_INPUT,
    NO_SOLUTION,
    SOLVED,
    apply_solution,
    board_to_grid,
    compute_candidates_tool,
    edit_cell,
    grid_to_board,
    is_valid,
    is_valid_move,
    next_moves,
    propagate,
    sanity_check,
    solve,
    solve_board,
    valid_candidates,
)


# No duplicates and no solution; one propagation session runs into a dead end
# partway, after which a fresh session over its board can still fill cells.
DEAD_END = [
    [0, 8, 6, 0, 0, 0, 0, 0, 3],
    [0, 0, 9, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 9, 7, 0, 6, 0, 0],
    [0, 0, 0, 8, 0, 0, 0, 0, 0],
    [0, 9, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 1, 5, 3, 9],
    [6, 7, 0, 0, 2, 0, 0, 0, 0],
    [2, 0, 0, 0, 0, 5, 0, 0, 0],
]


def has_no_repeats(grid):
    units = [[(r, c) for c in range(9)] for r in range(9)]
    units += [[(r, c) for r in range(9)] for c in range(9)]
    units += [[(3 * (b // 3) + i, 3 * (b % 3) + j) for i in range(3) for j in range(3)] for b in range(9)]
    for unit in units:
        vals = [grid[r][c] for r, c in unit if grid[r][c]]
        if len(vals) != len(set(vals)):
            return False
    return True


# --- validity gate ---------------------------------------------------------


def test_empty_grid_is_valid(empty):
    assert is_valid(empty)


@pytest.mark.parametrize(
    "cells",
    [
        [(0, 1), (0, 7)],  # same row
        [(2, 4), (8, 4)],  # same column
        [(3, 3), (5, 5)],  # same box
    ],
)
def test_duplicates_are_invalid(empty, cells):
    for r, c in cells:
        empty[r][c] = 5
    assert not is_valid(empty)
    assert not is_valid(grid_to_board(empty))


def test_same_digit_in_unrelated_cells_is_valid(empty):
    empty[0][0] = 5
    empty[4][4] = 5
    empty[8][8] = 5
    assert is_valid(empty)


# --- propagate ---------------------------------------------------------------


def test_propagate_empty_grid_changes_nothing(empty):
    board = grid_to_board(empty)
    assert propagate(board) == board


def test_propagate_returns_invalid_board_untouched(empty):
    empty[0][1] = 5
    empty[0][7] = 5
    board = grid_to_board(empty)
    assert propagate(board) is board


def test_propagate_fills_single_gap(solution):
    solution[6][3] = 0
    out = propagate(grid_to_board(solution))
    assert out[6][3] == {"value": 5, "source": "system"}


def test_propagate_completes_easy_puzzle(easy):
    out = propagate(grid_to_board(easy))
    grid = board_to_grid(out)
    assert all(v for row in grid for v in row)
    assert has_no_repeats(grid)
    assert grid == solve(easy).grid
    for r in range(9):
        for c in range(9):
            assert valid_candidates(grid, r, c) == set()


def test_propagate_is_idempotent(easy, hard):
    for grid in (easy, hard):
        once = propagate(grid_to_board(grid))
        assert propagate(once) == once


def test_propagate_is_idempotent_at_a_dead_end():
    assert is_valid(DEAD_END)
    once = propagate(grid_to_board(DEAD_END))
    assert propagate(once) == once
    assert has_no_repeats(board_to_grid(once))
    prop = Propagator(once)
    prop.run()
    assert prop.filled == 0


def test_solve_stops_at_a_dead_end():
    prop = Propagator(grid_to_board(DEAD_END))
    prop.run()
    assert prop.contradiction is not None
    assert solve(DEAD_END).status == NO_SOLUTION


def test_propagate_keeps_filled_cells(hard):
    board = grid_to_board(hard)
    board[2][2] = {"value": board[2][2]["value"], "source": "system"}
    out = propagate(board)
    for r in range(9):
        for c in range(9):
            if board[r][c]["value"]:
                assert out[r][c] == board[r][c]
    assert has_no_repeats(board_to_grid(out))


def test_propagate_stalls_on_hard_puzzle(hard):
    grid = board_to_grid(propagate(grid_to_board(hard)))
    empties = [(r, c) for r in range(9) for c in range(9) if grid[r][c] == 0]
    assert empties == [(3, 5), (3, 8), (4, 5), (4, 8)]
    assert all(len(valid_candidates(grid, r, c)) >= 2 for r, c in empties)


def test_propagate_does_not_need_to_detect_unsolvable(unsolvable):
    out = propagate(grid_to_board(unsolvable))
    grid = board_to_grid(out)
    assert has_no_repeats(grid)
    assert grid[0][8] == 0


# --- solve -------------------------------------------------------------------


def test_solve_empty_grid(empty):
    result = solve(empty)
    assert result.solved
    assert result.status == SOLVED
    assert all(v for row in result.grid for v in row)
    assert has_no_repeats(result.grid)


def test_solve_hard_puzzle_keeps_givens(hard, solution):
    before = [row[:] for row in hard]
    result = solve(hard)
    assert result.solved
    assert hard == before
    for r in range(9):
        for c in range(9):
            if hard[r][c]:
                assert result.grid[r][c] == hard[r][c]
    assert has_no_repeats(result.grid)
    assert result.grid == solution


def test_solve_reports_no_solution(unsolvable):
    result = solve(unsolvable)
    assert result.status == NO_SOLUTION
    assert not result.solved
    assert result.grid is None


def test_solve_reports_invalid_input(empty):
    empty[4][0] = 5
    empty[4][6] = 5
    result = solve(empty)
    assert result.status == INVALID_INPUT
    assert result.grid is None


def test_solve_budget(empty):
    with pytest.raises(SearchBudgetExceeded):
        solve(empty, max_steps=3)


def test_solve_board_tags_new_cells(hard):
    board = grid_to_board(hard)
    result, out = solve_board(board)
    assert result.solved
    assert out[0][0] == {"value": 5, "source": "system"}
    assert out[0][1] == {"value": 3, "source": "user"}


def test_solve_board_without_solution_returns_board(unsolvable):
    board = grid_to_board(unsolvable)
    result, out = solve_board(board)
    assert result.status == NO_SOLUTION
    assert out is board


# --- host helpers ------------------------------------------------------------


def test_valid_candidates(empty):
    empty[0][0] = 1
    empty[0][5] = 2
    empty[7][2] = 3
    assert valid_candidates(empty, 0, 2) == {4, 5, 6, 7, 8, 9}
    assert valid_candidates(empty, 0, 0) == set()


def test_compute_candidates_tool(solution):
    solution[0][0] = 0
    solution[0][1] = 0
    cands = compute_candidates_tool(solution)["candidates"]
    assert cands == {"r1c1": [5], "r1c2": [3]}


def test_compute_candidates_tool_invalid(empty):
    empty[0][0] = 1
    empty[1][1] = 1
    assert compute_candidates_tool(empty) == {"candidates": {}}


def test_next_moves_trace(easy):
    result = next_moves(grid_to_board(easy), max_moves=3)
    seq = result["moves"]
    assert len(seq) == 3
    assert [m["index"] for m in seq] == [1, 2, 3]
    m0 = seq[0]
    assert m0["type"] in ("placement", "elimination")
    if m0["type"] == "placement":
        assert "cell" in m0 and "digit" in m0
    assert result["snapshot"]["candidates"] == {}


def test_next_moves_rejects_negative_limit(easy):
    with pytest.raises(ValueError):
        next_moves(grid_to_board(easy), max_moves=-1)


def test_next_moves_with_zero_limit(easy):
    assert next_moves(grid_to_board(easy), max_moves=0)["moves"] == []


def test_next_moves_on_invalid_board(empty):
    empty[0][0] = 2
    empty[0][1] = 2
    result = next_moves(grid_to_board(empty))
    assert result["moves"] == []


def test_apply_solution_only_fills_empty(hard, solution):
    board = grid_to_board(hard)
    wrong = [row[:] for row in solution]
    wrong[0][1] = 9  # a filled cell must not be overwritten
    out = apply_solution(board, wrong)
    assert out[0][1] == {"value": 3, "source": "user"}
    assert out[3][5] == {"value": 1, "source": "system"}


@pytest.mark.parametrize(
    "row,col,value,expected",
    [(0, 2, 4, True), (0, 2, 5, False), (0, 2, 8, False), (0, 2, 1, False), (0, 2, 0, True), (0, 2, 10, False)],
)
def test_is_valid_move(empty, row, col, value, expected):
    empty[0][0] = 5  # same row
    empty[8][2] = 8  # same column
    empty[1][1] = 1  # same box
    assert is_valid_move(empty, row, col, value) is expected


def test_edit_cell(empty):
    board = grid_to_board(empty)
    out = edit_cell(board, 2, 2, 7)
    assert out[2][2] == {"value": 7, "source": "user"}
    assert board[2][2] == {"value": 0, "source": None}
    cleared = edit_cell(out, 2, 2, 0)
    assert cleared[2][2] == {"value": 0, "source": None}


def test_edit_cell_leaves_system_cells(solution):
    solution[0][0] = 0
    board = propagate(grid_to_board(solution))
    assert edit_cell(board, 0, 0, 3) is board


def test_sanity_check(solution):
    current = [row[:] for row in solution]
    current[0][0] = 3  # given overwritten and a duplicate in row 1 / box 1
    report = sanity_check(solution, current)
    assert not report["ok"]
    kinds = {issue["type"] for issue in report["issues"]}
    assert kinds == {"given_overwritten", "duplicate"}
    units = {issue.get("unit") for issue in report["issues"] if issue["type"] == "duplicate"}
    assert {"r1", "b1"} <= units
    assert sanity_check(solution, solution) == {"ok": True, "issues": []}


# --- boundary rejection ------------------------------------------------------


@pytest.mark.parametrize(
    "grid",
    [
        [[0] * 9 for _ in range(8)],
        [[0] * 8 for _ in range(9)],
        [[0] * 8 + [10]] + [[0] * 9 for _ in range(8)],
        [[0] * 8 + [-1]] + [[0] * 9 for _ in range(8)],
        [[0] * 8 + ["5"]] + [[0] * 9 for _ in range(8)],
    ],
)
def test_malformed_grids_are_rejected(grid):
    with pytest.raises(InvalidGridError):
        is_valid(grid)
    with pytest.raises(InvalidGridError):
        solve(grid)


@pytest.mark.parametrize("row,col", [(-1, 0), (0, 9), (9, 9)])
def test_malformed_coordinates_are_rejected(empty, row, col):
    with pytest.raises(InvalidGridError):
        valid_candidates(empty, row, col)


def test_malformed_board_sources_are_rejected(empty):
    board = grid_to_board(empty)
    board[0][0] = {"value": 4, "source": "robot"}
    with pytest.raises(InvalidGridError):
        propagate(board)
    board[0][0] = {"value": 0, "source": "user"}
    with pytest.raises(InvalidGridError):
        propagate(board)
