"""Public solving interface for hosts (API, CLI, display layers): validity gate, propagation, full solve and candidate hints, plus the board helpers a display layer needs around them."""

# sudoku_tools.py
# Every entry point validates shapes/coordinates at the boundary and works on
# copies; inputs are never mutated.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from types_sudoku import Board, Candidates, Grid, Move

from . import solver_core
from .constraints import ConstraintTracker
from .propagator import Propagator
from .search import BacktrackingSearch
from .solver_core import (
    EMPTY,
    SIZE,
    as_grid,
    check_board,
    check_cell,
    check_digit,
    check_grid,
    clone_board,
    find_duplicates,
    peers,
    rc_to_key,
)

log = logging.getLogger(__name__)

SOLVED = "solved"
NO_SOLUTION = "no_solution"
INVALID_INPUT = "invalid_input"


@dataclass
class SolveResult:
    """Outcome of ``solve``: a completed grid, or the reason there is none."""

    status: str
    grid: Optional[Grid] = None

    @property
    def solved(self) -> bool:
        return self.status == SOLVED


def _is_board(grid_or_board: Any) -> bool:
    try:
        return isinstance(grid_or_board[0][0], dict)
    except (TypeError, IndexError, KeyError):
        return False


def _checked_grid(grid_or_board: Any) -> Grid:
    if _is_board(grid_or_board):
        check_board(grid_or_board)
    else:
        check_grid(grid_or_board)
    return as_grid(grid_or_board)


# ---------------------------------------------------------------------------
# board <-> grid
# ---------------------------------------------------------------------------


def grid_to_board(grid: Grid, source: str = "user") -> Board:
    check_grid(grid)
    return [[{"value": v, "source": source if v != EMPTY else None} for v in row] for row in grid]


def board_to_grid(board: Board) -> Grid:
    check_board(board)
    return as_grid(board)


def apply_solution(board: Board, solution: Grid) -> Board:
    """Copy solution digits into the empty cells of ``board`` as system cells; filled cells stay as they are."""
    check_board(board)
    check_grid(solution)
    out = clone_board(board)
    for r in range(SIZE):
        for c in range(SIZE):
            if out[r][c]["value"] == EMPTY and solution[r][c] != EMPTY:
                out[r][c] = {"value": solution[r][c], "source": "system"}
    return out


# ---------------------------------------------------------------------------
# boundary operations
# ---------------------------------------------------------------------------


def is_valid(grid: Grid | Board) -> bool:
    return solver_core.is_valid(_checked_grid(grid))


def valid_candidates(grid: Grid | Board, row: int, col: int) -> set[int]:
    """Digits still legal at (row, col); empty for a filled cell."""
    plain = _checked_grid(grid)
    check_cell(row, col)
    if plain[row][col] != EMPTY:
        return set()
    return ConstraintTracker(plain).valid_numbers(row, col)


def propagate(board: Board, *, max_rounds: Optional[int] = None) -> Board:
    """Fill every logically forced cell. Invalid boards come back untouched (same object).

    A session that hits a contradiction stops filling, and the candidates it
    had narrowed are lost with it. A fresh session over its board may start
    wider and fill more, so sessions are repeated until one fills nothing;
    the result is then a fixed point for the next call as well.
    """
    check_board(board)
    if not solver_core.is_valid(board):
        log.warning("propagate: board holds duplicates, leaving it unchanged")
        return board
    while True:
        prop = Propagator(board, max_rounds=max_rounds)
        out = prop.run()
        if not prop.filled:
            return out
        board = out


def solve(grid: Grid | Board, *, max_steps: Optional[int] = None, max_rounds: Optional[int] = None) -> SolveResult:
    """Complete the grid: propagation first, backtracking for whatever is left."""
    plain = _checked_grid(grid)
    if not solver_core.is_valid(plain):
        log.warning("solve: grid holds duplicates")
        return SolveResult(INVALID_INPUT)
    prop = Propagator(grid_to_board(plain), max_rounds=max_rounds)
    settled = prop.run()
    if prop.contradiction:
        return SolveResult(NO_SOLUTION)
    found = BacktrackingSearch(as_grid(settled), max_steps=max_steps).solve()
    if found is None:
        return SolveResult(NO_SOLUTION)
    return SolveResult(SOLVED, found)


def solve_board(board: Board, *, max_steps: Optional[int] = None) -> tuple[SolveResult, Board]:
    """Solve and write the result back as system cells. The board is returned unchanged when there is no solution."""
    result = solve(board, max_steps=max_steps)
    if not result.solved:
        return result, board
    return result, apply_solution(board, result.grid)


# ---------------------------------------------------------------------------
# display helpers
# ---------------------------------------------------------------------------


def compute_candidates_tool(current: Grid | Board) -> Dict[str, Candidates]:
    """Compute candidate digits for each empty cell in the current grid. Returns a dict like {'candidates': {'r1c2': [1, 2, 5], ...}}; empty when the grid holds duplicates."""
    plain = _checked_grid(current)
    tracker = ConstraintTracker(plain)
    if not tracker.ok:
        return {"candidates": {}}
    return {"candidates": {rc_to_key(r, c): sorted(tracker.valid_numbers(r, c)) for r, c in tracker.empty_cells()}}


def next_moves(
    current: Board,
    *,
    max_moves: Optional[int] = None,
    max_rounds: Optional[int] = None,
) -> Dict[str, Any]:
    """Run propagation and report the deductions it made, in order, with
    visualization-friendly fields, plus the settled board and its remaining
    candidates.
    """
    check_board(current)
    if max_moves is not None and max_moves < 0:
        raise ValueError(f"max_moves must be >= 0, got {max_moves}")
    if not solver_core.is_valid(current):
        return {"moves": [], "snapshot": {"current": clone_board(current), "candidates": {}}}
    prop = Propagator(current, max_rounds=max_rounds)
    prop.run()
    moves: list[Move] = prop.moves if max_moves is None else prop.moves[:max_moves]
    return {"moves": moves, "snapshot": {"current": prop.board, "candidates": prop.snapshot_candidates()}}


def is_valid_move(grid: Grid | Board, row: int, col: int, value: Any) -> bool:
    """Whether writing ``value`` at (row, col) keeps its row, column and box free of repeats. 0 clears and is always fine."""
    plain = _checked_grid(grid)
    check_cell(row, col)
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    if value == EMPTY:
        return True
    if not 1 <= value <= SIZE:
        return False
    return all(plain[r][c] != value for r, c in peers(row, col))


def edit_cell(board: Board, row: int, col: int, value: int) -> Board:
    """Apply a user edit. System cells are read-only; the board comes back unchanged for them."""
    check_board(board)
    check_cell(row, col)
    check_digit(value)
    if board[row][col]["source"] == "system":
        return board
    out = clone_board(board)
    out[row][col] = {"value": value, "source": None if value == EMPTY else "user"}
    return out


def sanity_check(original: Grid, current: Grid) -> Dict:
    check_grid(original)
    check_grid(current)
    issues = []
    for r in range(SIZE):
        for c in range(SIZE):
            if original[r][c] != EMPTY and current[r][c] not in (EMPTY, original[r][c]):
                issues.append({"type": "given_overwritten", "cell": rc_to_key(r, c),
                               "given": original[r][c], "found": current[r][c]})
    issues.extend(find_duplicates(current))
    return {"ok": len(issues) == 0, "issues": issues}
