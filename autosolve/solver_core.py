"""Core Sudoku utilities shared by the tracker, the propagator and the search: index math, unit iterators, peers, boundary checks and the validity gate."""

# solver_core.py
# Grid is a 9x9 list of lists of ints (0..9). 0 = blank.
# Rows, columns and blocks are 0-based internally; cell keys ('r1c1') are
# 1-based because they are shown to people.
from __future__ import annotations

from typing import Any

from types_sudoku import Board, Grid

from .errors import InvalidGridError

Cell = tuple[int, int]  # (row, col) 0-based

SIZE = 9
EMPTY = 0
DIGITS = tuple(range(1, SIZE + 1))
SOURCES = ("user", "system")


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r < SIZE and 0 <= c < SIZE


def rc_to_key(r: int, c: int) -> str:
    return f"r{r + 1}c{c + 1}"


def key_to_rc(key: str) -> Cell:
    r = int(key.split("c")[0][1:])
    c = int(key.split("c")[1])
    return (r - 1, c - 1)


def clone_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def clone_board(board: Board) -> Board:
    return [[dict(cell) for cell in row] for row in board]


def block_index(r: int, c: int) -> int:
    return (r // 3) * 3 + c // 3


def row_cells(r: int) -> list[Cell]:
    return [(r, c) for c in range(SIZE)]


def col_cells(c: int) -> list[Cell]:
    return [(r, c) for r in range(SIZE)]


def block_cells(b: int) -> list[Cell]:
    r0 = 3 * (b // 3)
    c0 = 3 * (b % 3)
    return [(r0 + i, c0 + j) for i in range(3) for j in range(3)]


def peers(r: int, c: int) -> set[Cell]:
    """Return the set of peer coordinates for a given cell (same row, column, and 3x3 block)."""
    ps = set(row_cells(r)) | set(col_cells(c)) | set(block_cells(block_index(r, c)))
    ps.discard((r, c))
    return ps


def as_grid(grid_or_board: Grid | Board) -> Grid:
    """Plain digits of a Grid or Board (boards are unwrapped, grids copied)."""
    out = []
    for row in grid_or_board:
        out.append([cell["value"] if isinstance(cell, dict) else cell for cell in row])
    return out


# ---------------------------------------------------------------------------
# boundary checks
# ---------------------------------------------------------------------------


def check_cell(r: Any, c: Any) -> None:
    if not isinstance(r, int) or not isinstance(c, int) or isinstance(r, bool) or isinstance(c, bool):
        raise InvalidGridError(f"cell coordinates must be integers, got ({r!r}, {c!r})")
    if not in_bounds(r, c):
        raise InvalidGridError(f"cell ({r}, {c}) is outside the 9x9 grid")


def check_digit(value: Any, allow_empty: bool = True) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidGridError(f"cell value must be an integer, got {value!r}")
    lo = EMPTY if allow_empty else 1
    if not lo <= value <= SIZE:
        raise InvalidGridError(f"cell value {value} is outside {lo}..{SIZE}")


def _check_shape(rows: Any, what: str) -> None:
    if not isinstance(rows, (list, tuple)) or len(rows) != SIZE:
        raise InvalidGridError(f"{what} must have {SIZE} rows")
    for i, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or len(row) != SIZE:
            raise InvalidGridError(f"{what} row {i} must have {SIZE} cells")


def check_grid(grid: Any) -> None:
    """Reject anything that is not a 9x9 grid of ints in 0..9."""
    _check_shape(grid, "grid")
    for row in grid:
        for value in row:
            check_digit(value)


def check_board(board: Any) -> None:
    """Reject malformed boards: wrong shape, bad values, or provenance on empty cells."""
    _check_shape(board, "board")
    for r, row in enumerate(board):
        for c, cell in enumerate(row):
            if not isinstance(cell, dict) or "value" not in cell:
                raise InvalidGridError(f"board cell {rc_to_key(r, c)} must be a mapping with a 'value'")
            check_digit(cell["value"])
            source = cell.get("source")
            if cell["value"] == EMPTY and source is not None:
                raise InvalidGridError(f"empty cell {rc_to_key(r, c)} cannot carry source {source!r}")
            if cell["value"] != EMPTY and source not in SOURCES:
                raise InvalidGridError(f"cell {rc_to_key(r, c)} has unknown source {source!r}")


# ---------------------------------------------------------------------------
# validity
# ---------------------------------------------------------------------------


def is_valid(grid: Grid | Board) -> bool:
    """True unless some row, column or block holds the same digit twice. One scan, no mutation."""
    rows = [set() for _ in range(SIZE)]
    cols = [set() for _ in range(SIZE)]
    blocks = [set() for _ in range(SIZE)]
    for r, row in enumerate(as_grid(grid)):
        for c, d in enumerate(row):
            if d == EMPTY:
                continue
            b = block_index(r, c)
            if d in rows[r] or d in cols[c] or d in blocks[b]:
                return False
            rows[r].add(d)
            cols[c].add(d)
            blocks[b].add(d)
    return True


def _duplicates_in_unit(vals):
    seen = set()
    dups = set()
    for v in vals:
        if v == EMPTY:
            continue
        if v in seen:
            dups.add(v)
        seen.add(v)
    return dups


def find_duplicates(grid: Grid) -> list[dict]:
    """Describe every unit holding a repeated digit, for error highlighting."""
    issues = []
    units = (
        [(f"r{i + 1}", row_cells(i)) for i in range(SIZE)]
        + [(f"c{i + 1}", col_cells(i)) for i in range(SIZE)]
        + [(f"b{i + 1}", block_cells(i)) for i in range(SIZE)]
    )
    for label, cells in units:
        vals = [grid[r][c] for r, c in cells]
        dups = _duplicates_in_unit(vals)
        if dups:
            bad = [rc_to_key(r, c) for r, c in cells if grid[r][c] in dups]
            issues.append({"type": "duplicate", "unit": label, "digits": sorted(dups), "cells": bad})
    return issues
