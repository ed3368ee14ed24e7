"""Row/column/block bookkeeping of placed digits for one solving session."""

# constraints.py
from __future__ import annotations

from types_sudoku import Grid

from .solver_core import DIGITS, EMPTY, SIZE, Cell, block_index, clone_grid


class ConstraintTracker:
    """Holds the digits already committed to every row, column and block.

    The tracker owns a private copy of the grid. ``initialize`` is the only
    full scan; afterwards the sets are kept current through ``place`` and
    ``unplace``. ``ok`` is False when the grid handed in already broke the
    one-digit-per-unit rule, in which case the sets are incomplete and the
    tracker must not be used for solving.
    """

    def __init__(self, grid: Grid):
        self.ok = self.initialize(grid)

    def initialize(self, grid: Grid) -> bool:
        self._grid = clone_grid(grid)
        self.rows: list[set[int]] = [set() for _ in range(SIZE)]
        self.cols: list[set[int]] = [set() for _ in range(SIZE)]
        self.blocks: list[set[int]] = [set() for _ in range(SIZE)]
        ok = True
        for r in range(SIZE):
            for c in range(SIZE):
                d = self._grid[r][c]
                if d == EMPTY:
                    continue
                b = block_index(r, c)
                if d in self.rows[r] or d in self.cols[c] or d in self.blocks[b]:
                    ok = False
                self.rows[r].add(d)
                self.cols[c].add(d)
                self.blocks[b].add(d)
        self.ok = ok
        return ok

    @staticmethod
    def block_index(row: int, col: int) -> int:
        return block_index(row, col)

    @property
    def grid(self) -> Grid:
        return clone_grid(self._grid)

    def value(self, row: int, col: int) -> int:
        return self._grid[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self._grid[row][col] == EMPTY

    def empty_cells(self) -> list[Cell]:
        return [(r, c) for r in range(SIZE) for c in range(SIZE) if self._grid[r][c] == EMPTY]

    def row_has(self, row: int, digit: int) -> bool:
        return digit in self.rows[row]

    def col_has(self, col: int, digit: int) -> bool:
        return digit in self.cols[col]

    def block_has(self, block: int, digit: int) -> bool:
        return digit in self.blocks[block]

    def valid_numbers(self, row: int, col: int) -> set[int]:
        used = self.rows[row] | self.cols[col] | self.blocks[block_index(row, col)]
        return {d for d in DIGITS if d not in used}

    def place(self, row: int, col: int, digit: int) -> None:
        # caller guarantees digit is in valid_numbers(row, col)
        self._grid[row][col] = digit
        self.rows[row].add(digit)
        self.cols[col].add(digit)
        self.blocks[block_index(row, col)].add(digit)

    def unplace(self, row: int, col: int, digit: int) -> None:
        self._grid[row][col] = EMPTY
        self.rows[row].discard(digit)
        self.cols[col].discard(digit)
        self.blocks[block_index(row, col)].discard(digit)
