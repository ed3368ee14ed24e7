"""Depth-first backtracking over the constraint tracker, most constrained cell first."""

# search.py
from __future__ import annotations

import logging
from typing import Optional

from types_sudoku import Grid

from .constraints import ConstraintTracker
from .errors import InvalidGridError, SearchBudgetExceeded
from .solver_core import SIZE, EMPTY

log = logging.getLogger(__name__)


class BacktrackingSearch:
    """Find one complete assignment for the empty cells of ``grid``.

    ``max_steps`` caps the number of candidate trials; it is the hook for
    hosts that need bounded latency and raises ``SearchBudgetExceeded``
    when exhausted. None means unbounded.
    """

    def __init__(self, grid: Grid, max_steps: Optional[int] = None):
        self.tracker = ConstraintTracker(grid)
        if not self.tracker.ok:
            raise InvalidGridError("grid already holds a repeated digit in some row, column or box")
        self.max_steps = max_steps
        self.steps = 0
        self.backtracks = 0

    def find_best_cell(self) -> Optional[tuple[int, int, list[int]]]:
        """Empty cell with the fewest options (row-major tie-break), or None when the grid is full."""
        best = None
        min_options = SIZE + 1
        for r in range(SIZE):
            for c in range(SIZE):
                if self.tracker.value(r, c) != EMPTY:
                    continue
                options = self.tracker.valid_numbers(r, c)
                if len(options) < min_options:
                    min_options = len(options)
                    best = (r, c, sorted(options))
                    if min_options <= 1:
                        return best
        return best

    def run(self) -> bool:
        target = self.find_best_cell()
        if target is None:
            return True

        r, c, options = target
        for d in options:
            if self.max_steps is not None and self.steps >= self.max_steps:
                raise SearchBudgetExceeded(self.max_steps)
            self.steps += 1
            self.tracker.place(r, c, d)
            if self.run():
                return True
            # undo
            self.tracker.unplace(r, c, d)
            self.backtracks += 1
        return False

    def solve(self) -> Optional[Grid]:
        found = self.run()
        log.info("search %s after %d trials, %d backtracks", "succeeded" if found else "failed", self.steps, self.backtracks)
        return self.tracker.grid if found else None
