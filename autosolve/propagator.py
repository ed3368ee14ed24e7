"""Deductive propagation: naked singles, hidden singles and locked candidates (pointing), applied in rounds until nothing changes."""

# propagator.py
# Candidates are computed once from the tracker when the session starts and
# are only ever narrowed afterwards: a placement removes the cell's entry and
# strikes the digit from its peers, an elimination strikes it from the cells
# named by the technique.
from __future__ import annotations

import logging
from typing import Optional

from types_sudoku import Board, Candidates, Move

from .constraints import ConstraintTracker
from .errors import InvalidGridError, PropagationFault
from .solver_core import (
    DIGITS,
    SIZE,
    Cell,
    as_grid,
    block_cells,
    block_index,
    clone_board,
    col_cells,
    peers,
    rc_to_key,
    row_cells,
)

log = logging.getLogger(__name__)

UNIT_NAMES = {"row": "row", "col": "column", "box": "box"}


class Propagator:
    """One propagation session over a private copy of ``board``.

    Filled cells keep their value and provenance; every cell the session
    fills is tagged ``system``. ``moves`` records each deduction in the order
    it was applied.
    """

    def __init__(self, board: Board, max_rounds: Optional[int] = None):
        self.board = clone_board(board)
        self.tracker = ConstraintTracker(as_grid(board))
        if not self.tracker.ok:
            raise InvalidGridError("board already holds a repeated digit in some row, column or box")
        self.candidates: dict[Cell, set[int]] = {
            cell: self.tracker.valid_numbers(*cell) for cell in self.tracker.empty_cells()
        }
        self.moves: list[Move] = []
        self.rounds = 0
        # each productive round removes at least one candidate, plus one idle round to notice the fixed point
        derived = self.candidate_count() + 1
        self.max_rounds = derived if max_rounds is None else max(max_rounds, derived)
        self.contradiction: Optional[str] = self.find_contradiction()

    def candidate_count(self) -> int:
        return sum(len(opts) for opts in self.candidates.values())

    @property
    def filled(self) -> int:
        return sum(1 for m in self.moves if m["type"] == "placement")

    def _units(self):
        for r in range(SIZE):
            yield "row", r, row_cells(r), self.tracker.rows[r]
        for c in range(SIZE):
            yield "col", c, col_cells(c), self.tracker.cols[c]
        for b in range(SIZE):
            yield "box", b, block_cells(b), self.tracker.blocks[b]

    def find_contradiction(self) -> Optional[str]:
        """Describe why the board cannot be completed, or None when no cell or unit has run dry."""
        for (r, c), opts in sorted(self.candidates.items()):
            if not opts:
                return f"{rc_to_key(r, c)} has no candidates left"
        for kind, index, cells, placed in self._units():
            for d in DIGITS:
                if d not in placed and not any(d in self.candidates.get(cell, ()) for cell in cells):
                    return f"digit {d} has no place left in {UNIT_NAMES[kind]} {index + 1}"
        return None

    def snapshot_candidates(self) -> Candidates:
        return {rc_to_key(r, c): sorted(opts) for (r, c), opts in sorted(self.candidates.items())}

    def _record(self, move: Move) -> None:
        move["index"] = len(self.moves) + 1
        self.moves.append(move)

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def fill(self, r: int, c: int, d: int, move: Move) -> None:
        self.board[r][c] = {"value": d, "source": "system"}
        self.tracker.place(r, c, d)
        del self.candidates[(r, c)]
        for p in peers(r, c):
            opts = self.candidates.get(p)
            if opts is not None:
                opts.discard(d)
        self._record(move)
        self.contradiction = self.find_contradiction()

    def eliminate(self, d: int, targets: list[Cell], move: Move) -> bool:
        hit = [cell for cell in targets if d in self.candidates.get(cell, ())]
        if not hit:
            return False
        for cell in hit:
            self.candidates[cell].discard(d)
        move["eliminate"] = [rc_to_key(r, c) for r, c in hit]
        self._record(move)
        self.contradiction = self.find_contradiction()
        return True

    # ------------------------------------------------------------------
    # techniques
    # ------------------------------------------------------------------

    def naked_singles(self) -> bool:
        changed = False
        for r in range(SIZE):
            for c in range(SIZE):
                if self.contradiction:
                    return changed
                opts = self.candidates.get((r, c))
                if opts is None or len(opts) != 1:
                    continue
                d = next(iter(opts))
                key = rc_to_key(r, c)
                self.fill(
                    r,
                    c,
                    d,
                    {
                        "technique": "naked_single",
                        "type": "placement",
                        "cell": key,
                        "digit": d,
                        "explanation": {
                            "why": f"Only one candidate fits {key}.",
                            "units": {"row": f"r{r + 1}", "col": f"c{c + 1}", "box": f"b{block_index(r, c) + 1}"},
                        },
                        "highlights": {"cells": [key]},
                    },
                )
                changed = True
        return changed

    def _hidden_in_unit(self, kind: str, index: int, cells: list[Cell], placed: set[int]) -> bool:
        changed = False
        label = f"{kind[0]}{index + 1}"
        for d in DIGITS:
            if self.contradiction:
                return changed
            if d in placed:
                continue
            spots = [cell for cell in cells if d in self.candidates.get(cell, ())]
            if len(spots) != 1:
                continue
            r, c = spots[0]
            key = rc_to_key(r, c)
            self.fill(
                r,
                c,
                d,
                {
                    "technique": "hidden_single",
                    "type": "placement",
                    "cell": key,
                    "digit": d,
                    "explanation": {
                        "why": f"Digit {d} appears in only one cell in {UNIT_NAMES[kind]} {index + 1}.",
                        "units": {kind: label},
                    },
                    "highlights": {"cells": [key], kind: label},
                },
            )
            changed = True
        return changed

    def hidden_singles(self) -> bool:
        changed = False
        for kind, index, cells, placed in self._units():
            changed |= self._hidden_in_unit(kind, index, cells, placed)
        return changed

    def box_line_reduction(self) -> bool:
        """If in a box, a digit's candidates lie in a single row (or column), eliminate that digit
        from the rest of that row (or column) outside the box.
        """
        changed = False
        for b in range(SIZE):
            cells = block_cells(b)
            inside = set(cells)
            for d in DIGITS:
                if self.contradiction:
                    return changed
                if d in self.tracker.blocks[b]:
                    continue
                locs = [cell for cell in cells if d in self.candidates.get(cell, ())]
                if not locs:
                    continue
                rows = {r for r, _ in locs}
                cols = {c for _, c in locs}
                lines = []
                if len(rows) == 1:
                    r = rows.pop()
                    lines.append(("row", r, row_cells(r)))
                if len(cols) == 1:
                    c = cols.pop()
                    lines.append(("col", c, col_cells(c)))
                for kind, index, line_cells in lines:
                    label = f"{kind[0]}{index + 1}"
                    in_box = [rc_to_key(r, c) for r, c in locs]
                    move: Move = {
                        "technique": "locked_candidates_pointing",
                        "type": "elimination",
                        "digit": d,
                        "box": f"b{b + 1}",
                        "line": label,
                        "in_box": in_box,
                        "explanation": {
                            "why": f"In box {b + 1}, digit {d}'s candidates lie only in {UNIT_NAMES[kind]} {index + 1}. "
                            f"Eliminate {d} from {UNIT_NAMES[kind]} {index + 1} outside this box."
                        },
                        "highlights": {"box": f"b{b + 1}", kind: label, "cells": in_box},
                    }
                    changed |= self.eliminate(d, [cell for cell in line_cells if cell not in inside], move)
        return changed

    # ------------------------------------------------------------------
    # driver
    # ------------------------------------------------------------------

    def run_round(self) -> bool:
        placed_naked = self.naked_singles()
        placed_hidden = self.hidden_singles()
        pruned = self.box_line_reduction()
        return placed_naked or placed_hidden or pruned

    def run(self) -> Board:
        changed = True
        while changed and self.contradiction is None:
            if self.rounds >= self.max_rounds:
                log.error("propagation did not settle after %d rounds", self.rounds)
                raise PropagationFault(f"propagation exceeded {self.max_rounds} rounds")
            self.rounds += 1
            before = len(self.moves)
            changed = self.run_round()
            log.debug(
                "round %d: %d moves, %d empty cells, %d candidates left",
                self.rounds,
                len(self.moves) - before,
                len(self.candidates),
                self.candidate_count(),
            )
        if self.contradiction:
            log.info("propagation stopped after %d rounds: %s", self.rounds, self.contradiction)
        else:
            log.info("propagation settled after %d rounds: %d cells filled", self.rounds, self.filled)
        return self.board
