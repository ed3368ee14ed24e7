# types_sudoku.py
from __future__ import annotations

from typing import Any, Literal, Optional, TypedDict

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty, 1..9 = placed digit)."""

Candidates = dict[str, list[int]]
"""Map from cell key (e.g., 'r1c1') to a list of candidate digits (1..9)."""

Source = Literal["user", "system"]
"""Provenance of a filled cell: supplied by the host ('user') or derived by the solver ('system')."""


class Cell(TypedDict):
    """One board position as exchanged with the display layer."""

    value: int  # 0 = empty
    source: Optional[Source]  # None while the cell is empty


Board = list[list[Cell]]
"""A 9x9 grid of cells that also carries provenance."""


class Move(TypedDict, total=False):
    """A single human-style solving action recorded by the propagator."""

    index: int  # 1-based order in the sequence
    technique: str  # 'naked_single', 'hidden_single', 'locked_candidates_pointing'
    type: str  # 'placement' or 'elimination'
    digit: int  # the digit being placed or eliminated
    cell: str  # for placements, target cell (e.g., 'r4c7')
    box: str  # for eliminations, the block the digit is locked in (e.g., 'b3')
    line: str  # for eliminations, the row/column it is locked to (e.g., 'r2', 'c8')
    eliminate: list[str]  # for eliminations, list of cells to clear that digit from
    in_box: list[str]  # for eliminations, the in-block cells that still hold the digit
    explanation: dict[str, Any]  # 'why' text plus the units involved
    highlights: dict[str, Any]  # UI hints (row/col/box/cells) for overlay rendering
