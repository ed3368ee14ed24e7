# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "apps", "autosolve" and "types_sudoku" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def rows(text):
    return [[int(ch) for ch in text[i * 9:(i + 1) * 9]] for i in range(9)]


SOLUTION = rows(
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

# Solvable with naked/hidden singles alone.
EASY = rows("003020600900305001001806400008102900700000008006708200002609500800203009005010300")


@pytest.fixture
def solution():
    return [row[:] for row in SOLUTION]


@pytest.fixture
def easy():
    return [row[:] for row in EASY]


@pytest.fixture
def hard():
    # r4c6/r4c9/r5c6/r5c9 form a 1-3 rectangle across two boxes: both
    # fillings are legal, so only a guess can finish it. r1c1 and r9c9 are
    # plain naked singles.
    grid = [row[:] for row in SOLUTION]
    for r, c in [(3, 5), (3, 8), (4, 5), (4, 8), (0, 0), (8, 8)]:
        grid[r][c] = 0
    return grid


@pytest.fixture
def unsolvable():
    # No duplicates, but r1c9 can hold nothing: its row has 1..8 and its column a 9.
    grid = [[0] * 9 for _ in range(9)]
    grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
    grid[1][8] = 9
    return grid


@pytest.fixture
def empty():
    return [[0] * 9 for _ in range(9)]
