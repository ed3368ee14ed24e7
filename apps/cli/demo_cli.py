"""Command-line host for the solver: reads a puzzle, runs propagation / solve / candidate hints / move trace, and prints a JSON report to stdout."""

# demo_cli.py
# Usage:
#   python -m apps.cli.demo_cli --demo --mode moves --max_moves 5
#   python -m apps.cli.demo_cli --puzzle 003020600900305001... --mode solve --pretty
#   python -m apps.cli.demo_cli --file puzzle.txt --mode propagate --json out.json
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from types_sudoku import Board, Grid
from autosolve.config import load_config
from autosolve.errors import InvalidGridError, SearchBudgetExceeded, SolverError
from autosolve.solver_core import as_grid, check_grid
from autosolve.sudoku_tools import (
    compute_candidates_tool,
    grid_to_board,
    is_valid,
    next_moves,
    propagate,
    sanity_check,
    solve_board,
)

DEMO = [
    [5, 3, 0, 0, 7, 0, 0, 0, 0],
    [6, 0, 0, 1, 9, 5, 0, 0, 0],
    [0, 9, 8, 0, 0, 0, 0, 6, 0],
    [8, 0, 0, 0, 6, 0, 0, 0, 3],
    [4, 0, 0, 8, 0, 3, 0, 0, 1],
    [7, 0, 0, 0, 2, 0, 0, 0, 6],
    [0, 6, 0, 0, 0, 0, 2, 8, 0],
    [0, 0, 0, 4, 1, 9, 0, 0, 5],
    [0, 0, 0, 0, 8, 0, 0, 7, 9],
]

EMPTY_MARKS = ".0_"
SEPARATORS = "|-+ \t\r\n"


def parse_grid_text(text: str) -> Grid:
    """Parse a puzzle from text: a JSON 9x9 list, or 81 digit/blank marks
    ('0', '.', '_' are blank) with optional box-drawing separators.
    """
    stripped = text.strip()
    if stripped.startswith("["):
        try:
            grid = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise InvalidGridError(f"not a JSON grid: {e}") from e
        check_grid(grid)
        return grid
    marks = [ch for ch in stripped if ch not in SEPARATORS]
    if len(marks) != 81:
        raise InvalidGridError(f"expected 81 cells, found {len(marks)}")
    values = []
    for ch in marks:
        if ch in EMPTY_MARKS:
            values.append(0)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise InvalidGridError(f"unexpected character {ch!r} in puzzle")
    return [values[i * 9:(i + 1) * 9] for i in range(9)]


def format_grid(grid: Grid | Board) -> str:
    plain = as_grid(grid)
    lines = []
    for r, row in enumerate(plain):
        if r and r % 3 == 0:
            lines.append("------+-------+------")
        cells = [str(v) if v else "." for v in row]
        lines.append(" | ".join(" ".join(cells[i:i + 3]) for i in (0, 3, 6)))
    return "\n".join(lines)


def load_puzzle(args) -> Grid:
    if args.demo:
        return [row[:] for row in DEMO]
    if args.puzzle:
        return parse_grid_text(args.puzzle)
    path = Path(args.file)
    print(f"[load] {path}", file=sys.stderr)
    return parse_grid_text(path.read_text(encoding="utf-8"))


def run(args, cfg) -> dict:
    grid = load_puzzle(args)
    board = grid_to_board(grid)
    payload = {"mode": args.mode, "original": grid, "valid": is_valid(grid)}
    if not payload["valid"]:
        payload["issues"] = sanity_check(grid, grid)["issues"]
        print("[warn] puzzle repeats a digit in some row, column or box", file=sys.stderr)

    if args.mode == "propagate":
        out = propagate(board, max_rounds=cfg.max_rounds)
        payload["board"] = out
        payload["empty_cells"] = sum(1 for row in out for cell in row if cell["value"] == 0)
    elif args.mode == "solve":
        result, out = solve_board(board, max_steps=cfg.search_max_steps)
        print(f"[solve] status={result.status}", file=sys.stderr)
        payload["status"] = result.status
        payload["board"] = out
    elif args.mode == "candidates":
        cands = compute_candidates_tool(grid)["candidates"]
        payload["candidates"] = cands
        payload["candidates_count"] = sum(len(v) for v in cands.values())
    else:
        result = next_moves(board, max_moves=cfg.max_moves, max_rounds=cfg.max_rounds)
        payload["moves"] = result["moves"]
        payload["board"] = result["snapshot"]["current"]
        payload["candidates"] = result["snapshot"]["candidates"]
    return payload


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Sudoku propagation / solving demo")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--puzzle", type=str, help="81 cells, '0' or '.' for blanks")
    src.add_argument("--file", type=str, help="text or JSON file holding the puzzle")
    src.add_argument("--demo", action="store_true", help="use the built-in demo puzzle")
    ap.add_argument("--mode", type=str, default="propagate", choices=["propagate", "solve", "candidates", "moves"])
    ap.add_argument("--config", type=str, default=None, help="YAML config (see configs/default.yaml)")
    ap.add_argument("--max_steps", type=non_negative_int, default=None, help="override search_max_steps")
    ap.add_argument("--max_moves", type=non_negative_int, default=None, help="override max_moves")
    ap.add_argument("--log_level", type=str, default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--json", type=str, default=None, help="write the report here instead of stdout")
    ap.add_argument("--pretty", action="store_true", help="also print the resulting grid as text")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config, search_max_steps=args.max_steps, max_moves=args.max_moves,
                          log_level=args.log_level)
    except (OSError, SolverError) as e:
        print(f"[error] config: {e}", file=sys.stderr)
        return 2
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        payload = run(args, cfg)
    except (OSError, InvalidGridError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    except SearchBudgetExceeded as e:
        print(f"[error] {e}", file=sys.stderr)
        return 3
    except SolverError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    if args.pretty and "board" in payload:
        print(format_grid(payload["board"]), file=sys.stderr)
    if args.json:
        Path(args.json).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"[write] {args.json}", file=sys.stderr)
    else:
        print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
