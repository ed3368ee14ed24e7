# sudoku_tool_api.py
# FastAPI wrapper for the solver tools.
# Run with: AUTOSOLVE_CONFIG=configs/default.yaml uvicorn apps.api.sudoku_tool_api:app --reload
# Endpoints are plain `def` so each request solves in FastAPI's threadpool,
# with its own solver session.
import logging
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from autosolve.config import config_from_env
from autosolve.errors import InvalidGridError, PropagationFault, SearchBudgetExceeded
from autosolve.sudoku_tools import (
    compute_candidates_tool,
    edit_cell,
    is_valid,
    is_valid_move,
    next_moves,
    propagate,
    sanity_check,
    solve,
    valid_candidates,
)

CONFIG = config_from_env()
logging.getLogger("autosolve").setLevel(CONFIG.log_level)

app = FastAPI(title="Sudoku Autosolve API")


class CellModel(BaseModel):
    value: int = 0
    source: Optional[Literal["user", "system"]] = None


class GridModel(BaseModel):
    grid: List[List[int]]


class BoardModel(BaseModel):
    board: List[List[CellModel]]


class CellQuery(BaseModel):
    grid: List[List[int]]
    row: int
    col: int


class MoveCheck(CellQuery):
    value: int


class EditRequest(BaseModel):
    board: List[List[CellModel]]
    row: int
    col: int
    value: int


class SolveRequest(BaseModel):
    grid: List[List[int]]
    max_steps: Optional[int] = Field(default=None, ge=1)


class NextMovesRequest(BaseModel):
    board: List[List[CellModel]]
    max_moves: Optional[int] = Field(default=None, ge=0)


class SanityRequest(BaseModel):
    original: List[List[int]]
    current: List[List[int]]


def _board(rows: List[List[CellModel]]):
    return [[cell.model_dump() for cell in row] for row in rows]


@app.exception_handler(InvalidGridError)
async def invalid_grid_handler(request: Request, exc: InvalidGridError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SearchBudgetExceeded)
async def budget_handler(request: Request, exc: SearchBudgetExceeded):
    return JSONResponse(status_code=408, content={"detail": str(exc), "steps": exc.steps})


@app.exception_handler(PropagationFault)
async def propagation_fault_handler(request: Request, exc: PropagationFault):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.post("/is_valid")
def api_is_valid(payload: GridModel):
    return {"valid": is_valid(payload.grid)}


@app.post("/propagate")
def api_propagate(payload: BoardModel):
    board = _board(payload.board)
    return {"board": propagate(board, max_rounds=CONFIG.max_rounds)}


@app.post("/solve")
def api_solve(req: SolveRequest):
    max_steps = req.max_steps if req.max_steps is not None else CONFIG.search_max_steps
    result = solve(req.grid, max_steps=max_steps, max_rounds=CONFIG.max_rounds)
    return {"status": result.status, "grid": result.grid}


@app.post("/valid_candidates")
def api_valid_candidates(req: CellQuery):
    return {"candidates": sorted(valid_candidates(req.grid, req.row, req.col))}


@app.post("/compute_candidates")
def api_cands(payload: GridModel):
    return compute_candidates_tool(payload.grid)


@app.post("/is_valid_move")
def api_is_valid_move(req: MoveCheck):
    return {"valid": is_valid_move(req.grid, req.row, req.col, req.value)}


@app.post("/edit_cell")
def api_edit_cell(req: EditRequest):
    return {"board": edit_cell(_board(req.board), req.row, req.col, req.value)}


@app.post("/next_moves")
def api_moves(req: NextMovesRequest):
    max_moves = req.max_moves if req.max_moves is not None else CONFIG.max_moves
    return next_moves(_board(req.board), max_moves=max_moves, max_rounds=CONFIG.max_rounds)


@app.post("/sanity_check")
def api_sanity(payload: SanityRequest) -> Dict:
    return sanity_check(payload.original, payload.current)
