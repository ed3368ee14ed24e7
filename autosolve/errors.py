"""Exception hierarchy for the autosolve engine.

Everything raised on purpose by the engine inherits from :class:`SolverError`
so hosts can catch a single base class. Duplicate digits in an otherwise
well-formed grid are *not* an exception: ``is_valid`` reports them and
``solve`` returns an ``invalid_input`` result.
"""


class SolverError(Exception):
    """Base exception for all autosolve operations."""


class InvalidGridError(SolverError, ValueError):
    """Raised at the boundary when a grid, board, coordinate or digit is malformed.

    Examples include a grid that is not 9x9, a cell value outside ``0..9``,
    a provenance tag other than ``user``/``system``, or a row/column index
    outside ``0..8``.
    """


class PropagationFault(SolverError, RuntimeError):
    """Raised when the propagator exceeds its round cap.

    Every productive round strictly shrinks the candidate map, so tripping
    the cap points to a bug in a technique rather than to a hard puzzle.
    """


class SearchBudgetExceeded(SolverError):
    """Raised when backtracking uses up the step budget imposed by the host."""

    def __init__(self, steps: int):
        super().__init__(f"search exceeded its budget of {steps} candidate trials")
        self.steps = steps
