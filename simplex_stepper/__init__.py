"""Two-phase tableau simplex with a replayable step history."""

from .phases import Phase
from .pivots import SolutionType
from .solution import (
    MAX_ITERATIONS,
    Method,
    SimplexDidNotConverge,
    Solution,
    build_solution,
    extract,
    solve_complete,
)
from .steps import Step, advance, rewind
from .tableau import EPS, ObjectiveType, Problem

__all__ = [
    "EPS",
    "MAX_ITERATIONS",
    "Method",
    "ObjectiveType",
    "Phase",
    "Problem",
    "SimplexDidNotConverge",
    "Solution",
    "SolutionType",
    "Step",
    "advance",
    "build_solution",
    "extract",
    "rewind",
    "solve_complete",
]
