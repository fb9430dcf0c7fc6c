"""Auto-solve and solution extraction."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from .phases import Phase, phase_of
from .pivots import SolutionType
from .steps import Step, advance
from .tableau import EPS, Problem, is_zero, label, label_index

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 200


class SimplexDidNotConverge(RuntimeError):
    """Raised when the pivot budget runs out, typically from degenerate cycling."""

    def __init__(self, steps: Sequence[Step], max_iterations: int):
        super().__init__(f"simplex did not converge within {max_iterations} pivots")
        self.steps = list(steps)
        self.max_iterations = max_iterations


class Method(str, Enum):
    SIMPLEX = "simplex"
    ARTIFICIAL = "artificial"


@dataclass(frozen=True)
class Solution:
    problem: Problem
    steps: List[Step]
    x: Dict[str, float]
    objective: float
    method: Method
    solution_type: SolutionType = field(default=SolutionType.NOT_SOLVED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problem": self.problem.to_dict(),
            "status": self.solution_type.value,
            "method": self.method.value,
            "objective": None if math.isnan(self.objective) else self.objective,
            "x": dict(self.x),
            "iterations": max(len(self.steps) - 1, 0),
            "steps": [step.to_dict() for step in self.steps],
        }


def method_for(starting_basis: Sequence[int]) -> Method:
    return Method.SIMPLEX if len(starting_basis) else Method.ARTIFICIAL


def objective_from_z(problem: Problem, step: Step) -> float:
    """Objective value stored in the z-row, undoing the max-form sign."""
    value = step.z[-1]
    return value if problem.maximize else -value


def objective_value(problem: Problem, x: Dict[str, float]) -> float:
    return sum(c * x.get(label(i + 1), 0.0) for i, c in enumerate(problem.objective_coefficients))


def extract(problem: Problem, steps: Sequence[Step]) -> Tuple[Dict[str, float], float]:
    """Variable assignment and objective value of the last step.

    Non-basic variables are 0; artificial variables are not reported. An empty
    or infeasible history has no assignment and a NaN objective.
    """
    if not steps or steps[-1].solution_type is SolutionType.INFEASIBLE:
        return {}, math.nan
    last = steps[-1]
    x = {name: 0.0 for name in problem.variable_labels()}
    for row, name in enumerate(last.row_variables):
        if label_index(name) > problem.num_variables:
            continue
        value = last.matrix[row][-1]
        x[name] = 0.0 if is_zero(value) else value
    objective = objective_value(problem, x)

    if phase_of(problem, last.cols_variables + last.row_variables) is Phase.REAL:
        from_z = objective_from_z(problem, last)
        if not math.isclose(objective, from_z, rel_tol=1e-9, abs_tol=EPS):
            logger.warning("objective mismatch: c.x = %r but z-row gives %r", objective, from_z)
    return x, objective


def build_solution(problem: Problem, steps: Sequence[Step], starting_basis: Sequence[int] = ()) -> Solution:
    """Solution for a finished or truncated history."""
    x, objective = extract(problem, steps)
    solution_type = steps[-1].solution_type if steps else SolutionType.NOT_SOLVED
    return Solution(
        problem=problem,
        steps=[step.copy() for step in steps],
        x=x,
        objective=objective,
        method=method_for(starting_basis),
        solution_type=solution_type,
    )


def solve_complete(
    problem: Problem,
    starting_basis: Sequence[int] = (),
    max_iterations: int = MAX_ITERATIONS,
) -> Solution:
    """Advance with the first candidate pivot until the history is finished."""
    steps = advance(problem, [], starting_basis)
    pivots = 0
    while not steps[-1].is_terminal:
        if pivots >= max_iterations:
            raise SimplexDidNotConverge(steps, max_iterations)
        grown = advance(problem, steps, starting_basis)
        if len(grown) == len(steps):
            break
        steps = grown
        pivots += 1
    solution = build_solution(problem, steps, starting_basis)
    logger.debug("%s after %d pivots, objective %r", solution.solution_type.value, pivots, solution.objective)
    return solution
