"""
Two-phase (artificial basis) simplex machinery.

Phase I starts from one artificial variable per constraint row and maximizes
-sum(artificials). Artificial columns are dropped as soon as their variable
leaves the basis, so they never re-enter. When Phase I reaches optimality with
a zero objective, remaining zero-level artificials are driven out and Phase II
continues on the real objective.

The single-phase variant starts from a caller-supplied basis instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .pivots import Pivot, SolutionType, classify, find_potential_pivots
from .tableau import (
    EPS,
    Problem,
    build_matrix,
    canonicalize,
    compute_reduced_costs,
    expand,
    is_positive,
    is_zero,
    label,
    label_index,
    normalize_rhs,
    pivot,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    ARTIFICIAL = "artificial"
    REAL = "real"


@dataclass
class Tableau:
    # Compact layout per row: [non-basic columns..., RHS]
    matrix: np.ndarray
    z: np.ndarray
    col_labels: List[str]
    row_labels: List[str]
    phase: Phase

    @property
    def rhs(self) -> np.ndarray:
        return self.matrix[:, -1]

    def expanded(self) -> Tuple[np.ndarray, List[str]]:
        return expand(self.matrix, self.col_labels, self.row_labels)

    def phase_one_objective(self) -> float:
        """Sum of the artificial variables (only meaningful in Phase I)."""
        return -float(self.z[-1])


def costs_for(problem: Problem, phase: Phase) -> Dict[str, float]:
    if phase is Phase.ARTIFICIAL:
        return problem.artificial_costs()
    return problem.costs()


def phase_of(problem: Problem, labels: Sequence[str]) -> Phase:
    """A tableau is in Phase I while any of its variables is artificial."""
    if any(problem.is_artificial(name) for name in labels):
        return Phase.ARTIFICIAL
    return Phase.REAL


def make_tableau(
    problem: Problem,
    matrix: np.ndarray,
    col_labels: Sequence[str],
    row_labels: Sequence[str],
    phase: Phase,
) -> Tableau:
    """Tableau with its z-row recomputed from scratch for `phase`."""
    M = np.array(matrix, dtype=float).reshape(len(row_labels), len(col_labels) + 1)
    z = compute_reduced_costs(costs_for(problem, phase), M, col_labels, row_labels)
    return Tableau(M, z, list(col_labels), list(row_labels), phase)


def from_snapshot(
    problem: Problem,
    matrix: Sequence[Sequence[float]],
    col_labels: Sequence[str],
    row_labels: Sequence[str],
) -> Tableau:
    """Rebuild solver state from a stored matrix and its labels alone."""
    phase = phase_of(problem, list(col_labels) + list(row_labels))
    return make_tableau(problem, np.array(matrix, dtype=float), col_labels, row_labels, phase)


def artificial_tableau(problem: Problem) -> Tableau:
    matrix = normalize_rhs(build_matrix(problem))
    tab = make_tableau(
        problem,
        matrix,
        problem.variable_labels(),
        problem.artificial_labels(),
        Phase.ARTIFICIAL,
    )
    logger.debug("phase I start: artificial objective %g", tab.phase_one_objective())
    return tab


def is_valid_basis(problem: Problem, basis: Sequence[int]) -> bool:
    if len(basis) != problem.num_constraints or len(set(basis)) != len(basis):
        return False
    return all(
        isinstance(i, Integral) and not isinstance(i, bool) and 1 <= i <= problem.num_variables
        for i in basis
    )


def basis_tableau(problem: Problem, basis: Sequence[int]) -> Optional[Tableau]:
    """Canonical tableau for a 1-based starting basis, or None when the basis is
    malformed, singular or infeasible."""
    if not is_valid_basis(problem, basis):
        logger.debug("rejecting malformed basis %s", list(basis))
        return None
    n = problem.num_variables
    reduced = canonicalize(normalize_rhs(build_matrix(problem)), [int(i) - 1 for i in basis])
    if reduced is None:
        logger.debug("basis %s is singular", list(basis))
        return None
    if np.any(reduced[:, -1] < -EPS):
        logger.debug("basis %s is not feasible", list(basis))
        return None
    row_labels = [label(int(i)) for i in basis]
    col_labels = [name for name in problem.variable_labels() if name not in row_labels]
    keep = [label_index(name) - 1 for name in col_labels] + [n]
    return make_tableau(problem, reduced[:, keep], col_labels, row_labels, Phase.REAL)


def initial_tableau(problem: Problem, basis: Sequence[int] = ()) -> Optional[Tableau]:
    if len(basis) == 0:
        return artificial_tableau(problem)
    return basis_tableau(problem, basis)


def pivot_tableau(problem: Problem, tableau: Tableau, row: int, col: int) -> Tableau:
    """Swap column `col` into the basis in place of row `row`.

    The leaving variable takes the entering variable's column position, unless
    it is artificial, in which case its column is dropped.
    """
    full, labels = tableau.expanded()
    full = pivot(full, row, col)
    entering = tableau.col_labels[col]
    leaving = tableau.row_labels[row]
    logger.debug("pivot (%d, %d): %s enters, %s leaves", row, col, entering, leaving)

    row_labels = list(tableau.row_labels)
    row_labels[row] = entering
    col_labels = list(tableau.col_labels)
    col_labels[col] = leaving
    if problem.is_artificial(leaving):
        del col_labels[col]

    positions = [labels.index(name) for name in col_labels] + [full.shape[1] - 1]
    return make_tableau(problem, full[:, positions], col_labels, row_labels, tableau.phase)


def drop_row(problem: Problem, tableau: Tableau, row: int) -> Tableau:
    matrix = np.delete(tableau.matrix, row, axis=0)
    row_labels = [name for i, name in enumerate(tableau.row_labels) if i != row]
    return make_tableau(problem, matrix, tableau.col_labels, row_labels, tableau.phase)


def finish_phase_one(problem: Problem, tableau: Tableau) -> Tableau:
    """Hand a zero-objective Phase I tableau over to Phase II."""
    while True:
        row = next((i for i, name in enumerate(tableau.row_labels) if problem.is_artificial(name)), None)
        if row is None:
            break
        col = next((j for j in range(len(tableau.col_labels)) if not is_zero(tableau.matrix[row, j])), None)
        if col is None:
            logger.debug("constraint row of %s is redundant, dropping it", tableau.row_labels[row])
            tableau = drop_row(problem, tableau, row)
        else:
            tableau = pivot_tableau(problem, tableau, row, col)
    logger.debug("phase II start with basis %s", tableau.row_labels)
    return make_tableau(problem, tableau.matrix, tableau.col_labels, tableau.row_labels, Phase.REAL)


def settle(problem: Problem, tableau: Tableau) -> Tuple[Tableau, List[Pivot], SolutionType]:
    """Classify a freshly built tableau, applying the Phase I exit rules.

    A Phase I optimum with a positive artificial objective is infeasible; one
    with a zero objective is replaced by the first Phase II tableau.
    """
    pivots, has_negative = find_potential_pivots(tableau.matrix, tableau.z)
    solution_type = classify(has_negative, pivots)
    if tableau.phase is Phase.ARTIFICIAL and solution_type is SolutionType.OPTIMAL:
        if is_positive(tableau.phase_one_objective()):
            logger.debug("phase I optimum %g > 0: infeasible", tableau.phase_one_objective())
            return tableau, [], SolutionType.INFEASIBLE
        tableau = finish_phase_one(problem, tableau)
        pivots, has_negative = find_potential_pivots(tableau.matrix, tableau.z)
        solution_type = classify(has_negative, pivots)
    if solution_type is not SolutionType.NOT_SOLVED:
        logger.debug("%s tableau reached in %s phase", solution_type.value, tableau.phase.value)
    return tableau, pivots, solution_type
