"""
Step history and the replay protocol.

A history is a plain list of Step snapshots. `advance` is a pure function of
(problem, history, choice): it rebuilds the solver state from the last step's
matrix and labels, applies one pivot and returns a new list. Stepping forward,
rewinding (truncating the list) and branching (advancing a truncated list with
another pivot index) therefore need no solver object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .phases import Tableau, from_snapshot, initial_tableau, pivot_tableau, settle
from .pivots import Pivot, SolutionType
from .tableau import Problem

logger = logging.getLogger(__name__)


@dataclass
class Step:
    matrix: List[List[float]]
    z: List[float]
    potential_pivots: List[Pivot]
    cols_variables: List[str]
    row_variables: List[str]
    solution_type: SolutionType
    selected_pivot_index: Optional[int] = field(default=None)

    @property
    def is_terminal(self) -> bool:
        return self.solution_type is not SolutionType.NOT_SOLVED

    @property
    def selected_pivot(self) -> Optional[Pivot]:
        if self.selected_pivot_index is None:
            return None
        return self.potential_pivots[self.selected_pivot_index]

    def copy(self) -> "Step":
        return replace(
            self,
            matrix=[list(row) for row in self.matrix],
            z=list(self.z),
            potential_pivots=[tuple(p) for p in self.potential_pivots],
            cols_variables=list(self.cols_variables),
            row_variables=list(self.row_variables),
        )

    @classmethod
    def infeasible(cls) -> "Step":
        """Terminal snapshot for a starting basis that cannot be used."""
        return cls(
            matrix=[],
            z=[],
            potential_pivots=[],
            cols_variables=[],
            row_variables=[],
            solution_type=SolutionType.INFEASIBLE,
        )

    @classmethod
    def from_tableau(cls, tableau: Tableau, potential_pivots: Sequence[Pivot], solution_type: SolutionType) -> "Step":
        return cls(
            matrix=tableau.matrix.tolist(),
            z=tableau.z.tolist(),
            potential_pivots=[(int(r), int(c)) for r, c in potential_pivots],
            cols_variables=list(tableau.col_labels),
            row_variables=list(tableau.row_labels),
            solution_type=solution_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "matrix": [list(row) for row in self.matrix],
            "z": list(self.z),
            "potentialPivots": [list(p) for p in self.potential_pivots],
            "colsVariables": list(self.cols_variables),
            "rowVariables": list(self.row_variables),
            "solutionType": self.solution_type.value,
        }
        if self.selected_pivot_index is not None:
            data["selectedPivotIndex"] = self.selected_pivot_index
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Step":
        return cls(
            matrix=[[float(v) for v in row] for row in data["matrix"]],
            z=[float(v) for v in data["z"]],
            potential_pivots=[(int(r), int(c)) for r, c in data["potentialPivots"]],
            cols_variables=list(data["colsVariables"]),
            row_variables=list(data["rowVariables"]),
            solution_type=SolutionType(data["solutionType"]),
            selected_pivot_index=data.get("selectedPivotIndex"),
        )


def advance(
    problem: Problem,
    steps: Sequence[Step],
    starting_basis: Sequence[int] = (),
    pivot_index: Optional[int] = None,
) -> List[Step]:
    """Return `steps` extended by one pivot.

    - An empty history yields the initial tableau (Phase I when `starting_basis`
      is empty, single-phase otherwise); an unusable basis yields a single
      infeasible step.
    - A finished history, or a pivot index outside the last step's candidates,
      is returned unchanged.
    - Otherwise the chosen candidate (default 0) is recorded on the last step
      and exactly one new step is appended.

    `steps` itself is never modified.
    """
    history = [step.copy() for step in steps]

    if not history:
        tableau = initial_tableau(problem, starting_basis)
        if tableau is None:
            return [Step.infeasible()]
        return [Step.from_tableau(*settle(problem, tableau))]

    last = history[-1]
    if last.is_terminal or not last.potential_pivots:
        return history

    index = 0 if pivot_index is None else pivot_index
    if not 0 <= index < len(last.potential_pivots):
        logger.debug("pivot index %s out of range, history unchanged", pivot_index)
        return history

    last.selected_pivot_index = index
    row, col = last.potential_pivots[index]
    tableau = from_snapshot(problem, last.matrix, last.cols_variables, last.row_variables)
    history.append(Step.from_tableau(*settle(problem, pivot_tableau(problem, tableau, row, col))))
    return history


def rewind(steps: Sequence[Step], index: int) -> List[Step]:
    """History truncated after step `index`, ready to branch from it.

    The pivot choice recorded on the new last step is cleared. An index outside
    the history returns an unchanged copy.
    """
    history = [step.copy() for step in steps]
    if not 0 <= index < len(history):
        return history
    history = history[: index + 1]
    history[-1].selected_pivot_index = None
    return history
