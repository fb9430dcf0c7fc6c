"""
Problem model and tableau primitives.

- A Problem is an LP in canonical equality form: max/min c.x s.t. A x = b, x >= 0.
- Tableaux are kept compact: only the non-basic columns are stored, the RHS is
  the last column, and the basic columns are implied by the row labels.
- Variables are addressed by label ("x1", "x2", ...), never by position, since
  columns move and disappear between steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

EPS = 1e-10
MAX_DIMENSION = 16


def is_negative(x: float) -> bool:
    return x < -EPS


def is_positive(x: float) -> bool:
    return x > EPS


def is_zero(x: float) -> bool:
    return abs(x) < EPS


class ObjectiveType(str, Enum):
    MAX = "max"
    MIN = "min"


def label(index: int) -> str:
    """Label of the 1-based variable `index`."""
    return f"x{index}"


def label_index(name: str) -> int:
    """1-based variable index encoded in a label like 'x12'."""
    if not name.startswith("x") or not name[1:].isdigit():
        raise ValueError(f"not a variable label: {name!r}")
    return int(name[1:])


@dataclass(frozen=True)
class Problem:
    objective_coefficients: Tuple[float, ...]
    constraint_matrix: Tuple[Tuple[float, ...], ...]
    right_hand_side: Tuple[float, ...]
    objective_type: ObjectiveType = ObjectiveType.MAX

    def __post_init__(self):
        c = tuple(float(v) for v in self.objective_coefficients)
        A = tuple(tuple(float(v) for v in row) for row in self.constraint_matrix)
        b = tuple(float(v) for v in self.right_hand_side)
        n, m = len(c), len(b)
        if not 1 <= n <= MAX_DIMENSION:
            raise ValueError(f"number of variables must be between 1 and {MAX_DIMENSION}, got {n}")
        if not 1 <= m <= MAX_DIMENSION:
            raise ValueError(f"number of constraints must be between 1 and {MAX_DIMENSION}, got {m}")
        if len(A) != m:
            raise ValueError("constraint matrix must have one row per right-hand side value")
        for i, row in enumerate(A):
            if len(row) != n:
                raise ValueError(f"constraint row {i+1} has {len(row)} coefficients, expected {n}")
        # frozen: bypass __setattr__ to store the normalized tuples
        object.__setattr__(self, "objective_coefficients", c)
        object.__setattr__(self, "constraint_matrix", A)
        object.__setattr__(self, "right_hand_side", b)
        object.__setattr__(self, "objective_type", ObjectiveType(self.objective_type))

    @property
    def num_variables(self) -> int:
        return len(self.objective_coefficients)

    @property
    def num_constraints(self) -> int:
        return len(self.right_hand_side)

    @property
    def maximize(self) -> bool:
        return self.objective_type is ObjectiveType.MAX

    def variable_labels(self) -> List[str]:
        return [label(i) for i in range(1, self.num_variables + 1)]

    def artificial_labels(self) -> List[str]:
        n = self.num_variables
        return [label(n + i) for i in range(1, self.num_constraints + 1)]

    def is_artificial(self, name: str) -> bool:
        return label_index(name) > self.num_variables

    def costs(self) -> Dict[str, float]:
        """Objective coefficients of the internal maximization problem, by label."""
        sign = 1.0 if self.maximize else -1.0
        return {label(i + 1): sign * v for i, v in enumerate(self.objective_coefficients)}

    def artificial_costs(self) -> Dict[str, float]:
        # Phase I maximizes -sum(artificials)
        return {name: -1.0 for name in self.artificial_labels()}

    @classmethod
    def from_dict(cls, cfg: Mapping[str, object]) -> "Problem":
        """Build a Problem from the JSON layout {"c", "A", "b", "maximize"}.

        "objective": "max" | "min" is accepted in place of "maximize".
        """
        if "objective" in cfg:
            objective_type = ObjectiveType(str(cfg["objective"]).lower())
        else:
            maximize = bool(cfg.get("maximize", True))
            objective_type = ObjectiveType.MAX if maximize else ObjectiveType.MIN
        return cls(
            objective_coefficients=cfg["c"],
            constraint_matrix=cfg["A"],
            right_hand_side=cfg["b"],
            objective_type=objective_type,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "c": list(self.objective_coefficients),
            "A": [list(row) for row in self.constraint_matrix],
            "b": list(self.right_hand_side),
            "maximize": self.maximize,
        }


def build_matrix(problem: Problem) -> np.ndarray:
    """[A | b] as an m x (n+1) float array."""
    A = np.array(problem.constraint_matrix, dtype=float)
    b = np.array(problem.right_hand_side, dtype=float).reshape(-1, 1)
    return np.hstack([A, b])


def normalize_rhs(matrix: np.ndarray) -> np.ndarray:
    """Negate every row whose right-hand side is negative."""
    out = np.array(matrix, dtype=float)
    out[out[:, -1] < 0] *= -1
    return out


def pivot(matrix: np.ndarray, row: int, col: int) -> np.ndarray:
    T = np.array(matrix, dtype=float)
    piv = T[row, col]
    if is_zero(piv):
        raise RuntimeError("Zero pivot encountered")
    T[row] = T[row] / piv
    for i in range(T.shape[0]):
        if i == row:
            continue
        coeff = T[i, col]
        if coeff == 0:
            continue
        T[i] -= coeff * T[row]
    # exact unit column; removes rounding residue
    T[:, col] = 0.0
    T[row, col] = 1.0
    return T


def canonicalize(matrix: np.ndarray, basis_columns: Sequence[int]) -> Optional[np.ndarray]:
    """Gauss-Jordan elimination making column basis_columns[i] the i-th unit column.

    Returns None when the basis is singular, i.e. a column has no usable pivot
    in its own row or any row below it.
    """
    T = np.array(matrix, dtype=float)
    m = T.shape[0]
    if len(basis_columns) != m:
        return None
    for i, col in enumerate(basis_columns):
        if is_zero(T[i, col]):
            swap = next((k for k in range(i + 1, m) if not is_zero(T[k, col])), None)
            if swap is None:
                return None
            T[[i, swap]] = T[[swap, i]]
        T = pivot(T, i, col)
    return T


def expand(matrix: np.ndarray, col_labels: Sequence[str], row_labels: Sequence[str]) -> Tuple[np.ndarray, List[str]]:
    """Re-insert the basic columns of a compact tableau.

    Returns the full m x (k+m+1) matrix whose columns are col_labels followed by
    row_labels (an identity block) and the RHS, plus that column label list.
    """
    M = np.array(matrix, dtype=float).reshape(len(row_labels), len(col_labels) + 1)
    m = len(row_labels)
    full = np.hstack([M[:, :-1], np.eye(m), M[:, -1:]])
    return full, list(col_labels) + list(row_labels)


def compute_reduced_costs(
    costs: Mapping[str, float],
    matrix: np.ndarray,
    col_labels: Sequence[str],
    row_labels: Sequence[str],
) -> np.ndarray:
    """z-row of a compact canonical tableau, recomputed from scratch.

    z_j = sum_i c_B(i) * a_ij - c_j for every non-basic column j, and the last
    entry is sum_i c_B(i) * b_i, the value of the maximized objective.
    Labels missing from `costs` cost 0.
    """
    M = np.array(matrix, dtype=float).reshape(len(row_labels), len(col_labels) + 1)
    cb = np.array([costs.get(name, 0.0) for name in row_labels], dtype=float)
    cn = np.array([costs.get(name, 0.0) for name in col_labels] + [0.0], dtype=float)
    return cb @ M - cn
