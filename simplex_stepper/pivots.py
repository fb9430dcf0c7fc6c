"""Entering/leaving variable selection and classification of a tableau."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .tableau import is_negative, is_positive

Pivot = Tuple[int, int]


class SolutionType(str, Enum):
    NOT_SOLVED = "not-solved"
    OPTIMAL = "optimal"
    UNBOUNDED = "unbounded"
    INFEASIBLE = "infeasible"


def choose_leaving(matrix: np.ndarray, col: int) -> Optional[int]:
    """Minimum-ratio row for column `col`, or None when no coefficient is positive.

    Ties keep the first (lowest) row.
    """
    best_row = None
    best_ratio = float("inf")
    for i in range(matrix.shape[0]):
        aij = matrix[i, col]
        if not is_positive(aij):
            continue
        ratio = matrix[i, -1] / aij
        if ratio < best_ratio:
            best_ratio = ratio
            best_row = i
    return best_row


def find_potential_pivots(matrix: np.ndarray, z: Sequence[float]) -> Tuple[List[Pivot], bool]:
    """One (row, col) candidate per column with a negative reduced cost.

    Returns the candidates in column order and whether any reduced cost was
    negative at all; a negative column without a positive coefficient yields no
    candidate.
    """
    M = np.asarray(matrix, dtype=float)
    pivots: List[Pivot] = []
    has_negative = False
    for j in range(len(z) - 1):
        if not is_negative(z[j]):
            continue
        has_negative = True
        row = choose_leaving(M, j)
        if row is not None:
            pivots.append((row, j))
    return pivots, has_negative


def classify(has_negative: bool, potential_pivots: Sequence[Pivot]) -> SolutionType:
    if not has_negative:
        return SolutionType.OPTIMAL
    if not potential_pivots:
        return SolutionType.UNBOUNDED
    return SolutionType.NOT_SOLVED
