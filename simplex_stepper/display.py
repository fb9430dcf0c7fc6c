"""Number formatting and plain-text tableau rendering."""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import List, Optional, Union

from .steps import Step

Num = Union[int, float, Fraction, Decimal]


def F(x: Num) -> Fraction:
    """Best rational approximation of a computed value.

    Solver values are floats, so the denominator is limited to keep results
    such as 0.333... readable as 1/3.
    """
    if isinstance(x, Fraction):
        return x
    if isinstance(x, (int, Decimal)):
        return Fraction(x)
    return Fraction.from_float(float(x)).limit_denominator(10**6)


def fmt_frac(x: Num) -> str:
    if isinstance(x, float) and (math.isnan(x) or math.isinf(x)):
        return str(x)
    fr = F(x)
    if fr.denominator == 1:
        return str(fr.numerator)
    sign = '-' if fr.numerator < 0 else ''
    return f"{sign}{abs(fr.numerator)}/{fr.denominator}"


def fmt_decimal(x: Num) -> str:
    x = float(x)
    if math.isnan(x) or math.isinf(x):
        return str(x)
    if abs(x - round(x)) < 1e-6:
        return str(int(round(x)))
    return f"{x:.4f}".rstrip("0").rstrip(".")


def fmt_number(x: Num, fractions: bool = False) -> str:
    return fmt_frac(x) if fractions else fmt_decimal(x)


def format_step(step: Step, header: str = "", fractions: bool = False) -> List[str]:
    """Render a step as text lines: one row per basic variable, then the z-row.

    The selected pivot cell is marked with a circle; the candidate pivots are
    listed underneath.
    """
    lines = [header] if header else []
    if not step.row_variables and not step.cols_variables:
        lines.append(f"(no tableau) status: {step.solution_type.value}")
        return lines

    def cell(x: float) -> str:
        return fmt_number(x, fractions)

    headers = ["BV"] + list(step.cols_variables) + ["RHS"]
    rows: List[List[str]] = []
    chosen: Optional[tuple] = step.selected_pivot
    for i, name in enumerate(step.row_variables):
        cells = [name]
        for j, value in enumerate(step.matrix[i]):
            s = cell(value)
            if chosen is not None and chosen == (i, j):
                s = f"⭕{s}"
            cells.append(s)
        rows.append(cells)
    rows.append(["z"] + [cell(v) for v in step.z])

    colw = max(6, max(len(s) for s in headers + [c for r in rows for c in r]) + 2)
    lines.append(" ".join(f"{h:>{colw}}" for h in headers))
    lines.append("-" * (len(headers) * (colw + 1)))
    for cells in rows[:-1]:
        lines.append(" ".join(f"{c:>{colw}}" for c in cells))
    lines.append("-" * (len(headers) * (colw + 1)))
    lines.append(" ".join(f"{c:>{colw}}" for c in rows[-1]))

    if step.potential_pivots:
        options = ", ".join(
            f"[{k}] {step.cols_variables[c]} in / {step.row_variables[r]} out"
            for k, (r, c) in enumerate(step.potential_pivots)
        )
        lines.append(f"Candidate pivots: {options}")
    lines.append(f"Status: {step.solution_type.value}")
    return lines


def print_step(step: Step, header: str = "", fractions: bool = False) -> None:
    print()
    print("\n".join(format_step(step, header=header, fractions=fractions)))
