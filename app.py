import json
from decimal import Decimal

import pandas as pd
import streamlit as st

from simplex_stepper import Problem, SolutionType, advance, build_solution, rewind, solve_complete
from simplex_stepper.display import fmt_number
from simplex_stepper.solution import SimplexDidNotConverge

st.set_page_config(page_title="Simplex Stepper", layout="wide")
st.title("Simplex (Tableau) — Step, Branch & Rewind")

# Sidebar options
with st.sidebar:
    st.header("Options")
    is_min = st.checkbox("Minimize (default: Maximize)", value=True)
    fractions = st.checkbox("Show fractions", value=False)
    basis_text = st.text_input("Starting basis (1-based, e.g. 3 4 5; empty = artificial basis)", "")

# Default JSON template
default_json = {
    "c": [1, -1, 0, 0, 0],
    "A": [[2, -4, -1, 1, 0], [4, -3, -1, 1, 1], [1, 4, 1, 0, 1]],
    "b": [-3, 6, 15],
}

st.subheader("Model JSON")
json_text = st.text_area("Edit LP JSON here (A x = b, x >= 0)", json.dumps(default_json, indent=2), height=220)

if "steps" not in st.session_state:
    st.session_state.steps = []


def parse_problem():
    try:
        cfg = json.loads(json_text, parse_float=Decimal)
        cfg["maximize"] = not is_min
        return Problem.from_dict(cfg)
    except (ValueError, KeyError, TypeError) as e:
        st.error(f"Invalid LP: {e}")
        return None


def parse_basis():
    parts = basis_text.replace(",", " ").split()
    try:
        return [int(p) for p in parts]
    except ValueError:
        st.error(f"Invalid basis: {basis_text!r}")
        return None


def tableau_frame(step):
    rows = [[fmt_number(v, fractions) for v in row] for row in step.matrix]
    rows.append([fmt_number(v, fractions) for v in step.z])
    return pd.DataFrame(
        rows,
        index=list(step.row_variables) + ["z"],
        columns=list(step.cols_variables) + ["RHS"],
    )


problem = parse_problem()
basis = parse_basis()

col_solve, col_step, col_reset = st.columns([1, 1, 1])
if col_reset.button("Reset"):
    st.session_state.steps = []

if problem is not None and basis is not None:
    if col_solve.button("Solve"):
        try:
            st.session_state.steps = solve_complete(problem, basis).steps
        except SimplexDidNotConverge as e:
            st.session_state.steps = e.steps
            st.error(str(e))
    if col_step.button("Start" if not st.session_state.steps else "Next step"):
        choice = st.session_state.get("pivot_choice", 0)
        st.session_state.steps = advance(problem, st.session_state.steps, basis, choice)
        st.session_state.pop("pivot_choice", None)

    steps = st.session_state.steps
    st.subheader("Iterations / Tableaux")
    for k, step in enumerate(steps):
        st.markdown(f"**Step {k}** · {step.solution_type.value}")
        if step.matrix:
            st.dataframe(tableau_frame(step))
        else:
            st.info("No tableau: the starting basis is invalid or infeasible.")
        if step.selected_pivot is not None:
            r, c = step.selected_pivot
            st.caption(f"Pivot: {step.cols_variables[c]} enters, {step.row_variables[r]} leaves")
        if k < len(steps) - 1 and st.button("Rewind here", key=f"rewind-{k}"):
            st.session_state.steps = rewind(steps, k)
            st.session_state.pop("pivot_choice", None)
            st.rerun()

    if steps and steps[-1].solution_type is SolutionType.NOT_SOLVED:
        last = steps[-1]
        labels = [
            f"{last.cols_variables[c]} in / {last.row_variables[r]} out"
            for r, c in last.potential_pivots
        ]
        st.radio(
            "Pivot for the next step",
            options=list(range(len(labels))),
            format_func=lambda i: labels[i],
            key="pivot_choice",
        )

    if steps:
        res = build_solution(problem, steps, basis)
        st.subheader("Result")
        st.json({
            "status": res.solution_type.value,
            "objective": fmt_number(res.objective, fractions) if res.x else None,
            "solution": {k: fmt_number(v, fractions) for k, v in res.x.items()},
            "iterations": len(steps) - 1,
            "method": res.method.value,
        })
