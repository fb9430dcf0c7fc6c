"""End-to-end solves with pinned, hand-derived results."""

import logging
import math

import pytest

from simplex_stepper import (
    Method,
    Problem,
    SimplexDidNotConverge,
    SolutionType,
    advance,
    build_solution,
    extract,
    solve_complete,
)
from simplex_stepper.solution import objective_from_z


def test_two_phase_fixture(two_phase_problem):
    solution = solve_complete(two_phase_problem)

    assert solution.solution_type is SolutionType.OPTIMAL
    assert solution.method is Method.ARTIFICIAL
    assert len(solution.steps) == 6
    assert solution.x == pytest.approx({"x1": 0.0, "x2": 2.0, "x3": 0.0, "x4": 5.0, "x5": 7.0})
    assert solution.objective == pytest.approx(-2.0)


def test_single_phase_from_feasible_basis(two_phase_problem):
    solution = solve_complete(two_phase_problem, [3, 4, 5])

    assert solution.method is Method.SIMPLEX
    assert solution.solution_type is SolutionType.OPTIMAL
    assert solution.x == pytest.approx({"x1": 0.0, "x2": 2.0, "x3": 0.0, "x4": 5.0, "x5": 7.0})
    assert solution.objective == pytest.approx(-2.0)


def test_single_phase_from_optimal_basis_needs_no_pivot(two_phase_problem):
    solution = solve_complete(two_phase_problem, [2, 4, 5])

    assert len(solution.steps) == 1
    assert solution.solution_type is SolutionType.OPTIMAL
    assert solution.objective == pytest.approx(-2.0)


def test_linearly_dependent_basis_is_infeasible():
    problem = Problem([1, 1, 1, 1], [[1, 2, 1, 0], [2, 4, 0, 1]], [4, 6], "max")

    solution = solve_complete(problem, [1, 2])

    assert solution.solution_type is SolutionType.INFEASIBLE
    assert len(solution.steps) == 1
    assert solution.steps[0].matrix == []
    assert solution.x == {}
    assert math.isnan(solution.objective)


@pytest.mark.parametrize("basis", [[1], [1, 1, 2], [1, 2, 9], [1, 2, 5]])
def test_unusable_basis_is_infeasible(two_phase_problem, basis):
    solution = solve_complete(two_phase_problem, basis)

    assert solution.solution_type is SolutionType.INFEASIBLE
    assert solution.x == {}
    assert math.isnan(solution.objective)


def test_unbounded_fixture(unbounded_problem):
    solution = solve_complete(unbounded_problem)

    assert solution.solution_type is SolutionType.UNBOUNDED
    assert len(solution.steps) == 2
    assert solution.x == {"x1": 0.0, "x2": 0.0}
    assert solution.objective == 0.0


def test_phase_one_detects_infeasible_problem(inconsistent_problem):
    solution = solve_complete(inconsistent_problem)

    assert solution.solution_type is SolutionType.INFEASIBLE
    assert solution.x == {}
    assert math.isnan(solution.objective)


def test_redundant_constraint(redundant_problem):
    solution = solve_complete(redundant_problem)

    assert solution.solution_type is SolutionType.OPTIMAL
    assert solution.x == pytest.approx({"x1": 0.0, "x2": 2.0})
    assert solution.objective == pytest.approx(4.0)


def test_max_and_min_of_negated_objective_agree():
    A = [[1, 1, 1, 0], [1, 3, 0, 1]]
    b = [4, 6]
    as_max = solve_complete(Problem([2, 3, 0, 0], A, b, "max"))
    as_min = solve_complete(Problem([-2, -3, 0, 0], A, b, "min"))

    assert as_max.solution_type is as_min.solution_type is SolutionType.OPTIMAL
    assert as_max.x == pytest.approx(as_min.x)
    assert as_max.x == pytest.approx({"x1": 3.0, "x2": 1.0, "x3": 0.0, "x4": 0.0})
    assert as_max.objective == pytest.approx(9.0)
    assert as_min.objective == pytest.approx(-as_max.objective)
    # same internal z-row value, sign undone at extraction
    assert as_max.steps[-1].z[-1] == pytest.approx(as_min.steps[-1].z[-1])


def test_objective_matches_z_row_for_every_optimal_branch(two_phase_problem):
    first = advance(two_phase_problem, [])
    for choice in range(len(first[0].potential_pivots)):
        steps = advance(two_phase_problem, first, pivot_index=choice)
        while steps[-1].solution_type is SolutionType.NOT_SOLVED:
            steps = advance(two_phase_problem, steps)
        x, objective = extract(two_phase_problem, steps)
        assert steps[-1].solution_type is SolutionType.OPTIMAL
        c = two_phase_problem.objective_coefficients
        assert objective == pytest.approx(sum(ci * x[f"x{i + 1}"] for i, ci in enumerate(c)))
        assert objective == pytest.approx(objective_from_z(two_phase_problem, steps[-1]))


def test_truncated_history_reports_current_point(two_phase_problem):
    steps = advance(two_phase_problem, [])
    for _ in range(3):
        steps = advance(two_phase_problem, steps)

    solution = build_solution(two_phase_problem, steps)

    # first Phase II tableau
    assert solution.solution_type is SolutionType.NOT_SOLVED
    assert solution.x == pytest.approx({"x1": 4.0, "x2": 1.0, "x3": 7.0, "x4": 0.0, "x5": 0.0})
    assert solution.objective == pytest.approx(3.0)


def test_phase_one_history_ignores_artificial_values(two_phase_problem):
    steps = advance(two_phase_problem, [])

    x, objective = extract(two_phase_problem, steps)

    assert x == {"x1": 0.0, "x2": 0.0, "x3": 0.0, "x4": 0.0, "x5": 0.0}
    assert objective == 0.0


def test_empty_history_has_no_value(two_phase_problem):
    x, objective = extract(two_phase_problem, [])

    assert x == {}
    assert math.isnan(objective)


def test_z_row_disagreement_is_logged(two_phase_problem, caplog):
    steps = solve_complete(two_phase_problem).steps
    steps[-1].z[-1] += 1.0

    with caplog.at_level(logging.WARNING, logger="simplex_stepper.solution"):
        _, objective = extract(two_phase_problem, steps)

    assert objective == pytest.approx(-2.0)
    assert "objective mismatch" in caplog.text


def test_iteration_cap_raises(two_phase_problem):
    with pytest.raises(SimplexDidNotConverge) as excinfo:
        solve_complete(two_phase_problem, max_iterations=2)

    assert len(excinfo.value.steps) == 3
    assert excinfo.value.steps[-1].solution_type is SolutionType.NOT_SOLVED


def test_solution_to_dict(two_phase_problem):
    data = solve_complete(two_phase_problem).to_dict()

    assert data["status"] == "optimal"
    assert data["method"] == "artificial"
    assert data["iterations"] == 5
    assert data["objective"] == pytest.approx(-2.0)
    assert len(data["steps"]) == 6

    infeasible = solve_complete(two_phase_problem, [1]).to_dict()
    assert infeasible["objective"] is None
