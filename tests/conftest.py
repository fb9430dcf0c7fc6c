import pytest

from simplex_stepper import Problem


@pytest.fixture
def two_phase_problem():
    """minimize x1 - x2
    subject to  2x1 - 4x2 - x3 + x4      = -3
                4x1 - 3x2 - x3 + x4 + x5 =  6
                 x1 + 4x2 + x3      + x5 = 15

    Optimum x = (0, 2, 0, 5, 7) with objective -2.
    """
    return Problem(
        objective_coefficients=[1, -1, 0, 0, 0],
        constraint_matrix=[[2, -4, -1, 1, 0], [4, -3, -1, 1, 1], [1, 4, 1, 0, 1]],
        right_hand_side=[-3, 6, 15],
        objective_type="min",
    )


@pytest.fixture
def unbounded_problem():
    """maximize x1 subject to x1 - x2 = 0."""
    return Problem([1, 0], [[1, -1]], [0], "max")


@pytest.fixture
def inconsistent_problem():
    """x1 + x2 cannot equal both 1 and 2."""
    return Problem([1, 1], [[1, 1], [1, 1]], [1, 2], "max")


@pytest.fixture
def redundant_problem():
    """maximize x1 + 2x2 subject to x1 + x2 = 2 stated twice (once doubled)."""
    return Problem([1, 2], [[1, 1], [2, 2]], [2, 4], "max")
