"""Command-line front end: solve a JSON-described LP and print every tableau."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal
from typing import List, Optional, Sequence

from .display import fmt_number, print_step
from .solution import MAX_ITERATIONS, SimplexDidNotConverge, Solution, build_solution
from .steps import Step, advance
from .tableau import ObjectiveType, Problem

logger = logging.getLogger(__name__)


def load_problem(path: str, sense: Optional[str] = None) -> Problem:
    with open(path, "r") as f:
        # Decimal keeps "0.1" exact until the Problem converts it
        cfg = json.load(f, parse_float=Decimal)
    if sense is not None:
        cfg.pop("maximize", None)
        cfg["objective"] = sense
    return Problem.from_dict(cfg)


def run(
    problem: Problem,
    basis: Sequence[int] = (),
    choices: Sequence[int] = (),
    max_iterations: int = MAX_ITERATIONS,
) -> Solution:
    """Solve, taking pivot `choices[k]` at step k and the first candidate after that."""
    steps: List[Step] = advance(problem, [], basis)
    for k in range(max_iterations):
        if steps[-1].is_terminal:
            break
        choice = choices[k] if k < len(choices) else 0
        grown = advance(problem, steps, basis, choice)
        if len(grown) == len(steps):
            logger.warning("pivot choice %d is not available at step %d, taking 0", choice, k)
            grown = advance(problem, steps, basis, 0)
        steps = grown
    if not steps[-1].is_terminal:
        raise SimplexDidNotConverge(steps, max_iterations)
    return build_solution(problem, steps, basis)


def report(solution: Solution, fractions: bool = False, verbose: bool = True) -> None:
    if verbose:
        for k, step in enumerate(solution.steps):
            print_step(step, header=f"Step {k}", fractions=fractions)

    print("\n=== Result ===")
    print("Status:", solution.solution_type.value)
    if solution.x:
        print("Objective:", fmt_number(solution.objective, fractions))
        print("Solution x:", ", ".join(f"{k}={fmt_number(v, fractions)}" for k, v in solution.x.items()))
    print("Iterations:", max(len(solution.steps) - 1, 0))
    print("Method:", solution.method.value)


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Step-by-step tableau simplex (two-phase or from a given basis)")
    p.add_argument("json", help="Path to JSON file describing the LP: c, A, b, maximize")
    p.add_argument("--sense", choices=[t.value for t in ObjectiveType], default=None,
                   help="Objective sense (default: use JSON or max)")
    p.add_argument("--basis", type=int, nargs="+", default=[],
                   help="1-based starting basis; skips Phase I")
    p.add_argument("--choose", type=int, nargs="+", default=[],
                   help="Candidate pivot index to take at each successive step (default 0)")
    p.add_argument("--fractions", action="store_true", help="Show values as fractions")
    p.add_argument("--no-verbose", action="store_true", help="Hide tableau printouts")
    p.add_argument("--json-output", dest="json_output", action="store_true",
                   help="Print the solution and its steps as JSON")
    p.add_argument("--max-iterations", type=int, default=MAX_ITERATIONS)
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        problem = load_problem(args.json, args.sense)
    except (OSError, ValueError, KeyError) as e:
        logger.error("cannot load %s: %s", args.json, e)
        return 2

    try:
        solution = run(problem, args.basis, args.choose, args.max_iterations)
    except SimplexDidNotConverge as e:
        logger.error("%s", e)
        return 1

    if args.json_output:
        json.dump(solution.to_dict(), sys.stdout, indent=2)
        print()
    else:
        report(solution, fractions=args.fractions, verbose=not args.no_verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
