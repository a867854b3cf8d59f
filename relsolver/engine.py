""" Step-by-step relation solver with verification."""

"""
Takes a relation such as "(373.15 - x) * 3/2 = y" and a variable name,
isolates the variable with RelationSolver and returns a trail of
human-readable steps, followed by a symbolic (SymPy) and numeric (NumPy)
check of the answer.
"""

import logging
import time
from datetime import datetime

import numpy as np
import sympy
from sympy import Symbol, simplify

from relsolver import config
from relsolver.errors import InvalidInput
from relsolver.expression import is_identifier
from relsolver.relation import Relation
from relsolver.solver import RelationSolver

logger = logging.getLogger(__name__)

_ALLOWED_CHARS = set("abcdefghijklmnopqrstuvwxyz"
                     "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                     "0123456789"
                     " \t_.+-*/()=<>")


def _validate_input(relation_str: str, variable: str) -> None:
    """Reject over-long input and characters outside the grammar."""
    if len(relation_str) > config.MAX_INPUT_LENGTH:
        raise InvalidInput(
            relation_str,
            f"Input is too long ({len(relation_str)} characters, "
            f"limit {config.MAX_INPUT_LENGTH}).",
        )
    bad = {ch for ch in relation_str if ch not in _ALLOWED_CHARS}
    if bad:
        bad_sorted = " ".join(sorted(bad))
        raise InvalidInput(
            relation_str,
            f"Invalid character(s): {bad_sorted}\n"
            f"Only letters, numbers, '_', '.', and the symbols "
            f"+ - * / ( ) = < > are allowed.",
        )
    if not is_identifier(variable):
        raise InvalidInput(variable, f"'{variable}' is not a valid variable name.")


# ── Verification ────────────────────────────────────────────────────────

def _symbolic_residual(original: Relation, solved: Relation, variable: str):
    """Substitute the solved boundary into ``lhs - rhs`` and simplify."""
    difference = original.lhs.to_sympy() - original.rhs.to_sympy()
    return simplify(difference.subs(Symbol(variable), solved.rhs.to_sympy()))


def _numeric_check(original: Relation, solved: Relation, variable: str) -> tuple:
    """Compare the relations at random sample points.

    Returns ``(agreeing, checked)``; points where either side is not
    finite (division by zero) are skipped.
    """
    samples = config.VERIFY_SAMPLES
    rng = np.random.default_rng(config.VERIFY_SEED)
    names = sorted(original.variables() | solved.variables())
    values = {name: rng.uniform(-config.VERIFY_RANGE, config.VERIFY_RANGE, samples)
              for name in names}

    with np.errstate(divide="ignore", invalid="ignore"):
        if solved.is_equation:
            values[variable] = np.broadcast_to(
                np.asarray(solved.rhs.evaluate(values), dtype=float), (samples,))
            lhs = np.broadcast_to(np.asarray(original.lhs.evaluate(values), dtype=float), (samples,))
            rhs = np.broadcast_to(np.asarray(original.rhs.evaluate(values), dtype=float), (samples,))
            finite = np.isfinite(lhs) & np.isfinite(rhs)
            agree = np.isclose(lhs, rhs, atol=config.VERIFY_TOLERANCE)
        else:
            finite = np.ones(samples, dtype=bool)
            for expression in (original.lhs, original.rhs, solved.rhs):
                finite &= np.isfinite(np.broadcast_to(
                    np.asarray(expression.evaluate(values), dtype=float), (samples,)))
            agree = np.broadcast_to(original.holds(values) == solved.holds(values), (samples,))

    return int(np.count_nonzero(agree & finite)), int(np.count_nonzero(finite))


def _verification_steps(original: Relation, solved: Relation, variable: str) -> tuple:
    """Build the verification trail; returns ``(steps, passed)``."""
    boundary = str(solved.rhs)
    steps = [{
        "description": "Start with the original relation",
        "expression": str(original),
        "explanation": (
            f"We substitute {variable} = {boundary} back into the original "
            f"relation to check the answer."
            if solved.is_equation else
            f"At the boundary {variable} = {boundary} both sides of the "
            f"original relation must be equal; away from it the original and "
            f"the solved relation must agree."
        ),
    }]

    residual = _symbolic_residual(original, solved, variable)
    symbolic_ok = residual == 0
    steps.append({
        "description": f"Substitute {variable} = {boundary} into LHS - RHS",
        "expression": f"LHS - RHS = {residual}" + ("  ✓" if symbolic_ok else ""),
        "explanation": (
            "The difference of both sides simplifies to 0, so the boundary is exact."
            if symbolic_ok else
            f"The difference of both sides simplifies to {residual}, not 0."
        ),
    })

    agreeing, checked = _numeric_check(original, solved, variable)
    numeric_ok = agreeing == checked
    steps.append({
        "description": "Numeric spot check",
        "expression": f"{agreeing}/{checked} sample points agree",
        "explanation": (
            f"Every variable was sampled at {config.VERIFY_SAMPLES} random points "
            f"in [-{config.VERIFY_RANGE:g}, {config.VERIFY_RANGE:g}]; "
            f"{checked} of them were finite and {agreeing} matched."
        ),
    })

    for i, step in enumerate(steps, start=1):
        step["step_number"] = i
    return steps, symbolic_ok and numeric_ok


# ── Main public entry point ─────────────────────────────────────────────

_STAGE_TEXT = {
    "expand": (
        "Expand both sides",
        "We distribute multiplication (and division of a sum) over addition "
        "and subtraction so that each side becomes a sum of simple terms.",
    ),
    "collect": (
        "Move every term to the left side",
        "We subtract the right side from both sides, so the relation now "
        "compares a single expression against 0.",
    ),
    "factor": (
        "Factor out {variable}",
        "Every term that contains {variable} is written as {variable} times "
        "its coefficient, and those coefficients are added together.",
    ),
    "isolate": (
        "Divide both sides by the coefficient of {variable}",
        "We move the remaining terms to the right side and divide by the "
        "coefficient of {variable}.",
    ),
}


def solve_relation(relation_str: str, variable: str) -> dict:
    """
    Solve a relation for *variable* step by step.

    Returns a dict with trail-format sections:
      - given, method, steps, final_answer, verification_steps, summary
    """
    t_start = time.perf_counter()

    _validate_input(relation_str, variable)
    relation = Relation.from_string(relation_str)

    steps = [{
        "description": "Starting with the original relation",
        "expression": str(relation),
        "explanation": (
            f"We are given {relation}. Our goal is to isolate {variable} "
            f"on the left side."
        ),
    }]

    previous = relation
    solved = relation
    for stage in RelationSolver(relation).stages(variable):
        solved = stage.relation
        if stage.name == "expand" and solved == previous:
            continue
        description, explanation = _STAGE_TEXT[stage.name]
        if stage.name == "isolate" and solved.operator != relation.operator:
            explanation += (
                " The coefficient is negative, so the direction of the "
                f"relation flips from {relation.operator} to {solved.operator}."
            )
        steps.append({
            "description": description.format(variable=variable),
            "expression": str(solved),
            "explanation": explanation.format(variable=variable),
        })
        previous = solved

    for i, step in enumerate(steps, start=1):
        step["step_number"] = i

    verification_steps, passed = _verification_steps(relation, solved, variable)
    if not passed:
        logger.warning("verification failed for %s solved for %s: %s",
                       relation, variable, solved)

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)
    logger.debug("solved %s for %s in %sms", relation, variable, runtime_ms)

    given = {
        "problem": f"Solve for {variable}: {relation}",
        "inputs": {
            "relation":   str(relation),
            "left_side":  str(relation.lhs),
            "right_side": str(relation.rhs),
            "operator":   relation.operator,
            "variable":   variable,
        },
    }
    method = {
        "name": "Symbolic Isolation (Linear)",
        "description": "Isolate the variable by expanding, collecting and factoring.",
        "parameters": {
            "relation_type": "Equation" if relation.is_equation else "Inequality",
            "variable": variable,
            "approach": "Expand → Collect → Factor → Divide",
        },
    }
    summary = {
        "runtime_ms": runtime_ms,
        "total_steps": len(steps),
        "verification_steps": len(verification_steps),
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "library": f"SymPy {sympy.__version__}, NumPy {np.__version__}",
        "validation_status": "pass" if passed else "fail",
    }
    return {
        "relation": relation_str,
        "given": given,
        "method": method,
        "steps": steps,
        "final_answer": str(solved),
        "verification_steps": verification_steps,
        "summary": summary,
    }
