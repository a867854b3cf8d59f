"""Centralized configuration for RelSolver.

Values can be overridden with environment variables prefixed with
``RELSOLVER_`` (e.g. ``RELSOLVER_VERIFY_SAMPLES=100``).
"""

import os

import sympy as sp

VERSION = "0.3.0"

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("RELSOLVER_MAX_INPUT_LENGTH", "1000"))  # characters

# Numeric verification of solved relations
VERIFY_SAMPLES = int(os.getenv("RELSOLVER_VERIFY_SAMPLES", "32"))
VERIFY_SEED = int(os.getenv("RELSOLVER_VERIFY_SEED", "0"))
VERIFY_TOLERANCE = float(os.getenv("RELSOLVER_VERIFY_TOLERANCE", "1e-6"))
VERIFY_RANGE = float(os.getenv("RELSOLVER_VERIFY_RANGE", "10"))  # samples drawn from [-R, R]

# Identifiers with this prefix may name a built-in math constant
CONSTANT_PREFIX = os.getenv("RELSOLVER_CONSTANT_PREFIX", "M_")

# Named constants left untouched when rendering and never solved for.
# Names follow the C math.h convention.
NAMED_CONSTANTS = {
    "M_PI": sp.pi,
    "M_PI_2": sp.pi / 2,
    "M_PI_4": sp.pi / 4,
    "M_1_PI": 1 / sp.pi,
    "M_2_PI": 2 / sp.pi,
    "M_2_SQRTPI": 2 / sp.sqrt(sp.pi),
    "M_E": sp.E,
    "M_LOG2E": 1 / sp.log(2),
    "M_LOG10E": 1 / sp.log(10),
    "M_LN2": sp.log(2),
    "M_LN10": sp.log(10),
    "M_SQRT2": sp.sqrt(2),
    "M_SQRT1_2": 1 / sp.sqrt(2),
}


def is_named_constant(name: str) -> bool:
    return name.startswith(CONSTANT_PREFIX) and name in NAMED_CONSTANTS


def constant_values() -> dict:
    """Float values of the named constants, for evaluating rendered snippets."""
    return {name: float(value) for name, value in NAMED_CONSTANTS.items()}
