"""
RelSolver — parse arithmetic relations and solve them for one variable.
"""

from relsolver.config import VERSION as __version__
from relsolver.errors import (
    IndeterminateSign,
    InvalidInput,
    InvalidOperand,
    MissingRelationOperator,
    ParseError,
    RelSolverError,
    SolveError,
    UnbalancedParentheses,
    UnknownRelationOperator,
    UnknownVariable,
    UnsupportedDegree,
    WrongCountRelationOperators,
)
from relsolver.tokens import Token, TokenKind, tokenize
from relsolver.expression import Expression, Leaf, Node, parse_tokens
from relsolver.relation import Relation
from relsolver.solver import RelationSolver, SolveStage, solve_for
from relsolver.engine import solve_relation

__all__ = [
    "Expression",
    "IndeterminateSign",
    "InvalidInput",
    "InvalidOperand",
    "Leaf",
    "MissingRelationOperator",
    "Node",
    "ParseError",
    "Relation",
    "RelationSolver",
    "RelSolverError",
    "SolveError",
    "SolveStage",
    "Token",
    "TokenKind",
    "UnbalancedParentheses",
    "UnknownRelationOperator",
    "UnknownVariable",
    "UnsupportedDegree",
    "WrongCountRelationOperators",
    "parse_tokens",
    "solve_for",
    "solve_relation",
    "tokenize",
]
