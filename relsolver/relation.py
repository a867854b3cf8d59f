"""Binary relations: two expressions joined by =, <, <=, > or >=."""

from dataclasses import dataclass
from typing import FrozenSet

import numpy as np

from relsolver import config
from relsolver.errors import (
    MissingRelationOperator,
    UnknownRelationOperator,
    WrongCountRelationOperators,
)
from relsolver.expression import Expression
from relsolver.tokens import RELATION_SYMBOLS, Token, TokenKind, tokenize

RELATION_OPERATORS = ("=", "<", "<=", ">", ">=")

# Direction after multiplying both sides by a negative number
MIRRORED = {"=": "=", "<": ">", "<=": ">=", ">": "<", ">=": "<="}


@dataclass(frozen=True)
class Relation:
    """An immutable pair of expressions related by a relation operator.

    The operator may be given as a string or as a relation ``Token``; the
    sides may be given as expressions or as strings to parse.
    """

    lhs: Expression
    operator: str
    rhs: Expression

    def __post_init__(self):
        operator = self.operator
        if isinstance(operator, Token):
            if operator.kind is not TokenKind.RELATION:
                raise UnknownRelationOperator(operator.text)
            operator = operator.text
        if operator not in RELATION_OPERATORS:
            raise UnknownRelationOperator(operator)
        object.__setattr__(self, "operator", operator)

        for side in ("lhs", "rhs"):
            value = getattr(self, side)
            if isinstance(value, str):
                object.__setattr__(self, side, Expression.from_string(value))
            elif not isinstance(value, Expression):
                raise TypeError(f"The {side} of a relation must be an expression.")

    @classmethod
    def from_string(cls, text: str) -> "Relation":
        """Parse ``"<expression> <operator> <expression>"``.

        Raises MissingRelationOperator or WrongCountRelationOperators unless
        exactly one relation operator is found.
        """
        tokens = tokenize(text, RELATION_SYMBOLS)
        positions = [i for i, token in enumerate(tokens)
                     if token.kind is TokenKind.RELATION]
        if not positions:
            raise MissingRelationOperator(text)
        if len(positions) > 1:
            raise WrongCountRelationOperators(text, len(positions))

        index = positions[0]
        lhs = "".join(token.text for token in tokens[:index])
        rhs = "".join(token.text for token in tokens[index + 1:])
        return cls(Expression.from_string(lhs),
                   tokens[index].text,
                   Expression.from_string(rhs))

    def __str__(self) -> str:
        return f"{self.lhs} {self.operator} {self.rhs}"

    @property
    def is_equation(self) -> bool:
        return self.operator == "="

    def variables(self) -> FrozenSet[str]:
        return self.lhs.variables() | self.rhs.variables()

    def holds(self, values: dict):
        """Evaluate the relation with NumPy; returns booleans.

        Equality is tested within ``config.VERIFY_TOLERANCE``.
        """
        lhs = self.lhs.evaluate(values)
        rhs = self.rhs.evaluate(values)
        if self.operator == "=":
            return np.isclose(lhs, rhs, atol=config.VERIFY_TOLERANCE)
        if self.operator == "<":
            return np.less(lhs, rhs)
        if self.operator == "<=":
            return np.less_equal(lhs, rhs)
        if self.operator == ">":
            return np.greater(lhs, rhs)
        return np.greater_equal(lhs, rhs)
