"""Solve a relation for one of its variables.

Works in four stages, each producing a new relation:

1. expand      ``(z * (4 + x)) = ((6 * y) + (5 * x))``
               ``((z * 4) + (z * x)) = ((6 * y) + (5 * x))``
2. collect     ``(((z * 4) + (z * x)) - ((6 * y) + (5 * x))) = 0``
3. factor      ``(((x * (z - 5)) + (z * 4)) - (6 * y)) = 0``
4. isolate     ``x = (((6 * y) - (z * 4)) / (z - 5))``

Only first-degree occurrences of the variable are supported.
"""

import logging
from collections import namedtuple
from typing import Iterator

from relsolver import algebra
from relsolver.errors import IndeterminateSign, UnknownVariable
from relsolver.expression import Leaf, Node
from relsolver.relation import MIRRORED, Relation

logger = logging.getLogger(__name__)

SolveStage = namedtuple("SolveStage", ["name", "relation"])


class RelationSolver:
    def __init__(self, relation: Relation):
        self.relation = relation

    def stages(self, variable: str) -> Iterator[SolveStage]:
        """Yield the relation after each stage; the last one is the answer.

        Raises UnknownVariable, UnsupportedDegree or IndeterminateSign while
        iterating.
        """
        relation = self.relation
        if variable not in relation.variables():
            raise UnknownVariable(variable, relation)

        expanded = Relation(relation.lhs.expand(), relation.operator, relation.rhs.expand())
        logger.debug("expand: %s", expanded)
        yield SolveStage("expand", expanded)

        difference = Node(expanded.lhs, "-", expanded.rhs).expand()
        collected = Relation(difference, relation.operator, algebra.ZERO)
        logger.debug("collect: %s", collected)
        yield SolveStage("collect", collected)

        coefficients, remainder = algebra.collect(difference, variable)
        # every occurrence cancels out, possibly only symbolically as in x * (y - y)
        if not coefficients or algebra.is_zero(algebra.join_terms(coefficients)):
            raise UnknownVariable(variable, relation)
        factored = Relation(algebra.factor_terms(variable, coefficients, remainder),
                            relation.operator, algebra.ZERO)
        logger.debug("factor: %s", factored)
        yield SolveStage("factor", factored)

        isolated = self._isolate(variable, coefficients, remainder)
        logger.debug("isolate: %s", isolated)
        yield SolveStage("isolate", isolated)

    def solve_for(self, variable: str) -> Relation:
        """Return an equivalent relation with *variable* alone on the left."""
        stage = None
        for stage in self.stages(variable):
            pass
        return stage.relation

    def _isolate(self, variable, coefficients, remainder) -> Relation:
        operator = self.relation.operator

        # -a*x - b*x ~ 0  is  a*x + b*x ~' 0 with the direction mirrored
        if all(sign < 0 for sign, _ in coefficients):
            coefficients = algebra.negate(coefficients)
            remainder = algebra.negate(remainder)
            operator = MIRRORED[operator]

        coefficient = algebra.join_terms(coefficients)
        sign = algebra.constant_sign(coefficient)
        if sign is not None and sign < 0:
            coefficients = algebra.negate(coefficients)
            remainder = algebra.negate(remainder)
            operator = MIRRORED[operator]
            coefficient = algebra.join_terms(coefficients)
        elif sign is None and operator != "=":
            raise IndeterminateSign(variable, coefficient)

        # Moving the remainder across flips its sign
        rhs = algebra.divide(algebra.negate(remainder), coefficient)
        return Relation(Leaf(variable), operator, rhs)


def solve_for(relation: Relation, variable: str) -> Relation:
    return RelationSolver(relation).solve_for(variable)
