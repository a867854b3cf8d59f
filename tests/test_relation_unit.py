"""Tests for Relation parsing and construction."""

import dataclasses

import numpy as np
import pytest

from relsolver.errors import (
    InvalidOperand,
    MissingRelationOperator,
    UnbalancedParentheses,
    UnknownRelationOperator,
    WrongCountRelationOperators,
)
from relsolver.expression import Expression
from relsolver.relation import MIRRORED, Relation
from relsolver.tokens import Token


@pytest.mark.parametrize(
    "lhs,operator,rhs,expected",
    [
        ("x", "=", "12", "x = 12"),
        # Even though it's not true, this relation can still be expressed.
        ("1", "=", "2", "1 = 2"),
        ("x+12", "=", "y-75", "(x + 12) = (y - 75)"),
        ("z", "<=", "2", "z <= 2"),
        ("a*b", ">", "c", "(a * b) > c"),
    ],
)
def test_relation_to_string(lhs, operator, rhs, expected):
    relation = Relation(Expression.from_string(lhs), operator, Expression.from_string(rhs))
    assert str(relation) == expected
    assert str(Relation.from_string(expected)) == expected


@pytest.mark.parametrize(
    "raw,operator",
    [
        ("x<y", "<"),
        ("x <= y", "<="),
        ("x>y", ">"),
        ("x >= y", ">="),
        ("x = y", "="),
    ],
)
def test_from_string_matches_longest_operator(raw, operator):
    relation = Relation.from_string(raw)
    assert relation.operator == operator
    assert str(relation.lhs) == "x"
    assert str(relation.rhs) == "y"


def test_from_string_parses_each_side():
    relation = Relation.from_string("(373.15 - x) * 3/2 = y")
    assert str(relation.lhs) == "(((373.15 - x) * 3) / 2)"
    assert relation.variables() == {"x", "y"}
    assert relation.is_equation


def test_missing_relation_operator():
    with pytest.raises(MissingRelationOperator, match="No relation operator"):
        Relation.from_string("2 * x + 3")


@pytest.mark.parametrize("raw", ["x = 1 = 2", "x < y < z", "x =< 2", "a >= b <= c"])
def test_wrong_count_relation_operators(raw):
    with pytest.raises(WrongCountRelationOperators) as excinfo:
        Relation.from_string(raw)
    assert excinfo.value.count >= 2


@pytest.mark.parametrize("raw,error", [
    ("= 5", InvalidOperand),
    ("x =", InvalidOperand),
    ("(x + 1 = 2", UnbalancedParentheses),
    ("x @ 1 = 2", InvalidOperand),
])
def test_from_string_propagates_expression_errors(raw, error):
    with pytest.raises(error):
        Relation.from_string(raw)


@pytest.mark.parametrize("operator", ["==", "!=", "≠", "+", ""])
def test_unknown_relation_operator(operator):
    with pytest.raises(UnknownRelationOperator):
        Relation(Expression.from_string("x"), operator, Expression.from_string("1"))


def test_accepts_relation_tokens_and_strings():
    relation = Relation("x + 1", Token.relation(">="), "y")
    assert str(relation) == "(x + 1) >= y"
    assert relation.operator == ">="
    with pytest.raises(UnknownRelationOperator):
        Relation("x", Token.operand("="), "y")


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        Relation.from_string("x")


def test_is_immutable():
    relation = Relation.from_string("x = 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        relation.operator = "<"


def test_mirrored_operators():
    assert MIRRORED == {"=": "=", "<": ">", "<=": ">=", ">": "<", ">=": "<="}


def test_holds():
    values = {"x": np.array([1.0, 2.0, 3.0])}
    np.testing.assert_array_equal(Relation.from_string("x < 2").holds(values), [True, False, False])
    np.testing.assert_array_equal(Relation.from_string("x >= 2").holds(values), [False, True, True])
    np.testing.assert_array_equal(Relation.from_string("x * 2 = 4").holds(values), [False, True, False])
