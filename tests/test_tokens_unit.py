"""Tests for the token model and the tokenizer."""

import dataclasses

import pytest

from relsolver.errors import UnbalancedParentheses
from relsolver.tokens import (
    CLOSE_PAREN,
    EXPRESSION_SYMBOLS,
    OPEN_PAREN,
    RELATION_SYMBOLS,
    Token,
    TokenKind,
    check_balanced,
    is_balanced,
    stringify,
    tokenize,
)


# ── Token ────────────────────────────────────────────────────────────────

class TestToken:
    def test_properties(self):
        token = Token("test", TokenKind.OPERAND)
        assert token.text == "test"
        assert token.kind is TokenKind.OPERAND
        assert token.precedence is None

    def test_operator_precedence(self):
        token = Token.operator("+", 2)
        assert token.kind is TokenKind.OPERATOR
        assert token.precedence == 2

    @pytest.mark.parametrize(
        "text,kind,precedence",
        [
            ("+", TokenKind.OPERATOR, "vibraphone"),
            ("+", TokenKind.OPERATOR, None),
            ("x", TokenKind.OPERAND, 2),
            ("x", "vibraphone", None),
        ],
    )
    def test_faulty_constructor_values(self, text, kind, precedence):
        with pytest.raises(ValueError):
            Token(text, kind, precedence)

    def test_is_immutable(self):
        token = Token.relation("<=")
        with pytest.raises(dataclasses.FrozenInstanceError):
            token.text = "newval"

    def test_equality_and_ordering_by_content(self):
        assert Token.operand("x") == Token.operand("x")
        assert Token.operand("x") != Token.operand("y")
        assert Token.relation("<") != Token.operand("<")
        assert sorted([Token.operand("b"), Token.operand("a")])[0].text == "a"
        assert str(Token.relation(">=")) == ">="


# ── tokenize ─────────────────────────────────────────────────────────────

def _texts(tokens):
    return [token.text for token in tokens]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1+2", ["1", "+", "2"]),
        ("  thingy  ", ["thingy"]),
        ("(x + y) * 3", ["(", "x", "+", "y", ")", "*", "3"]),
        ("373.15-x", ["373.15", "-", "x"]),
        ("a\t/\nb", ["a", "/", "b"]),
    ],
)
def test_tokenize_expression(raw, expected):
    assert _texts(tokenize(raw, EXPRESSION_SYMBOLS)) == expected


def test_tokenize_classifies_tokens():
    tokens = tokenize("(a*b)", EXPRESSION_SYMBOLS)
    assert [t.kind for t in tokens] == [
        TokenKind.OPEN_PAREN, TokenKind.OPERAND, TokenKind.OPERATOR,
        TokenKind.OPERAND, TokenKind.CLOSE_PAREN,
    ]
    assert tokens[2].precedence == 1


def test_tokenize_longest_symbol_first():
    tokens = tokenize("x<=2", RELATION_SYMBOLS)
    assert _texts(tokens) == ["x", "<=", "2"]
    assert tokens[1].kind is TokenKind.RELATION

    tokens = tokenize("x=<2", RELATION_SYMBOLS)
    assert _texts(tokens) == ["x", "=", "<", "2"]


def test_tokenize_keeps_everything_but_whitespace():
    raw = " (373.15 - x) * 3/2 >= y_1 "
    tokens = tokenize(raw, EXPRESSION_SYMBOLS + RELATION_SYMBOLS)
    assert "".join(_texts(tokens)) == "".join(raw.split())


@pytest.mark.parametrize("raw", ["", "   "])
def test_tokenize_empty_input_gives_one_empty_operand(raw):
    assert tokenize(raw, EXPRESSION_SYMBOLS) == [Token.operand("")]


def test_tokenize_relation_symbols_leave_operators_in_operands():
    assert _texts(tokenize("x+12=y-75", RELATION_SYMBOLS)) == ["x+12", "=", "y-75"]


# ── Parenthesis balance ─────────────────────────────────────────────────

_X_PLUS_1 = [Token.operand("x"), Token.operator("+", 2), Token.operand("1")]


@pytest.mark.parametrize(
    "tokens",
    [
        _X_PLUS_1,
        [OPEN_PAREN] + _X_PLUS_1 + [CLOSE_PAREN],
        [OPEN_PAREN, OPEN_PAREN] + _X_PLUS_1 + [CLOSE_PAREN, CLOSE_PAREN],
    ],
)
def test_balanced_parentheses(tokens):
    check_balanced(tokens)
    assert is_balanced(tokens)


@pytest.mark.parametrize(
    "tokens",
    [
        [OPEN_PAREN] + _X_PLUS_1,
        _X_PLUS_1 + [CLOSE_PAREN],
        [OPEN_PAREN] + _X_PLUS_1 + [CLOSE_PAREN, CLOSE_PAREN],
        [OPEN_PAREN, OPEN_PAREN] + _X_PLUS_1 + [CLOSE_PAREN],
        [CLOSE_PAREN] + _X_PLUS_1 + [OPEN_PAREN],
        [CLOSE_PAREN, CLOSE_PAREN] + _X_PLUS_1 + [OPEN_PAREN, OPEN_PAREN],
    ],
)
def test_unbalanced_parentheses(tokens):
    with pytest.raises(UnbalancedParentheses, match="unbalanced parentheses"):
        check_balanced(tokens)
    assert not is_balanced(tokens)


def test_stringify():
    assert stringify([OPEN_PAREN] + _X_PLUS_1 + [CLOSE_PAREN]) == "( x + 1 )"
