"""Immutable arithmetic expression trees.

Parses expressions built from numbers, variable names, the four basic
operators and parentheses.  Exponents and functions such as ``sin`` are not
part of the grammar.

The tree has two kinds of nodes: ``Leaf`` for a single operand and ``Node``
for a binary operator with a left and right sub-expression.  Trees are never
changed after construction; every rewrite returns a new tree.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import FrozenSet, List, Optional, Sequence

import sympy as sp

from relsolver import config
from relsolver.errors import InvalidOperand
from relsolver.tokens import (
    EXPRESSION_SYMBOLS,
    Token,
    TokenKind,
    check_balanced,
    is_balanced,
    stringify,
    tokenize,
)

OPERATORS = ("*", "/", "+", "-")
ADDITIVE_OPERATORS = ("+", "-")

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(text: str) -> bool:
    return _IDENTIFIER.fullmatch(text) is not None


def is_numeric(text: str) -> bool:
    """True for numeric literals.

    Anything ``float()`` accepts counts, except strings that are also valid
    names (``inf``, ``nan``): those are treated as variables.
    """
    if not text or is_identifier(text):
        return False
    try:
        float(text)
    except ValueError:
        return False
    return True


class Expression(ABC):
    """Base class of the expression tree (``Leaf`` or ``Node``)."""

    @classmethod
    def from_string(cls, text: str) -> "Expression":
        """Parse *text* into an expression tree."""
        return parse_tokens(tokenize(text, EXPRESSION_SYMBOLS))

    @property
    def is_additive(self) -> bool:
        return False

    def expand(self) -> "Expression":
        return self

    def factor_for(self, variable: str) -> "Expression":
        """Rewrite the expanded expression as ``variable * coefficients ± rest``.

        Raises UnsupportedDegree when *variable* occurs more than once in a
        product or inside a divisor.
        """
        # algebra imports this module, so the import is deferred
        from relsolver.algebra import factor
        return factor(self, variable)

    @abstractmethod
    def variables(self) -> FrozenSet[str]:
        pass

    @abstractmethod
    def to_python(self, namespace: str = "values") -> str:
        pass

    @abstractmethod
    def to_sympy(self):
        pass

    def evaluate(self, values: dict):
        """Evaluate numerically with NumPy.

        *values* maps every free variable to a number or an array; arrays
        are evaluated element-wise.
        """
        names = sorted(self.variables())
        func = sp.lambdify([sp.Symbol(name) for name in names],
                           self.to_sympy(), modules="numpy")
        return func(*(values[name] for name in names))


@dataclass(frozen=True)
class Leaf(Expression):
    text: str

    def __post_init__(self):
        if not (is_numeric(self.text) or is_identifier(self.text)):
            raise InvalidOperand(self.text)

    def __str__(self) -> str:
        return self.text

    @property
    def is_numeric(self) -> bool:
        return is_numeric(self.text)

    def variables(self) -> FrozenSet[str]:
        if self.is_numeric or config.is_named_constant(self.text):
            return frozenset()
        return frozenset([self.text])

    def to_python(self, namespace: str = "values") -> str:
        # Named constants are left as-is for the caller's namespace to supply
        if self.is_numeric or config.is_named_constant(self.text):
            return self.text
        return f"{namespace}['{self.text}']"

    def to_sympy(self):
        if self.is_numeric:
            value = Fraction(Decimal(self.text))
            return sp.Rational(value.numerator, value.denominator)
        if config.is_named_constant(self.text):
            return config.NAMED_CONSTANTS[self.text]
        return sp.Symbol(self.text)


@dataclass(frozen=True)
class Node(Expression):
    lhs: Expression
    operator: str
    rhs: Expression

    def __post_init__(self):
        if self.operator not in OPERATORS:
            raise ValueError(f"Unknown operator: {self.operator}")
        if not isinstance(self.lhs, Expression) or not isinstance(self.rhs, Expression):
            raise TypeError("Both sides of a Node must be expressions.")

    def __str__(self) -> str:
        # Every node is parenthesized so the string re-parses to the same tree
        return f"({self.lhs} {self.operator} {self.rhs})"

    @property
    def is_additive(self) -> bool:
        return self.operator in ADDITIVE_OPERATORS

    def expand(self) -> Expression:
        """Distribute products (and quotients of sums) over addition.

        ``x * (y + z)`` becomes ``(x * y) + (x * z)``; two sums multiplied
        give every cross product.  ``(a + b) / c`` becomes ``a/c + b/c``;
        a divisor is never split.
        """
        lhs = self.lhs.expand()
        rhs = self.rhs.expand()

        if self.operator == "*":
            if lhs.is_additive:
                return Node(Node(lhs.lhs, "*", rhs).expand(),
                            lhs.operator,
                            Node(lhs.rhs, "*", rhs).expand())
            if rhs.is_additive:
                return Node(Node(lhs, "*", rhs.lhs).expand(),
                            rhs.operator,
                            Node(lhs, "*", rhs.rhs).expand())
        elif self.operator == "/" and lhs.is_additive:
            return Node(Node(lhs.lhs, "/", rhs).expand(),
                        lhs.operator,
                        Node(lhs.rhs, "/", rhs).expand())

        return Node(lhs, self.operator, rhs)

    def variables(self) -> FrozenSet[str]:
        return self.lhs.variables() | self.rhs.variables()

    def to_python(self, namespace: str = "values") -> str:
        return (f"({self.lhs.to_python(namespace)} {self.operator} "
                f"{self.rhs.to_python(namespace)})")

    def to_sympy(self):
        lhs = self.lhs.to_sympy()
        rhs = self.rhs.to_sympy()
        if self.operator == "*":
            return lhs * rhs
        if self.operator == "/":
            return lhs / rhs
        if self.operator == "+":
            return lhs + rhs
        return lhs - rhs


# ── Parser ──────────────────────────────────────────────────────────────

def parse_tokens(tokens: Sequence[Token]) -> Expression:
    """Build an expression tree from a token list.

    The list is split at its loosest-binding operator outside of any
    parentheses (the rightmost one on ties) and both halves are parsed
    recursively, so ``a - b - c`` groups as ``(a - b) - c``.

    Raises UnbalancedParentheses or InvalidOperand.
    """
    tokens = list(tokens)
    check_balanced(tokens)
    tokens = _strip_outer_parentheses(tokens)

    # An empty group such as "()" becomes an empty operand, which then
    # fails operand validation with a useful message.
    if not tokens:
        tokens = [Token.operand("")]

    index = _find_split_operator(tokens)
    if index is None:
        if len(tokens) != 1 or tokens[0].kind is not TokenKind.OPERAND:
            raise InvalidOperand(stringify(tokens))
        return Leaf(tokens[0].text)

    return Node(parse_tokens(tokens[:index]),
                tokens[index].text,
                parse_tokens(tokens[index + 1:]))


def _strip_outer_parentheses(tokens: List[Token]) -> List[Token]:
    """Remove every parenthesis pair that encloses the whole list.

    The interior must itself be balanced, otherwise the first and last
    tokens are not a pair, as in ``(a) + (b)``.
    """
    while (len(tokens) >= 2
           and tokens[0].kind is TokenKind.OPEN_PAREN
           and tokens[-1].kind is TokenKind.CLOSE_PAREN
           and is_balanced(tokens[1:-1])):
        tokens = tokens[1:-1]
    return tokens


def _find_split_operator(tokens: List[Token]) -> Optional[int]:
    """Index of the rightmost loosest-binding operator at depth zero."""
    positions = {}
    depth = 0
    for index in range(len(tokens) - 1, -1, -1):
        token = tokens[index]
        if token.kind is TokenKind.CLOSE_PAREN:
            depth += 1
        elif token.kind is TokenKind.OPEN_PAREN:
            depth -= 1
        elif depth == 0 and token.kind is TokenKind.OPERATOR:
            positions.setdefault(token.precedence, []).append(index)

    if not positions:
        return None
    return max(positions[max(positions)])
