"""Token model and tokenizer.

A token is an immutable, classified slice of the input text.  The tokenizer
knows nothing about grammar: it only splits a string on a given set of
symbols, collecting everything in between into operand tokens.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional

from relsolver.errors import UnbalancedParentheses


class TokenKind(IntEnum):
    OPERAND = 0
    OPERATOR = 1
    OPEN_PAREN = 2
    CLOSE_PAREN = 3
    RELATION = 4


@dataclass(frozen=True, order=True)
class Token:
    text: str
    kind: TokenKind
    precedence: Optional[int] = None  # operators only; lower binds tighter

    def __post_init__(self):
        if not isinstance(self.kind, TokenKind):
            raise ValueError(f"The type ({self.kind}) is not valid.")
        if self.kind is TokenKind.OPERATOR:
            if not isinstance(self.precedence, int) or isinstance(self.precedence, bool):
                raise ValueError(f"The precedence ({self.precedence}) must be an integer.")
        elif self.precedence is not None:
            raise ValueError(f"Only operators carry a precedence, not {self.kind.name}.")

    def __str__(self) -> str:
        return self.text

    @classmethod
    def operand(cls, text: str) -> "Token":
        return cls(text, TokenKind.OPERAND)

    @classmethod
    def operator(cls, text: str, precedence: int) -> "Token":
        return cls(text, TokenKind.OPERATOR, precedence)

    @classmethod
    def relation(cls, text: str) -> "Token":
        return cls(text, TokenKind.RELATION)


OPEN_PAREN = Token("(", TokenKind.OPEN_PAREN)
CLOSE_PAREN = Token(")", TokenKind.CLOSE_PAREN)

EXPRESSION_SYMBOLS = (
    OPEN_PAREN,
    CLOSE_PAREN,
    Token.operator("*", 1),
    Token.operator("/", 1),
    Token.operator("+", 2),
    Token.operator("-", 2),
)

RELATION_SYMBOLS = (
    Token.relation("="),
    Token.relation("<"),
    Token.relation("<="),
    Token.relation(">"),
    Token.relation(">="),
)


def tokenize(text: str, symbols: Iterable[Token]) -> List[Token]:
    """Split *text* into tokens, matching the longest symbols first.

    Whitespace is insignificant and removed up front.  Characters that do
    not start a symbol are buffered into operand tokens.  An empty input
    yields a single empty operand so that it fails operand validation
    instead of producing an empty tree.
    """
    # sorted() is stable: equal-length symbols keep their given order
    ordered = sorted(symbols, key=lambda token: len(token.text), reverse=True)
    remaining = "".join(text.split())

    tokens = []
    buffer = ""
    position = 0
    while position < len(remaining):
        for symbol in ordered:
            if symbol.text and remaining.startswith(symbol.text, position):
                if buffer:
                    tokens.append(Token.operand(buffer))
                    buffer = ""
                tokens.append(symbol)
                position += len(symbol.text)
                break
        else:
            buffer += remaining[position]
            position += 1

    if buffer or not tokens:
        tokens.append(Token.operand(buffer))
    return tokens


def stringify(tokens: Iterable[Token]) -> str:
    """A plausible human-readable form of a token list, for messages."""
    return " ".join(token.text for token in tokens)


def check_balanced(tokens: List[Token]) -> None:
    """Raise UnbalancedParentheses unless every '(' has a matching ')'."""
    depth = 0
    for token in tokens:
        if token.kind is TokenKind.OPEN_PAREN:
            depth += 1
        elif token.kind is TokenKind.CLOSE_PAREN:
            depth -= 1
        # Closed more than we opened
        if depth < 0:
            raise UnbalancedParentheses(stringify(tokens))
    if depth != 0:
        raise UnbalancedParentheses(stringify(tokens))


def is_balanced(tokens: List[Token]) -> bool:
    try:
        check_balanced(tokens)
    except UnbalancedParentheses:
        return False
    return True
