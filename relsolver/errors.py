"""Exceptions raised while parsing and solving relations.

Every error is a ``ValueError`` so callers can catch the whole family the
same way they catch bad user input.
"""


class RelSolverError(ValueError):
    """Base class for every RelSolver error."""


# ── Parsing ─────────────────────────────────────────────────────────────

class ParseError(RelSolverError):
    """The input text could not be turned into an expression or relation."""


class UnbalancedParentheses(ParseError):
    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(
            f'There are unbalanced parentheses in the expression "{expression}".'
        )


class InvalidOperand(ParseError):
    def __init__(self, operand: str):
        self.operand = operand
        super().__init__(
            f'The operand "{operand}" is neither a number nor a valid variable name.'
        )


class MissingRelationOperator(ParseError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f'No relation operator (=, <, <=, >, >=) was found in "{text}".'
        )


class WrongCountRelationOperators(ParseError):
    def __init__(self, text: str, count: int):
        self.text = text
        self.count = count
        super().__init__(
            f'A relation needs exactly one relation operator, '
            f'found {count} in "{text}".'
        )


class InvalidInput(ParseError):
    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(reason)


class UnknownRelationOperator(RelSolverError):
    def __init__(self, operator):
        self.operator = operator
        super().__init__(f"The given operator ({operator}) is not a valid relation.")


# ── Solving ─────────────────────────────────────────────────────────────

class SolveError(RelSolverError):
    """The relation is well formed but cannot be solved as asked."""


class UnknownVariable(SolveError):
    def __init__(self, variable: str, relation):
        self.variable = variable
        self.relation = relation
        super().__init__(
            f"The given variable ({variable}) wasn't present in the "
            f"relation ({relation})."
        )


class UnsupportedDegree(SolveError):
    def __init__(self, variable: str, term):
        self.variable = variable
        self.term = term
        super().__init__(
            f"The term {term} is not linear in {variable}. Only first-degree "
            f"occurrences of the variable (no {variable}*{variable}, no "
            f"{variable} in a divisor) can be solved for."
        )


class IndeterminateSign(SolveError):
    def __init__(self, variable: str, coefficient):
        self.variable = variable
        self.coefficient = coefficient
        super().__init__(
            f"Cannot divide an inequality by {coefficient}: its sign depends on "
            f"free variables, so the direction of the result for {variable} "
            f"is unknown."
        )
