"""Term-level algebra on expanded expressions.

An expanded expression is a chain of ``+``/``-`` nodes whose leaves are
products and quotients.  These helpers flatten such a chain into signed
terms, separate the terms that contain a variable from those that do not,
and rebuild trees from term lists.
"""

from typing import List, Optional, Tuple

import sympy as sp

from relsolver.errors import UnsupportedDegree
from relsolver.expression import Expression, Leaf, Node

Term = Tuple[int, Expression]  # (sign, term) with sign +1 or -1

ONE = Leaf("1")
ZERO = Leaf("0")


def signed_terms(expression: Expression, sign: int = 1) -> List[Term]:
    """Flatten a sum into ``(sign, term)`` pairs, left to right."""
    if isinstance(expression, Node) and expression.is_additive:
        rhs_sign = sign if expression.operator == "+" else -sign
        return (signed_terms(expression.lhs, sign)
                + signed_terms(expression.rhs, rhs_sign))
    return [(sign, expression)]


def negate(terms: List[Term]) -> List[Term]:
    return [(-sign, term) for sign, term in terms]


def join_terms(terms: List[Term]) -> Expression:
    """Rebuild a left-nested sum; added terms come before subtracted ones.

    An empty list is ``0``; a sum of subtracted terms only starts from
    ``(0 - t)`` since the grammar has no unary minus.
    """
    if not terms:
        return ZERO
    ordered = ([t for t in terms if t[0] > 0]
               + [t for t in terms if t[0] < 0])
    sign, result = ordered[0]
    if sign < 0:
        result = Node(ZERO, "-", result)
    for sign, term in ordered[1:]:
        result = Node(result, "+" if sign > 0 else "-", term)
    return result


def split_variable(term: Expression, variable: str) -> Tuple[int, Optional[Expression]]:
    """Return ``(degree, coefficient)`` of *variable* in a product term.

    The coefficient is the term with the variable taken out, or None when
    nothing but the variable is left (a coefficient of one).
    """
    if isinstance(term, Leaf):
        if term.text == variable:
            return 1, None
        return 0, term

    if term.operator == "*":
        lhs_degree, lhs_coefficient = split_variable(term.lhs, variable)
        rhs_degree, rhs_coefficient = split_variable(term.rhs, variable)
        if lhs_coefficient is None:
            coefficient = rhs_coefficient
        elif rhs_coefficient is None:
            coefficient = lhs_coefficient
        else:
            coefficient = Node(lhs_coefficient, "*", rhs_coefficient)
        return lhs_degree + rhs_degree, coefficient

    if variable in term.variables():
        # x in a divisor, or a sum left unexpanded inside a product
        if term.operator != "/" or variable in term.rhs.variables():
            raise UnsupportedDegree(variable, term)
        degree, numerator = split_variable(term.lhs, variable)
        return degree, Node(ONE if numerator is None else numerator, "/", term.rhs)

    return 0, term


def collect(expression: Expression, variable: str) -> Tuple[List[Term], List[Term]]:
    """Split an expanded sum into coefficient terms and remainder terms.

    Each coefficient term is the signed coefficient of one occurrence of
    *variable*; the remainder holds the terms without it, unchanged.
    """
    coefficients = []
    remainder = []
    for sign, term in signed_terms(expression):
        degree, coefficient = split_variable(term, variable)
        if degree > 1:
            raise UnsupportedDegree(variable, term)
        if degree == 1:
            coefficients.append((sign, ONE if coefficient is None else coefficient))
        else:
            remainder.append((sign, term))
    return coefficients, remainder


def factor(expression: Expression, variable: str) -> Expression:
    expanded = expression.expand()
    coefficients, remainder = collect(expanded, variable)
    if not coefficients:
        return expanded
    return factor_terms(variable, coefficients, remainder)


def factor_terms(variable: str, coefficients: List[Term], remainder: List[Term]) -> Expression:
    """Build ``variable * (c1 ± c2 ...) ± rest`` from collected terms."""
    sign = 1
    if all(s < 0 for s, _ in coefficients):
        sign = -1
        coefficients = negate(coefficients)

    coefficient = join_terms(coefficients)
    if coefficient == ONE:
        product = Leaf(variable)
    else:
        product = Node(Leaf(variable), "*", coefficient)
    return join_terms([(sign, product)] + remainder)


# ── Numeric constants ───────────────────────────────────────────────────

def constant_value(expression: Expression):
    """The exact rational value of a variable-free expression, else None."""
    if expression.variables():
        return None
    value = expression.to_sympy()
    return value if value.is_Rational else None


def is_zero(expression: Expression) -> bool:
    """True when the expression simplifies to 0, free variables or not."""
    return sp.simplify(expression.to_sympy()) == 0


def constant_sign(expression: Expression) -> Optional[int]:
    """-1, 0 or 1 for a variable-free expression; None when unknown."""
    if expression.variables():
        return None
    value = expression.to_sympy()
    if value.is_zero:
        return 0
    if value.is_positive:
        return 1
    if value.is_negative:
        return -1
    return None


def format_number(value) -> Optional[str]:
    """Write a non-negative rational as a plain decimal literal.

    Returns None when the decimal expansion does not terminate (1/3).
    """
    numerator, denominator = abs(int(value.p)), int(value.q)
    twos = fives = 0
    rest = denominator
    while rest % 2 == 0:
        rest //= 2
        twos += 1
    while rest % 5 == 0:
        rest //= 5
        fives += 1
    if rest != 1:
        return None

    places = max(twos, fives)
    if places == 0:
        return str(numerator)
    digits = str(numerator * 10 ** places // denominator).rjust(places + 1, "0")
    return f"{digits[:-places]}.{digits[-places:]}"


def fold_constants(terms: List[Term]) -> List[Term]:
    """Sum every numeric term into one literal.

    The literal takes the place of the first numeric term.  Terms are left
    alone when the sum has no finite decimal form.
    """
    kept = []
    total = 0
    position = None
    for sign, term in terms:
        value = constant_value(term)
        if value is None:
            kept.append((sign, term))
            continue
        if position is None:
            position = len(kept)
        total += sign * value

    if position is None:
        return terms
    literal = format_number(total)
    if literal is None:
        return terms
    if total != 0:
        kept.insert(position, (1 if total > 0 else -1, Leaf(literal)))
    elif not kept:
        kept.append((1, ZERO))
    return kept


# ── Division ────────────────────────────────────────────────────────────

def divide_term(term: Expression, divisor: Expression) -> Expression:
    """``term / divisor``, with ``t / (a / b)`` written as ``(t / a) * b``."""
    if divisor == ONE:
        return term
    if isinstance(divisor, Node) and divisor.operator == "/":
        return Node(divide_term(term, divisor.lhs), "*", divisor.rhs)
    return Node(term, "/", divisor)


def divide(terms: List[Term], coefficient: Expression) -> Expression:
    """Divide a sum of terms by a coefficient known to be non-zero."""
    if not terms:
        return ZERO

    if coefficient.is_additive:
        value = constant_value(coefficient)
        literal = None if value is None else format_number(value)
        if literal is None:
            return Node(join_terms(fold_constants(terms)), "/", coefficient)
        coefficient = Leaf(literal)

    return join_terms(fold_constants(
        [(sign, divide_term(term, coefficient)) for sign, term in terms]
    ))
