from __future__ import annotations

from typing import Dict

from ..errors import MalformedExpressionError, UnknownTermTypeError
from ..sanitize import render_literal, sanitize_string
from .ast import ColumnName, Expression, Literal, Operator, Term, ValueList

_INFIX: Dict[Operator, str] = {
    Operator.AND: "AND",
    Operator.OR: "OR",
    Operator.EQUALS: "=",
    Operator.NOT_EQUALS: "<>",
    Operator.GREATER_THAN: ">",
    Operator.GREATER_THAN_OR_EQUAL_TO: ">=",
    Operator.LESS_THAN: "<",
    Operator.LESS_THAN_OR_EQUAL_TO: "<=",
    Operator.IN: "IN",
    Operator.NOT_IN: "NOT IN",
}

_LIKE: Dict[Operator, str] = {
    Operator.CONTAINS: "LIKE",
    Operator.CONTAINS_NOT: "NOT LIKE",
}

_NULL_CHECK: Dict[Operator, str] = {
    Operator.IS_NULL: "IS NULL",
    Operator.IS_NOT_NULL: "IS NOT NULL",
}


def compile_where(expr: Expression) -> str:
    """Compile ``expr`` into the text of a WHERE clause (without the keyword).

    Every node is wrapped in its own pair of parentheses, so nesting never
    depends on operator precedence::

        >>> compile_where(Expression("postal", Operator.GREATER_THAN, 70000))
        "(postal > '70000')"

    Raises :class:`MalformedExpressionError` for a node missing a term its
    operator needs and :class:`UnknownTermTypeError` for unsupported terms.
    """
    if not isinstance(expr, Expression):
        raise UnknownTermTypeError(f"Expected Expression, got {type(expr).__name__}")

    op = expr.operator
    left = _render_term(expr.left)

    if op in _NULL_CHECK:
        return f"({left} {_NULL_CHECK[op]})"

    if expr.right is None:
        raise MalformedExpressionError(f"Operator {op.value} requires a right term")

    if op in _LIKE:
        return f"(({_render_contains(expr.left, expr.right, _LIKE[op])}))"

    if op in (Operator.IN, Operator.NOT_IN):
        if not isinstance(expr.right, ValueList):
            raise MalformedExpressionError(f"Operator {op.value} requires a list of values")
        values = ",".join(render_literal(v) for v in expr.right.values)
        return f"({left} {_INFIX[op]} ({values}))"

    if op not in _INFIX:
        raise MalformedExpressionError(f"Operator {op.value} cannot be rendered")
    return f"({left} {_INFIX[op]} {_render_term(expr.right)})"


def _render_term(term: Term) -> str:
    if isinstance(term, Expression):
        return compile_where(term)
    if isinstance(term, ColumnName):
        return sanitize_string(term.name)
    if isinstance(term, Literal):
        return render_literal(term.value)
    if isinstance(term, ValueList):
        raise MalformedExpressionError("A list of values is only valid with In/NotIn")
    raise UnknownTermTypeError(f"Unsupported term type: {type(term).__name__}")


def _render_contains(left: Term, right: Term, keyword: str) -> str:
    if not isinstance(left, ColumnName):
        raise MalformedExpressionError("Contains requires a column name on the left")
    if not isinstance(right, Literal) or not isinstance(right.value, str):
        raise MalformedExpressionError("Contains requires a string on the right")
    column = sanitize_string(left.name)
    value = sanitize_string(right.value)
    return (
        f"{column} {keyword} '{value}%' OR "
        f"{column} {keyword} '%{value}%' OR "
        f"{column} {keyword} '%{value}'"
    )


__all__ = ["compile_where"]
