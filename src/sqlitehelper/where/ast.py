from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union, cast

from ..errors import MalformedExpressionError, MissingArgumentError, UnknownTermTypeError


class Operator(str, Enum):
    AND = "And"
    OR = "Or"
    EQUALS = "Equals"
    NOT_EQUALS = "NotEquals"
    IN = "In"
    NOT_IN = "NotIn"
    CONTAINS = "Contains"
    CONTAINS_NOT = "ContainsNot"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL_TO = "GreaterThanOrEqualTo"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL_TO = "LessThanOrEqualTo"
    BETWEEN = "Between"
    IS_NULL = "IsNull"
    IS_NOT_NULL = "IsNotNull"


UNARY_OPERATORS = frozenset({Operator.IS_NULL, Operator.IS_NOT_NULL})
LIST_OPERATORS = frozenset({Operator.IN, Operator.NOT_IN})
PATTERN_OPERATORS = frozenset({Operator.CONTAINS, Operator.CONTAINS_NOT})


@dataclass(frozen=True)
class ColumnName:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Literal:
    value: Any

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ValueList:
    values: Tuple[Any, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.values) + "]"


Term = Union[ColumnName, Literal, ValueList, "Expression"]


@dataclass(frozen=True)
class Expression:
    """A ``term operator term`` node of a WHERE clause.

    ``left`` is usually a column name (a plain ``str`` is accepted and wrapped
    in :class:`ColumnName`) or a nested :class:`Expression`. ``right`` may be a
    nested expression, a :class:`ColumnName`, a scalar literal, or a list of
    literals for ``IN``/``NOT_IN``/``BETWEEN``. Shapes are checked on
    construction; ``BETWEEN`` is rewritten into two bound comparisons joined
    by ``AND``, so a built expression never carries that operator.

    Expressions are immutable. :meth:`prepend_and` and :meth:`prepend_or`
    return a new root and leave the receiver untouched.
    """

    left: Term
    operator: Operator
    right: Optional[Term] = None

    def __post_init__(self) -> None:
        try:
            operator = Operator(self.operator)
        except ValueError as exc:
            raise MalformedExpressionError(f"Unknown operator: {self.operator!r}") from exc
        left = _coerce_left(self.left)
        right = None if operator in UNARY_OPERATORS else _coerce_right(self.right)
        _validate(left, operator, right)

        if operator is Operator.BETWEEN:
            lower, upper = cast(ValueList, right).values
            left, operator, right = (
                Expression(left, Operator.GREATER_THAN_OR_EQUAL_TO, Literal(lower)),
                Operator.AND,
                Expression(left, Operator.LESS_THAN_OR_EQUAL_TO, Literal(upper)),
            )

        object.__setattr__(self, "left", left)
        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "right", right)

    def to_where_clause(self) -> str:
        from .compile import compile_where

        return compile_where(self)

    def prepend_and(
        self,
        prepend: Union["Expression", str],
        operator: Optional[Operator] = None,
        right: Any = None,
    ) -> "Expression":
        """Return ``(prepend AND self)``.

        ``prepend`` may be an expression, or the left term of one when
        ``operator``/``right`` are given.
        """
        return prepend_and_clause(_as_expression(prepend, operator, right), self)

    def prepend_or(
        self,
        prepend: Union["Expression", str],
        operator: Optional[Operator] = None,
        right: Any = None,
    ) -> "Expression":
        """Return ``(prepend OR self)``."""
        return prepend_or_clause(_as_expression(prepend, operator, right), self)

    def __str__(self) -> str:
        if self.right is None:
            return f"({self.left} {self.operator.value})"
        return f"({self.left} {self.operator.value} {self.right})"


def _coerce_left(value: Any) -> Term:
    if value is None:
        raise MalformedExpressionError("Expression is missing its left term")
    if isinstance(value, str):
        return ColumnName(value)
    if isinstance(value, (Expression, ColumnName, Literal)):
        return value
    raise UnknownTermTypeError(f"Unsupported left term type: {type(value).__name__}")


def _coerce_right(value: Any) -> Optional[Term]:
    if value is None:
        return None
    if isinstance(value, (Expression, ColumnName, Literal, ValueList)):
        return value
    if isinstance(value, (list, tuple)):
        return ValueList(tuple(v.value if isinstance(v, Literal) else v for v in value))
    if isinstance(value, (set, frozenset)):
        # sets have no order; sort by text so the rendered list is stable
        return ValueList(tuple(sorted(value, key=str)))
    return Literal(value)


def _validate(left: Term, operator: Operator, right: Optional[Term]) -> None:
    if operator in UNARY_OPERATORS:
        return
    if right is None or (isinstance(right, Literal) and right.value is None):
        raise MalformedExpressionError(f"Operator {operator.value} requires a right term")

    if operator in LIST_OPERATORS:
        if not isinstance(right, ValueList):
            raise MalformedExpressionError(f"Operator {operator.value} requires a list of values")
        if not right.values:
            raise MalformedExpressionError(f"Operator {operator.value} requires at least one value")
        return

    if operator is Operator.BETWEEN:
        if not isinstance(right, ValueList) or len(right.values) != 2:
            raise MalformedExpressionError("Between requires exactly two values: [lower, upper]")
        if any(v is None for v in right.values):
            raise MalformedExpressionError("Between bounds must not be null")
        return

    if isinstance(right, ValueList):
        raise MalformedExpressionError(f"Operator {operator.value} does not accept a list of values")

    if operator in PATTERN_OPERATORS:
        if not isinstance(left, ColumnName):
            raise MalformedExpressionError(f"Operator {operator.value} requires a column name on the left")
        if not isinstance(right, Literal) or not isinstance(right.value, str):
            raise MalformedExpressionError(f"Operator {operator.value} requires a string on the right")


def _as_expression(prepend: Any, operator: Optional[Operator], right: Any) -> Expression:
    if operator is None:
        if not isinstance(prepend, Expression):
            raise MissingArgumentError("An expression, or a left term with an operator, is required")
        return prepend
    return Expression(prepend, operator, right)


def prepend_and_clause(prepend: Expression, original: Expression) -> Expression:
    if prepend is None or original is None:
        raise MissingArgumentError("Both expressions are required")
    return Expression(prepend, Operator.AND, original)


def prepend_or_clause(prepend: Expression, original: Expression) -> Expression:
    if prepend is None or original is None:
        raise MissingArgumentError("Both expressions are required")
    return Expression(prepend, Operator.OR, original)


def _list_to_nested(exprs: Sequence[Expression], operator: Operator) -> Optional[Expression]:
    if not exprs:
        return None
    head, rest = exprs[0], exprs[1:]
    if not rest:
        return head
    return Expression(head, operator, _list_to_nested(rest, operator))


def list_to_nested_and(exprs: Optional[Iterable[Expression]]) -> Optional[Expression]:
    """Join ``exprs`` with AND: ``[a, b, c]`` becomes ``(a AND (b AND c))``.

    Returns ``None`` for an empty list and the element itself for a single one.
    """
    if exprs is None:
        raise MissingArgumentError("Expression list is required")
    return _list_to_nested(list(exprs), Operator.AND)


def list_to_nested_or(exprs: Optional[Iterable[Expression]]) -> Optional[Expression]:
    """Join ``exprs`` with OR, nesting the same way as :func:`list_to_nested_and`."""
    if exprs is None:
        raise MissingArgumentError("Expression list is required")
    return _list_to_nested(list(exprs), Operator.OR)


__all__: List[str] = [
    "Operator",
    "ColumnName",
    "Literal",
    "ValueList",
    "Term",
    "Expression",
    "prepend_and_clause",
    "prepend_or_clause",
    "list_to_nested_and",
    "list_to_nested_or",
]
