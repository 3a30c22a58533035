"""Boolean filter expressions and their compilation into WHERE clauses."""

from .ast import (
    ColumnName,
    Expression,
    Literal,
    Operator,
    Term,
    ValueList,
    list_to_nested_and,
    list_to_nested_or,
    prepend_and_clause,
    prepend_or_clause,
)
from .compile import compile_where

__all__ = [
    "ColumnName",
    "Expression",
    "Literal",
    "Operator",
    "Term",
    "ValueList",
    "compile_where",
    "list_to_nested_and",
    "list_to_nested_or",
    "prepend_and_clause",
    "prepend_or_clause",
]
