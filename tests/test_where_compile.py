from datetime import datetime

import pytest

from sqlitehelper.errors import MalformedExpressionError, MissingArgumentError, UnknownTermTypeError
from sqlitehelper.where import (
    ColumnName,
    Expression,
    Literal,
    Operator,
    ValueList,
    compile_where,
    list_to_nested_and,
    list_to_nested_or,
    prepend_and_clause,
)


def test_simple_comparison():
    expr = Expression("postal", Operator.GREATER_THAN, 70000)
    assert compile_where(expr) == "(postal > '70000')"
    assert expr.to_where_clause() == "(postal > '70000')"


def test_nested_or_is_fully_parenthesized():
    expr = Expression(
        Expression("postal", Operator.GREATER_THAN, 70000),
        Operator.OR,
        Expression("postal", Operator.LESS_THAN, 50000),
    )
    assert compile_where(expr) == "((postal > '70000') OR (postal < '50000'))"


@pytest.mark.parametrize(
    "op, sql",
    [
        (Operator.EQUALS, "="),
        (Operator.NOT_EQUALS, "<>"),
        (Operator.GREATER_THAN, ">"),
        (Operator.GREATER_THAN_OR_EQUAL_TO, ">="),
        (Operator.LESS_THAN, "<"),
        (Operator.LESS_THAN_OR_EQUAL_TO, "<="),
    ],
)
def test_comparison_operators(op, sql):
    assert compile_where(Expression("age", op, 30)) == f"(age {sql} '30')"


def test_between_is_rewritten_at_construction():
    between = Expression("postal", Operator.BETWEEN, [50000, 70000])
    explicit = Expression(
        Expression("postal", Operator.GREATER_THAN_OR_EQUAL_TO, 50000),
        Operator.AND,
        Expression("postal", Operator.LESS_THAN_OR_EQUAL_TO, 70000),
    )

    assert between.operator is Operator.AND
    assert compile_where(between) == compile_where(explicit)
    assert compile_where(between) == "((postal >= '50000') AND (postal <= '70000'))"


@pytest.mark.parametrize("bounds", [[1], [1, 2, 3], 5, [None, 2]])
def test_between_requires_two_bounds(bounds):
    with pytest.raises(MalformedExpressionError):
        Expression("postal", Operator.BETWEEN, bounds)


def test_in_and_not_in_render_value_lists():
    assert compile_where(Expression("name", Operator.IN, ["a", "b"])) == "(name IN ('a','b'))"
    assert compile_where(Expression("name", Operator.NOT_IN, ("a", "o'b"))) == "(name NOT IN ('a','o''b'))"


def test_in_renders_dates_with_timestamp_format():
    expr = Expression("created", Operator.IN, [datetime(2020, 1, 2), "x"])
    assert compile_where(expr) == "(created IN ('01/02/2020 12:00:00.0000000 AM','x'))"


@pytest.mark.parametrize("right", ["a", 5, Expression("x", Operator.EQUALS, 1), []])
def test_in_rejects_anything_but_a_value_list(right):
    with pytest.raises(MalformedExpressionError):
        Expression("name", Operator.IN, right)


def test_contains_renders_prefix_substring_and_suffix_patterns():
    expr = Expression("name", Operator.CONTAINS, "ann")
    assert compile_where(expr) == (
        "((name LIKE 'ann%' OR name LIKE '%ann%' OR name LIKE '%ann'))"
    )


def test_contains_not_uses_not_like():
    expr = Expression("name", Operator.CONTAINS_NOT, "o'b")
    assert compile_where(expr) == (
        "((name NOT LIKE 'o''b%' OR name NOT LIKE '%o''b%' OR name NOT LIKE '%o''b'))"
    )


def test_contains_requires_column_and_string():
    with pytest.raises(MalformedExpressionError):
        Expression(Expression("a", Operator.EQUALS, 1), Operator.CONTAINS, "x")
    with pytest.raises(MalformedExpressionError):
        Expression("name", Operator.CONTAINS, 5)


def test_null_checks_ignore_right_term():
    expr = Expression("name", Operator.IS_NOT_NULL, "ignored")
    assert expr.right is None
    assert compile_where(Expression("name", Operator.IS_NULL)) == "(name IS NULL)"
    assert compile_where(expr) == "(name IS NOT NULL)"


def test_missing_terms_are_rejected():
    with pytest.raises(MalformedExpressionError):
        Expression(None, Operator.EQUALS, 1)
    with pytest.raises(MalformedExpressionError):
        Expression("name", Operator.EQUALS)
    with pytest.raises(MalformedExpressionError):
        Expression("name", Operator.EQUALS, Literal(None))


def test_unknown_left_term_type():
    with pytest.raises(UnknownTermTypeError):
        Expression(42, Operator.EQUALS, 1)
    with pytest.raises(MalformedExpressionError):
        Expression(["a"], Operator.EQUALS, 1)


def test_value_list_only_with_list_operators():
    with pytest.raises(MalformedExpressionError):
        Expression("name", Operator.EQUALS, ["a", "b"])


def test_operator_accepts_its_name():
    assert Expression("a", "Equals", 1).operator is Operator.EQUALS
    with pytest.raises(MalformedExpressionError):
        Expression("a", "Resembles", 1)


def test_literals_and_identifiers_are_sanitized():
    expr = Expression("na--me", Operator.EQUALS, "x'; DROP TABLE t; --")
    assert compile_where(expr) == "(name = 'x''; DROP TABLE t; ')"


def test_column_name_on_the_right_is_not_quoted():
    assert compile_where(Expression("a", Operator.EQUALS, ColumnName("b"))) == "(a = b)"


def test_datetime_literal():
    expr = Expression("created", Operator.GREATER_THAN, datetime(2020, 1, 2, 13, 0, 0))
    assert compile_where(expr) == "(created > '01/02/2020 01:00:00.0000000 PM')"


def test_prepend_returns_new_root_and_keeps_original():
    original = Expression("a", Operator.EQUALS, 1)
    combined = original.prepend_and("b", Operator.EQUALS, 2)

    assert compile_where(combined) == "((b = '2') AND (a = '1'))"
    assert compile_where(original) == "(a = '1')"

    either = original.prepend_or(Expression("c", Operator.IS_NULL))
    assert compile_where(either) == "((c IS NULL) OR (a = '1'))"


def test_prepend_requires_expression_without_operator():
    with pytest.raises(MissingArgumentError):
        Expression("a", Operator.EQUALS, 1).prepend_and("b")
    with pytest.raises(MissingArgumentError):
        prepend_and_clause(None, Expression("a", Operator.EQUALS, 1))


def test_shared_subexpression_is_not_aliased():
    shared = Expression("a", Operator.EQUALS, 1)
    left = shared.prepend_and(Expression("b", Operator.EQUALS, 2))
    right = shared.prepend_or(Expression("c", Operator.EQUALS, 3))

    assert compile_where(left) == "((b = '2') AND (a = '1'))"
    assert compile_where(right) == "((c = '3') OR (a = '1'))"


def test_list_to_nested_and_or():
    a = Expression("a", Operator.EQUALS, 1)
    b = Expression("b", Operator.EQUALS, 2)
    c = Expression("c", Operator.EQUALS, 3)

    assert compile_where(list_to_nested_and([a, b, c])) == "((a = '1') AND ((b = '2') AND (c = '3')))"
    assert compile_where(list_to_nested_or([a, b])) == "((a = '1') OR (b = '2'))"
    assert list_to_nested_and([a]) is a
    assert list_to_nested_or([]) is None
    with pytest.raises(MissingArgumentError):
        list_to_nested_and(None)


def test_str_is_human_readable():
    assert str(Expression("postal", Operator.GREATER_THAN, 70000)) == "(postal GreaterThan 70000)"
    assert str(Expression("name", Operator.IN, ["a", "b"])) == "(name In [a, b])"
    assert str(Expression("name", Operator.IS_NULL)) == "(name IsNull)"


def test_compile_rejects_non_expression():
    with pytest.raises(UnknownTermTypeError):
        compile_where("postal > 1")  # type: ignore[arg-type]


def test_right_terms_are_typed():
    expr = Expression("name", Operator.IN, ["a"])
    assert isinstance(expr.left, ColumnName)
    assert expr.right == ValueList(("a",))
    assert Expression("a", Operator.EQUALS, 1).right == Literal(1)


def test_set_values_become_a_sorted_value_list():
    expr = Expression("name", Operator.IN, {"b", "a"})
    assert expr.right == ValueList(("a", "b"))
    assert compile_where(expr) == "(name IN ('a','b'))"
    assert compile_where(Expression("name", Operator.NOT_IN, frozenset({"a"}))) == "(name NOT IN ('a'))"
