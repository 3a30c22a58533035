from __future__ import annotations

"""Builders for the CRUD statements issued by :class:`DatabaseClient`.

All functions are pure: they only assemble text. Table names, column names
and values go through :func:`sanitize_string` before being embedded.
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .errors import MissingArgumentError, MissingFilterError
from .sanitize import render_literal, sanitize_string
from .where import Expression, Operator, compile_where

LAST_INSERT_ID_SQL = "SELECT last_insert_rowid() AS id;"


def _require_table(table: str) -> str:
    if not table:
        raise MissingArgumentError("Table name is required")
    return sanitize_string(table)


def _field_items(fields: Optional[Mapping[str, Any]], wide_prefix: str) -> List[Tuple[str, str]]:
    if not fields:
        raise MissingArgumentError("At least one field is required")
    items = [
        (sanitize_string(key), render_literal(value, wide_prefix=wide_prefix))
        for key, value in fields.items()
        if key
    ]
    if not items:
        raise MissingArgumentError("At least one field with a non-empty name is required")
    return items


def build_select(
    table: str,
    offset: Optional[int] = None,
    limit: Optional[int] = None,
    fields: Optional[Sequence[str]] = None,
    filter: Optional[Expression] = None,
    order_by: Optional[str] = None,
) -> str:
    """Build ``SELECT ... FROM table [WHERE ...] [ORDER BY ...] [LIMIT n [OFFSET m]]``.

    ``LIMIT`` is emitted only for a positive ``limit``; ``OFFSET`` only
    together with it and only when ``offset`` is non-negative. ``order_by`` is
    the full clause text, e.g. ``"ORDER BY id DESC"``.
    """
    table_sql = _require_table(table)
    columns = [sanitize_string(f) for f in fields or [] if f]
    sql_parts = ["SELECT", ",".join(columns) if columns else "*", "FROM", table_sql]

    if filter is not None:
        sql_parts.extend(["WHERE", compile_where(filter)])
    if order_by:
        sql_parts.append(sanitize_string(order_by))
    if limit is not None and limit > 0:
        sql_parts.append(f"LIMIT {int(limit)}")
        if offset is not None and offset >= 0:
            sql_parts.append(f"OFFSET {int(offset)}")

    return " ".join(sql_parts)


def build_unique_by_id(table: str, column: str, value: Any) -> str:
    """SELECT the single row of ``table`` whose ``column`` equals ``value``."""
    if not column:
        raise MissingArgumentError("Column name is required")
    if value is None:
        raise MissingArgumentError("Value is required")
    return build_select(table, limit=1, filter=Expression(column, Operator.EQUALS, str(value)))


def build_insert(table: str, fields: Mapping[str, Any], *, wide_prefix: str = "N") -> str:
    """Build an INSERT followed by ``SELECT last_insert_rowid()``.

    The batch's result is the generated row id. Fields are emitted in mapping
    order; entries with an empty name are skipped and ``None`` becomes
    ``null``.
    """
    table_sql = _require_table(table)
    items = _field_items(fields, wide_prefix)
    keys = ",".join(k for k, _ in items)
    values = ",".join(v for _, v in items)
    return f"INSERT INTO {table_sql} ({keys}) VALUES ({values}); {LAST_INSERT_ID_SQL}"


def build_update(
    table: str,
    fields: Mapping[str, Any],
    filter: Optional[Expression] = None,
    *,
    wide_prefix: str = "N",
) -> str:
    table_sql = _require_table(table)
    assignments = ",".join(f"{k}={v}" for k, v in _field_items(fields, wide_prefix))
    sql = f"UPDATE {table_sql} SET {assignments}"
    if filter is not None:
        sql += f" WHERE {compile_where(filter)}"
    return sql


def build_delete(table: str, filter: Optional[Expression]) -> str:
    """Build ``DELETE FROM table WHERE ...``; a filter is mandatory."""
    table_sql = _require_table(table)
    if filter is None:
        raise MissingFilterError("DELETE requires a filter expression")
    return f"DELETE FROM {table_sql} WHERE {compile_where(filter)}"


__all__ = [
    "LAST_INSERT_ID_SQL",
    "build_select",
    "build_unique_by_id",
    "build_insert",
    "build_update",
    "build_delete",
]
