from __future__ import annotations

"""Column metadata, type-affinity mapping and schema statements."""

from enum import Enum
from typing import Any, Iterable, List, Mapping, Sequence

from pydantic import BaseModel, ConfigDict

from .errors import MissingArgumentError, UnknownDataTypeError
from .sanitize import sanitize_string


class DataType(str, Enum):
    INTEGER = "Integer"
    TEXT = "Text"
    BLOB = "Blob"
    REAL = "Real"
    NUMERIC = "Numeric"
    NULL = "Null"


class Column(BaseModel):
    """Description of a single table column."""

    name: str
    primary_key: bool = False
    type: DataType = DataType.TEXT
    nullable: bool = True

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        pk = "PK " if self.primary_key else ""
        return f"  [{self.name}] {pk}Type: {self.type.value} Nullable: {self.nullable}"


# Checked in order; the first matching group wins.
_AFFINITY_RULES: Sequence[tuple[DataType, tuple[str, ...]]] = (
    (DataType.INTEGER, ("int",)),
    (DataType.TEXT, ("char", "text", "clob")),
    (DataType.BLOB, ("blob",)),
    (DataType.REAL, ("real", "double", "float")),
    (DataType.NUMERIC, ("numeric", "decimal", "bool", "date")),
)


def data_type_from_string(value: str) -> DataType:
    """Map a declared column type (``"VARCHAR(64)"``, ``"BIGINT"``...) to a :class:`DataType`."""
    if not value:
        raise MissingArgumentError("Data type text is required")
    lowered = value.lower()
    for data_type, needles in _AFFINITY_RULES:
        if any(needle in lowered for needle in needles):
            return data_type
    raise UnknownDataTypeError(f"Unknown DataType: {value}")


def build_list_tables() -> str:
    return (
        "DROP TABLE IF EXISTS temp.tablelist; "
        "CREATE TEMPORARY TABLE tablelist AS "
        "SELECT name AS TABLE_NAME FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%'; "
        "SELECT * FROM temp.tablelist;"
    )


def build_describe_table(table: str) -> str:
    if not table:
        raise MissingArgumentError("Table name is required")
    name = sanitize_string(table, preserve_newlines=False)
    return (
        "DROP TABLE IF EXISTS temp.tableinfo; "
        "CREATE TEMPORARY TABLE tableinfo AS "
        "SELECT "
        "m.name AS TABLE_NAME, "
        "p.name AS COLUMN_NAME, "
        "p.type AS DATA_TYPE, "
        "p.pk AS IS_PRIMARY_KEY, "
        "p.[notnull] AS IS_NOT_NULLABLE "
        "FROM sqlite_master m, pragma_table_info(m.name) p "
        f"WHERE m.type = 'table' AND m.name = '{name}' "
        "ORDER BY TABLE_NAME; "
        "SELECT * FROM temp.tableinfo;"
    )


def columns_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[Column]:
    """Turn ``build_describe_table`` result rows into :class:`Column` objects.

    Duplicate column names keep their first occurrence.
    """
    columns: List[Column] = []
    seen: set[str] = set()
    for row in rows:
        name = row.get("COLUMN_NAME")
        if not isinstance(name, str) or not name or name in seen:
            continue
        seen.add(name)
        columns.append(
            Column(
                name=name,
                type=data_type_from_string(str(row.get("DATA_TYPE") or "")),
                primary_key=bool(row.get("IS_PRIMARY_KEY")),
                nullable=not bool(row.get("IS_NOT_NULLABLE")),
            )
        )
    return columns


def build_create_table(table: str, columns: Sequence[Column]) -> str:
    """Build ``CREATE TABLE IF NOT EXISTS`` for ``columns`` in the given order.

    Text columns are case-insensitive (``COLLATE NOCASE``); an Integer primary
    key also gets ``AUTOINCREMENT``.
    """
    if not table:
        raise MissingArgumentError("Table name is required")
    if not columns:
        raise MissingArgumentError("At least one column is required")

    definitions: List[str] = []
    for col in columns:
        definition = f"{sanitize_string(col.name)} {col.type.value} "
        if col.type is DataType.TEXT:
            definition += "COLLATE NOCASE "
        if col.primary_key:
            definition += "PRIMARY KEY "
            if col.type is DataType.INTEGER:
                definition += "AUTOINCREMENT "
        if not col.nullable:
            definition += "NOT NULL "
        definitions.append(definition)

    return f"CREATE TABLE IF NOT EXISTS '{sanitize_string(table)}' ({', '.join(definitions)})"


def build_drop_table(table: str) -> str:
    if not table:
        raise MissingArgumentError("Table name is required")
    return f"DROP TABLE IF EXISTS '{sanitize_string(table)}'"


__all__ = [
    "DataType",
    "Column",
    "data_type_from_string",
    "build_list_tables",
    "build_describe_table",
    "columns_from_rows",
    "build_create_table",
    "build_drop_table",
]
