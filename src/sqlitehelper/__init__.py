from pydantic import __version__ as _pydantic_version

# sqlitehelper relies on the Pydantic v2 API (model_config, field_validator, etc.).
# Import errors should surface early if an incompatible version is installed.
if not _pydantic_version.startswith("2"):
    raise ImportError(
        "sqlitehelper requires pydantic>=2.0; detected version %s" % _pydantic_version
    )

from .client import DatabaseClient
from .errors import (
    ClientClosedError,
    MalformedExpressionError,
    MissingArgumentError,
    MissingFilterError,
    SqliteHelperError,
    UnknownDataTypeError,
    UnknownTermTypeError,
)
from .sanitize import format_timestamp, has_extended_characters, render_literal, sanitize_string
from .schema import Column, DataType, build_create_table, build_drop_table, data_type_from_string
from .settings import ClientSettings, load_settings
from .statements import build_delete, build_insert, build_select, build_update
from .where import (
    ColumnName,
    Expression,
    Literal,
    Operator,
    ValueList,
    compile_where,
    list_to_nested_and,
    list_to_nested_or,
    prepend_and_clause,
    prepend_or_clause,
)

__all__ = [
    # client
    "DatabaseClient",
    "ClientSettings",
    "load_settings",
    # expressions
    "Operator",
    "ColumnName",
    "Literal",
    "ValueList",
    "Expression",
    "compile_where",
    "list_to_nested_and",
    "list_to_nested_or",
    "prepend_and_clause",
    "prepend_or_clause",
    # statements
    "build_select",
    "build_insert",
    "build_update",
    "build_delete",
    # schema
    "Column",
    "DataType",
    "data_type_from_string",
    "build_create_table",
    "build_drop_table",
    # strings
    "sanitize_string",
    "has_extended_characters",
    "format_timestamp",
    "render_literal",
    # errors
    "SqliteHelperError",
    "MissingArgumentError",
    "MissingFilterError",
    "MalformedExpressionError",
    "UnknownTermTypeError",
    "UnknownDataTypeError",
    "ClientClosedError",
]
