from __future__ import annotations

"""Exception taxonomy shared by the builders and the client."""


class SqliteHelperError(Exception):
    """Base class for errors raised by sqlitehelper."""


class MissingArgumentError(SqliteHelperError, ValueError):
    """A required string or collection argument is empty or absent."""


class MissingFilterError(MissingArgumentError):
    """A DELETE was requested without a filter expression."""


class MalformedExpressionError(SqliteHelperError, ValueError):
    """An expression node lacks a term its operator requires, or a term has the wrong shape."""


class UnknownTermTypeError(MalformedExpressionError, TypeError):
    """A term is neither a column name, a literal, a value list nor a nested expression."""


class UnknownDataTypeError(SqliteHelperError, ValueError):
    """A column type affinity string could not be mapped to a :class:`DataType`."""


class ClientClosedError(SqliteHelperError, RuntimeError):
    """The database client was used after :meth:`DatabaseClient.close`."""


__all__ = [
    "SqliteHelperError",
    "MissingArgumentError",
    "MissingFilterError",
    "MalformedExpressionError",
    "UnknownTermTypeError",
    "UnknownDataTypeError",
    "ClientClosedError",
]
