from __future__ import annotations

"""SQLite client that executes the statements built by :mod:`sqlitehelper`."""

import logging
import sqlite3
import threading
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .errors import ClientClosedError, MissingArgumentError
from .schema import (
    Column,
    build_create_table,
    build_describe_table,
    build_drop_table,
    build_list_tables,
    columns_from_rows,
)
from .settings import ClientSettings
from .statements import (
    build_delete,
    build_insert,
    build_select,
    build_unique_by_id,
    build_update,
)
from .where import Expression

logger = logging.getLogger(__name__)

_Rows = Tuple[List[str], List[Tuple[Any, ...]]]


def split_statements(sql: str) -> Iterator[str]:
    """Yield the individual statements of a semicolon-separated batch.

    Boundaries are found with :func:`sqlite3.complete_statement`, so
    semicolons inside string literals do not split a statement.
    """
    buffer = ""
    for ch in sql:
        buffer += ch
        if ch == ";" and sqlite3.complete_statement(buffer):
            statement = buffer.strip()
            buffer = ""
            if statement != ";":
                yield statement
    tail = buffer.strip()
    if tail:
        yield tail


class DatabaseClient:
    """Thin wrapper over a single SQLite connection.

    The connection is opened on construction and runs in autocommit mode.
    Every execution holds one lock, so multi-statement batches (the
    temporary-table sequences used for introspection) run as one unit even
    when the client is shared between threads.

    Query results come back as :class:`pandas.DataFrame`.
    """

    def __init__(self, filename: Optional[str] = None, *, settings: Optional[ClientSettings] = None):
        self.settings = settings or ClientSettings()
        self.filename = filename or self.settings.filename
        if not self.filename:
            raise MissingArgumentError("Database filename is required")

        self._lock = threading.RLock()
        self._connection: Optional[sqlite3.Connection] = sqlite3.connect(
            self.filename,
            timeout=self.settings.timeout_s,
            isolation_level=None,
            check_same_thread=False,
        )
        logger.debug("Opened SQLite database %s", self.filename)

    # --- lifecycle ---
    def close(self) -> None:
        with self._lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None
            logger.debug("Closed SQLite database %s", self.filename)

    @property
    def closed(self) -> bool:
        return self._connection is None

    def __enter__(self) -> "DatabaseClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- raw execution ---
    def _conn(self) -> sqlite3.Connection:
        if self._connection is None:
            raise ClientClosedError(f"Database client for {self.filename} is closed")
        return self._connection

    def _execute(self, sql: str) -> _Rows:
        if not sql:
            raise MissingArgumentError("Query text is required")
        if self.settings.log_queries:
            logger.debug("Query: %s", sql)

        with self._lock:
            cursor = self._conn().cursor()
            try:
                for statement in split_statements(sql):
                    cursor.execute(statement)
                if cursor.description is None:
                    return [], []
                columns = [desc[0] for desc in cursor.description]
                return columns, cursor.fetchall()
            finally:
                cursor.close()

    def query(self, sql: str) -> pd.DataFrame:
        """Run ``sql`` and return the rows of its last statement."""
        columns, rows = self._execute(sql)
        result = pd.DataFrame.from_records(rows, columns=columns)
        if self.settings.log_results:
            logger.info("Query result: %d rows", len(result))
        return result

    def query_scalar(self, sql: str) -> Any:
        """Run ``sql`` and return the first column of the first row, or ``None``."""
        _, rows = self._execute(sql)
        value = rows[0][0] if rows else None
        if self.settings.log_results:
            logger.info("QueryScalar result: %r", value)
        return value

    def _records(self, sql: str) -> List[Dict[str, Any]]:
        columns, rows = self._execute(sql)
        return [dict(zip(columns, row)) for row in rows]

    # --- CRUD ---
    def select(
        self,
        table: str,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        fields: Optional[Sequence[str]] = None,
        filter: Optional[Expression] = None,
        order_by: Optional[str] = None,
    ) -> pd.DataFrame:
        return self.query(build_select(table, offset, limit, fields, filter, order_by))

    def get_unique_object_by_id(self, table: str, column: str, value: Any) -> pd.DataFrame:
        return self.query(build_unique_by_id(table, column, value))

    def insert(self, table: str, fields: Mapping[str, Any]) -> Any:
        """Insert one row and return its generated row id."""
        return self.query_scalar(
            build_insert(table, fields, wide_prefix=self.settings.wide_literal_prefix)
        )

    def update(self, table: str, fields: Mapping[str, Any], filter: Optional[Expression] = None) -> None:
        self._execute(build_update(table, fields, filter, wide_prefix=self.settings.wide_literal_prefix))

    def delete(self, table: str, filter: Expression) -> None:
        self._execute(build_delete(table, filter))

    # --- schema ---
    def list_tables(self) -> List[str]:
        return [str(row["TABLE_NAME"]) for row in self._records(build_list_tables())]

    def table_exists(self, table: str) -> bool:
        if not table:
            raise MissingArgumentError("Table name is required")
        return table in self.list_tables()

    def describe_table(self, table: str) -> List[Column]:
        return columns_from_rows(self._records(build_describe_table(table)))

    def describe_database(self) -> Dict[str, List[Column]]:
        with self._lock:
            return {name: self.describe_table(name) for name in self.list_tables()}

    def create_table(self, table: str, columns: Sequence[Column]) -> None:
        self._execute(build_create_table(table, columns))

    def drop_table(self, table: str) -> None:
        self._execute(build_drop_table(table))

    def get_primary_key_column(self, table: str) -> Optional[str]:
        for col in self.describe_table(table):
            if col.primary_key:
                return col.name
        return None

    def get_column_names(self, table: str) -> List[str]:
        return [col.name for col in self.describe_table(table)]

    # --- maintenance ---
    def backup(self, destination: str) -> None:
        """Copy the whole database into the file at ``destination``."""
        if not destination:
            raise MissingArgumentError("Backup destination is required")
        with self._lock:
            target = sqlite3.connect(destination)
            try:
                self._conn().backup(target)
            finally:
                target.close()
        logger.info("Backed up %s to %s", self.filename, destination)


__all__ = ["DatabaseClient", "split_statements"]
