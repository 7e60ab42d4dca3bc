"""Statement execution engine.

The Engine runs generated SQL through the adapter of a ConnectionManager.
Outside a transaction every statement runs on a pooled connection and
write statements commit immediately. While a transaction opened with
Engine.transaction() is active, all statements run on the transaction's
connection and nothing is committed until the transaction ends.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

from row_aggregate.core.connection import ConnectionConfig, ConnectionManager
from row_aggregate.core.exceptions import (
    MultipleRowsError,
    StatementError,
    TransactionStateError,
)
from row_aggregate.core.params import normalize_params
from row_aggregate.core.transaction import TransactionManager

logger = logging.getLogger(__name__)


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # Check if rows are already dict-like (e.g., psycopg dict_row, MySQL dict cursor)
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    # Tuple-like rows, zip with columns
    return [dict(zip(columns, row, strict=True)) for row in rows]


class Engine:
    """Synchronous statement execution engine.

    The active transaction is held by the engine instance, not per thread:
    while one is open, every statement issued through this engine, from
    any thread, runs on the transaction's connection. Share an engine
    between threads only without transactions, or use one engine per
    thread.
    """

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._paramstyle = connection_manager.adapter.paramstyle
        self._transaction: TransactionManager | None = None

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig."""
        return cls(ConnectionManager(config))

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    @contextmanager
    def _connection(self):  # type: ignore[no-untyped-def]
        """Yield (connection, autocommit) for the next statement."""
        if self._transaction is not None:
            yield self._transaction.connection, False
            return
        with self._connection_manager.get_connection() as conn:
            yield conn, True

    def _execute(self, conn: Any, sql: str, params: dict[str, Any] | None) -> Any:
        sql = normalize_params(sql, self._paramstyle)
        logger.debug("Executing %s with %r", sql, params)
        try:
            return self._adapter.execute(conn, sql, params)
        except Exception as e:
            raise StatementError(sql, str(e)) from e

    def fetch_one(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        rows = self.fetch_all(sql, params)
        if len(rows) == 0:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(sql, len(rows))
        return rows[0]

    def fetch_all(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all matching rows."""
        with self._connection() as (conn, _):
            cursor = self._execute(conn, sql, params)
            return _rows_to_dicts(cursor)

    def fetch_scalar(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Fetch a single scalar value (first column of first row)."""
        with self._connection() as (conn, _):
            cursor = self._execute(conn, sql, params)
            row = cursor.fetchone()

        if row is None:
            return None
        # Handle dict rows (e.g., psycopg dict_row)
        if isinstance(row, dict):
            return next(iter(row.values()))
        return row[0]

    def execute(
        self,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Execute a write statement. Returns affected row count."""
        with self._connection() as (conn, autocommit):
            cursor = self._execute(conn, sql, params)
            if autocommit:
                conn.commit()
            return int(cursor.rowcount)

    def insert(
        self,
        sql: str,
        params: dict[str, Any] | None,
        id_column: str,
    ) -> Any:
        """Execute an INSERT built by the adapter and return the generated id."""
        with self._connection() as (conn, autocommit):
            cursor = self._execute(conn, sql, params)
            generated = self._adapter.generated_id(cursor, id_column)
            if autocommit:
                conn.commit()
            return generated

    def transaction(self) -> TransactionManager:
        """Create a transaction context manager bound to this engine.

        Raises:
            TransactionStateError: If a transaction is already active.
        """
        if self._transaction is not None:
            raise TransactionStateError("active", "begin")
        return TransactionManager(self, self._connection_manager)

    def _bind(self, transaction: TransactionManager) -> None:
        if self._transaction is not None and self._transaction is not transaction:
            raise TransactionStateError("active", "begin")
        self._transaction = transaction

    def _unbind(self, transaction: TransactionManager) -> None:
        if self._transaction is transaction:
            self._transaction = None
