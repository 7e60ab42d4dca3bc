"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from row_aggregate.core.connection import ConnectionConfig
from row_aggregate.core.exceptions import PoolError


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite.

        Every connection to ":memory:" is a separate database, so in-memory
        setups should use pool_size=1.
        """
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            conn = sqlite3.connect(config.database)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            if config.extra.get("foreign_keys", True):
                conn.execute("PRAGMA foreign_keys=ON")
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params or {})

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def insert_sql(self, table: str, columns: Sequence[str], id_column: str) -> str:
        """INSERT statement; the id is read back from cursor.lastrowid."""
        if not columns:
            return f"INSERT INTO {self.quote_identifier(table)} DEFAULT VALUES"
        column_list = ", ".join(self.quote_identifier(c) for c in columns)
        values = ", ".join(f":{c}" for c in columns)
        return f"INSERT INTO {self.quote_identifier(table)} ({column_list}) VALUES ({values})"

    def generated_id(self, cursor: sqlite3.Cursor, id_column: str) -> Any:
        return cursor.lastrowid
