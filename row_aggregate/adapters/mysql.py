"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_aggregate.core.connection import ConnectionConfig
from row_aggregate.core.exceptions import PoolError


class MysqlSyncAdapter:
    """Synchronous MySQL adapter using mysql-connector-python."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        """Create a pool (list of connections) for MySQL."""
        import mysql.connector

        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = mysql.connector.connect(
                host=config.host,
                port=config.port,
                user=config.user,
                password=config.password,
                database=config.database,
            )
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor with dictionary results."""
        cursor = connection.cursor(dictionary=True)
        cursor.execute(sql, params or {})
        return cursor

    def quote_identifier(self, name: str) -> str:
        return f"`{name}`"

    def insert_sql(self, table: str, columns: Sequence[str], id_column: str) -> str:
        """INSERT statement; the id is read back from cursor.lastrowid."""
        column_list = ", ".join(self.quote_identifier(c) for c in columns)
        values = ", ".join(f":{c}" for c in columns)
        return f"INSERT INTO {self.quote_identifier(table)} ({column_list}) VALUES ({values})"

    def generated_id(self, cursor: Any, id_column: str) -> Any:
        return cursor.lastrowid
