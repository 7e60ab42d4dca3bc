"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from row_aggregate.core.connection import ConnectionConfig
from row_aggregate.core.exceptions import PoolError


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlSyncAdapter:
    """Synchronous PostgreSQL adapter using psycopg (v3+)."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = psycopg.connect(conninfo, row_factory=psycopg.rows.dict_row)
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return connection.execute(sql, params)

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def insert_sql(self, table: str, columns: Sequence[str], id_column: str) -> str:
        """INSERT ... RETURNING the id column."""
        returning = f" RETURNING {self.quote_identifier(id_column)}"
        if not columns:
            return f"INSERT INTO {self.quote_identifier(table)} DEFAULT VALUES{returning}"
        column_list = ", ".join(self.quote_identifier(c) for c in columns)
        values = ", ".join(f":{c}" for c in columns)
        return (
            f"INSERT INTO {self.quote_identifier(table)} ({column_list}) "
            f"VALUES ({values}){returning}"
        )

    def generated_id(self, cursor: Any, id_column: str) -> Any:
        row = cursor.fetchone()
        if row is None:
            return None
        if isinstance(row, dict):
            return row[id_column]
        return row[0]
