"""Database adapter protocol.

Every adapter module MUST implement this protocol. Besides the pool
lifecycle, adapters own the dialect details the accessor layer needs:
identifier quoting, INSERT statement shape and generated-id retrieval.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from row_aggregate.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column name."""
        ...

    def insert_sql(self, table: str, columns: Sequence[str], id_column: str) -> str:
        """Build an INSERT for *columns* bound as :column parameters."""
        ...

    def generated_id(self, cursor: Any, id_column: str) -> Any:
        """Return the id generated by an INSERT built with insert_sql."""
        ...
