"""Transaction management.

A TransactionManager holds one pooled connection for its lifetime and binds
it to its Engine, so every statement issued through the engine (including
those issued by generated accessors during a save or delete cascade) runs
in the same transaction. Auto-commits on success, auto-rolls-back on
exception.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from row_aggregate.core.exceptions import TransactionStateError

if TYPE_CHECKING:
    from row_aggregate.core.connection import ConnectionManager
    from row_aggregate.core.engine import Engine

logger = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionManager:
    """Synchronous transaction context manager."""

    def __init__(self, engine: Engine, connection_manager: ConnectionManager) -> None:
        self._engine = engine
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._connection: Any = None
        self._pool: Any = None
        self._state = _TxState.IDLE

    @property
    def state(self) -> str:
        return self._state.value

    @property
    def connection(self) -> Any:
        """The transaction's connection. Only available while active."""
        self._check_active()
        return self._connection

    def __enter__(self) -> TransactionManager:
        if self._state != _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        self._pool = self._connection_manager.initialize_pool()
        self._connection = self._adapter.acquire_connection(self._pool)
        try:
            self._engine._bind(self)
        except TransactionStateError:
            self._adapter.release_connection(self._connection, self._pool)
            raise
        self._state = _TxState.ACTIVE
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    self.rollback()
                else:
                    self.commit()
        finally:
            self._engine._unbind(self)
            self._adapter.release_connection(self._connection, self._pool)

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "commit")
        self._connection.commit()
        self._state = _TxState.COMMITTED
        logger.info("Transaction committed")

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "rollback")
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK
        logger.info("Transaction rolled back")

    def _check_active(self) -> None:
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
