"""row-aggregate exception hierarchy.

Engines raise only precondition errors themselves. Errors raised by accessors
propagate unchanged; the relational accessor layer wraps raw driver exceptions
in StatementError so that driver types never leak to callers.
"""

from __future__ import annotations

from typing import Any


class RowAggregateError(Exception):
    """Base exception for all row-aggregate errors."""


# --- Configuration ---


class ConfigurationError(RowAggregateError):
    """Base for errors detected while building a relation model."""


class UnknownEntityError(ConfigurationError):
    """Raised when a relation or an operation names an undeclared entity."""

    def __init__(self, entity: str, referenced_by: str | None = None) -> None:
        self.entity = entity
        self.referenced_by = referenced_by
        if referenced_by is None:
            super().__init__(f"Unknown entity: '{entity}'")
        else:
            super().__init__(f"Unknown entity '{entity}' referenced by {referenced_by}")


class DuplicateEntityError(ConfigurationError):
    """Raised when two entity declarations share a name."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"Entity '{entity}' is declared more than once")


class DuplicateRelationError(ConfigurationError):
    """Raised when an entity declares the same relation name twice."""

    def __init__(self, entity: str, relation: str) -> None:
        self.entity = entity
        self.relation = relation
        super().__init__(f"Relation '{relation}' is declared more than once on '{entity}'")


class MissingAccessorError(ConfigurationError):
    """Raised when an entity has no accessors and no factory can provide them."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(
            f"Entity '{entity}' has no accessors and no accessor factory was given"
        )


class MissingRelationFunctionError(ConfigurationError):
    """Raised when a relation lacks a function its relation type requires."""

    def __init__(self, entity: str, relation: str, function: str) -> None:
        self.entity = entity
        self.relation = relation
        self.function = function
        super().__init__(f"Relation '{entity}.{relation}' requires a {function} function")


class InvalidIdentifierError(ConfigurationError):
    """Raised when a table or column name is unsafe for generated SQL."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid SQL identifier: {identifier!r}")


# --- Precondition ---


class PreconditionError(RowAggregateError):
    """Base for violated preconditions. Always fatal for the current call."""


class MissingIdError(PreconditionError):
    """Raised when an update is attempted on a row without an id."""

    def __init__(self, table: str, id_column: str) -> None:
        self.table = table
        self.id_column = id_column
        super().__init__(f"Cannot update '{table}': row has no '{id_column}' value")


class UnpersistedNodeError(PreconditionError):
    """Raised when dependants are saved for a node that has no id."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(
            f"Cannot save dependants of '{entity}': the node has not been persisted"
        )


class UntaggedNodeError(PreconditionError):
    """Raised when no entity is given and the node carries no entity tag."""

    def __init__(self, node: Any) -> None:
        self.node = node
        super().__init__("No entity given and the node carries no entity tag")


class EntityOutsideModelError(PreconditionError):
    """Raised when a node is saved as an entity the (narrowed) model lacks."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"Cannot save '{entity}': the entity is not part of the model")


# --- Execution ---


class ExecutionError(RowAggregateError):
    """Base for statement execution errors."""


class StatementError(ExecutionError):
    """Raised when the driver rejects a statement."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Statement failed: {detail} [{sql}]")


class MultipleRowsError(ExecutionError):
    """Raised when fetch_one encounters more than one row."""

    def __init__(self, sql: str, row_count: int) -> None:
        self.sql = sql
        self.row_count = row_count
        super().__init__(f"fetch_one returned {row_count} rows (expected 0 or 1) [{sql}]")


# --- Transaction ---


class TransactionError(RowAggregateError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(RowAggregateError):
    """Base for adapter errors."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
