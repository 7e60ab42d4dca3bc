"""RowAggregate - relation-model driven persistence of nested aggregates."""

from __future__ import annotations

from row_aggregate.accessors import AccessorFactory, SqlAccessorFactory
from row_aggregate.cascade import ENTITY_KEY, Node, delete, entity_of, load, save, tag
from row_aggregate.core.connection import ConnectionConfig, ConnectionManager
from row_aggregate.core.engine import Engine
from row_aggregate.core.enums import DatabaseBackend
from row_aggregate.core.exceptions import (
    AdapterError,
    ConfigurationError,
    DuplicateEntityError,
    DuplicateRelationError,
    EntityOutsideModelError,
    ExecutionError,
    InvalidIdentifierError,
    MissingAccessorError,
    MissingIdError,
    MissingRelationFunctionError,
    MultipleRowsError,
    PoolError,
    PreconditionError,
    RowAggregateError,
    StatementError,
    TransactionError,
    TransactionStateError,
    UnknownEntityError,
    UnpersistedNodeError,
    UntaggedNodeError,
)
from row_aggregate.core.transaction import TransactionManager
from row_aggregate.model import (
    EntityAccessors,
    EntityConfig,
    ModelOptions,
    RelationConfig,
    RelationModel,
    RelationType,
    entity,
    has_id,
    only,
    relation_model,
    to_many,
    to_many_linked,
    to_one,
    without,
)
from row_aggregate.repository import AggregateRepository

__all__ = [
    # Model
    "RelationType",
    "RelationConfig",
    "EntityConfig",
    "EntityAccessors",
    "RelationModel",
    "ModelOptions",
    "has_id",
    "entity",
    "relation_model",
    "to_one",
    "to_many",
    "to_many_linked",
    "only",
    "without",
    # Cascade
    "ENTITY_KEY",
    "Node",
    "tag",
    "entity_of",
    "load",
    "save",
    "delete",
    # Repository
    "AggregateRepository",
    # Accessors
    "AccessorFactory",
    "SqlAccessorFactory",
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    "TransactionManager",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "RowAggregateError",
    "ConfigurationError",
    "UnknownEntityError",
    "DuplicateEntityError",
    "DuplicateRelationError",
    "MissingAccessorError",
    "MissingRelationFunctionError",
    "InvalidIdentifierError",
    "PreconditionError",
    "MissingIdError",
    "UnpersistedNodeError",
    "UntaggedNodeError",
    "EntityOutsideModelError",
    "ExecutionError",
    "StatementError",
    "MultipleRowsError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "PoolError",
]
