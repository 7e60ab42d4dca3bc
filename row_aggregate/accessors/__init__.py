"""Accessors - default relational implementations of the accessor contract."""

from __future__ import annotations

from row_aggregate.accessors.protocol import AccessorFactory
from row_aggregate.accessors.sql import (
    SqlAccessorFactory,
    make_delete,
    make_entity_accessors,
    make_insert,
    make_query_by_foreign_key,
    make_query_by_join,
    make_read,
    make_update,
    make_update_links,
)

__all__ = [
    "AccessorFactory",
    "SqlAccessorFactory",
    "make_read",
    "make_insert",
    "make_update",
    "make_delete",
    "make_query_by_foreign_key",
    "make_query_by_join",
    "make_update_links",
    "make_entity_accessors",
]
