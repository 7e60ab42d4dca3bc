"""Accessor factory protocol.

relation_model() asks a factory for the accessors and relation functions
that a declaration leaves out. SqlAccessorFactory is the bundled
implementation; any object with these methods can take its place.
"""

from __future__ import annotations

from typing import Protocol

from row_aggregate.model.relation import EntityAccessors, QueryFn, UpdateLinksFn


class AccessorFactory(Protocol):
    """Produces default accessors from table and column names."""

    def entity_accessors(self, table: str, id_column: str) -> EntityAccessors:
        """Read, insert, update and delete for one table."""
        ...

    def query_by_foreign_key(self, table: str, fk_column: str, id_column: str) -> QueryFn:
        """Rows of *table* whose *fk_column* equals the given id."""
        ...

    def query_by_join(
        self,
        table: str,
        link_table: str,
        target_column: str,
        owner_column: str,
        id_column: str,
    ) -> QueryFn:
        """Rows of *table* linked to the given owner id through *link_table*."""
        ...

    def update_links(
        self,
        link_table: str,
        owner_column: str,
        target_column: str,
        id_column: str,
    ) -> UpdateLinksFn:
        """Replace all link rows of an owner id."""
        ...
