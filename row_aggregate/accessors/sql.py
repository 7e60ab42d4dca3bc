"""Default relational accessors.

Factories producing functions that satisfy the accessor contract for a
table, executed through an Engine. Table and column names are validated
and quoted by the engine's adapter; values are always bound parameters.

Because the functions run through the engine, wrapping a save or delete in
``with engine.transaction():`` makes the whole cascade atomic.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from row_aggregate.core.engine import Engine
from row_aggregate.core.exceptions import InvalidIdentifierError, MissingIdError
from row_aggregate.model.relation import (
    DeleteFn,
    EntityAccessors,
    InsertFn,
    QueryFn,
    ReadFn,
    Row,
    UpdateFn,
    UpdateLinksFn,
)

logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _checked(*names: str) -> None:
    for name in names:
        if not isinstance(name, str) or not _IDENTIFIER_PATTERN.match(name):
            raise InvalidIdentifierError(name)


def make_read(engine: Engine, table: str, id_column: str = "id") -> ReadFn:
    """Return ``read(id) -> row | None`` for *table*."""
    _checked(table, id_column)
    q = engine.adapter.quote_identifier
    sql = f"SELECT * FROM {q(table)} WHERE {q(id_column)} = :id"

    def read(id: Any) -> Row | None:
        if id is None:
            return None
        return engine.fetch_one(sql, {"id": id})

    return read


def make_insert(engine: Engine, table: str, id_column: str = "id") -> InsertFn:
    """Return ``insert(row) -> row`` for *table*.

    The returned row is the given row plus the generated id.
    """
    _checked(table, id_column)

    def insert(row: Mapping[str, Any]) -> Row:
        values = {c: v for c, v in row.items() if not (c == id_column and v is None)}
        _checked(*values)
        sql = engine.adapter.insert_sql(table, list(values), id_column)
        generated = engine.insert(sql, values, id_column)
        saved = dict(row)
        if saved.get(id_column) is None:
            saved[id_column] = generated
        return saved

    return insert


def make_update(engine: Engine, table: str, id_column: str = "id") -> UpdateFn:
    """Return ``update(row) -> row`` for *table*.

    Only the columns present in the row are written.

    Raises:
        MissingIdError: If the row has no id.
    """
    _checked(table, id_column)
    q = engine.adapter.quote_identifier

    def update(row: Mapping[str, Any]) -> Row:
        if row.get(id_column) is None:
            raise MissingIdError(table, id_column)
        columns = [c for c in row if c != id_column]
        if not columns:
            return dict(row)
        _checked(*columns)
        assignments = ", ".join(f"{q(c)} = :{c}" for c in columns)
        sql = f"UPDATE {q(table)} SET {assignments} WHERE {q(id_column)} = :{id_column}"
        engine.execute(sql, dict(row))
        return dict(row)

    return update


def make_delete(engine: Engine, table: str, id_column: str = "id") -> DeleteFn:
    """Return ``delete(id) -> count | None`` for *table*."""
    _checked(table, id_column)
    q = engine.adapter.quote_identifier
    sql = f"DELETE FROM {q(table)} WHERE {q(id_column)} = :id"

    def delete(id: Any) -> int | None:
        count = engine.execute(sql, {"id": id})
        return count if count > 0 else None

    return delete


def make_query_by_foreign_key(
    engine: Engine,
    table: str,
    fk_column: str,
    id_column: str = "id",
) -> QueryFn:
    """Return a finder for all rows of *table* whose *fk_column* equals an id."""
    _checked(table, fk_column, id_column)
    q = engine.adapter.quote_identifier
    sql = f"SELECT * FROM {q(table)} WHERE {q(fk_column)} = :id ORDER BY {q(id_column)}"

    def query_by_foreign_key(id: Any) -> list[Row]:
        return engine.fetch_all(sql, {"id": id})

    return query_by_foreign_key


def make_query_by_join(
    engine: Engine,
    table: str,
    link_table: str,
    target_column: str,
    owner_column: str,
    id_column: str = "id",
) -> QueryFn:
    """Return a finder for rows of *table* linked to an owner id.

    *target_column* is the link-table column referencing *table*,
    *owner_column* the one referencing the owner. Only the columns of
    *table* are selected, so the link table's keys never reach the rows.
    """
    _checked(table, link_table, target_column, owner_column, id_column)
    q = engine.adapter.quote_identifier
    sql = (
        f"SELECT t.* FROM {q(table)} t "
        f"JOIN {q(link_table)} l ON t.{q(id_column)} = l.{q(target_column)} "
        f"WHERE l.{q(owner_column)} = :id ORDER BY t.{q(id_column)}"
    )

    def query_by_join(id: Any) -> list[Row]:
        return engine.fetch_all(sql, {"id": id})

    return query_by_join


def make_update_links(
    engine: Engine,
    link_table: str,
    owner_column: str,
    target_column: str,
    id_column: str = "id",
) -> UpdateLinksFn:
    """Return ``update_links(owner_id, children)``.

    Deletes every link row of the owner, then inserts one link row per
    child, referencing the child's *id_column* value.
    """
    _checked(link_table, owner_column, target_column, id_column)
    q = engine.adapter.quote_identifier
    delete_sql = f"DELETE FROM {q(link_table)} WHERE {q(owner_column)} = :owner"
    insert_sql = (
        f"INSERT INTO {q(link_table)} ({q(owner_column)}, {q(target_column)}) "
        f"VALUES (:owner, :target)"
    )

    def update_links(owner_id: Any, children: Sequence[Mapping[str, Any]]) -> None:
        removed = engine.execute(delete_sql, {"owner": owner_id})
        for child in children:
            engine.execute(insert_sql, {"owner": owner_id, "target": child[id_column]})
        logger.debug(
            "Replaced %d link row(s) of %s %s=%r with %d",
            max(removed, 0),
            link_table,
            owner_column,
            owner_id,
            len(children),
        )

    return update_links


def make_entity_accessors(engine: Engine, table: str, id_column: str = "id") -> EntityAccessors:
    """All four default accessors for *table*."""
    return EntityAccessors(
        read=make_read(engine, table, id_column),
        insert=make_insert(engine, table, id_column),
        update=make_update(engine, table, id_column),
        delete=make_delete(engine, table, id_column),
    )


class SqlAccessorFactory:
    """AccessorFactory producing the relational accessors of this module."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def entity_accessors(self, table: str, id_column: str) -> EntityAccessors:
        return make_entity_accessors(self.engine, table, id_column)

    def query_by_foreign_key(self, table: str, fk_column: str, id_column: str) -> QueryFn:
        return make_query_by_foreign_key(self.engine, table, fk_column, id_column)

    def query_by_join(
        self,
        table: str,
        link_table: str,
        target_column: str,
        owner_column: str,
        id_column: str,
    ) -> QueryFn:
        return make_query_by_join(
            self.engine, table, link_table, target_column, owner_column, id_column
        )

    def update_links(
        self,
        link_table: str,
        owner_column: str,
        target_column: str,
        id_column: str,
    ) -> UpdateLinksFn:
        return make_update_links(self.engine, link_table, owner_column, target_column, id_column)
