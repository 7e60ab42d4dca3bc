"""Shared test fixtures."""

from __future__ import annotations

import itertools
from collections import defaultdict
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

import pytest

from row_aggregate.core.connection import ConnectionConfig, ConnectionManager
from row_aggregate.core.engine import Engine
from row_aggregate.model import (
    entity,
    relation_model,
    to_many,
    to_many_linked,
    to_one,
)
from row_aggregate.model.relation import (
    EntityAccessors,
    QueryFn,
    RelationModel,
    Row,
    UpdateLinksFn,
)


class MemoryStore:
    """In-memory AccessorFactory.

    Tables are dicts keyed by id (link tables by (owner, target)). Every
    accessor call is recorded in ``calls`` as ``(operation, table, argument)``.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[Any, Row]] = defaultdict(dict)
        self.calls: list[tuple[str, str, Any]] = []
        self._ids: dict[str, Any] = defaultdict(lambda: itertools.count(1))

    def rows(self, table: str) -> list[Row]:
        return list(self.tables[table].values())

    def count(self, table: str) -> int:
        return len(self.tables[table])

    def operations(self) -> list[tuple[str, str]]:
        return [(operation, table) for operation, table, _ in self.calls]

    def entity_accessors(self, table: str, id_column: str) -> EntityAccessors:
        rows = self.tables[table]

        def read(id: Any) -> Row | None:
            self.calls.append(("read", table, id))
            row = rows.get(id)
            return dict(row) if row is not None else None

        def insert(row: Mapping[str, Any]) -> Row:
            self.calls.append(("insert", table, dict(row)))
            saved = dict(row)
            if saved.get(id_column) is None:
                saved[id_column] = next(self._ids[table])
            rows[saved[id_column]] = dict(saved)
            return saved

        def update(row: Mapping[str, Any]) -> Row:
            self.calls.append(("update", table, dict(row)))
            rows.setdefault(row[id_column], {}).update(row)
            return dict(row)

        def delete(id: Any) -> int | None:
            self.calls.append(("delete", table, id))
            return 1 if rows.pop(id, None) is not None else None

        return EntityAccessors(read=read, insert=insert, update=update, delete=delete)

    def query_by_foreign_key(self, table: str, fk_column: str, id_column: str) -> QueryFn:
        def query(id: Any) -> list[Row]:
            self.calls.append(("query", table, id))
            matching = [r for r in self.tables[table].values() if r.get(fk_column) == id]
            return [dict(r) for r in sorted(matching, key=lambda r: r[id_column])]

        return query

    def query_by_join(
        self,
        table: str,
        link_table: str,
        target_column: str,
        owner_column: str,
        id_column: str,
    ) -> QueryFn:
        def query(id: Any) -> list[Row]:
            self.calls.append(("query", table, id))
            linked = sorted(
                link[target_column]
                for link in self.tables[link_table].values()
                if link[owner_column] == id
            )
            rows = self.tables[table]
            return [dict(rows[target]) for target in linked if target in rows]

        return query

    def update_links(
        self,
        link_table: str,
        owner_column: str,
        target_column: str,
        id_column: str,
    ) -> UpdateLinksFn:
        def update_links(owner_id: Any, children: Sequence[Mapping[str, Any]]) -> None:
            targets = [child[id_column] for child in children]
            self.calls.append(("update_links", link_table, (owner_id, targets)))
            links = self.tables[link_table]
            for key in [k for k, link in links.items() if link[owner_column] == owner_id]:
                del links[key]
            for target in targets:
                links[(owner_id, target)] = {owner_column: owner_id, target_column: target}

        return update_links


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config.

    A single pooled connection, since every ":memory:" connection is its own
    database.
    """
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def engine(sqlite_config: ConnectionConfig) -> Iterator[Engine]:
    manager = ConnectionManager(sqlite_config)
    yield Engine(manager)
    manager.close_pool()


@pytest.fixture
def create_tables(engine: Engine) -> Callable[..., None]:
    """Helper running CREATE TABLE statements on the test database.

    Usage:
        create_tables("CREATE TABLE person (id INTEGER PRIMARY KEY, name TEXT)")
    """

    def _create(*statements: str) -> None:
        for statement in statements:
            engine.execute(statement)

    return _create


@pytest.fixture
def count_rows(engine: Engine) -> Callable[[str], int]:
    def _count(table: str) -> int:
        return engine.fetch_scalar(f'SELECT COUNT(*) FROM "{table}"')

    return _count


@pytest.fixture
def model(store: MemoryStore) -> RelationModel:
    """Project aggregate over the in-memory store.

    project: tasks (owned), members (linked), manager (not owned), customer (owned)
    task: project (back reference, not owned)
    team: players (not owned)
    """
    return relation_model(
        entity(
            "project",
            to_many("tasks", "task"),
            to_many_linked("members", "person"),
            to_one("manager", "person", owned=False),
            to_one("customer", "customer"),
        ),
        entity("task", to_one("project", "project", owned=False)),
        entity("person"),
        entity("customer"),
        entity("team", to_many("players", "player", owned=False)),
        entity("player"),
        factory=store,
    )
