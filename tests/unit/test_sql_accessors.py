"""Unit tests for the relational accessor factories."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from row_aggregate.accessors import (
    SqlAccessorFactory,
    make_entity_accessors,
    make_query_by_foreign_key,
    make_query_by_join,
    make_update_links,
)
from row_aggregate.core.engine import Engine
from row_aggregate.core.exceptions import InvalidIdentifierError, MissingIdError
from row_aggregate.model.relation import EntityAccessors


@pytest.fixture
def schema(engine: Engine, create_tables: Callable[..., None]) -> Engine:
    create_tables(
        "CREATE TABLE person (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT)",
        "CREATE TABLE project (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT)",
        "CREATE TABLE task (id INTEGER PRIMARY KEY AUTOINCREMENT, \"desc\" TEXT, "
        "project_id INTEGER REFERENCES project (id))",
        "CREATE TABLE project_person (project_id INTEGER REFERENCES project (id), "
        "person_id INTEGER REFERENCES person (id))",
    )
    engine.execute("INSERT INTO person (name) VALUES ('Foo')")
    return engine


@pytest.fixture
def person(schema: Engine) -> EntityAccessors:
    return make_entity_accessors(schema, "person")


class TestEntityAccessors:
    def test_read(self, person: EntityAccessors) -> None:
        assert person.read(1) == {"id": 1, "name": "Foo"}
        assert person.read(2) is None
        assert person.read(None) is None

    def test_insert_returns_row_with_id(
        self, person: EntityAccessors, count_rows: Callable[[str], int]
    ) -> None:
        assert person.insert({"name": "Bar"}) == {"id": 2, "name": "Bar"}
        assert count_rows("person") == 2
        assert person.read(2) == {"id": 2, "name": "Bar"}

    def test_insert_ignores_none_id(self, person: EntityAccessors) -> None:
        assert person.insert({"id": None, "name": "Bar"}) == {"id": 2, "name": "Bar"}

    def test_insert_without_columns(self, person: EntityAccessors) -> None:
        assert person.insert({}) == {"id": 2}

    def test_update_returns_given_row(
        self, person: EntityAccessors, count_rows: Callable[[str], int]
    ) -> None:
        assert person.update({"id": 1, "name": "Baz"}) == {"id": 1, "name": "Baz"}
        assert person.read(1) == {"id": 1, "name": "Baz"}
        assert count_rows("person") == 1

    def test_update_needs_id(self, person: EntityAccessors) -> None:
        with pytest.raises(MissingIdError, match="person"):
            person.update({"name": "Baz"})

    def test_update_with_only_id(self, person: EntityAccessors) -> None:
        assert person.update({"id": 1}) == {"id": 1}
        assert person.read(1) == {"id": 1, "name": "Foo"}

    def test_delete(self, person: EntityAccessors, count_rows: Callable[[str], int]) -> None:
        assert person.delete(1) == 1
        assert count_rows("person") == 0
        assert person.delete(1) is None

    def test_reserved_word_column(self, schema: Engine) -> None:
        task = make_entity_accessors(schema, "task")
        saved = task.insert({"desc": "Hack!"})
        assert task.read(saved["id"]) == {"id": 1, "desc": "Hack!", "project_id": None}

    def test_invalid_identifiers(self, schema: Engine) -> None:
        with pytest.raises(InvalidIdentifierError):
            make_entity_accessors(schema, "person; DROP TABLE person")
        person = make_entity_accessors(schema, "person")
        with pytest.raises(InvalidIdentifierError):
            person.insert({"name) VALUES ('x'); --": "y"})


class TestRelationFunctions:
    def test_query_by_foreign_key(self, schema: Engine) -> None:
        schema.execute("INSERT INTO project (name) VALUES ('A'), ('B')")
        schema.execute(
            "INSERT INTO task (\"desc\", project_id) VALUES ('a1', 1), ('b1', 2), ('a2', 1)"
        )
        query = make_query_by_foreign_key(schema, "task", "project_id")
        assert [row["desc"] for row in query(1)] == ["a1", "a2"]
        assert query(3) == []

    def test_links(self, schema: Engine, count_rows: Callable[[str], int]) -> None:
        schema.execute("INSERT INTO project (name) VALUES ('Webapp')")
        schema.execute("INSERT INTO person (name) VALUES ('Bar'), ('Baz')")
        update_links = make_update_links(schema, "project_person", "project_id", "person_id")
        members = make_query_by_join(schema, "person", "project_person", "person_id", "project_id")

        update_links(1, [{"id": 3}, {"id": 1}])
        assert members(1) == [{"id": 1, "name": "Foo"}, {"id": 3, "name": "Baz"}]

        update_links(1, [{"id": 2}])
        assert [row["name"] for row in members(1)] == ["Bar"]
        assert count_rows("project_person") == 1

        update_links(1, [])
        assert members(1) == []

    def test_factory(self, schema: Engine) -> None:
        factory = SqlAccessorFactory(schema)
        accessors = factory.entity_accessors("person", "id")
        assert accessors.read(1) == {"id": 1, "name": "Foo"}
        assert factory.query_by_foreign_key("task", "project_id", "id")(1) == []
