"""Unit tests for the delete engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from row_aggregate.cascade import ENTITY_KEY, delete, save
from row_aggregate.core.exceptions import UntaggedNodeError
from row_aggregate.model import only, without
from row_aggregate.model.relation import RelationModel

if TYPE_CHECKING:
    from conftest import MemoryStore


@pytest.fixture
def project(model: RelationModel, store: MemoryStore) -> dict:
    saved = save(
        model,
        "project",
        {
            "name": "Webapp",
            "tasks": [{"title": "Design"}, {"title": "Build"}],
            "members": [{"name": "Donald"}],
            "manager": {"name": "Mickey"},
            "customer": {"name": "ACME"},
        },
    )
    store.calls.clear()
    return saved


class TestDeleteById:
    def test_removes_one_record(self, model: RelationModel, store: MemoryStore) -> None:
        saved = save(model, "person", {"name": "Donald"})
        assert delete(model, "person", saved["id"]) == 1
        assert delete(model, "person", saved["id"]) == 0
        assert store.count("person") == 0

    def test_does_not_cascade(
        self, model: RelationModel, project: dict, store: MemoryStore
    ) -> None:
        assert delete(model, "project", project["id"]) == 1
        assert store.operations() == [("delete", "project")]
        assert store.count("task") == 2

    def test_id_needs_an_entity(self, model: RelationModel) -> None:
        with pytest.raises(UntaggedNodeError):
            delete(model, None, 1)


class TestDeleteNode:
    def test_none(self, model: RelationModel, store: MemoryStore) -> None:
        assert delete(model, "project", None) == 0
        assert store.calls == []

    def test_entity_outside_model(
        self, model: RelationModel, project: dict, store: MemoryStore
    ) -> None:
        assert delete(without(model, "project"), "project", project) == 0
        assert store.count("project") == 1

    def test_full_aggregate(self, model: RelationModel, project: dict, store: MemoryStore) -> None:
        # 2 tasks, the project and its owned customer
        assert delete(model, "project", project) == 4
        assert store.operations() == [
            ("delete", "task"),
            ("delete", "task"),
            ("update_links", "project_person"),
            ("delete", "project"),
            ("delete", "customer"),
        ]
        assert store.count("project_person") == 0
        assert store.count("person") == 2

    def test_entity_from_tag(self, model: RelationModel, project: dict, store: MemoryStore) -> None:
        assert project[ENTITY_KEY] == "project"
        assert delete(model, None, project) == 4
        assert store.count("project") == 0

    def test_untagged_node(self, model: RelationModel) -> None:
        with pytest.raises(UntaggedNodeError):
            delete(model, None, {"id": 1})

    def test_owned_to_one_by_foreign_key(
        self, model: RelationModel, project: dict, store: MemoryStore
    ) -> None:
        node = {k: v for k, v in project.items() if k != "customer"}
        delete(only(model, ("project", "customer"), "customer"), "project", node)
        assert store.count("customer") == 0

    def test_only_embedded_children_are_deleted(
        self, model: RelationModel, project: dict, store: MemoryStore
    ) -> None:
        node = {**project, "tasks": project["tasks"][:1]}
        assert delete(only(model, ("project", "tasks"), "task"), "project", node) == 2
        assert store.count("task") == 1

    def test_not_owned_children_are_detached(
        self, model: RelationModel, store: MemoryStore
    ) -> None:
        team = save(model, "team", {"name": "Red", "players": [{"name": "A"}, {"name": "B"}]})
        assert delete(model, "team", team) == 1
        assert store.count("player") == 2
        assert [row["team_id"] for row in store.rows("player")] == [None, None]

    def test_links_removed_even_when_target_narrowed_away(
        self, model: RelationModel, project: dict, store: MemoryStore
    ) -> None:
        narrowed = without(model, "person", "task", "customer")
        assert delete(narrowed, "project", project) == 1
        assert ("update_links", "project_person") in store.operations()
        assert store.count("task") == 2
        assert store.count("customer") == 1
