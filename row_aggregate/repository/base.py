"""Repository base classes.

Thin wrappers over the cascade engines for DDD-oriented usage: one
repository per aggregate root.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Mapping
from typing import Any

from row_aggregate.cascade import Node, delete, load, save
from row_aggregate.core.engine import Engine
from row_aggregate.model.narrowing import Spec, only, without
from row_aggregate.model.relation import RelationModel


class AggregateRepository:
    """Loads, saves and deletes aggregates rooted at one entity.

    When an engine is given, save and delete run inside one transaction
    each, unless a transaction is already active on that engine.

    Example:
        tasks = AggregateRepository(model, "task", engine)
        task = tasks.load(1)
        task["title"] = "Renamed"
        tasks.save(task)
    """

    def __init__(self, model: RelationModel, entity: str, engine: Engine | None = None) -> None:
        self.model = model
        self.entity = entity
        self.engine = engine

    def only(self, *specs: Spec) -> AggregateRepository:
        """Repository over ``only(model, *specs)``."""
        return AggregateRepository(only(self.model, *specs), self.entity, self.engine)

    def without(self, *specs: Spec) -> AggregateRepository:
        """Repository over ``without(model, *specs)``."""
        return AggregateRepository(without(self.model, *specs), self.entity, self.engine)

    def load(self, id: Any) -> Node | None:
        return load(self.model, self.entity, id)

    def save(self, node: Mapping[str, Any] | None) -> Node | None:
        with self._unit_of_work():
            return save(self.model, self.entity, node)

    def delete(self, node_or_id: Any) -> int:
        with self._unit_of_work():
            return delete(self.model, self.entity, node_or_id)

    @contextlib.contextmanager
    def _unit_of_work(self) -> Iterator[None]:
        if self.engine is None or self.engine.in_transaction:
            yield
            return
        with self.engine.transaction():
            yield
