"""Configuration narrowing.

`only` and `without` derive restricted copies of a RelationModel. Callers
use them to scope an operation to part of the model; the engines use
`without(model, entity)` before every recursive step so that cyclic
relation graphs terminate.

A spec is either an entity name or a sequence whose first item is an
entity name followed by relation names, e.g. ``("project", "tasks")``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from row_aggregate.model.relation import EntityConfig, RelationModel

Spec = str | Sequence[str]


def _split(spec: Spec) -> tuple[str, tuple[str, ...] | None]:
    """Return (entity, relation names) or (entity, None) for a bare name."""
    if isinstance(spec, str):
        return spec, None
    entity, *relations = spec
    return entity, tuple(relations)


def _with_relations(config: EntityConfig, names: set[str], keep: bool) -> EntityConfig:
    relations = {
        name: relation
        for name, relation in config.relations.items()
        if (name in names) == keep
    }
    return dataclasses.replace(config, relations=relations)


def only(model: RelationModel, *specs: Spec) -> RelationModel:
    """Keep only the named entities, each with exactly the named relations.

    Example:
        only(model, "person", ("project", "members", "manager"))
        keeps person without relations and project with two relations.
    """
    entities: dict[str, EntityConfig] = {}
    for spec in specs:
        entity, relations = _split(spec)
        config = model.get(entity)
        if config is None:
            continue
        entities[entity] = _with_relations(config, set(relations or ()), keep=True)
    return model.replace_entities(entities)


def without(model: RelationModel, *specs: Spec) -> RelationModel:
    """Remove entities wholesale, or only some relations of an entity.

    Example:
        without(model, "task", ("project", "members"))
        drops task and the members relation of project.
    """
    entities = dict(model.entities)
    for spec in specs:
        entity, relations = _split(spec)
        if relations is None:
            entities.pop(entity, None)
        elif entity in entities:
            entities[entity] = _with_relations(entities[entity], set(relations), keep=False)
    return model.replace_entities(entities)
