"""Relation model - entities, relations, construction and narrowing."""

from __future__ import annotations

from row_aggregate.model.builder import (
    entity,
    relation_model,
    to_many,
    to_many_linked,
    to_one,
)
from row_aggregate.model.narrowing import only, without
from row_aggregate.model.relation import (
    EntityAccessors,
    EntityConfig,
    ModelOptions,
    RelationConfig,
    RelationModel,
    RelationType,
    has_id,
)

__all__ = [
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
]
