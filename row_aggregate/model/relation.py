"""Relation model data classes.

Frozen dataclasses describing entities, their accessors and the typed
relations between them. A RelationModel is built once (usually through
row_aggregate.model.builder) and never mutated; narrowing produces new
values. Entity and relation mappings are read-only views.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

Row = dict[str, Any]

ReadFn = Callable[[Any], "Mapping[str, Any] | None"]
InsertFn = Callable[[Row], Row]
UpdateFn = Callable[[Row], Row]
DeleteFn = Callable[[Any], "int | None"]
QueryFn = Callable[[Any], Sequence[Row]]
UpdateLinksFn = Callable[[Any, Sequence[Mapping[str, Any]]], None]
PersistedPredicate = Callable[[str, Mapping[str, Any]], bool]


class RelationType(Enum):
    """How a relation is stored."""

    TO_ONE = "to_one"  # foreign key on the owner row
    TO_MANY = "to_many"  # foreign key on the target rows
    TO_MANY_LINKED = "to_many_linked"  # link table


def has_id(id_column: str, row: Mapping[str, Any]) -> bool:
    """Default persisted predicate: the id column holds a value."""
    return row.get(id_column) is not None


@dataclass(frozen=True)
class EntityAccessors:
    """Single-table operations of one entity."""

    read: ReadFn
    insert: InsertFn
    update: UpdateFn
    delete: DeleteFn


@dataclass(frozen=True)
class RelationConfig:
    """A named, typed edge from an entity to a target entity."""

    name: str
    relation_type: RelationType
    target: str
    fk_column: str | None = None  # TO_ONE and TO_MANY
    owned: bool = True
    query: QueryFn | None = None  # TO_MANY and TO_MANY_LINKED
    update_links: UpdateLinksFn | None = None  # TO_MANY_LINKED
    # Link table layout, used to generate default TO_MANY_LINKED functions
    link_table: str | None = None
    owner_column: str | None = None
    target_column: str | None = None

    @property
    def is_to_one(self) -> bool:
        return self.relation_type is RelationType.TO_ONE


@dataclass(frozen=True)
class EntityConfig:
    """Configuration of one entity."""

    name: str
    accessors: EntityAccessors | None = None
    id_column: str | None = None  # None: use the model's default id column
    relations: Mapping[str, RelationConfig] = field(default_factory=dict)
    table: str | None = None  # None: the entity name

    def __post_init__(self) -> None:
        object.__setattr__(self, "relations", MappingProxyType(dict(self.relations)))


@dataclass(frozen=True)
class ModelOptions:
    """Global options of a relation model."""

    default_id_column: str = "id"
    persisted: PersistedPredicate = has_id


@dataclass(frozen=True)
class RelationModel:
    """Mapping of entity name to EntityConfig plus global options."""

    entities: Mapping[str, EntityConfig] = field(default_factory=dict)
    options: ModelOptions = field(default_factory=ModelOptions)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", MappingProxyType(dict(self.entities)))

    def __contains__(self, entity: object) -> bool:
        return entity in self.entities

    def __getitem__(self, entity: str) -> EntityConfig:
        return self.entities[entity]

    def get(self, entity: str) -> EntityConfig | None:
        return self.entities.get(entity)

    def id_column(self, entity: str) -> str:
        """Id column of *entity*, falling back to the default id column."""
        config = self.entities.get(entity)
        if config is not None and config.id_column is not None:
            return config.id_column
        return self.options.default_id_column

    def is_persisted(self, entity: str, row: Mapping[str, Any]) -> bool:
        return self.options.persisted(self.id_column(entity), row)

    def replace_entities(self, entities: Mapping[str, EntityConfig]) -> RelationModel:
        """Copy of this model with a different entity mapping."""
        return RelationModel(entities=entities, options=self.options)
