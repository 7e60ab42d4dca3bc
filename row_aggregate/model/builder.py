"""Relation model construction.

One constructor per relation type plus entity() and relation_model().
Declarations may leave out foreign-key columns, link-table layout and
accessor functions; relation_model() fills them in from naming defaults
and an optional accessor factory, validates the result and raises
ConfigurationError subclasses for anything that would only fail later
during a traversal.

Example:
    model = relation_model(
        entity("project", to_many("tasks", "task"), to_one("manager", "person", owned=False)),
        entity("task"),
        entity("person"),
        factory=SqlAccessorFactory(engine),
    )
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from row_aggregate.core.exceptions import (
    ConfigurationError,
    DuplicateEntityError,
    DuplicateRelationError,
    MissingAccessorError,
    MissingRelationFunctionError,
    UnknownEntityError,
)
from row_aggregate.model.relation import (
    EntityAccessors,
    EntityConfig,
    ModelOptions,
    QueryFn,
    RelationConfig,
    RelationModel,
    RelationType,
    UpdateLinksFn,
)

if TYPE_CHECKING:
    from row_aggregate.accessors.protocol import AccessorFactory


def to_one(
    name: str,
    target: str,
    *,
    fk_column: str | None = None,
    owned: bool = True,
) -> RelationConfig:
    """Declare a relation whose foreign key lives on the owner row.

    The foreign-key column defaults to ``<name>_id``.
    """
    return RelationConfig(
        name=name,
        relation_type=RelationType.TO_ONE,
        target=target,
        fk_column=fk_column or f"{name}_id",
        owned=owned,
    )


def to_many(
    name: str,
    target: str,
    *,
    fk_column: str | None = None,
    owned: bool = True,
    query: QueryFn | None = None,
) -> RelationConfig:
    """Declare a relation whose foreign key lives on the target rows.

    The foreign-key column defaults to ``<owner entity>_id``.
    """
    return RelationConfig(
        name=name,
        relation_type=RelationType.TO_MANY,
        target=target,
        fk_column=fk_column,
        owned=owned,
        query=query,
    )


def to_many_linked(
    name: str,
    target: str,
    *,
    owned: bool = False,
    link_table: str | None = None,
    owner_column: str | None = None,
    target_column: str | None = None,
    query: QueryFn | None = None,
    update_links: UpdateLinksFn | None = None,
) -> RelationConfig:
    """Declare a many-to-many relation stored in a link table.

    The link table defaults to ``<owner>_<target>`` with the columns
    ``<owner>_id`` and ``<target>_id``. Unlike the other relation types,
    linked relations are not owned unless asked for.
    """
    return RelationConfig(
        name=name,
        relation_type=RelationType.TO_MANY_LINKED,
        target=target,
        owned=owned,
        query=query,
        update_links=update_links,
        link_table=link_table,
        owner_column=owner_column,
        target_column=target_column,
    )


def entity(
    name: str,
    *relations: RelationConfig,
    accessors: EntityAccessors | None = None,
    id_column: str | None = None,
    table: str | None = None,
) -> EntityConfig:
    """Declare an entity with its relations."""
    by_name: dict[str, RelationConfig] = {}
    for relation in relations:
        if relation.name in by_name:
            raise DuplicateRelationError(name, relation.name)
        by_name[relation.name] = relation
    return EntityConfig(
        name=name,
        accessors=accessors,
        id_column=id_column,
        relations=by_name,
        table=table,
    )


def relation_model(
    *entities: EntityConfig,
    factory: AccessorFactory | None = None,
    options: ModelOptions | None = None,
) -> RelationModel:
    """Resolve and validate entity declarations into a RelationModel.

    Raises:
        DuplicateEntityError: Two declarations share a name.
        UnknownEntityError: A relation targets an undeclared entity.
        MissingAccessorError: An entity has no accessors and there is no factory.
        MissingRelationFunctionError: A relation lacks a query or link-update
            function and there is no factory.
    """
    options = options or ModelOptions()

    declared: dict[str, EntityConfig] = {}
    for config in entities:
        if config.name in declared:
            raise DuplicateEntityError(config.name)
        declared[config.name] = config

    resolved: dict[str, EntityConfig] = {}
    for config in declared.values():
        relations = {
            name: _resolve_relation(config, relation, declared, factory, options)
            for name, relation in config.relations.items()
        }
        resolved[config.name] = dataclasses.replace(
            config,
            accessors=_resolve_accessors(config, factory, options),
            relations=relations,
        )

    return RelationModel(entities=resolved, options=options)


def _table(config: EntityConfig) -> str:
    return config.table or config.name


def _id_column(config: EntityConfig, options: ModelOptions) -> str:
    return config.id_column or options.default_id_column


def _resolve_accessors(
    config: EntityConfig,
    factory: AccessorFactory | None,
    options: ModelOptions,
) -> EntityAccessors:
    if config.accessors is not None:
        return config.accessors
    if factory is None:
        raise MissingAccessorError(config.name)
    return factory.entity_accessors(_table(config), _id_column(config, options))


def _resolve_relation(
    owner: EntityConfig,
    relation: RelationConfig,
    declared: dict[str, EntityConfig],
    factory: AccessorFactory | None,
    options: ModelOptions,
) -> RelationConfig:
    target = declared.get(relation.target)
    if target is None:
        raise UnknownEntityError(relation.target, f"{owner.name}.{relation.name}")

    def require(function: str) -> AccessorFactory:
        if factory is None:
            raise MissingRelationFunctionError(owner.name, relation.name, function)
        return factory

    target_table = _table(target)
    target_id = _id_column(target, options)

    if relation.relation_type is RelationType.TO_ONE:
        return relation

    if relation.relation_type is RelationType.TO_MANY:
        fk_column = relation.fk_column or f"{owner.name}_id"
        query = relation.query
        if query is None:
            query = require("query").query_by_foreign_key(target_table, fk_column, target_id)
        return dataclasses.replace(relation, fk_column=fk_column, query=query)

    # TO_MANY_LINKED
    link_table = relation.link_table or f"{owner.name}_{target.name}"
    owner_column = relation.owner_column or f"{owner.name}_id"
    target_column = relation.target_column or f"{target.name}_id"
    generated = relation.query is None or relation.update_links is None
    if generated and owner_column == target_column:
        raise ConfigurationError(
            f"Relation '{owner.name}.{relation.name}' needs distinct owner and "
            f"target columns in link table '{link_table}'"
        )
    query = relation.query
    if query is None:
        query = require("query").query_by_join(
            target_table, link_table, target_column, owner_column, target_id
        )
    update_links = relation.update_links
    if update_links is None:
        update_links = require("update_links").update_links(
            link_table, owner_column, target_column, target_id
        )
    return dataclasses.replace(
        relation,
        link_table=link_table,
        owner_column=owner_column,
        target_column=target_column,
        query=query,
        update_links=update_links,
    )
