"""Save engine.

Persists an aggregate in three phases so that every foreign key points at
a row that already exists:

1. to-one prerequisites are saved first and their ids copied into the
   foreign-key fields of the node;
2. the node's own record is inserted or updated;
3. to-many and linked dependants are saved, link rows replaced and
   children no longer present in the node are deleted or detached.

The node passed in is never mutated; the returned node carries every
generated id.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from row_aggregate.cascade.deleter import delete
from row_aggregate.cascade.node import ENTITY_KEY, Node, record_of, resolve_entity, tag
from row_aggregate.core.exceptions import EntityOutsideModelError, UnpersistedNodeError
from row_aggregate.model.narrowing import without
from row_aggregate.model.relation import EntityConfig, RelationModel, RelationType

logger = logging.getLogger(__name__)


def save(model: RelationModel, entity: str | None, node: Mapping[str, Any] | None) -> Node | None:
    """Insert or update *node* and everything it embeds.

    *entity* may be None for a tagged node.

    Raises:
        UntaggedNodeError: No entity was given and the node is untagged.
        EntityOutsideModelError: The entity is not part of the model.
        UnpersistedNodeError: Dependants were to be saved under a node that
            did not end up persisted.
    """
    if node is None:
        return None
    entity = resolve_entity(entity, node)
    config = model.get(entity)
    if config is None:
        raise EntityOutsideModelError(entity)

    narrowed = without(model, entity)
    result = dict(node)
    _save_prerequisites(model, narrowed, config, result)
    _save_self(model, config, result)
    _save_dependants(model, narrowed, config, result)
    return result


def _save_prerequisites(
    model: RelationModel,
    narrowed: RelationModel,
    config: EntityConfig,
    node: Node,
) -> None:
    id_column = model.id_column(config.name)
    persisted = model.is_persisted(config.name, node)

    for name, relation in config.relations.items():
        if not relation.is_to_one or relation.target not in narrowed:
            continue

        child = node.get(name)
        if child is not None:
            saved = save(narrowed, relation.target, child)
            node[relation.fk_column] = saved[narrowed.id_column(relation.target)]
            node[name] = saved
            continue

        node.pop(name, None)
        if not persisted:
            # A bare foreign key on a new record references an existing row
            continue
        previous = node.pop(relation.fk_column, None)
        if previous is None:
            continue
        # Clear the reference before its target can be removed
        config.accessors.update({id_column: node[id_column], relation.fk_column: None})
        if relation.owned:
            delete(narrowed, relation.target, previous)


def _save_self(model: RelationModel, config: EntityConfig, node: Node) -> None:
    id_column = model.id_column(config.name)
    record = record_of(config, node)
    if model.is_persisted(config.name, node):
        logger.debug("update %s %r", config.name, node.get(id_column))
        saved = config.accessors.update(record)
    else:
        saved = config.accessors.insert(record)
        logger.debug("insert %s %r", config.name, saved.get(id_column))
    node[id_column] = saved.get(id_column, node.get(id_column))
    node[ENTITY_KEY] = config.name


def _save_dependants(
    model: RelationModel,
    narrowed: RelationModel,
    config: EntityConfig,
    node: Node,
) -> None:
    id_column = model.id_column(config.name)

    for name, relation in config.relations.items():
        if relation.is_to_one or relation.target not in narrowed:
            continue
        if not model.is_persisted(config.name, node):
            raise UnpersistedNodeError(config.name)

        self_id = node[id_column]
        target_id = narrowed.id_column(relation.target)
        foreign_key = relation.relation_type is RelationType.TO_MANY
        current = relation.query(self_id)

        children = []
        for child in node.get(name) or ():
            if foreign_key:
                child = {**child, relation.fk_column: self_id}
            saved = save(narrowed, relation.target, child)
            if foreign_key:
                saved.pop(relation.fk_column, None)
            children.append(saved)

        if relation.relation_type is RelationType.TO_MANY_LINKED:
            relation.update_links(self_id, children)

        kept = {child.get(target_id) for child in children}
        for row in current:
            if row.get(target_id) in kept:
                continue
            if relation.owned:
                delete(narrowed, relation.target, tag(row, relation.target))
            elif foreign_key:
                narrowed[relation.target].accessors.update(
                    {target_id: row[target_id], relation.fk_column: None}
                )

        node[name] = children
