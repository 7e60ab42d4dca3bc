"""Delete engine.

Removes an aggregate in dependency order: link rows and dependants first,
then the record itself, then owned prerequisites. Embedded children only
are cascaded; nothing is re-read from storage.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from row_aggregate.cascade.node import resolve_entity
from row_aggregate.core.exceptions import UntaggedNodeError
from row_aggregate.model.narrowing import without
from row_aggregate.model.relation import EntityConfig, RelationModel, RelationType

logger = logging.getLogger(__name__)


def _removed(result: int | None) -> int:
    return 1 if result else 0


def delete(model: RelationModel, entity: str | None, node_or_id: Any) -> int:
    """Delete a node (with its owned relations) or a single record by id.

    Returns the number of records removed. A bare id deletes exactly one
    record without cascading. An entity outside the model deletes nothing.
    """
    if node_or_id is None:
        return 0
    is_node = isinstance(node_or_id, Mapping)
    if is_node:
        entity = resolve_entity(entity, node_or_id)
    elif entity is None:
        raise UntaggedNodeError(node_or_id)

    config = model.get(entity)
    if config is None:
        return 0

    if not is_node:
        count = _removed(config.accessors.delete(node_or_id))
        logger.debug("delete %s %r: %d", entity, node_or_id, count)
        return count

    narrowed = without(model, entity)
    self_id = node_or_id.get(model.id_column(entity))
    count = _delete_dependants(narrowed, config, node_or_id, self_id)
    removed = _removed(config.accessors.delete(self_id))
    logger.debug("delete %s %r: %d", entity, self_id, removed)
    count += removed
    count += _delete_prerequisites(narrowed, config, node_or_id)
    return count


def _delete_dependants(
    narrowed: RelationModel,
    config: EntityConfig,
    node: Mapping[str, Any],
    self_id: Any,
) -> int:
    count = 0
    for name, relation in config.relations.items():
        if relation.is_to_one:
            continue
        if relation.relation_type is RelationType.TO_MANY_LINKED:
            relation.update_links(self_id, [])
        if relation.target not in narrowed:
            continue

        children = node.get(name) or ()
        if relation.owned:
            for child in children:
                count += delete(narrowed, relation.target, child)
        elif relation.relation_type is RelationType.TO_MANY:
            # Detach only; the children outlive their former owner
            target_id = narrowed.id_column(relation.target)
            update = narrowed[relation.target].accessors.update
            for child in children:
                if child.get(target_id) is not None:
                    update({target_id: child[target_id], relation.fk_column: None})
    return count


def _delete_prerequisites(
    narrowed: RelationModel,
    config: EntityConfig,
    node: Mapping[str, Any],
) -> int:
    count = 0
    for name, relation in config.relations.items():
        if not relation.is_to_one or not relation.owned:
            continue
        child = node.get(name)
        if child is not None:
            count += delete(narrowed, relation.target, child)
        elif node.get(relation.fk_column) is not None:
            count += delete(narrowed, relation.target, node[relation.fk_column])
    return count
