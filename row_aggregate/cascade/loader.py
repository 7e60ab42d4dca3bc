"""Load engine.

Read-only recursive hydration of an aggregate from a root id. Every
recursive step works on ``without(model, entity)`` so cycles in the
relation graph end once their entities have been narrowed away.
"""

from __future__ import annotations

import logging
from typing import Any

from row_aggregate.cascade.node import ENTITY_KEY, Node, tag
from row_aggregate.model.narrowing import without
from row_aggregate.model.relation import RelationModel, RelationType

logger = logging.getLogger(__name__)


def load(model: RelationModel, entity: str, id: Any) -> Node | None:
    """Load the aggregate rooted at *entity* with *id*.

    Returns None when the entity is not part of the model or no row has
    this id.
    """
    config = model.get(entity)
    if config is None or id is None:
        return None
    row = config.accessors.read(id)
    if row is None:
        logger.debug("load %s %r: not found", entity, id)
        return None
    logger.debug("load %s %r", entity, id)
    return _load_relations(model, tag(row, entity))


def _load_relations(model: RelationModel, node: Node) -> Node:
    entity = node[ENTITY_KEY]
    config = model[entity]
    narrowed = without(model, entity)
    self_id = node.get(model.id_column(entity))

    for name, relation in config.relations.items():
        if relation.relation_type is RelationType.TO_ONE:
            fk = node.get(relation.fk_column)
            child = load(narrowed, relation.target, fk) if fk is not None else None
            if child is None:
                node.pop(name, None)
                node.pop(relation.fk_column, None)
            else:
                node[name] = child

        elif relation.relation_type in (RelationType.TO_MANY, RelationType.TO_MANY_LINKED):
            if relation.target not in narrowed:
                continue
            children = []
            for row in relation.query(self_id):
                child = tag(row, relation.target)
                if relation.relation_type is RelationType.TO_MANY:
                    # The owner link is implied by nesting, as save returns it
                    child.pop(relation.fk_column, None)
                children.append(_load_relations(narrowed, child))
            node[name] = children

    return node
