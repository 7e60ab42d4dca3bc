"""Aggregate node helpers.

A node is a plain dict of field values tagged with its entity name under
ENTITY_KEY. Relation names hold a nested node (to-one) or a list of nodes
(to-many, to-many-linked).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from row_aggregate.core.exceptions import UntaggedNodeError
from row_aggregate.model.relation import EntityConfig, Row

ENTITY_KEY = "__entity__"

Node = dict[str, Any]


def tag(row: Mapping[str, Any], entity: str) -> Node:
    """Copy of *row* tagged with *entity*."""
    node = dict(row)
    node[ENTITY_KEY] = entity
    return node


def entity_of(node: Mapping[str, Any]) -> str | None:
    return node.get(ENTITY_KEY)


def resolve_entity(entity: str | None, node: Any) -> str:
    """The explicit entity, or the tag of *node*."""
    if entity is not None:
        return entity
    if isinstance(node, Mapping):
        tagged = entity_of(node)
        if tagged is not None:
            return tagged
    raise UntaggedNodeError(node)


def record_of(config: EntityConfig, node: Mapping[str, Any]) -> Row:
    """The columns of *node*: everything but relation fields and the tag."""
    return {
        key: value
        for key, value in node.items()
        if key != ENTITY_KEY and key not in config.relations
    }
