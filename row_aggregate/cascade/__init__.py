"""Cascade - recursive load, save and delete of aggregates."""

from __future__ import annotations

from row_aggregate.cascade.deleter import delete
from row_aggregate.cascade.loader import load
from row_aggregate.cascade.node import ENTITY_KEY, Node, entity_of, tag
from row_aggregate.cascade.saver import save

__all__ = [
    "ENTITY_KEY",
    "Node",
    "tag",
    "entity_of",
    "load",
    "save",
    "delete",
]
