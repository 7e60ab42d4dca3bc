"""Repository layer - DDD repository pattern."""

from __future__ import annotations

from row_aggregate.repository.base import AggregateRepository

__all__ = [
    "AggregateRepository",
]
