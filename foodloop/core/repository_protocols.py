"""Boundary Protocols - the Data Store contract between core and shell.

Invariants:
    - Core NEVER imports from shell - dependency arrows point inward only
    - Records cross the boundary as plain dicts keyed by column name
    - update() with `expected` is a conditional write: it returns False and writes
      nothing when any expected field no longer matches
    - insert() raises ConflictError on uniqueness violations, StoreError otherwise

Design Decisions:
    - Protocol over ABC: structural subtyping, the SQL store and test doubles need
      no shared base class
    - Async in Protocol: implementations do IO; the pure rules that decide WHAT to
      write stay synchronous in core/
    - Filters are data (StoreFilter), not callables, so any backend can translate them
"""

from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence
from uuid import UUID

from foodloop.core.domain_types import EntityKind


FilterOp = Literal["eq", "gte", "lt", "in"]


@dataclass(frozen=True)
class StoreFilter:
    """Equality / range / membership predicate on one field."""
    field: str
    op: FilterOp
    value: Any

    @classmethod
    def eq(cls, field: str, value: Any) -> "StoreFilter":
        return cls(field, "eq", value)


class DataStore(Protocol):
    """Contract for listing/request/impact/report persistence - implemented by shell."""
    async def insert(self, kind: EntityKind, record: dict) -> UUID: ...
    async def get(self, kind: EntityKind, entity_id: UUID) -> dict | None: ...
    async def update(
        self,
        kind: EntityKind,
        entity_id: UUID,
        patch: dict,
        expected: dict | None = None,
    ) -> bool: ...
    async def query(
        self,
        kind: EntityKind,
        filters: Sequence[StoreFilter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]: ...
