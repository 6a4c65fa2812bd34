"""SQL Data Store - DataStore protocol over the async SQLAlchemy session manager.

Invariants:
    - Every call runs in its own short session and commits before returning
    - update() with `expected` compiles to UPDATE ... WHERE id = :id AND <guards>;
      it returns True only when exactly one row matched
    - Records leave as plain dicts keyed by column name
    - Unknown entity kinds or field names raise ValueError (programming errors)

Design Decisions:
    - One commit per call mirrors a remote store with single-record atomicity;
      multi-record consistency is the lifecycle engine's job (guards + compensation)
    - Error mapping reuses DatabaseSessionManager.session(): IntegrityError becomes
      ConflictError, everything else StoreError
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select, update

from foodloop.core.domain_types import EntityKind
from foodloop.core.repository_protocols import StoreFilter
from foodloop.db.base import Base
from foodloop.infrastructure.database import DatabaseSessionManager
from foodloop.models.donation_request import DonationRequest
from foodloop.models.impact_record import ImpactRecord
from foodloop.models.listing import FoodListing
from foodloop.models.report import WasteReport

logger = logging.getLogger(__name__)


MODELS: dict[EntityKind, type[Base]] = {
    EntityKind.LISTING: FoodListing,
    EntityKind.REQUEST: DonationRequest,
    EntityKind.IMPACT_RECORD: ImpactRecord,
    EntityKind.REPORT: WasteReport,
}


def _model(kind: EntityKind) -> type[Base]:
    try:
        return MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}")


def _column(model: type[Base], field: str):
    if field not in model.__table__.columns:
        raise ValueError(f"{model.__name__} has no field '{field}'")
    return getattr(model, field)


def _to_dict(obj: Base) -> dict:
    return {col.name: getattr(obj, col.name) for col in obj.__table__.columns}


def _predicate(model: type[Base], flt: StoreFilter):
    col = _column(model, flt.field)
    if flt.op == "eq":
        return col.is_(None) if flt.value is None else col == flt.value
    if flt.op == "gte":
        return col >= flt.value
    if flt.op == "lt":
        return col < flt.value
    if flt.op == "in":
        return col.in_(list(flt.value))
    raise ValueError(f"Unsupported filter op: {flt.op}")


class SqlDataStore:
    """DataStore implementation backed by SQLAlchemy async sessions."""

    def __init__(self, manager: DatabaseSessionManager):
        self.manager = manager

    async def insert(self, kind: EntityKind, record: dict) -> UUID:
        model = _model(kind)
        for field in record:
            _column(model, field)
        async with self.manager.session() as db:
            obj = model(**record)
            db.add(obj)
            await db.commit()
            logger.debug(f"Inserted {kind.value} {obj.id}")
            return obj.id

    async def get(self, kind: EntityKind, entity_id: UUID) -> dict | None:
        model = _model(kind)
        async with self.manager.session() as db:
            obj = await db.get(model, entity_id)
            return _to_dict(obj) if obj is not None else None

    async def update(
        self,
        kind: EntityKind,
        entity_id: UUID,
        patch: dict,
        expected: dict | None = None,
    ) -> bool:
        model = _model(kind)
        values: dict[str, Any] = {}
        for field, value in patch.items():
            _column(model, field)
            values[field] = value

        stmt = update(model).where(model.id == entity_id)
        for field, value in (expected or {}).items():
            stmt = stmt.where(_predicate(model, StoreFilter.eq(field, value)))
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        async with self.manager.session() as db:
            result = await db.execute(stmt)
            await db.commit()
            matched = result.rowcount == 1
        if not matched:
            logger.info(
                f"Guarded update on {kind.value} {entity_id} matched no row",
                extra={"operation": "update"},
            )
        return matched

    async def query(
        self,
        kind: EntityKind,
        filters: Sequence[StoreFilter] = (),
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict]:
        model = _model(kind)
        stmt = select(model)
        for flt in filters:
            stmt = stmt.where(_predicate(model, flt))
        if order_by:
            col = _column(model, order_by)
            stmt = stmt.order_by(col.desc() if descending else col.asc())

        async with self.manager.session() as db:
            result = await db.execute(stmt)
            return [_to_dict(obj) for obj in result.scalars().all()]
