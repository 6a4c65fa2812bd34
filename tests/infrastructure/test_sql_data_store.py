"""SQL Data Store - tests for guarded updates and error mapping on SQLite.

Tests cover:
    - insert/get round trip returns plain dicts keyed by column
    - update with matching guard applies; mismatched guard applies nothing
    - duplicate impact donation_id surfaces as ConflictError
    - unknown fields are programming errors (ValueError)
    - query filters and ordering
    - listing reads never load the listing's requests
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy import event

from foodloop.core.domain_types import EntityKind
from foodloop.core.errors import ConflictError
from foodloop.core.repository_protocols import StoreFilter


def _listing_row(donor_id=None, **overrides):
    row = {
        "donor_id": donor_id or uuid4(),
        "title": "Bread",
        "food_type": "baked_goods",
        "quantity": 4.0,
        "unit": "items",
        "pickup_location": "Side door",
        "status": "available",
        "created_at": datetime(2024, 1, 10, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


async def test_insert_and_get(store):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row())
    row = await store.get(EntityKind.LISTING, listing_id)
    assert row["id"] == listing_id
    assert row["status"] == "available"
    assert row["claimed_by"] is None


async def test_get_missing_returns_none(store):
    assert await store.get(EntityKind.LISTING, uuid4()) is None


async def test_guarded_update_applies_when_expected_matches(store):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row())
    ok = await store.update(
        EntityKind.LISTING, listing_id, {"status": "claimed"}, {"status": "available"},
    )
    assert ok
    assert (await store.get(EntityKind.LISTING, listing_id))["status"] == "claimed"


async def test_guarded_update_is_noop_on_mismatch(store):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row(status="expired"))
    ok = await store.update(
        EntityKind.LISTING, listing_id, {"status": "claimed"}, {"status": "available"},
    )
    assert not ok
    assert (await store.get(EntityKind.LISTING, listing_id))["status"] == "expired"


async def test_guard_on_null_column(store):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row())
    assert await store.update(
        EntityKind.LISTING, listing_id, {"status": "expired"}, {"claimed_by": None},
    )


async def test_update_missing_row_returns_false(store):
    assert not await store.update(EntityKind.LISTING, uuid4(), {"status": "expired"})


async def test_duplicate_donation_id_is_conflict(store):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row())
    record = {
        "donor_id": uuid4(),
        "donation_id": listing_id,
        "food_saved_lbs": 3.0,
        "co2_saved_lbs": 11.4,
        "meals_provided": 4,
        "recorded_at": datetime(2024, 1, 11, tzinfo=timezone.utc),
    }
    await store.insert(EntityKind.IMPACT_RECORD, record)
    with pytest.raises(ConflictError):
        await store.insert(EntityKind.IMPACT_RECORD, record)
    assert len(await store.query(EntityKind.IMPACT_RECORD)) == 1


async def test_unknown_field_is_value_error(store):
    with pytest.raises(ValueError):
        await store.insert(EntityKind.LISTING, {**_listing_row(), "colour": "red"})
    with pytest.raises(ValueError):
        await store.query(EntityKind.LISTING, [StoreFilter.eq("colour", "red")])


async def test_query_filters_and_orders(store):
    donor_id = uuid4()
    older = await store.insert(EntityKind.LISTING, _listing_row(
        donor_id, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    ))
    newer = await store.insert(EntityKind.LISTING, _listing_row(
        donor_id, created_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
    ))
    await store.insert(EntityKind.LISTING, _listing_row(status="expired"))

    rows = await store.query(
        EntityKind.LISTING,
        [StoreFilter.eq("donor_id", donor_id)],
        order_by="created_at",
        descending=True,
    )
    assert [r["id"] for r in rows] == [newer, older]

    rows = await store.query(
        EntityKind.LISTING, [StoreFilter("status", "in", ["expired", "claimed"])],
    )
    assert len(rows) == 1

    rows = await store.query(
        EntityKind.LISTING,
        [StoreFilter("created_at", "gte", datetime(2024, 1, 2, tzinfo=timezone.utc))],
    )
    assert {r["id"] for r in rows} >= {newer}
    assert older not in {r["id"] for r in rows}


async def test_listing_reads_never_select_requests(store, test_engine):
    listing_id = await store.insert(EntityKind.LISTING, _listing_row())
    await store.insert(EntityKind.REQUEST, {
        "listing_id": listing_id,
        "recipient_id": uuid4(),
        "status": "pending",
        "created_at": datetime(2024, 1, 11, tzinfo=timezone.utc),
    })
    statements = []

    def _capture(conn, cursor, statement, *args):
        statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", _capture)
    try:
        row = await store.get(EntityKind.LISTING, listing_id)
        rows = await store.query(EntityKind.LISTING)
    finally:
        event.remove(test_engine.sync_engine, "before_cursor_execute", _capture)

    assert row["id"] == listing_id
    assert len(rows) == 1
    selects = [s for s in statements if s.lstrip().upper().startswith("SELECT")]
    assert len(selects) == 2
    assert not any("donation_requests" in s for s in selects)
