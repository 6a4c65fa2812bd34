"""Domain Types - verifies enum members and the Actor value object."""

from uuid import uuid4

import pytest

from foodloop.core.domain_types import (
    Actor, ListingStatus, QuantityUnit, ReportType, RequestStatus, UserId, UserRole,
)


def test_listing_status_has_four_states():
    assert {s.value for s in ListingStatus} == {
        "available", "claimed", "completed", "expired",
    }


def test_request_status_has_four_states():
    assert {s.value for s in RequestStatus} == {
        "pending", "approved", "rejected", "completed",
    }


def test_declared_units():
    assert {u.value for u in QuantityUnit} == {"kg", "lbs", "servings", "items"}


def test_report_types():
    assert {t.value for t in ReportType} == {"weekly", "monthly", "custom"}


def test_str_enums_compare_to_raw_values():
    assert ListingStatus.AVAILABLE == "available"
    assert UserRole("data_analyst") is UserRole.DATA_ANALYST


def test_actor_is_frozen_and_knows_admin():
    actor = Actor(user_id=UserId(uuid4()), role=UserRole.ADMIN)
    assert actor.is_admin
    assert not Actor(user_id=UserId(uuid4()), role=UserRole.FOOD_DONOR).is_admin
    with pytest.raises(AttributeError):
        actor.role = UserRole.FOOD_DONOR
