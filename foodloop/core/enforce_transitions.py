"""Lifecycle Enforcement - listing/request state machines and paired-transition plans.

Invariants:
    - Listing: available -> claimed -> completed, available -> expired; nothing leaves
      completed or expired
    - Request: pending -> approved -> completed, pending -> rejected; nothing leaves
      rejected or completed
    - plan_* functions are PURE: they validate the observed state and return the
      guarded updates to apply, they never touch the store
    - Every step carries its own compensation so the shell can undo a partial plan

Design Decisions:
    - Guarded updates (expected prior status) instead of transactions: the store
      contract only promises conditional single-record updates
    - Approval claims the listing BEFORE approving the request: an observer can see
      (listing claimed, request pending) mid-flight but never (request approved,
      listing available)
    - Completion moves the request first: its approved -> completed guard picks the
      single winner among concurrent completions
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from foodloop.core.domain_types import (
    EntityKind, FoodType, ListingStatus, QuantityUnit, RequestStatus,
)
from foodloop.core.errors import ErrorContext, InvalidStateError, ValidationError
from foodloop.core.impact_calculator import impact_for_quantity


LISTING_TRANSITIONS: dict[ListingStatus, frozenset[ListingStatus]] = {
    ListingStatus.AVAILABLE: frozenset({ListingStatus.CLAIMED, ListingStatus.EXPIRED}),
    ListingStatus.CLAIMED: frozenset({ListingStatus.COMPLETED}),
    ListingStatus.COMPLETED: frozenset(),
    ListingStatus.EXPIRED: frozenset(),
}

REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.COMPLETED}),
    RequestStatus.REJECTED: frozenset(),
    RequestStatus.COMPLETED: frozenset(),
}

MAX_TITLE_LENGTH = 200


def can_transition_listing(current: ListingStatus | str, target: ListingStatus) -> bool:
    return target in LISTING_TRANSITIONS[ListingStatus(current)]


def can_transition_request(current: RequestStatus | str, target: RequestStatus) -> bool:
    return target in REQUEST_TRANSITIONS[RequestStatus(current)]


# ─── Guarded Update Plans ────────────────────────────────────────

@dataclass(frozen=True)
class GuardedUpdate:
    """One conditional update: apply `patch` only if `expected` still holds."""
    kind: EntityKind
    entity_id: UUID
    patch: dict[str, Any]
    expected: dict[str, Any]
    undo_patch: dict[str, Any] = field(default_factory=dict)
    undo_guard: tuple[str, ...] = ()

    def compensation(self) -> "GuardedUpdate":
        """Reverse step, guarded on the values this step wrote.

        The guard covers every key of `expected` plus `undo_guard`, so a row
        another writer has since changed is left alone.
        """
        keys = (*self.expected, *self.undo_guard)
        return GuardedUpdate(
            kind=self.kind,
            entity_id=self.entity_id,
            patch=self.undo_patch,
            expected={k: self.patch[k] for k in keys if k in self.patch},
        )


@dataclass(frozen=True)
class TransitionPlan:
    """Ordered guarded updates that form one logical operation."""
    operation: str
    steps: tuple[GuardedUpdate, ...]
    impact_record: dict[str, Any] | None = None


def _context(listing: dict | None = None, request: dict | None = None) -> ErrorContext:
    return ErrorContext(
        listing_id=str(listing["id"]) if listing else None,
        request_id=str(request["id"]) if request else None,
    )


def _require_request_status(
    request: dict, expected: RequestStatus, operation: str,
) -> None:
    if request["status"] != expected.value:
        raise InvalidStateError(
            "request", request["status"], operation, _context(request=request),
        )


def _require_listing_status(
    listing: dict, expected: ListingStatus, operation: str, request: dict | None = None,
) -> None:
    if listing["status"] != expected.value:
        raise InvalidStateError(
            "listing", listing["status"], operation, _context(listing, request),
        )


def plan_approval(request: dict, listing: dict, now: datetime) -> TransitionPlan:
    """Request pending -> approved paired with listing available -> claimed."""
    _require_request_status(request, RequestStatus.PENDING, "approve request")
    _require_listing_status(listing, ListingStatus.AVAILABLE, "approve request", request)

    claim_listing = GuardedUpdate(
        kind=EntityKind.LISTING,
        entity_id=listing["id"],
        patch={
            "status": ListingStatus.CLAIMED.value,
            "claimed_by": request["recipient_id"],
            "claimed_at": now,
        },
        expected={"status": ListingStatus.AVAILABLE.value},
        undo_patch={
            "status": ListingStatus.AVAILABLE.value,
            "claimed_by": None,
            "claimed_at": None,
        },
        undo_guard=("claimed_by",),
    )
    approve_request = GuardedUpdate(
        kind=EntityKind.REQUEST,
        entity_id=request["id"],
        patch={"status": RequestStatus.APPROVED.value, "approved_at": now},
        expected={"status": RequestStatus.PENDING.value},
        undo_patch={"status": RequestStatus.PENDING.value, "approved_at": None},
    )
    return TransitionPlan("approve", (claim_listing, approve_request))


def plan_rejection(request: dict) -> TransitionPlan:
    _require_request_status(request, RequestStatus.PENDING, "reject request")
    return TransitionPlan("reject", (
        GuardedUpdate(
            kind=EntityKind.REQUEST,
            entity_id=request["id"],
            patch={"status": RequestStatus.REJECTED.value},
            expected={"status": RequestStatus.PENDING.value},
        ),
    ))


def plan_completion(request: dict, listing: dict, now: datetime) -> TransitionPlan:
    """Request approved -> completed, listing claimed -> completed, one impact record."""
    _require_request_status(request, RequestStatus.APPROVED, "complete request")
    _require_listing_status(listing, ListingStatus.CLAIMED, "complete request", request)

    complete_request = GuardedUpdate(
        kind=EntityKind.REQUEST,
        entity_id=request["id"],
        patch={"status": RequestStatus.COMPLETED.value, "completed_at": now},
        expected={"status": RequestStatus.APPROVED.value},
        undo_patch={"status": RequestStatus.APPROVED.value, "completed_at": None},
    )
    complete_listing = GuardedUpdate(
        kind=EntityKind.LISTING,
        entity_id=listing["id"],
        patch={"status": ListingStatus.COMPLETED.value, "completed_at": now},
        expected={"status": ListingStatus.CLAIMED.value},
        undo_patch={"status": ListingStatus.CLAIMED.value, "completed_at": None},
    )
    return TransitionPlan(
        "complete",
        (complete_request, complete_listing),
        impact_record=build_impact_record(listing, now),
    )


def plan_expiry(listing: dict) -> TransitionPlan:
    _require_listing_status(listing, ListingStatus.AVAILABLE, "expire listing")
    return TransitionPlan("expire", (
        GuardedUpdate(
            kind=EntityKind.LISTING,
            entity_id=listing["id"],
            patch={"status": ListingStatus.EXPIRED.value},
            expected={"status": ListingStatus.AVAILABLE.value},
        ),
    ))


def build_impact_record(listing: dict, recorded_at: datetime) -> dict:
    """Impact record for a completed listing. Pure."""
    figures = impact_for_quantity(listing["quantity"], listing["unit"])
    return {
        "donor_id": listing["donor_id"],
        "donation_id": listing["id"],
        "food_saved_lbs": figures.food_saved_lbs,
        "co2_saved_lbs": figures.co2_avoided,
        "meals_provided": figures.meals_provided,
        "recorded_at": recorded_at,
    }


# ─── Input Validation ────────────────────────────────────────────

def validate_listing_attrs(attrs: dict) -> dict:
    """Validate and normalize donor-supplied listing attributes.

    Returns a new dict with stripped strings and enum values; raises
    ValidationError naming the first offending field.
    """
    title = (attrs.get("title") or "").strip()
    if not title:
        raise ValidationError("Listing title is required", "title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"Listing title exceeds {MAX_TITLE_LENGTH} characters", "title",
        )

    quantity = attrs.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise ValidationError("Quantity must be a number", "quantity")
    if not quantity > 0 or quantity == float("inf"):
        raise ValidationError(
            f"Quantity must be a positive finite number, got {quantity}", "quantity",
        )

    try:
        unit = QuantityUnit(attrs.get("unit"))
    except ValueError:
        raise ValidationError(
            f"Unit must be one of {[u.value for u in QuantityUnit]}", "unit",
        )

    try:
        food_type = FoodType(attrs.get("food_type") or FoodType.OTHER.value)
    except ValueError:
        raise ValidationError(
            f"Food type must be one of {[t.value for t in FoodType]}", "food_type",
        )

    pickup_location = (attrs.get("pickup_location") or "").strip()
    if not pickup_location:
        raise ValidationError("Pickup location is required", "pickup_location")

    description = (attrs.get("description") or "").strip() or None
    return {
        "title": title,
        "description": description,
        "food_type": food_type.value,
        "quantity": float(quantity),
        "unit": unit.value,
        "expiry_date": attrs.get("expiry_date"),
        "pickup_location": pickup_location,
    }


def validate_request_submission(
    listing: dict,
    requested_quantity: float | None = None,
    accept_on_claimed: bool = True,
) -> None:
    """Raise unless the listing can still receive a new request."""
    status = ListingStatus(listing["status"])
    closed = {ListingStatus.COMPLETED, ListingStatus.EXPIRED}
    if not accept_on_claimed:
        closed.add(ListingStatus.CLAIMED)
    if status in closed:
        raise InvalidStateError(
            "listing", status.value, "submit request", _context(listing),
        )
    if requested_quantity is not None:
        if not requested_quantity > 0:
            raise ValidationError(
                "Requested quantity must be positive", "requested_quantity",
            )
        if requested_quantity > listing["quantity"]:
            raise ValidationError(
                "Requested quantity exceeds listed quantity", "requested_quantity",
            )


def is_overdue(listing: dict, now: datetime) -> bool:
    """True when an available listing's expiry date has passed."""
    expiry = listing.get("expiry_date")
    if expiry is None or listing["status"] != ListingStatus.AVAILABLE.value:
        return False
    return _as_naive_utc(expiry) < _as_naive_utc(now)


def _as_naive_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
