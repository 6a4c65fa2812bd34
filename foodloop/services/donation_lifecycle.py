"""Donation Lifecycle Engine - listing/request transitions and the impact side effect.

Invariants:
    - Every call authorizes the explicit Actor before reading or writing
    - State is read, a pure plan is computed (core/enforce_transitions.py), then the
      plan's guarded updates are applied in order
    - A failed guard or store error compensates already-applied steps in reverse
      order before the error propagates: no partial state survives
    - complete_request inserts exactly one ImpactRecord per listing; a retry after
      a lost insert acknowledgement adopts the committed record, and the store's
      unique donation_id is the backstop

Design Decisions:
    - Clock injected (defaults to UTC now): plans stay pure and tests control time
    - Compensation failures are logged at ERROR and the ORIGINAL error is raised;
      the caller sees why the operation failed, operators see what needs repair
    - Reads (get_/list_) are not role-gated and may be stale
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from foodloop.config import Settings, get_settings
from foodloop.core.domain_types import (
    Action, Actor, EntityKind, ListingStatus, RequestStatus,
)
from foodloop.core.enforce_roles import require_owner, require_role
from foodloop.core.enforce_transitions import (
    GuardedUpdate,
    TransitionPlan,
    is_overdue,
    plan_approval,
    plan_completion,
    plan_expiry,
    plan_rejection,
    validate_listing_attrs,
    validate_request_submission,
)
from foodloop.core.errors import (
    ConflictError, ErrorContext, FoodLoopError, ResourceNotFoundError,
)
from foodloop.core.repository_protocols import DataStore, StoreFilter

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of complete_request: final request/listing rows and the impact record."""
    request: dict
    listing: dict
    impact_record: dict


class DonationLifecycle:
    """Owns the listing and request state machines."""

    def __init__(
        self,
        store: DataStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    # ─── Listings ────────────────────────────────────────────────

    async def create_listing(self, actor: Actor, attrs: dict) -> dict:
        """Validate donor input and insert an available listing."""
        require_role(actor, Action.CREATE_LISTING)
        fields = validate_listing_attrs(attrs)
        donor_id = actor.user_id
        if actor.is_admin and attrs.get("donor_id"):
            donor_id = attrs["donor_id"]

        record = {
            **fields,
            "donor_id": donor_id,
            "status": ListingStatus.AVAILABLE.value,
            "created_at": self.clock(),
        }
        listing_id = await self.store.insert(EntityKind.LISTING, record)
        logger.info(
            f"Listing created: {fields['quantity']} {fields['unit']}",
            extra={"listing_id": listing_id, "actor_role": actor.role.value},
        )
        return await self.get_listing(listing_id)

    async def expire_listing(self, actor: Actor, listing_id: UUID) -> dict:
        """Explicitly move an available listing to expired."""
        require_role(actor, Action.EXPIRE_LISTING)
        listing = await self.get_listing(listing_id)
        require_owner(actor, listing["donor_id"], Action.EXPIRE_LISTING)
        await self._apply(plan_expiry(listing))
        logger.info("Listing expired", extra={"listing_id": listing_id})
        return await self.get_listing(listing_id)

    async def expire_overdue_listings(
        self, actor: Actor, now: datetime | None = None,
    ) -> list[UUID]:
        """Expire every available listing past its expiry date. Returns expired ids.

        Donors sweep only their own listings; admins sweep all. Listings claimed
        between the read and the guarded write are skipped, not failed.
        """
        require_role(actor, Action.EXPIRE_LISTING)
        now = now or self.clock()
        filters = [StoreFilter.eq("status", ListingStatus.AVAILABLE.value)]
        if not actor.is_admin:
            filters.append(StoreFilter.eq("donor_id", actor.user_id))

        expired: list[UUID] = []
        for listing in await self.store.query(EntityKind.LISTING, filters):
            if not is_overdue(listing, now):
                continue
            try:
                await self._apply(plan_expiry(listing))
            except ConflictError:
                logger.warning(
                    "Overdue listing changed before it could be expired",
                    extra={"listing_id": listing["id"]},
                )
                continue
            expired.append(listing["id"])
        logger.info(f"Expiry sweep expired {len(expired)} listing(s)")
        return expired

    async def get_listing(self, listing_id: UUID) -> dict:
        return await self._get_or_404(EntityKind.LISTING, listing_id, "Listing")

    async def list_listings(
        self,
        status: ListingStatus | str | None = None,
        donor_id: UUID | None = None,
    ) -> list[dict]:
        """Listings newest first, optionally filtered by status and donor."""
        filters = []
        if status is not None:
            filters.append(StoreFilter.eq("status", ListingStatus(status).value))
        if donor_id is not None:
            filters.append(StoreFilter.eq("donor_id", donor_id))
        return await self.store.query(
            EntityKind.LISTING, filters, order_by="created_at", descending=True,
        )

    # ─── Requests ────────────────────────────────────────────────

    async def submit_request(
        self,
        actor: Actor,
        listing_id: UUID,
        message: str | None = None,
        requested_quantity: float | None = None,
    ) -> dict:
        """Create a pending request against a listing. No listing side effect."""
        require_role(actor, Action.SUBMIT_REQUEST)
        listing = await self.get_listing(listing_id)
        validate_request_submission(
            listing,
            requested_quantity,
            accept_on_claimed=self.settings.accept_requests_on_claimed_listings,
        )
        record = {
            "listing_id": listing["id"],
            "recipient_id": actor.user_id,
            "status": RequestStatus.PENDING.value,
            "message": (message or "").strip() or None,
            "requested_quantity": requested_quantity,
            "created_at": self.clock(),
        }
        request_id = await self.store.insert(EntityKind.REQUEST, record)
        logger.info(
            "Request submitted",
            extra={"request_id": request_id, "listing_id": listing_id},
        )
        return await self.get_request(request_id)

    async def approve_request(self, actor: Actor, request_id: UUID) -> dict:
        """pending -> approved, paired with listing available -> claimed."""
        require_role(actor, Action.APPROVE_REQUEST)
        request = await self.get_request(request_id)
        listing = await self.get_listing(request["listing_id"])
        require_owner(actor, listing["donor_id"], Action.APPROVE_REQUEST)

        await self._apply(plan_approval(request, listing, self.clock()))
        logger.info(
            "Request approved, listing claimed",
            extra={"request_id": request_id, "listing_id": listing["id"]},
        )
        return await self.get_request(request_id)

    async def reject_request(self, actor: Actor, request_id: UUID) -> dict:
        require_role(actor, Action.REJECT_REQUEST)
        request = await self.get_request(request_id)
        listing = await self.get_listing(request["listing_id"])
        require_owner(actor, listing["donor_id"], Action.REJECT_REQUEST)

        await self._apply(plan_rejection(request))
        logger.info("Request rejected", extra={"request_id": request_id})
        return await self.get_request(request_id)

    async def complete_request(self, actor: Actor, request_id: UUID) -> CompletionOutcome:
        """approved -> completed, listing -> completed, one impact record."""
        require_role(actor, Action.COMPLETE_REQUEST)
        request = await self.get_request(request_id)
        require_owner(actor, request["recipient_id"], Action.COMPLETE_REQUEST)
        listing = await self.get_listing(request["listing_id"])

        plan = plan_completion(request, listing, self.clock())
        impact_record = await self._apply(plan)
        logger.info(
            f"Donation completed: {plan.impact_record['food_saved_lbs']:.2f} lbs saved",
            extra={"request_id": request_id, "listing_id": listing["id"]},
        )
        return CompletionOutcome(
            request=await self.get_request(request_id),
            listing=await self.get_listing(listing["id"]),
            impact_record=impact_record,
        )

    async def get_request(self, request_id: UUID) -> dict:
        return await self._get_or_404(EntityKind.REQUEST, request_id, "Request")

    async def list_requests(
        self,
        listing_id: UUID | None = None,
        recipient_id: UUID | None = None,
        status: RequestStatus | str | None = None,
    ) -> list[dict]:
        """Requests newest first, optionally filtered."""
        filters = []
        if listing_id is not None:
            filters.append(StoreFilter.eq("listing_id", listing_id))
        if recipient_id is not None:
            filters.append(StoreFilter.eq("recipient_id", recipient_id))
        if status is not None:
            filters.append(StoreFilter.eq("status", RequestStatus(status).value))
        return await self.store.query(
            EntityKind.REQUEST, filters, order_by="created_at", descending=True,
        )

    # ─── Plan Execution ──────────────────────────────────────────

    async def _apply(self, plan: TransitionPlan) -> dict | None:
        """Apply a plan's guarded updates (then its impact insert) as one unit."""
        applied: list[GuardedUpdate] = []
        for step in plan.steps:
            try:
                matched = await self.store.update(
                    step.kind, step.entity_id, step.patch, step.expected,
                )
            except FoodLoopError:
                await self._compensate(plan, applied)
                raise
            if not matched:
                await self._compensate(plan, applied)
                raise ConflictError(
                    f"Cannot {plan.operation}: {step.kind.value} "
                    f"{step.entity_id} was modified concurrently",
                    retry_after_ms=self.settings.conflict_retry_after_ms,
                    context=_step_context(step),
                )
            applied.append(step)

        if plan.impact_record is None:
            return None
        return await self._record_impact(plan, applied)

    async def _record_impact(
        self, plan: TransitionPlan, applied: list[GuardedUpdate],
    ) -> dict:
        """Insert the plan's impact record, or adopt one an earlier attempt wrote.

        A lost insert acknowledgement may still have committed the row, so on
        failure the record is looked up before anything is rolled back.
        """
        donation_id = plan.impact_record["donation_id"]
        try:
            existing = await self._find_impact(donation_id)
            if existing is not None:
                logger.warning(
                    "Impact record from an earlier attempt adopted",
                    extra={"listing_id": donation_id, "operation": plan.operation},
                )
                return existing
            record_id = await self.store.insert(
                EntityKind.IMPACT_RECORD, plan.impact_record,
            )
            return {**plan.impact_record, "id": record_id}
        except FoodLoopError as e:
            landed = await self._find_impact_quietly(donation_id)
            if landed is not None:
                logger.warning(
                    f"Impact insert reported {e.code} but the record exists",
                    extra={"listing_id": donation_id, "error_code": e.code},
                )
                return landed
            await self._compensate(plan, applied)
            raise

    async def _find_impact(self, donation_id: UUID) -> dict | None:
        rows = await self.store.query(
            EntityKind.IMPACT_RECORD, [StoreFilter.eq("donation_id", donation_id)],
        )
        return rows[0] if rows else None

    async def _find_impact_quietly(self, donation_id: UUID) -> dict | None:
        try:
            return await self._find_impact(donation_id)
        except FoodLoopError as e:
            logger.error(
                f"Impact record lookup failed: {e}",
                extra={"listing_id": donation_id, "error_code": e.code},
            )
            return None

    async def _compensate(
        self, plan: TransitionPlan, applied: list[GuardedUpdate],
    ) -> None:
        for step in reversed(applied):
            undo = step.compensation()
            if not undo.patch:
                continue
            try:
                restored = await self.store.update(
                    undo.kind, undo.entity_id, undo.patch, undo.expected,
                )
            except FoodLoopError as e:
                logger.error(
                    f"Compensation for {plan.operation} failed: {e}",
                    extra={"error_code": e.code, "operation": plan.operation},
                    exc_info=True,
                )
                continue
            if not restored:
                logger.error(
                    f"Compensation for {plan.operation} matched no row on "
                    f"{undo.kind.value} {undo.entity_id}",
                    extra={"operation": plan.operation},
                )
            else:
                logger.warning(
                    f"Rolled back {undo.kind.value} {undo.entity_id} "
                    f"after failed {plan.operation}",
                    extra={"operation": plan.operation},
                )

    async def _get_or_404(
        self, kind: EntityKind, entity_id: UUID, label: str,
    ) -> dict:
        record = await self.store.get(kind, entity_id)
        if record is None:
            raise ResourceNotFoundError(label, str(entity_id))
        return record


def _step_context(step: GuardedUpdate) -> ErrorContext:
    if step.kind == EntityKind.LISTING:
        return ErrorContext(listing_id=str(step.entity_id))
    return ErrorContext(request_id=str(step.entity_id))
