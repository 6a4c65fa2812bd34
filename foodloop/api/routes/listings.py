"""Listing Routes - create, browse and expire donor listings.

Invariants:
    - POST /listings is gated to food_donor/admin by the lifecycle engine
    - Listing feed is newest first
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from foodloop.api.dependencies import get_actor, get_lifecycle
from foodloop.core.domain_types import Actor, ListingStatus
from foodloop.schemas.listing import (
    ExpirySweepResponse, ListingCreate, ListingResponse,
)
from foodloop.services.donation_lifecycle import DonationLifecycle

router = APIRouter(prefix="/api/v1/listings", tags=["listings"])


@router.post(
    "", response_model=ListingResponse, status_code=status.HTTP_201_CREATED,
)
async def create_listing(
    body: ListingCreate,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """Post a new surplus food listing."""
    return await lifecycle.create_listing(actor, body.model_dump(mode="python"))


@router.get("", response_model=list[ListingResponse])
async def list_listings(
    status_filter: ListingStatus | None = Query(None, alias="status"),
    donor_id: UUID | None = Query(None),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.list_listings(status=status_filter, donor_id=donor_id)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: UUID, lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.get_listing(listing_id)


@router.post("/expire-overdue", response_model=ExpirySweepResponse)
async def expire_overdue_listings(
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """Expire available listings whose expiry date has passed."""
    expired = await lifecycle.expire_overdue_listings(actor)
    return {"expired": expired, "count": len(expired)}


@router.post("/{listing_id}/expire", response_model=ListingResponse)
async def expire_listing(
    listing_id: UUID,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.expire_listing(actor, listing_id)
