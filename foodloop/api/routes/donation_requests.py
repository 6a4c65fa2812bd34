"""Request Routes - submit, approve, reject and complete donation requests.

Invariants:
    - Every transition endpoint is a single lifecycle call: the paired listing
      update happens inside the engine, never across two HTTP calls
    - 409 means retryable conflict (retryable=true) or illegal state (retryable=false)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from foodloop.api.dependencies import get_actor, get_lifecycle
from foodloop.core.domain_types import Actor, RequestStatus
from foodloop.schemas.donation_request import (
    CompletionResponse, RequestCreate, RequestResponse,
)
from foodloop.services.donation_lifecycle import DonationLifecycle

router = APIRouter(prefix="/api/v1/requests", tags=["requests"])


@router.post(
    "", response_model=RequestResponse, status_code=status.HTTP_201_CREATED,
)
async def submit_request(
    body: RequestCreate,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """Claim a listing on behalf of a recipient organization."""
    return await lifecycle.submit_request(
        actor, body.listing_id, body.message, body.requested_quantity,
    )


@router.get("", response_model=list[RequestResponse])
async def list_requests(
    listing_id: UUID | None = Query(None),
    recipient_id: UUID | None = Query(None),
    status_filter: RequestStatus | None = Query(None, alias="status"),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.list_requests(
        listing_id=listing_id, recipient_id=recipient_id, status=status_filter,
    )


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: UUID, lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.get_request(request_id)


@router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: UUID,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.approve_request(actor, request_id)


@router.post("/{request_id}/reject", response_model=RequestResponse)
async def reject_request(
    request_id: UUID,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.reject_request(actor, request_id)


@router.post("/{request_id}/complete", response_model=CompletionResponse)
async def complete_request(
    request_id: UUID,
    actor: Actor = Depends(get_actor),
    lifecycle: DonationLifecycle = Depends(get_lifecycle),
):
    """Mark a donation picked up; records its impact exactly once."""
    outcome = await lifecycle.complete_request(actor, request_id)
    return {
        "request": outcome.request,
        "listing": outcome.listing,
        "impact_record": outcome.impact_record,
    }
