"""Request Schemas - recipient claims and their lifecycle responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from foodloop.core.domain_types import RequestStatus
from foodloop.schemas.listing import ListingResponse


class RequestCreate(BaseModel):
    listing_id: UUID
    message: str | None = Field(None, max_length=2000)
    requested_quantity: float | None = Field(None, gt=0)


class RequestResponse(BaseModel):
    id: UUID
    listing_id: UUID
    recipient_id: UUID
    status: RequestStatus
    requested_quantity: float | None
    message: str | None
    approved_at: datetime | None
    completed_at: datetime | None
    created_at: datetime


class ImpactRecordResponse(BaseModel):
    id: UUID
    donor_id: UUID
    donation_id: UUID
    food_saved_lbs: float
    co2_saved_lbs: float
    meals_provided: int
    recorded_at: datetime


class CompletionResponse(BaseModel):
    """complete_request result: both final states plus the derived impact."""
    request: RequestResponse
    listing: ListingResponse
    impact_record: ImpactRecordResponse
