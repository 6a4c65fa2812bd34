"""Listing Schemas - donor input and listing responses.

Invariants:
    - ListingCreate.quantity > 0; title and pickup_location stripped and non-empty
    - donor_id is honoured only for admin callers (services decide)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from foodloop.core.domain_types import FoodType, ListingStatus, QuantityUnit


class ListingCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    food_type: FoodType = FoodType.OTHER
    quantity: float = Field(gt=0)
    unit: QuantityUnit
    expiry_date: datetime | None = None
    pickup_location: str = Field(min_length=1, max_length=500)
    donor_id: UUID | None = None

    @field_validator("title", "pickup_location")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class ListingResponse(BaseModel):
    id: UUID
    donor_id: UUID
    title: str
    description: str | None
    food_type: FoodType
    quantity: float
    unit: QuantityUnit
    expiry_date: datetime | None
    pickup_location: str
    status: ListingStatus
    claimed_by: UUID | None
    claimed_at: datetime | None
    completed_at: datetime | None
    created_at: datetime


class ExpirySweepResponse(BaseModel):
    expired: list[UUID]
    count: int
