"""DonationRequest ORM - persists a recipient organization's claim on a listing.

Invariants:
    - Always references exactly one FoodListing (listing_id FK)
    - status transitions: pending -> approved -> completed | pending -> rejected
    - At most one request per listing ever reaches approved (enforced by the
      listing's available -> claimed guard, not by a DB constraint)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from foodloop.db.base import Base


class DonationRequest(Base):
    """Donation request entity - a claim against a listing."""
    __tablename__ = "donation_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    listing_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("food_listings.id"),
        nullable=False, index=True,
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    requested_quantity: Mapped[float | None] = mapped_column(Float, nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    listing: Mapped["FoodListing"] = relationship(
        "FoodListing", back_populates="requests", lazy="raise",
    )
