"""FoodListing ORM - persists a donor-posted offer of surplus food.

Invariants:
    - id is UUID primary key
    - quantity > 0, unit in QuantityUnit (validated in core before insert)
    - status transitions: available -> claimed -> completed | available -> expired
    - Rows are never deleted; completed/expired are soft-terminal

Design Decisions:
    - claimed_by/claimed_at/completed_at denormalized: listing views need no join
      to show who holds the donation
    - Index on status: the listing feed and the expiry sweep filter by it
    - requests relationship is lazy="raise": store reads return columns only and
      never load a listing's requests implicitly
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from foodloop.db.base import Base


class FoodListing(Base):
    """Food listing entity - owns its donation requests."""
    __tablename__ = "food_listings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    donor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    food_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="other",
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(10), nullable=False)
    expiry_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    pickup_location: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="available", index=True,
    )
    claimed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    claimed_at: Mapped[datetime | None] = mapped_column(
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
    requests: Mapped[list["DonationRequest"]] = relationship(
        "DonationRequest", back_populates="listing", lazy="raise",
    )
