"""ImpactRecord ORM - immutable impact fact derived from one completed donation.

Invariants:
    - donation_id is UNIQUE: at most one record per listing, even if two
      completions race past the application-level guards
    - Never updated or deleted after insert
    - food_saved_lbs is canonical mass (pounds-equivalent)

Design Decisions:
    - Index on recorded_at: report windows are range scans on it
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Float, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from foodloop.db.base import Base


class ImpactRecord(Base):
    """Impact record entity - CO2 avoided and meals provided for a donation."""
    __tablename__ = "impact_records"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    donor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    donation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("food_listings.id"),
        nullable=False, unique=True,
    )
    food_saved_lbs: Mapped[float] = mapped_column(Float, nullable=False)
    co2_saved_lbs: Mapped[float] = mapped_column(Float, nullable=False)
    meals_provided: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
