"""WasteReport ORM - persisted snapshot of impact totals over a date window.

Invariants:
    - Immutable once inserted; regenerating a window creates a new row
    - start_date <= end_date; window is [start_date, end_date)
    - average_donation_size is 0 when total_donations is 0
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Float, Integer, Date, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from foodloop.db.base import Base


class WasteReport(Base):
    """Waste reduction report entity."""
    __tablename__ = "waste_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    report_type: Mapped[str] = mapped_column(String(10), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    period: Mapped[str] = mapped_column(String(40), nullable=False)
    total_donations: Mapped[int] = mapped_column(Integer, nullable=False)
    total_food_saved_lbs: Mapped[float] = mapped_column(Float, nullable=False)
    total_co2_saved_lbs: Mapped[float] = mapped_column(Float, nullable=False)
    total_meals_provided: Mapped[int] = mapped_column(Integer, nullable=False)
    average_donation_size: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
