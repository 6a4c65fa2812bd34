"""Initial schema - food_listings, donation_requests, impact_records, waste_reports.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "food_listings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("donor_id", UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("food_type", sa.String(20), nullable=False, server_default="other"),
        sa.Column("quantity", sa.Float, nullable=False),
        sa.Column("unit", sa.String(10), nullable=False),
        sa.Column("expiry_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("pickup_location", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="available"),
        sa.Column("claimed_by", UUID(as_uuid=True), nullable=True),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("quantity > 0", name="ck_food_listings_quantity_positive"),
    )
    op.create_index("ix_food_listings_donor_id", "food_listings", ["donor_id"])
    op.create_index("ix_food_listings_status", "food_listings", ["status"])

    op.create_table(
        "donation_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", UUID(as_uuid=True), sa.ForeignKey("food_listings.id"), nullable=False),
        sa.Column("recipient_id", UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("requested_quantity", sa.Float, nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_donation_requests_listing_id", "donation_requests", ["listing_id"])
    op.create_index("ix_donation_requests_recipient_id", "donation_requests", ["recipient_id"])

    op.create_table(
        "impact_records",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("donor_id", UUID(as_uuid=True), nullable=False),
        sa.Column("donation_id", UUID(as_uuid=True), sa.ForeignKey("food_listings.id"), nullable=False),
        sa.Column("food_saved_lbs", sa.Float, nullable=False),
        sa.Column("co2_saved_lbs", sa.Float, nullable=False),
        sa.Column("meals_provided", sa.Integer, nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("donation_id", name="uq_impact_records_donation_id"),
    )
    op.create_index("ix_impact_records_donor_id", "impact_records", ["donor_id"])
    op.create_index("ix_impact_records_recorded_at", "impact_records", ["recorded_at"])

    op.create_table(
        "waste_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("created_by", UUID(as_uuid=True), nullable=False),
        sa.Column("report_type", sa.String(10), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("period", sa.String(40), nullable=False),
        sa.Column("total_donations", sa.Integer, nullable=False),
        sa.Column("total_food_saved_lbs", sa.Float, nullable=False),
        sa.Column("total_co2_saved_lbs", sa.Float, nullable=False),
        sa.Column("total_meals_provided", sa.Integer, nullable=False),
        sa.Column("average_donation_size", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("start_date <= end_date", name="ck_waste_reports_window"),
    )


def downgrade() -> None:
    op.drop_table("waste_reports")
    op.drop_index("ix_impact_records_recorded_at", "impact_records")
    op.drop_index("ix_impact_records_donor_id", "impact_records")
    op.drop_table("impact_records")
    op.drop_index("ix_donation_requests_recipient_id", "donation_requests")
    op.drop_index("ix_donation_requests_listing_id", "donation_requests")
    op.drop_table("donation_requests")
    op.drop_index("ix_food_listings_status", "food_listings")
    op.drop_index("ix_food_listings_donor_id", "food_listings")
    op.drop_table("food_listings")
