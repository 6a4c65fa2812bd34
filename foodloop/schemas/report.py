"""Report Schemas - report generation input and stored report responses.

Invariants:
    - start_date <= end_date is checked by the aggregator (ValidationError), not
      here, so API and direct callers share one rule
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from foodloop.core.domain_types import ReportType


class ReportCreate(BaseModel):
    report_type: ReportType = ReportType.WEEKLY
    start_date: date
    end_date: date


class ReportResponse(BaseModel):
    id: UUID
    created_by: UUID
    report_type: ReportType
    start_date: date
    end_date: date
    period: str
    total_donations: int
    total_food_saved_lbs: float
    total_co2_saved_lbs: float
    total_meals_provided: int
    average_donation_size: float
    created_at: datetime


class ImpactTotalsResponse(BaseModel):
    total_donations: int
    total_food_saved_lbs: float
    total_co2_saved_lbs: float
    total_meals_provided: int
    average_donation_size: float
