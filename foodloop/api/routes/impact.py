"""Impact Routes - all-time impact totals for the dashboard."""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from foodloop.api.dependencies import get_report_aggregator
from foodloop.schemas.report import ImpactTotalsResponse
from foodloop.services.report_aggregator import ReportAggregator

router = APIRouter(prefix="/api/v1/impact", tags=["impact"])


@router.get("/totals", response_model=ImpactTotalsResponse)
async def impact_totals(
    donor_id: UUID | None = Query(None),
    aggregator: ReportAggregator = Depends(get_report_aggregator),
):
    return asdict(await aggregator.impact_totals(donor_id))
