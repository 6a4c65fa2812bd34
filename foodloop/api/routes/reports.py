"""Report Routes - generate, browse and export impact reports.

Invariants:
    - POST /reports is gated to data_analyst/admin by the aggregator
    - Export is text/plain and reads the stored snapshot, never recomputes
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from foodloop.api.dependencies import get_actor, get_report_aggregator
from foodloop.core.domain_types import Actor
from foodloop.schemas.report import ReportCreate, ReportResponse
from foodloop.services.report_aggregator import ReportAggregator

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.post(
    "", response_model=ReportResponse, status_code=status.HTTP_201_CREATED,
)
async def generate_report(
    body: ReportCreate,
    actor: Actor = Depends(get_actor),
    aggregator: ReportAggregator = Depends(get_report_aggregator),
):
    return await aggregator.generate_report(
        actor, body.report_type, body.start_date, body.end_date,
    )


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    aggregator: ReportAggregator = Depends(get_report_aggregator),
):
    return await aggregator.list_reports()


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: UUID,
    aggregator: ReportAggregator = Depends(get_report_aggregator),
):
    return await aggregator.get_report(report_id)


@router.get("/{report_id}/export", response_class=PlainTextResponse)
async def export_report(
    report_id: UUID,
    aggregator: ReportAggregator = Depends(get_report_aggregator),
):
    """Plain-text summary for download."""
    report = await aggregator.get_report(report_id)
    text = await aggregator.export_report_text(report_id)
    filename = f"food-waste-report-{report['start_date'].isoformat()}.txt"
    return PlainTextResponse(
        text, headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
