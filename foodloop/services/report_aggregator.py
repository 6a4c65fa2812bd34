"""Report Aggregator - time-windowed impact reports over persisted ImpactRecords.

Invariants:
    - generate_report reads records with recorded_at in [start, end) only
    - A stored report is a snapshot: regenerating the same window inserts a new row
      and may differ if impact records were added in between
    - Only data_analyst and admin may generate reports; reading them is open

Design Decisions:
    - All arithmetic lives in core/report_summary.py; this class only does IO
    - Reports are persisted (waste_reports) so exports and listings read the same
      numbers the analyst saw at generation time
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable
from uuid import UUID

from foodloop.core.domain_types import Action, Actor, EntityKind, ReportType
from foodloop.core.enforce_roles import require_role
from foodloop.core.errors import ResourceNotFoundError, ValidationError
from foodloop.core.report_summary import (
    ReportSummary,
    as_date,
    format_report_text,
    period_label,
    summarize_impact,
    window_bounds,
)
from foodloop.core.repository_protocols import DataStore, StoreFilter

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Generates, stores and exports impact reports."""

    def __init__(
        self,
        store: DataStore,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.store = store
        self.clock = clock

    async def generate_report(
        self,
        actor: Actor,
        report_type: ReportType | str,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> dict:
        """Aggregate impact records in [start_date, end_date) into a stored report."""
        require_role(actor, Action.GENERATE_REPORT)
        try:
            kind = ReportType(report_type)
        except ValueError:
            raise ValidationError(
                f"Report type must be one of {[t.value for t in ReportType]}",
                "report_type",
            )
        lower, upper = window_bounds(start_date, end_date)

        records = await self.store.query(
            EntityKind.IMPACT_RECORD,
            [
                StoreFilter("recorded_at", "gte", lower),
                StoreFilter("recorded_at", "lt", upper),
            ],
        )
        summary = summarize_impact(records)

        report = {
            "created_by": actor.user_id,
            "report_type": kind.value,
            "start_date": as_date(start_date),
            "end_date": as_date(end_date),
            "period": period_label(start_date, end_date),
            "total_donations": summary.total_donations,
            "total_food_saved_lbs": summary.total_food_saved_lbs,
            "total_co2_saved_lbs": summary.total_co2_saved_lbs,
            "total_meals_provided": summary.total_meals_provided,
            "average_donation_size": summary.average_donation_size,
            "created_at": self.clock(),
        }
        report_id = await self.store.insert(EntityKind.REPORT, report)
        logger.info(
            f"Report generated for {report['period']}: "
            f"{summary.total_donations} donation(s)",
            extra={"report_id": report_id, "actor_role": actor.role.value},
        )
        return {**report, "id": report_id}

    async def get_report(self, report_id: UUID) -> dict:
        report = await self.store.get(EntityKind.REPORT, report_id)
        if report is None:
            raise ResourceNotFoundError("Report", str(report_id))
        return report

    async def list_reports(self) -> list[dict]:
        return await self.store.query(
            EntityKind.REPORT, order_by="created_at", descending=True,
        )

    async def export_report_text(self, report_id: UUID) -> str:
        return format_report_text(await self.get_report(report_id))

    async def impact_totals(self, donor_id: UUID | None = None) -> ReportSummary:
        """All-time totals for the impact dashboard."""
        filters = [StoreFilter.eq("donor_id", donor_id)] if donor_id else []
        records = await self.store.query(EntityKind.IMPACT_RECORD, filters)
        return summarize_impact(records)
