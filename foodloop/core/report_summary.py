"""Report Summary - pure aggregation of impact records over a [start, end) window.

Invariants:
    - start <= end, otherwise ValidationError (start == end is a legal, empty window)
    - Window is half-open: recorded_at >= start and recorded_at < end
    - average_donation_size is 0.0 when there are no records (never divides by zero)
    - Missing co2/meals values count as 0

Design Decisions:
    - Dates are widened to UTC-midnight datetimes so date and datetime inputs compare
      the same way against stored timestamps
    - format_report_text is presentation, but reads only the ReportSummary fields
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Iterable

from foodloop.core.errors import ValidationError


@dataclass(frozen=True)
class ReportSummary:
    total_donations: int
    total_food_saved_lbs: float
    total_co2_saved_lbs: float
    total_meals_provided: int
    average_donation_size: float


def to_window_bound(value: date | datetime) -> datetime:
    """Widen a date to UTC midnight; treat naive datetimes as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def window_bounds(
    start: date | datetime, end: date | datetime,
) -> tuple[datetime, datetime]:
    """Validate and normalize a reporting window."""
    lower, upper = to_window_bound(start), to_window_bound(end)
    if lower > upper:
        raise ValidationError(
            f"start_date ({start}) must not be after end_date ({end})", "start_date",
        )
    return lower, upper


def period_label(start: date | datetime, end: date | datetime) -> str:
    return f"{as_date(start).isoformat()} to {as_date(end).isoformat()}"


def summarize_impact(records: Iterable[dict]) -> ReportSummary:
    """Aggregate impact records into totals and average. Pure."""
    count = 0
    food = 0.0
    co2 = 0.0
    meals = 0
    for record in records:
        count += 1
        food += record["food_saved_lbs"]
        co2 += record.get("co2_saved_lbs") or 0.0
        meals += record.get("meals_provided") or 0

    return ReportSummary(
        total_donations=count,
        total_food_saved_lbs=food,
        total_co2_saved_lbs=co2,
        total_meals_provided=meals,
        average_donation_size=food / count if count else 0.0,
    )


def format_report_text(report: dict, generated_at: datetime | None = None) -> str:
    """Flat plain-text export of a stored report."""
    generated = generated_at or report["created_at"]
    return "\n".join([
        "Food Waste Reduction Report",
        f"Generated: {generated.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Period: {as_date(report['start_date']).isoformat()} - "
        f"{as_date(report['end_date']).isoformat()}",
        "",
        "SUMMARY",
        f"Total Donations: {report['total_donations']}",
        f"Total Food Saved: {report['total_food_saved_lbs']:.2f} lbs",
        f"Total CO2 Reduced: {report['total_co2_saved_lbs']:.2f} lbs",
        f"Total Meals Provided: {report['total_meals_provided']}",
        "",
        f"Average Donation Size: {report['average_donation_size']:.2f} lbs",
        "",
    ])


def as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value
