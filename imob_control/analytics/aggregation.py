"""Portfolio financial and occupancy aggregation.

Everything here is a pure function of the property list and the selection
filter. Malformed record data never raises: unparseable dates are left out
of whichever computation needed them (occupancy or monthly bucketing), and
records without a numeric amount are left out of the financials.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from imob_control.dates import (
    ONE_DAY,
    as_day,
    month_bounds,
    normalize_day_end,
    normalize_day_start,
    overlap_days,
    parse_date,
    round_half_up,
)
from imob_control.models import FinancialRecord, Property

ZERO = Decimal("0")


@dataclass(frozen=True)
class SelectionFilter:
    """Dashboard selection: property subset plus optional date range.

    An empty ``property_ids`` set selects every property.
    """

    property_ids: frozenset[str] = field(default_factory=frozenset)
    start: date | None = None
    end: date | None = None

    @property
    def has_date_range(self) -> bool:
        return self.start is not None or self.end is not None

    def toggle(self, property_id: str) -> "SelectionFilter":
        """Return a filter with ``property_id`` added or removed."""
        ids = set(self.property_ids)
        ids.symmetric_difference_update({property_id})
        return SelectionFilter(frozenset(ids), self.start, self.end)

    def select_all(self, properties: Iterable[Property]) -> "SelectionFilter":
        """Select every property, or clear the selection if all were selected."""
        all_ids = frozenset(p.id for p in properties)
        ids = frozenset() if self.property_ids == all_ids else all_ids
        return SelectionFilter(ids, self.start, self.end)


@dataclass(frozen=True)
class MonthlyBucket:
    """Revenue and expense totals for one calendar month."""

    key: str  # "M/YYYY"
    month_start: date
    revenue: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.revenue - self.expense


@dataclass(frozen=True)
class RecordRow:
    """A record flattened together with its owning property."""

    property_id: str
    property_title: str
    record: FinancialRecord
    sort_date: date | None


@dataclass(frozen=True)
class AggregationResult:
    """Derived dashboard statistics. Never stored."""

    total_revenue: Decimal
    total_expense: Decimal
    net_result: Decimal
    monthly: tuple[MonthlyBucket, ...]
    records: tuple[RecordRow, ...]
    occupied_days: int
    vacant_days: int
    occupancy_rate: float
    days_in_period: int
    total_possible_days: int
    period_start: date
    period_end: date
    property_count: int


def select_properties(properties: Iterable[Property], selected_ids: Iterable[str]) -> list[Property]:
    """Active subset: everything when nothing is selected."""
    selected = set(selected_ids)
    if not selected:
        return list(properties)
    return [p for p in properties if p.id in selected]


def occupancy_window(
    period_start: date | None,
    period_end: date | None,
    today: date,
) -> tuple[datetime, datetime]:
    """Occupancy window, defaulting each missing bound to the current month."""
    month_first, month_last = month_bounds(today)
    start = normalize_day_start(period_start if period_start is not None else month_first)
    end = normalize_day_end(period_end if period_end is not None else month_last)
    return start, end


def stay_interval(record: FinancialRecord) -> tuple[datetime, datetime] | None:
    """Interval a record's stay occupies, or None when it occupies nothing.

    The stay runs from the check-in day to the check-out day, and always
    covers at least the check-in day itself. A check-out before the
    check-in is an inverted range and occupies no days.
    """
    check_in = parse_date(record.check_in)
    if check_in is None:
        return None
    check_out = parse_date(record.check_out) or check_in
    if check_out < check_in:
        return None
    start = normalize_day_start(check_in)
    end = max(normalize_day_start(check_out), normalize_day_end(check_in))
    return start, end


def record_in_range(record: FinancialRecord, start: date | None, end: date | None) -> bool:
    """Whether a record's reference date falls inside the inclusive bounds.

    With no bounds at all every record matches, even one without a
    parseable date.
    """
    start, end = as_day(start), as_day(end)
    if start is None and end is None:
        return True
    record_date = parse_date(record.date)
    if record_date is None:
        return False
    if start is not None and record_date < start:
        return False
    if end is not None and record_date > end:
        return False
    return True


def aggregate(
    properties: Iterable[Property],
    selected_ids: Iterable[str] = (),
    period_start: date | None = None,
    period_end: date | None = None,
    *,
    today: date | None = None,
) -> AggregationResult:
    """Compute dashboard totals, monthly series and occupancy.

    Parameters
    ----------
    properties : Iterable[Property]
        Full portfolio; order is irrelevant.
    selected_ids : Iterable[str]
        Selected property ids. Empty selects all.
    period_start, period_end : date | None
        Optional inclusive date bounds. They filter financial records by
        reference date and define the occupancy window. A missing bound
        leaves financials unfiltered on that side and defaults the
        occupancy window to the current month. Datetimes are truncated
        to their day.
    today : date | None
        Reference day for the default occupancy window.

    Returns
    -------
    AggregationResult
        Derived statistics.
    """
    today = today or date.today()
    period_start, period_end = as_day(period_start), as_day(period_end)
    active = select_properties(properties, selected_ids)

    window_start, window_end = occupancy_window(period_start, period_end, today)
    days_in_period = max(1, round_half_up((window_end - window_start) / ONE_DAY))

    occupied_days = 0
    total_revenue = ZERO
    total_expense = ZERO
    buckets: dict[tuple[int, int], list[Decimal]] = {}
    rows: list[RecordRow] = []

    for prop in active:
        for record in prop.rental_history:
            stay = stay_interval(record)
            if stay is not None:
                occupied_days += overlap_days(stay[0], stay[1], window_start, window_end)

        for record in prop.rental_history:
            if record.amount is None or not record_in_range(record, period_start, period_end):
                continue

            if record.is_expense:
                total_expense += record.amount
            else:
                total_revenue += record.amount

            record_date = parse_date(record.date)
            rows.append(RecordRow(prop.id, prop.title, record, record_date))

            if record_date is not None:
                sums = buckets.setdefault((record_date.year, record_date.month), [ZERO, ZERO])
                sums[1 if record.is_expense else 0] += record.amount

    monthly = tuple(
        MonthlyBucket(
            key=f"{month}/{year}",
            month_start=date(year, month, 1),
            revenue=revenue,
            expense=expense,
        )
        for (year, month), (revenue, expense) in sorted(buckets.items())
    )

    # Stable sort: undated rows sink to the bottom in entry order
    rows.sort(key=lambda r: r.sort_date or date.min, reverse=True)

    total_possible_days = len(active) * days_in_period
    if total_possible_days > 0:
        # Overlapping manual entries can exceed the possible days
        occupancy_rate = min(100.0, occupied_days / total_possible_days * 100)
    else:
        occupancy_rate = 0.0
    vacant_days = max(0, total_possible_days - occupied_days)

    return AggregationResult(
        total_revenue=total_revenue,
        total_expense=total_expense,
        net_result=total_revenue - total_expense,
        monthly=monthly,
        records=tuple(rows),
        occupied_days=occupied_days,
        vacant_days=vacant_days,
        occupancy_rate=occupancy_rate,
        days_in_period=days_in_period,
        total_possible_days=total_possible_days,
        period_start=window_start.date(),
        period_end=window_end.date(),
        property_count=len(active),
    )


def aggregate_filter(
    properties: Iterable[Property],
    selection: SelectionFilter,
    *,
    today: date | None = None,
) -> AggregationResult:
    """Run :func:`aggregate` with a :class:`SelectionFilter`."""
    return aggregate(
        properties,
        selection.property_ids,
        selection.start,
        selection.end,
        today=today,
    )
