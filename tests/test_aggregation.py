"""Tests for the dashboard aggregation engine."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from imob_control.analytics import SelectionFilter, aggregate, aggregate_filter
from imob_control.models import FinancialRecord, Property

NOV_START = date(2025, 11, 1)
NOV_END = date(2025, 11, 30)


def _stay(check_in: str | None, check_out: str | None = None, amount: str = "100") -> FinancialRecord:
    return FinancialRecord(
        date=check_in or "",
        amount=Decimal(amount),
        description="Stay",
        check_in=check_in,
        check_out=check_out,
    )


def _single(*records: FinancialRecord, prop_id: str = "p1") -> list[Property]:
    return [Property(id=prop_id, title="Unit", rental_history=list(records))]


class TestOccupancy:
    """Occupancy computed from stay overlap with the window."""

    def test_four_night_stay_in_november(self, sample_property: Property) -> None:
        result = aggregate([sample_property], period_start=NOV_START, period_end=NOV_END)

        assert result.occupied_days == 4
        assert result.days_in_period == 30
        assert result.total_possible_days == 30
        assert result.occupancy_rate == pytest.approx(13.333, rel=1e-3)
        assert result.vacant_days == 26

    def test_window_defaults_to_current_month(self, sample_property: Property, today: date) -> None:
        result = aggregate([sample_property], today=today)

        assert result.period_start == NOV_START
        assert result.period_end == NOV_END
        assert result.occupied_days == 4
        assert result.occupancy_rate == pytest.approx(13.333, rel=1e-3)

    def test_default_window_in_leap_february(self) -> None:
        result = aggregate(_single(), today=date(2024, 2, 10))
        assert result.days_in_period == 29

    def test_same_day_stay_counts_one_day(self) -> None:
        props = _single(_stay("10/11/2025", "10/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 1

    def test_check_in_without_check_out_counts_one_day(self) -> None:
        props = _single(_stay("10/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 1

    def test_check_out_before_check_in_occupies_nothing(self) -> None:
        props = _single(_stay("10/11/2025", "05/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)

        assert result.occupied_days == 0
        assert result.occupancy_rate == 0.0

    def test_stay_crossing_window_end(self) -> None:
        props = _single(_stay("28/11/2025", "05/12/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 3

    def test_stay_crossing_window_start(self) -> None:
        props = _single(_stay("25/10/2025", "03/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 2

    def test_stay_outside_window(self) -> None:
        props = _single(_stay("01/09/2025", "05/09/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 0
        assert result.occupancy_rate == 0.0

    def test_records_without_check_in_do_not_occupy(self) -> None:
        props = _single(FinancialRecord(date="05/11/2025", amount=Decimal("10"), description="x"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 0

    def test_unparseable_check_in_is_ignored(self) -> None:
        props = _single(_stay("not a date", "06/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)
        assert result.occupied_days == 0

    def test_rate_clamped_at_100(self) -> None:
        month = _stay("01/11/2025", "30/11/2025")
        props = _single(month, _stay("01/11/2025", "30/11/2025"))
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END)

        assert result.occupied_days == 58
        assert result.occupancy_rate == 100.0
        assert result.vacant_days == 0

    def test_possible_days_scale_with_property_count(
        self, sample_property: Property, second_property: Property
    ) -> None:
        result = aggregate(
            [sample_property, second_property], period_start=NOV_START, period_end=NOV_END
        )
        assert result.total_possible_days == 60
        assert result.occupancy_rate == pytest.approx(4 / 60 * 100)

    def test_empty_portfolio(self, today: date) -> None:
        result = aggregate([], today=today)

        assert result.total_possible_days == 0
        assert result.occupancy_rate == 0.0
        assert result.vacant_days == 0
        assert result.net_result == Decimal("0")


class TestFinancials:
    """Totals, monthly series and the record table."""

    def test_totals_without_date_filter(
        self, sample_property: Property, second_property: Property, today: date
    ) -> None:
        result = aggregate([sample_property, second_property], today=today)

        assert result.total_revenue == Decimal("6200")
        assert result.total_expense == Decimal("470")
        assert result.net_result == result.total_revenue - result.total_expense

    def test_date_filter_is_inclusive(self, second_property: Property, today: date) -> None:
        result = aggregate(
            [second_property],
            period_start=date(2025, 10, 1),
            period_end=date(2025, 10, 20),
            today=today,
        )
        assert result.total_revenue == Decimal("2500")
        assert result.total_expense == Decimal("350")

    def test_start_bound_only(self, second_property: Property, today: date) -> None:
        result = aggregate([second_property], period_start=date(2025, 10, 15), today=today)
        assert result.total_revenue == Decimal("2500")
        assert result.total_expense == Decimal("350")

    def test_end_bound_only(self, second_property: Property, today: date) -> None:
        result = aggregate([second_property], period_end=date(2025, 10, 15), today=today)
        assert result.total_revenue == Decimal("2500")
        assert result.total_expense == Decimal("0")

    def test_monthly_buckets_sorted_and_partition_totals(
        self, sample_property: Property, second_property: Property, today: date
    ) -> None:
        result = aggregate([sample_property, second_property], today=today)

        assert [b.key for b in result.monthly] == ["10/2025", "11/2025"]
        october, november = result.monthly
        assert october.revenue == Decimal("2500")
        assert october.expense == Decimal("470")
        assert november.revenue == Decimal("3700")
        assert november.expense == Decimal("0")
        assert sum(b.revenue for b in result.monthly) == result.total_revenue
        assert sum(b.expense for b in result.monthly) == result.total_expense

    def test_buckets_across_years(self, today: date) -> None:
        props = _single(
            FinancialRecord(date="15/01/2025", amount=Decimal("1"), description="a"),
            FinancialRecord(date="15/12/2024", amount=Decimal("2"), description="b"),
        )
        result = aggregate(props, today=today)
        assert [b.key for b in result.monthly] == ["12/2024", "1/2025"]

    def test_datetime_bounds_truncated_to_day(self, sample_property: Property) -> None:
        result = aggregate(
            [sample_property],
            period_start=datetime(2025, 11, 1, 9, 30),
            period_end=datetime(2025, 11, 30, 8, 0),
        )

        assert result.period_start == NOV_START
        assert result.period_end == NOV_END
        assert result.total_revenue == Decimal("1200")
        assert result.occupied_days == 4

    def test_non_numeric_amount_left_out_of_financials(self, today: date) -> None:
        broken = FinancialRecord(date="03/11/2025", amount=None, description="valor inválido")
        props = _single(broken, FinancialRecord(date="01/11/2025", amount=Decimal("10"), description="x"))
        result = aggregate(props, today=today)

        assert result.total_revenue == Decimal("10")
        assert [b.revenue for b in result.monthly] == [Decimal("10")]
        assert all(row.record is not broken for row in result.records)

    def test_non_numeric_amount_stay_still_occupies(self) -> None:
        stay = FinancialRecord(
            date="02/11/2025",
            amount=None,
            description="Estadia",
            check_in="02/11/2025",
            check_out="06/11/2025",
        )
        result = aggregate(_single(stay), period_start=NOV_START, period_end=NOV_END)

        assert result.occupied_days == 4
        assert result.total_revenue == Decimal("0")

    def test_undated_record_without_filter(self, today: date) -> None:
        undated = FinancialRecord(date="", amount=Decimal("50"), description="sem data")
        props = _single(undated, FinancialRecord(date="01/11/2025", amount=Decimal("10"), description="x"))
        result = aggregate(props, today=today)

        assert result.total_revenue == Decimal("60")
        assert sum(b.revenue for b in result.monthly) == Decimal("10")
        assert result.records[-1].record is undated

    def test_undated_record_with_filter(self, today: date) -> None:
        undated = FinancialRecord(date="??", amount=Decimal("50"), description="sem data")
        props = _single(undated)
        result = aggregate(props, period_start=NOV_START, period_end=NOV_END, today=today)

        assert result.total_revenue == Decimal("0")
        assert result.records == ()

    def test_records_sorted_newest_first(
        self, sample_property: Property, second_property: Property, today: date
    ) -> None:
        result = aggregate([sample_property, second_property], today=today)

        dates = [row.sort_date for row in result.records]
        assert dates == sorted(dates, reverse=True)
        assert result.records[0].property_title == "Studio Compacto Centro"

    def test_financial_dates_do_not_use_stay_dates(self, today: date) -> None:
        record = FinancialRecord(
            date="30/10/2025",
            amount=Decimal("900"),
            description="Pago antes",
            check_in="02/11/2025",
            check_out="05/11/2025",
        )
        result = aggregate(_single(record), period_start=NOV_START, period_end=NOV_END, today=today)

        assert result.total_revenue == Decimal("0")
        assert result.occupied_days == 3


class TestSelection:
    """Property subset selection."""

    def test_only_selected_property_counts(
        self, sample_property: Property, second_property: Property, today: date
    ) -> None:
        result = aggregate([sample_property, second_property], {"prop-002"}, today=today)

        assert result.property_count == 1
        assert result.total_revenue == Decimal("5000")
        assert {row.property_id for row in result.records} == {"prop-002"}
        assert result.occupied_days == 0

    def test_unknown_selection_selects_nothing(self, sample_property: Property, today: date) -> None:
        result = aggregate([sample_property], {"missing"}, today=today)

        assert result.property_count == 0
        assert result.records == ()
        assert result.occupancy_rate == 0.0

    def test_aggregate_filter(self, sample_property: Property, second_property: Property) -> None:
        selection = SelectionFilter(frozenset({"prop-001"}), NOV_START, NOV_END)
        result = aggregate_filter([sample_property, second_property], selection)

        assert result.total_revenue == Decimal("1200")
        assert result.occupied_days == 4

    def test_toggle(self) -> None:
        selection = SelectionFilter().toggle("a").toggle("b").toggle("a")
        assert selection.property_ids == frozenset({"b"})

    def test_select_all_twice_clears(self, sample_property: Property, second_property: Property) -> None:
        props = [sample_property, second_property]
        selection = SelectionFilter().select_all(props)
        assert selection.property_ids == frozenset({"prop-001", "prop-002"})
        assert selection.select_all(props).property_ids == frozenset()

    def test_has_date_range(self) -> None:
        assert not SelectionFilter().has_date_range
        assert SelectionFilter(start=NOV_START).has_date_range


class TestDeterminism:
    """Aggregation is a pure function of its inputs."""

    def test_same_inputs_same_result(
        self, sample_property: Property, second_property: Property, today: date
    ) -> None:
        props = [sample_property, second_property]
        first = aggregate(props, {"prop-001"}, NOV_START, NOV_END, today=today)
        second = aggregate(props, {"prop-001"}, NOV_START, NOV_END, today=today)
        assert first == second

    def test_inputs_not_mutated(self, sample_property: Property, today: date) -> None:
        history_before = list(sample_property.rental_history)
        aggregate([sample_property], today=today)
        assert sample_property.rental_history == history_before
