"""Period metrics domain service."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence

from arrecon.domain.allocation import AllocationService
from arrecon.domain.dates import (
    month_bounds,
    require_date,
    resolve_as_of,
    shift_months,
    shift_years,
)
from arrecon.domain.entities import (
    ZERO,
    CollectionEntry,
    CollectionsReport,
    PeriodMetric,
    PeriodTotals,
    ReportFilter,
    Transaction,
    TrendMetrics,
)
from arrecon.domain.errors import ValidationError, inverted_date_range
from arrecon.domain.filters import build_collection_entries
from arrecon.utils.bhs_week import bhs_week, bhs_week_range, next_bhs_week

logger = logging.getLogger(__name__)

# Runaway-loop guards for the series builders
MAX_DAILY_PERIODS = 5000
MAX_WEEKLY_PERIODS = 200

ONE_DAY = timedelta(days=1)
WEEK_SHIFT = timedelta(days=7)


def percent_change(current: Decimal | int, previous: Decimal | int) -> float:
    """Signed percentage change from previous to current (0 when previous is 0)."""
    previous = Decimal(previous)
    if previous == 0:
        return 0.0
    return float((Decimal(current) - previous) / previous * 100)


def resolve_window(
    entries: Sequence[CollectionEntry],
    start_date: Optional[Any] = None,
    end_date: Optional[Any] = None,
    as_of: Optional[Any] = None,
) -> tuple[date, date]:
    """Resolve the reporting window.

    Missing bounds come from the earliest and latest dated entry. With no
    dated entries, the window is the twelve calendar months ending with the
    as-of month. A filled-in bound never crosses the bound the caller gave,
    so a window past the data collapses to the supplied day.

    Raises:
        ValidationError: If an argument is not a date or the supplied start
            is after the supplied end
    """
    reference = resolve_as_of(as_of)
    start = require_date("start_date", start_date) if start_date is not None else None
    end = require_date("end_date", end_date) if end_date is not None else None

    if start is not None and end is not None:
        if start > end:
            raise ValidationError(inverted_date_range(start, end))
        return start, end

    dated = [e.date for e in entries if e.date is not None]
    if dated:
        default_start, default_end = min(dated), max(dated)
    else:
        default_start = shift_months(reference.replace(day=1), -11)
        default_end = month_bounds(reference)[1]

    if start is None and end is None:
        return default_start, default_end
    if start is None:
        return min(default_start, end), end
    return start, max(default_end, start)


class DailyTotals:
    """Collection values summed per calendar day."""

    def __init__(self, entries: Sequence[CollectionEntry]):
        self.totals: dict[date, Decimal] = {}
        for entry in entries:
            if entry.date is None:
                continue
            self.totals[entry.date] = self.totals.get(entry.date, ZERO) + entry.value

    def sum_range(self, start: date, end: date) -> Decimal:
        """Sum values dated within [start, end]."""
        if end < start:
            return ZERO
        if (end - start).days + 1 > len(self.totals):
            return sum(
                (value for day, value in self.totals.items() if start <= day <= end),
                ZERO,
            )
        total = ZERO
        day = start
        while day <= end:
            total += self.totals.get(day, ZERO)
            day += ONE_DAY
        return total


class PeriodMetricsService:
    """Service for building comparative collection series.

    Every series compares the same metric (net collections) over three
    windows: the period itself, a preceding period and the same period one
    year earlier.
    """

    def __init__(self, allocation_service: Optional[AllocationService] = None):
        """Initialize period metrics service.

        Args:
            allocation_service: Allocation service used to attribute
                payments to sources, defaults to a new AllocationService
        """
        self.allocation_service = allocation_service or AllocationService()

    def collection_entries(
        self,
        transactions: Sequence[Transaction],
        report_filter: Optional[ReportFilter] = None,
    ) -> list[CollectionEntry]:
        """Allocate payments and return the filtered collection entries."""
        allocation = self.allocation_service.allocate(transactions)
        return build_collection_entries(transactions, allocation, report_filter)

    def build_report(
        self,
        transactions: Sequence[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        report_filter: Optional[ReportFilter] = None,
        as_of: Optional[date] = None,
    ) -> CollectionsReport:
        """Build daily, weekly and monthly series plus the overall trend.

        Args:
            transactions: Ledger transactions
            start_date: Optional window start, defaults to the first collection
            end_date: Optional window end, defaults to the last collection
            report_filter: Optional customer and source filter
            as_of: Reference day used only when there is no data to size the window

        Returns:
            CollectionsReport for the resolved window

        Raises:
            ValidationError: If a date argument is invalid
        """
        entries = self.collection_entries(transactions, report_filter)
        start, end = resolve_window(entries, start_date, end_date, as_of)
        totals = DailyTotals(entries)

        daily = self.build_daily(totals, start, end)
        weekly = self.build_weekly(totals, start, end)
        monthly = self.build_monthly(totals, start, end)

        if report_filter is not None and report_filter.has_text_filter:
            daily = self.drop_inactive(daily)
            weekly = self.drop_inactive(weekly)
            monthly = self.drop_inactive(monthly)

        return CollectionsReport(
            start=start,
            end=end,
            daily=tuple(daily),
            weekly=tuple(weekly),
            monthly=tuple(monthly),
            trend=self.build_trend(entries, start, end),
        )

    def drop_inactive(self, metrics: list[PeriodMetric]) -> list[PeriodMetric]:
        """Keep only periods with a non-zero current value."""
        return [m for m in metrics if m.current != 0]

    def build_daily(self, totals: DailyTotals, start: date, end: date) -> list[PeriodMetric]:
        """One metric per day; previous is the same day a month earlier."""
        metrics: list[PeriodMetric] = []
        day = start
        while day <= end:
            if len(metrics) >= MAX_DAILY_PERIODS:
                logger.warning(
                    "Daily series truncated at %d days (window %s to %s)",
                    MAX_DAILY_PERIODS,
                    start,
                    end,
                )
                break
            previous_day = shift_months(day, -1)
            last_year_day = shift_years(day, -1)
            metrics.append(
                PeriodMetric(
                    label=day.strftime("%d/%m/%Y"),
                    start=day,
                    end=day,
                    current=totals.sum_range(day, day),
                    previous=totals.sum_range(previous_day, previous_day),
                    last_year=totals.sum_range(last_year_day, last_year_day),
                )
            )
            day += ONE_DAY
        return metrics

    def build_weekly(self, totals: DailyTotals, start: date, end: date) -> list[PeriodMetric]:
        """One metric per BHS week overlapping the window.

        Previous is the same span shifted back seven days; last year is the
        same week number in the prior year.
        """
        metrics: list[PeriodMetric] = []
        year, week = bhs_week(start)
        for _ in range(MAX_WEEKLY_PERIODS):
            week_start, week_end = bhs_week_range(year, week)
            if week_start > end:
                break
            if week_end >= start:
                last_year_start, last_year_end = bhs_week_range(year - 1, week)
                metrics.append(
                    PeriodMetric(
                        label=f"Week {week} / {year}",
                        start=week_start,
                        end=week_end,
                        current=totals.sum_range(week_start, week_end),
                        previous=totals.sum_range(
                            week_start - WEEK_SHIFT, week_end - WEEK_SHIFT
                        ),
                        last_year=totals.sum_range(last_year_start, last_year_end),
                    )
                )
            year, week = next_bhs_week(year, week)

        if bhs_week_range(year, week)[0] <= end:
            logger.warning(
                "Weekly series truncated at %d weeks (window %s to %s)",
                MAX_WEEKLY_PERIODS,
                start,
                end,
            )
        return metrics

    def build_monthly(self, totals: DailyTotals, start: date, end: date) -> list[PeriodMetric]:
        """One metric per calendar month overlapping the window."""
        metrics: list[PeriodMetric] = []
        month_start = start.replace(day=1)
        while month_start <= end:
            _, month_end = month_bounds(month_start)
            previous_start = shift_months(month_start, -1)
            last_year_start = shift_years(month_start, -1)
            metrics.append(
                PeriodMetric(
                    label=month_start.strftime("%b %Y"),
                    start=month_start,
                    end=month_end,
                    current=totals.sum_range(month_start, month_end),
                    previous=totals.sum_range(previous_start, month_start - ONE_DAY),
                    last_year=totals.sum_range(
                        last_year_start, month_bounds(last_year_start)[1]
                    ),
                )
            )
            month_start = shift_months(month_start, 1)
        return metrics

    def period_totals(
        self, entries: Sequence[CollectionEntry], start: date, end: date
    ) -> PeriodTotals:
        """Total, count and distinct customers of entries dated in [start, end]."""
        in_range = [e for e in entries if e.date is not None and start <= e.date <= end]
        return PeriodTotals(
            start=start,
            end=end,
            total=sum((e.value for e in in_range), ZERO),
            count=len(in_range),
            customers=len({e.customer_name for e in in_range}),
        )

    def build_trend(
        self, entries: Sequence[CollectionEntry], start: date, end: date
    ) -> TrendMetrics:
        """Compare the window with the equal-length window before it and with last year."""
        previous_end = start - ONE_DAY
        previous_start = previous_end - (end - start)

        current = self.period_totals(entries, start, end)
        previous = self.period_totals(entries, previous_start, previous_end)
        last_year = self.period_totals(entries, shift_years(start, -1), shift_years(end, -1))

        return TrendMetrics(
            current=current,
            previous=previous,
            last_year=last_year,
            total_change=percent_change(current.total, previous.total),
            count_change=percent_change(current.count, previous.count),
            customers_change=percent_change(current.customers, previous.customers),
            average_change=percent_change(current.average, previous.average),
            total_change_last_year=percent_change(current.total, last_year.total),
            count_change_last_year=percent_change(current.count, last_year.count),
            customers_change_last_year=percent_change(
                current.customers, last_year.customers
            ),
            average_change_last_year=percent_change(current.average, last_year.average),
        )
