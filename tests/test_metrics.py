"""Tests for period metrics domain service."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from arrecon.domain.errors import ValidationError
from arrecon.domain.filters import build_report_filter
from arrecon.domain.metrics import (
    MAX_DAILY_PERIODS,
    MAX_WEEKLY_PERIODS,
    DailyTotals,
    percent_change,
    resolve_window,
)

START = date(2025, 2, 1)
END = date(2025, 3, 31)


def _by_label(metrics):
    return {m.label: m for m in metrics}


@pytest.mark.parametrize(
    "current, previous, expected",
    [
        (150, 100, 50.0),
        (Decimal("50"), Decimal("100"), -50.0),
        (10, 0, 0.0),
        (0, 0, 0.0),
        (Decimal("42.5"), Decimal("42.5"), 0.0),
    ],
)
def test_percent_change(current, previous, expected):
    assert percent_change(current, previous) == expected


def test_daily_series(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, start_date=START, end_date=END)

    assert len(report.daily) == 59
    assert report.daily[0].label == "01/02/2025"

    daily = _by_label(report.daily)
    assert daily["05/02/2025"].current == Decimal("250")
    # Previous is the same day one month earlier
    assert daily["05/03/2025"].previous == Decimal("250")
    assert daily["05/03/2025"].current == Decimal("0")


def test_daily_previous_clamps_to_month_end(metrics_service, make_txn):
    transactions = [make_txn("BNK-1", txn_date=date(2025, 2, 28), credit="10")]

    report = metrics_service.build_report(
        transactions, start_date=date(2025, 3, 31), end_date=date(2025, 3, 31)
    )

    assert report.daily[0].previous == Decimal("10")


def test_weekly_series(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, start_date=START, end_date=END)

    assert [m.label for m in report.weekly][0] == "Week 5 / 2025"
    assert [m.label for m in report.weekly][-1] == "Week 13 / 2025"

    weekly = _by_label(report.weekly)
    assert weekly["Week 6 / 2025"].start == date(2025, 2, 5)
    assert weekly["Week 6 / 2025"].current == Decimal("250")
    assert weekly["Week 10 / 2025"].current == Decimal("30")
    assert weekly["Week 10 / 2025"].previous == Decimal("120")


def test_weekly_last_year_uses_same_week_number(metrics_service, make_txn):
    transactions = [
        make_txn("BNK-1", txn_date=date(2024, 2, 6), credit="70"),
        make_txn("BNK-2", txn_date=date(2025, 2, 6), credit="90"),
    ]

    report = metrics_service.build_report(
        transactions, start_date=date(2025, 2, 5), end_date=date(2025, 2, 11)
    )

    assert len(report.weekly) == 1
    assert report.weekly[0].current == Decimal("90")
    assert report.weekly[0].last_year == Decimal("70")


def test_weekly_buckets_never_span_new_year(metrics_service, make_txn):
    transactions = [
        make_txn("BNK-1", txn_date=date(2024, 12, 28), credit="11"),
        make_txn("BNK-2", txn_date=date(2025, 1, 2), credit="22"),
    ]

    report = metrics_service.build_report(transactions)

    assert [m.label for m in report.weekly] == [
        "Week 52 / 2024",
        "Week 53 / 2024",
        "Week 1 / 2025",
    ]
    assert [m.current for m in report.weekly] == [Decimal("11"), Decimal("0"), Decimal("22")]
    assert report.weekly[1].end == date(2024, 12, 31)


def test_monthly_series(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, start_date=START, end_date=END)

    monthly = _by_label(report.monthly)
    assert list(monthly) == ["Feb 2025", "Mar 2025"]
    assert monthly["Feb 2025"].current == Decimal("250")
    assert monthly["Mar 2025"].current == Decimal("150")
    assert monthly["Mar 2025"].previous == Decimal("250")
    assert monthly["Mar 2025"].last_year == Decimal("0")


def test_window_defaults_to_data_span(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger)

    assert report.start == date(2025, 2, 5)
    assert report.end == date(2025, 3, 10)


def test_trend(metrics_service, sample_ledger):
    trend = metrics_service.build_report(sample_ledger, start_date=START, end_date=END).trend

    assert trend.current.total == Decimal("400")
    assert trend.current.count == 3
    assert trend.current.customers == 2
    assert trend.previous.end == date(2025, 1, 31)
    assert trend.previous.start == date(2024, 12, 4)
    assert trend.last_year.start == date(2024, 2, 1)
    assert trend.total_change == 0.0
    assert not trend.has_last_year_data


def test_trend_symmetry(metrics_service, make_txn):
    transactions = [
        make_txn("BNK-1", "Acme", date(2025, 1, 15), credit="100"),
        make_txn("BNK-2", "Acme", date(2025, 2, 15), credit="100"),
    ]

    trend = metrics_service.build_report(
        transactions, start_date=date(2025, 2, 1), end_date=date(2025, 2, 28)
    ).trend

    assert trend.previous.total == trend.current.total
    assert trend.total_change == 0.0
    assert trend.count_change == 0.0
    assert trend.customers_change == 0.0
    assert trend.average_change == 0.0


def test_trend_change_against_last_year(metrics_service, make_txn):
    transactions = [
        make_txn("BNK-1", "Acme", date(2024, 2, 10), credit="100"),
        make_txn("BNK-2", "Acme", date(2025, 2, 10), credit="150"),
    ]

    trend = metrics_service.build_report(
        transactions, start_date=date(2025, 2, 1), end_date=date(2025, 2, 28)
    ).trend

    assert trend.has_last_year_data
    assert trend.total_change_last_year == 50.0


def test_reversed_payment_reduces_collections(metrics_service, make_txn):
    transactions = [
        make_txn("BNK-1", txn_date=date(2025, 2, 3), credit="100"),
        make_txn("BNK-2", txn_date=date(2025, 2, 4), debit="40"),
    ]

    report = metrics_service.build_report(transactions)

    assert report.monthly[0].current == Decimal("60")


def test_text_filter_drops_inactive_periods(metrics_service, sample_ledger):
    report = metrics_service.build_report(
        sample_ledger,
        start_date=START,
        end_date=END,
        report_filter=build_report_filter(search="acme"),
    )

    assert [m.label for m in report.daily] == ["05/02/2025"]
    assert [m.label for m in report.monthly] == ["Feb 2025"]


def test_rep_filter_keeps_inactive_periods(metrics_service, sample_ledger):
    report = metrics_service.build_report(
        sample_ledger,
        start_date=START,
        end_date=END,
        report_filter=build_report_filter(sales_rep="Alice"),
    )

    assert len(report.daily) == 59
    assert _by_label(report.monthly)["Mar 2025"].current == Decimal("0")


def test_source_filter_uses_fragments(metrics_service, sample_ledger):
    ob_only = metrics_service.build_report(
        sample_ledger, start_date=START, end_date=END, report_filter=build_report_filter(sources=["OB"])
    )
    assert _by_label(ob_only.monthly)["Feb 2025"].current == Decimal("100")
    assert ob_only.trend.current.count == 1

    january = metrics_service.build_report(
        sample_ledger,
        start_date=START,
        end_date=END,
        report_filter=build_report_filter(sources=["Jan25"]),
    )
    assert _by_label(january.monthly)["Feb 2025"].current == Decimal("150")
    assert _by_label(january.monthly)["Mar 2025"].current == Decimal("120")

    unmatched = metrics_service.build_report(
        sample_ledger,
        start_date=START,
        end_date=END,
        report_filter=build_report_filter(sources=["Unmatched"]),
    )
    assert unmatched.trend.current.total == Decimal("30")


def test_empty_ledger_window_is_twelve_months(metrics_service):
    report = metrics_service.build_report([], as_of=date(2025, 3, 15))

    assert report.start == date(2024, 4, 1)
    assert report.end == date(2025, 3, 31)
    assert len(report.monthly) == 12
    assert all(m.current == 0 for m in report.monthly)


def test_inverted_window_is_rejected(metrics_service, sample_ledger):
    with pytest.raises(ValidationError, match="is after end date"):
        metrics_service.build_report(sample_ledger, start_date=END, end_date=START)


def test_non_date_bound_is_rejected():
    with pytest.raises(ValidationError, match="start_date must be a date"):
        resolve_window([], start_date="2025-01-01", end_date=date(2025, 2, 1))


def test_series_are_capped(metrics_service, caplog):
    with caplog.at_level(logging.WARNING, logger="arrecon.domain.metrics"):
        report = metrics_service.build_report(
            [], start_date=date(2000, 1, 1), end_date=date(2016, 6, 30)
        )

    assert len(report.daily) == MAX_DAILY_PERIODS
    assert len(report.weekly) == MAX_WEEKLY_PERIODS
    assert "Daily series truncated" in caplog.text
    assert "Weekly series truncated" in caplog.text


def test_daily_totals_sum_range():
    from arrecon.domain.entities import CollectionEntry

    entries = [
        CollectionEntry(0, date(2025, 1, 1), "Acme", None, Decimal("10")),
        CollectionEntry(1, date(2025, 1, 3), "Acme", None, Decimal("5")),
        CollectionEntry(2, None, "Acme", None, Decimal("99")),
    ]
    totals = DailyTotals(entries)

    assert totals.sum_range(date(2025, 1, 1), date(2025, 1, 2)) == Decimal("10")
    assert totals.sum_range(date(2024, 1, 1), date(2026, 1, 1)) == Decimal("15")
    assert totals.sum_range(date(2025, 1, 5), date(2025, 1, 1)) == Decimal("0")


def test_start_after_data_collapses_window(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, start_date=date(2025, 6, 1))

    assert report.start == date(2025, 6, 1)
    assert report.end == date(2025, 6, 1)
    assert [m.label for m in report.monthly] == ["Jun 2025"]
    assert report.monthly[0].current == Decimal("0")
    assert report.trend.current.total == Decimal("0")


def test_end_before_data_collapses_window(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, end_date=date(2024, 6, 1))

    assert report.start == date(2024, 6, 1)
    assert report.end == date(2024, 6, 1)
    assert report.trend.current.count == 0


def test_single_bound_inside_data_keeps_data_edge(metrics_service, sample_ledger):
    report = metrics_service.build_report(sample_ledger, start_date=date(2025, 3, 1))

    assert report.start == date(2025, 3, 1)
    assert report.end == date(2025, 3, 10)


def test_single_bound_past_empty_default_window():
    start, end = resolve_window([], start_date=date(2030, 1, 1), as_of=date(2025, 3, 15))

    assert start == end == date(2030, 1, 1)


def test_invalid_as_of_is_rejected_with_data(metrics_service, sample_ledger):
    with pytest.raises(ValidationError, match="as_of must be a date"):
        metrics_service.build_report(sample_ledger, as_of="garbage")


def test_weekly_series_at_exact_cap_is_not_truncated(metrics_service, caplog):
    with caplog.at_level(logging.WARNING, logger="arrecon.domain.metrics"):
        report = metrics_service.build_report(
            [], start_date=date(2020, 1, 1), end_date=date(2023, 10, 14)
        )

    assert len(report.weekly) == MAX_WEEKLY_PERIODS
    assert report.weekly[-1].end == date(2023, 10, 14)
    assert "truncated" not in caplog.text
