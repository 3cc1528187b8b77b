"""Collection rollups per customer, per sales rep and per invoice age."""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from arrecon.domain.dates import month_difference
from arrecon.domain.entities import (
    OPENING_BALANCE_LABEL,
    UNKNOWN_SALES_REP,
    UNMATCHED,
    ZERO,
    CollectionEntry,
    CollectionQuality,
    CustomerCollection,
    ReportFilter,
    SalesRepCollection,
    Transaction,
)
from arrecon.domain.metrics import PeriodMetricsService, resolve_window
from arrecon.domain.tolerances import MATERIAL_AMOUNT

OPENING_BALANCE_BUCKET = "Opening Balance (OB)"
OLDEST_MONTH_BUCKET = 6


def invoice_month(label: str) -> Optional[date]:
    """Return the first day of the invoice month encoded in a source label."""
    if label in (OPENING_BALANCE_LABEL, UNMATCHED):
        return None
    try:
        return datetime.strptime(label, "%b%y").date()
    except ValueError:
        return None


def source_sort_key(label: str) -> tuple[int, date]:
    """Order source labels: OB first, invoice months oldest first, Unmatched last."""
    if label == OPENING_BALANCE_LABEL:
        return (0, date.min)
    month = invoice_month(label)
    if month is None:
        return (2, date.min)
    return (1, month)


def age_bucket_label(months: int) -> str:
    """Label for a payment collected a number of months after its invoice."""
    if months <= 0:
        return "Current Month Inv"
    if months == 1:
        return "1 Month Old Inv"
    if months < OLDEST_MONTH_BUCKET:
        return f"{months} Months Old Inv"
    return f"{OLDEST_MONTH_BUCKET}+ Months Old Inv"


QUALITY_BUCKETS: tuple[str, ...] = tuple(
    age_bucket_label(m) for m in range(OLDEST_MONTH_BUCKET + 1)
) + (OPENING_BALANCE_BUCKET, UNMATCHED)


class CollectionRollupService:
    """Service for per-customer, per-rep and per-age collection rollups."""

    def __init__(self, metrics_service: Optional[PeriodMetricsService] = None):
        """Initialize rollup service.

        Args:
            metrics_service: Service used to build filtered collection entries
        """
        self.metrics_service = metrics_service or PeriodMetricsService()

    def entries_in_window(
        self,
        transactions: Sequence[Transaction],
        start_date: Optional[date],
        end_date: Optional[date],
        report_filter: Optional[ReportFilter],
    ) -> tuple[list[CollectionEntry], date, date]:
        entries = self.metrics_service.collection_entries(transactions, report_filter)
        start, end = resolve_window(entries, start_date, end_date)
        in_window = [e for e in entries if e.date is not None and start <= e.date <= end]
        return in_window, start, end

    def customer_collections(
        self,
        transactions: Sequence[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        report_filter: Optional[ReportFilter] = None,
    ) -> list[CustomerCollection]:
        """Summarize each customer's collections within the window.

        The gap is measured in days. With an explicit start date it runs
        from the last collection before the window to the first one inside
        it; otherwise from the collection preceding the latest one in the
        window to that latest one.

        Returns:
            Customers with a material total, largest first
        """
        in_window, start, _ = self.entries_in_window(
            transactions, start_date, end_date, report_filter
        )

        # Payment history ignores the source facet
        history_filter = replace(report_filter, sources=frozenset()) if report_filter else None
        history: dict[str, list[date]] = {}
        for entry in self.metrics_service.collection_entries(transactions, history_filter):
            if entry.date is not None:
                history.setdefault(entry.customer_name, []).append(entry.date)

        per_customer: dict[str, list[CollectionEntry]] = {}
        for entry in in_window:
            if entry.value > MATERIAL_AMOUNT:
                per_customer.setdefault(entry.customer_name, []).append(entry)

        results: list[CustomerCollection] = []
        for customer_name, entries in per_customer.items():
            total = sum((e.value for e in entries), ZERO)
            if total <= MATERIAL_AMOUNT:
                continue

            breakdown: dict[str, Decimal] = {}
            for entry in entries:
                for label, amount in entry.breakdown:
                    breakdown[label] = breakdown.get(label, ZERO) + amount

            dates = sorted(e.date for e in entries)
            results.append(
                CustomerCollection(
                    customer_name=customer_name,
                    total=total,
                    count=len(entries),
                    payment_dates=tuple(sorted(set(dates))),
                    gap_days=self.payment_gap(
                        dates,
                        history.get(customer_name, []),
                        start if start_date is not None else None,
                    ),
                    breakdown=tuple(
                        (label, breakdown[label])
                        for label in sorted(breakdown, key=source_sort_key)
                    ),
                )
            )

        return sorted(results, key=lambda c: (-c.total, c.customer_name))

    def payment_gap(
        self,
        window_dates: Sequence[date],
        history: Sequence[date],
        start_date: Optional[date],
    ) -> Optional[int]:
        """Days between an anchor collection and the one before it, or None."""
        if not window_dates:
            return None
        if start_date is not None:
            anchor = window_dates[0]
            cutoff = start_date
        else:
            anchor = window_dates[-1]
            cutoff = anchor
        earlier = [d for d in history if d < cutoff]
        if not earlier:
            return None
        return (anchor - max(earlier)).days

    def sales_rep_collections(
        self,
        transactions: Sequence[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        report_filter: Optional[ReportFilter] = None,
    ) -> list[SalesRepCollection]:
        """Summarize collections per sales rep within the window.

        Rows without a rep are reported under "Unknown". Reps whose total is
        not a material positive amount are omitted.
        """
        in_window, _, _ = self.entries_in_window(
            transactions, start_date, end_date, report_filter
        )

        totals: dict[str, Decimal] = {}
        counts: dict[str, int] = {}
        customers: dict[str, set[str]] = {}
        for entry in in_window:
            rep = entry.sales_rep or UNKNOWN_SALES_REP
            totals[rep] = totals.get(rep, ZERO) + entry.value
            counts[rep] = counts.get(rep, 0) + 1
            customers.setdefault(rep, set()).add(entry.customer_name)

        included = {rep: total for rep, total in totals.items() if total > MATERIAL_AMOUNT}
        grand_total = sum(included.values(), ZERO)

        results = [
            SalesRepCollection(
                sales_rep=rep,
                total=total,
                count=counts[rep],
                customer_count=len(customers[rep]),
                share_percent=float(total / grand_total * 100) if grand_total > 0 else 0.0,
            )
            for rep, total in included.items()
        ]
        return sorted(results, key=lambda r: (-r.total, r.sales_rep))

    def collection_quality(
        self,
        transactions: Sequence[Transaction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        report_filter: Optional[ReportFilter] = None,
    ) -> CollectionQuality:
        """Bucket collections by how many months old the settled invoices were.

        Opening balances and unmatched amounts get their own buckets. Invoice
        month totals are listed newest first.
        """
        in_window, _, _ = self.entries_in_window(
            transactions, start_date, end_date, report_filter
        )

        buckets: dict[str, Decimal] = {label: ZERO for label in QUALITY_BUCKETS}
        months: dict[date, Decimal] = {}
        total = ZERO
        for entry in in_window:
            for label, amount in entry.breakdown:
                if label == OPENING_BALANCE_LABEL:
                    buckets[OPENING_BALANCE_BUCKET] += amount
                else:
                    month = invoice_month(label)
                    if month is None:
                        buckets[UNMATCHED] += amount
                    else:
                        age = month_difference(entry.date, month)
                        buckets[age_bucket_label(age)] += amount
                        months[month] = months.get(month, ZERO) + amount
                total += amount

        return CollectionQuality(
            buckets=tuple(buckets.items()),
            invoice_months=tuple(
                (month.strftime("%b %Y"), months[month])
                for month in sorted(months, reverse=True)
            ),
            total=total,
        )
