"""Customer and source filtering applied before aggregation."""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from arrecon.domain.classification import classify
from arrecon.domain.entities import (
    ALL_SALES_REPS,
    UNMATCHED,
    ZERO,
    AllocationFragment,
    AllocationResult,
    CollectionEntry,
    CustomerAgingSummary,
    ReportFilter,
    Transaction,
)


def build_report_filter(
    sales_rep: Optional[str] = None,
    customers: Iterable[str] = (),
    search: Optional[str] = None,
    sources: Iterable[str] = (),
) -> ReportFilter:
    """Build a normalized ReportFilter from raw user input.

    Customer names are trimmed and case-folded, the "All Sales Reps"
    choice and blank values are dropped.
    """
    rep = (sales_rep or "").strip()
    if rep == ALL_SALES_REPS:
        rep = ""
    return ReportFilter(
        sales_rep=rep or None,
        customers=frozenset(c.strip().lower() for c in customers if c and c.strip()),
        search=(search or "").strip() or None,
        sources=frozenset(s.strip() for s in sources if s and s.strip()),
    )


def customer_matches(
    customer_name: str, sales_reps: Iterable[str], report_filter: ReportFilter
) -> bool:
    """Return True if a customer passes the customer facets of a filter.

    An explicit customer selection overrides the sales rep and search
    facets.
    """
    if report_filter.has_customer_selection:
        return customer_name.strip().lower() in report_filter.customers

    if report_filter.sales_rep is not None:
        reps = {rep.strip() for rep in sales_reps if rep}
        if report_filter.sales_rep not in reps:
            return False

    if report_filter.search:
        if report_filter.search.lower() not in customer_name.lower():
            return False

    return True


def transaction_matches(txn: Transaction, report_filter: ReportFilter) -> bool:
    """Return True if a single transaction passes the customer facets."""
    reps = [txn.sales_rep] if txn.sales_rep else []
    return customer_matches(txn.customer_name, reps, report_filter)


def summary_matches(summary: CustomerAgingSummary, report_filter: ReportFilter) -> bool:
    """Return True if an aging summary passes the customer facets."""
    return customer_matches(summary.customer_name, summary.sales_reps, report_filter)


def source_selected(label: str, report_filter: Optional[ReportFilter]) -> bool:
    """True if a source label passes the source facet (or none is active)."""
    if report_filter is None or not report_filter.has_source_filter:
        return True
    return label in report_filter.sources


def source_breakdown(
    fragments: Sequence[AllocationFragment], report_filter: Optional[ReportFilter]
) -> tuple[tuple[str, Decimal], ...]:
    """Sum fragment amounts per source label, keeping selected labels only.

    Labels appear in the order their first fragment does.
    """
    totals: dict[str, Decimal] = {}
    for fragment in fragments:
        label = fragment.source_label
        if not source_selected(label, report_filter):
            continue
        totals[label] = totals.get(label, ZERO) + fragment.amount
    return tuple(totals.items())


def build_collection_entries(
    transactions: Sequence[Transaction],
    allocation: AllocationResult,
    report_filter: Optional[ReportFilter] = None,
) -> list[CollectionEntry]:
    """Turn collection rows into filtered, source-attributed entries.

    Only Payment and R-Payment rows are collections. A row with allocation
    fragments is attributed fragment by fragment; a row without fragments is
    attributed in full to "Unmatched". When a source facet is active, rows
    with no selected attribution are dropped.

    Args:
        transactions: Ledger transactions, in the order used for allocation
        allocation: Allocation result for the same list
        report_filter: Optional customer and source filter

    Returns:
        Entries in input order
    """
    entries: list[CollectionEntry] = []
    for index, txn in enumerate(transactions):
        if not classify(txn).is_collection:
            continue
        if report_filter is not None and not transaction_matches(txn, report_filter):
            continue

        fragments = allocation.fragments_for(index)
        if fragments:
            breakdown = source_breakdown(fragments, report_filter)
        elif source_selected(UNMATCHED, report_filter):
            breakdown = ((UNMATCHED, txn.net_value),)
        else:
            breakdown = ()

        if not breakdown and report_filter is not None and report_filter.has_source_filter:
            continue

        entries.append(
            CollectionEntry(
                payment_index=index,
                date=txn.date,
                customer_name=txn.customer_name.strip(),
                sales_rep=txn.sales_rep.strip() if txn.sales_rep else None,
                value=sum((amount for _, amount in breakdown), ZERO),
                breakdown=breakdown,
            )
        )
    return entries
