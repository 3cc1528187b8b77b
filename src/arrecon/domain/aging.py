"""Aging domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from arrecon.domain.classification import classify
from arrecon.domain.dates import days_overdue, resolve_as_of
from arrecon.domain.entities import (
    ZERO,
    AgingBucket,
    AgingMode,
    CustomerAgingSummary,
    OpenItem,
    ReportFilter,
    Transaction,
)
from arrecon.domain.errors import ValidationError, unknown_aging_mode
from arrecon.domain.filters import customer_matches, summary_matches
from arrecon.domain.matching import find_holder, group_by_matching_key
from arrecon.domain.tolerances import EPSILON, MATERIAL_AMOUNT, is_material

logger = logging.getLogger(__name__)


class AgingService:
    """Service for bucketing outstanding customer balances by days overdue.

    Two modes are supported. SIMPLE ignores matching groups and consumes a
    customer's net debt from its newest invoices backwards. GROUP_AWARE ages
    each unmatched row at its own net and each open matching group at its
    holder row.
    """

    def build_aging(
        self,
        transactions: Sequence[Transaction],
        as_of: Optional[date] = None,
        mode: AgingMode | str = AgingMode.SIMPLE,
        report_filter: Optional[ReportFilter] = None,
    ) -> list[CustomerAgingSummary]:
        """Build one aging summary per customer with ledger activity.

        Args:
            transactions: Ledger transactions
            as_of: Reference day for days overdue, defaults to today
            mode: AgingMode or its value ("simple", "group")
            report_filter: Optional filter applied to the finished summaries

        Returns:
            Summaries sorted by grand total, largest first

        Raises:
            ValidationError: If as_of is not a date or mode is unknown
        """
        as_of_day = resolve_as_of(as_of)
        aging_mode = self.resolve_mode(mode)

        summaries: list[CustomerAgingSummary] = []
        for customer_name, rows in self.group_by_customer(transactions).items():
            total_debit = sum((t.debit for t in rows), ZERO)
            total_credit = sum((t.credit for t in rows), ZERO)
            if total_debit <= EPSILON and total_credit <= EPSILON:
                continue

            grand_total = total_debit - total_credit
            if aging_mode is AgingMode.SIMPLE:
                buckets = self.age_simple(rows, grand_total, as_of_day)
            else:
                buckets = self.age_group_aware(rows, as_of_day)

            summaries.append(
                CustomerAgingSummary.from_buckets(
                    customer_name=customer_name,
                    sales_reps=self.collect_sales_reps(rows),
                    buckets=buckets,
                    grand_total=grand_total,
                )
            )

        if report_filter is not None:
            summaries = [s for s in summaries if summary_matches(s, report_filter)]

        return sorted(summaries, key=lambda s: (-s.grand_total, s.customer_name))

    def resolve_mode(self, mode: AgingMode | str) -> AgingMode:
        """Return an AgingMode from an enum member or its value."""
        if isinstance(mode, AgingMode):
            return mode
        try:
            return AgingMode(str(mode).strip().lower())
        except ValueError:
            raise ValidationError(unknown_aging_mode(mode))

    def group_by_customer(
        self, transactions: Sequence[Transaction]
    ) -> dict[str, list[Transaction]]:
        """Group transactions by trimmed customer name, preserving input order."""
        customers: dict[str, list[Transaction]] = {}
        for txn in transactions:
            customers.setdefault(txn.customer_name.strip(), []).append(txn)
        return customers

    def collect_sales_reps(self, rows: Sequence[Transaction]) -> frozenset[str]:
        return frozenset(
            t.sales_rep.strip() for t in rows if t.sales_rep and t.sales_rep.strip()
        )

    def age_simple(
        self, rows: Sequence[Transaction], grand_total: Decimal, as_of: date
    ) -> dict[AgingBucket, Decimal]:
        """Age a customer's net debt against its newest invoices first.

        Each invoice absorbs at most its own debit. Nothing is aged for a
        zero or credit balance.
        """
        buckets: dict[AgingBucket, Decimal] = {}
        if grand_total <= MATERIAL_AMOUNT:
            return buckets

        debits = [t for t in rows if t.debit > ZERO]
        dated = [t for t in debits if t.aging_date is not None]
        if len(dated) < len(debits):
            logger.debug(
                "Excluded %d undated invoice(s) of '%s' from aging",
                len(debits) - len(dated),
                rows[0].customer_name,
            )
        dated.sort(key=lambda t: t.aging_date, reverse=True)

        remaining = grand_total
        for txn in dated:
            if remaining <= EPSILON:
                break
            amount = min(txn.debit, remaining)
            bucket = AgingBucket.for_days(days_overdue(as_of, txn.aging_date))
            buckets[bucket] = buckets.get(bucket, ZERO) + amount
            remaining -= amount

        return buckets

    def age_group_aware(
        self, rows: Sequence[Transaction], as_of: date
    ) -> dict[AgingBucket, Decimal]:
        """Age unmatched rows and open matching-group residuals."""
        buckets: dict[AgingBucket, Decimal] = {}
        for item in self.find_open_items(rows, as_of):
            if item.days_overdue is None:
                logger.debug(
                    "Excluded undated open item '%s' of '%s' from aging",
                    item.document_number,
                    item.customer_name,
                )
                continue
            bucket = AgingBucket.for_days(item.days_overdue)
            buckets[bucket] = buckets.get(bucket, ZERO) + item.remaining
        return buckets

    def find_open_items(
        self, rows: Sequence[Transaction], as_of: date
    ) -> list[OpenItem]:
        """Return the open items of one customer's rows.

        An unmatched row is open when its own net is material. A matching
        group is open when its summed net is material; the residual is
        carried by the group's largest-debit row.
        """
        groups = group_by_matching_key(rows)
        grouped = {i for indices in groups.values() for i in indices}

        items: list[OpenItem] = []
        for index, txn in enumerate(rows):
            if index in grouped:
                continue
            if is_material(txn.net_debt):
                items.append(self.build_open_item(txn, txn.net_debt, as_of))

        for indices in groups.values():
            residual = sum((rows[i].net_debt for i in indices), ZERO)
            if not is_material(residual):
                continue
            holder = find_holder(rows, indices)
            items.append(self.build_open_item(rows[holder], residual, as_of))

        return items

    def build_open_item(
        self, txn: Transaction, remaining: Decimal, as_of: date
    ) -> OpenItem:
        aging_date = txn.aging_date
        return OpenItem(
            customer_name=txn.customer_name.strip(),
            document_number=txn.document_number,
            transaction_type=classify(txn),
            date=txn.date,
            due_date=txn.due_date,
            matching_key=txn.matching_key,
            debit=txn.debit,
            credit=txn.debit - remaining,
            remaining=remaining,
            days_overdue=days_overdue(as_of, aging_date) if aging_date else None,
        )

    def list_open_items(
        self,
        transactions: Sequence[Transaction],
        as_of: Optional[Any] = None,
        report_filter: Optional[ReportFilter] = None,
    ) -> list[OpenItem]:
        """List open items across all customers, newest first.

        Args:
            transactions: Ledger transactions
            as_of: Reference day for days overdue, defaults to today
            report_filter: Optional customer filter

        Returns:
            Open items sorted by date descending; undated items last
        """
        as_of_day = resolve_as_of(as_of)
        items: list[OpenItem] = []
        for customer_name, rows in self.group_by_customer(transactions).items():
            if report_filter is not None and not customer_matches(
                customer_name, self.collect_sales_reps(rows), report_filter
            ):
                continue
            items.extend(self.find_open_items(rows, as_of_day))

        return sorted(
            items,
            key=lambda i: (i.date is not None, i.date or date.min),
            reverse=True,
        )
