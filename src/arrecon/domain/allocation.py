"""Payment allocation domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from arrecon.domain.classification import classify
from arrecon.domain.entities import (
    UNMATCHED,
    ZERO,
    AllocationFragment,
    AllocationResult,
    Transaction,
)
from arrecon.domain.matching import find_holder, group_by_matching_key
from arrecon.domain.tolerances import EPSILON, MATERIAL_AMOUNT

logger = logging.getLogger(__name__)


def date_sort_key(txn: Transaction) -> tuple[bool, date]:
    """Sort key placing undated rows after dated ones."""
    return (txn.date is None, txn.date or date.min)


class AllocationService:
    """Service for distributing payments across the invoices they settle.

    Within each matching group the largest-debit invoice is the holder: it
    is processed last and absorbs whatever a payment has left after the
    other invoices are filled to their debit.
    """

    def allocate(self, transactions: Sequence[Transaction]) -> AllocationResult:
        """Allocate every payment in every matching group.

        Args:
            transactions: Ledger transactions; positions identify payments

        Returns:
            AllocationResult keyed by payment position
        """
        fragments: dict[int, tuple[AllocationFragment, ...]] = {}
        for key, indices in group_by_matching_key(transactions).items():
            group_fragments = self.allocate_group(transactions, indices)
            if not group_fragments:
                logger.debug("Matching group '%s' has no invoice or no payment", key)
            fragments.update(group_fragments)
        return AllocationResult(fragments=fragments)

    def allocate_group(
        self, transactions: Sequence[Transaction], indices: Sequence[int]
    ) -> dict[int, tuple[AllocationFragment, ...]]:
        """Allocate the payments of one matching group.

        Returns an empty mapping when the group lacks an invoice or a payment.
        """
        invoices = [i for i in indices if transactions[i].debit > MATERIAL_AMOUNT]
        payments = [i for i in indices if transactions[i].credit > MATERIAL_AMOUNT]
        if not invoices or not payments:
            return {}

        holder = find_holder(transactions, invoices)
        invoice_order = self.order_invoices(transactions, invoices, holder)

        allocated: dict[int, Decimal] = {}
        result: dict[int, tuple[AllocationFragment, ...]] = {}
        for payment_index in sorted(payments, key=lambda i: date_sort_key(transactions[i])):
            result[payment_index] = self.allocate_payment(
                transactions,
                payment_index=payment_index,
                invoice_order=invoice_order,
                holder=holder,
                allocated=allocated,
            )
        return result

    def order_invoices(
        self,
        transactions: Sequence[Transaction],
        invoices: Sequence[int],
        holder: Optional[int],
    ) -> list[int]:
        """Return invoice positions in processing order.

        Non-holder invoices are sorted oldest first; the holder always
        comes last regardless of its own date.
        """
        others = sorted(
            (i for i in invoices if i != holder),
            key=lambda i: date_sort_key(transactions[i]),
        )
        holder_tail = [holder] if holder is not None else []
        return others + holder_tail

    def allocate_payment(
        self,
        transactions: Sequence[Transaction],
        payment_index: int,
        invoice_order: Sequence[int],
        holder: Optional[int],
        allocated: dict[int, Decimal],
    ) -> tuple[AllocationFragment, ...]:
        """Walk the invoice order and split one payment into fragments.

        Args:
            transactions: Ledger transactions
            payment_index: Position of the payment being allocated
            invoice_order: Invoice positions, holder last
            holder: Position of the holder invoice
            allocated: Running amount already allocated per invoice; updated
                in place so later payments see earlier allocations

        Returns:
            Fragments whose amounts sum to the payment's net value
        """
        payment = transactions[payment_index]
        remaining = payment.credit - payment.debit
        fragments: list[AllocationFragment] = []

        for invoice_index in invoice_order:
            if remaining <= EPSILON:
                break

            invoice = transactions[invoice_index]
            if invoice_index == holder:
                amount = remaining
            else:
                capacity = invoice.debit - allocated.get(invoice_index, ZERO)
                if capacity <= EPSILON:
                    continue
                amount = min(remaining, capacity)

            if amount <= EPSILON:
                continue

            fragments.append(
                AllocationFragment(
                    payment_index=payment_index,
                    source_date=invoice.date,
                    amount=amount,
                    source_type=classify(invoice).value,
                )
            )
            allocated[invoice_index] = allocated.get(invoice_index, ZERO) + amount
            remaining -= amount

        if remaining > EPSILON:
            fragments.append(
                AllocationFragment(
                    payment_index=payment_index,
                    source_date=payment.date,
                    amount=remaining,
                    source_type=UNMATCHED,
                )
            )

        return tuple(fragments)
