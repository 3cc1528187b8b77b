"""Ledger domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from arrecon.database.base import Database
from arrecon.domain.entities import ZERO, Transaction
from arrecon.domain.errors import (
    NotFoundError,
    ValidationError,
    ledger_entry_not_found,
    negative_amount,
)


class LedgerService:
    """Service for reading and writing ledger rows."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_entry(
        self,
        customer_name: str,
        document_number: str,
        date: Optional[date] = None,
        due_date: Optional[date] = None,
        sales_rep: Optional[str] = None,
        debit: Decimal = ZERO,
        credit: Decimal = ZERO,
        matching_key: Optional[str] = None,
    ) -> int:
        """Add a ledger row.

        Args:
            customer_name: Customer the row belongs to
            document_number: Document number; its prefix drives classification
            date: Transaction date, None when unknown
            due_date: Optional due date
            sales_rep: Optional sales rep
            debit: Amount owed by the customer
            credit: Amount paid by the customer
            matching_key: Optional reconciliation tag

        Returns:
            Ledger entry ID

        Raises:
            ValidationError: If the customer name is blank or an amount is negative
        """
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if debit < 0:
            raise ValidationError(negative_amount("debit", debit))
        if credit < 0:
            raise ValidationError(negative_amount("credit", credit))

        return self.db.add_ledger_entry(
            customer_name=customer_name.strip(),
            document_number=(document_number or "").strip(),
            date=date,
            due_date=due_date,
            sales_rep=sales_rep.strip() if sales_rep and sales_rep.strip() else None,
            debit=debit,
            credit=credit,
            matching_key=matching_key.strip() if matching_key and matching_key.strip() else None,
        )

    def get_entry(self, entry_id: int) -> Transaction:
        """Get a ledger row by ID.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_ledger_entry(entry_id)
        if entry is None:
            raise NotFoundError(ledger_entry_not_found(entry_id))
        return entry

    def list_transactions(
        self,
        customer_name: Optional[str] = None,
        sales_rep: Optional[str] = None,
    ) -> list[Transaction]:
        """List ledger rows in the order they were loaded."""
        return self.db.list_ledger_entries(customer_name=customer_name, sales_rep=sales_rep)

    def list_sales_reps(self) -> list[str]:
        return self.db.list_sales_reps()

    def count(self) -> int:
        return self.db.count_ledger_entries()

    def clear(self) -> int:
        """Delete every ledger row. Returns the number deleted."""
        return self.db.clear_ledger()
