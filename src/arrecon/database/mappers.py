"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the ledger table can change
without touching the engine's Transaction entity.
"""

from decimal import Decimal

from arrecon.domain import entities as domain
from arrecon.database.models import LedgerEntry as ORMLedgerEntry


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.Transaction:
    """Convert SQLAlchemy LedgerEntry model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_entry.id,
        date=orm_entry.date,
        due_date=orm_entry.due_date,
        document_number=orm_entry.document_number or "",
        customer_name=orm_entry.customer_name,
        sales_rep=orm_entry.sales_rep,
        debit=Decimal(orm_entry.debit or 0),
        credit=Decimal(orm_entry.credit or 0),
        matching_key=orm_entry.matching_key,
    )
