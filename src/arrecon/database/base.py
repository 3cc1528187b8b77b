"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from arrecon.domain.entities import Transaction


class Database(ABC):
    """Abstract ledger store interface for arrecon."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger operations
    @abstractmethod
    def add_ledger_entry(
        self,
        customer_name: str,
        document_number: str,
        date: Optional[date] = None,
        due_date: Optional[date] = None,
        sales_rep: Optional[str] = None,
        debit: Decimal = Decimal("0"),
        credit: Decimal = Decimal("0"),
        matching_key: Optional[str] = None,
    ) -> int:
        """Add a ledger row. Returns entry ID."""
        pass

    @abstractmethod
    def get_ledger_entry(self, entry_id: int) -> Optional[Transaction]:
        """Get ledger row by ID."""
        pass

    @abstractmethod
    def list_ledger_entries(
        self,
        customer_name: Optional[str] = None,
        sales_rep: Optional[str] = None,
    ) -> list[Transaction]:
        """List ledger rows in insertion order, optionally filtered."""
        pass

    @abstractmethod
    def count_ledger_entries(self) -> int:
        """Count ledger rows."""
        pass

    @abstractmethod
    def clear_ledger(self) -> int:
        """Delete all ledger rows. Returns number deleted."""
        pass

    @abstractmethod
    def list_sales_reps(self) -> list[str]:
        """List distinct non-empty sales reps."""
        pass
