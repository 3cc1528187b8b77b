"""Tests for the ledger store and ledger service."""

import pytest
from datetime import date
from decimal import Decimal

from arrecon.database.factories import create_sqlite_database
from arrecon.domain import entities
from arrecon.domain.errors import NotFoundError, ValidationError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_add_and_get_ledger_entry(self, temp_db):
        entry_id = temp_db.add_ledger_entry(
            customer_name="Acme",
            document_number="SAL-1",
            date=date(2025, 1, 10),
            due_date=date(2025, 2, 9),
            sales_rep="Alice",
            debit=Decimal("200.50"),
            matching_key="M1",
        )

        entry = temp_db.get_ledger_entry(entry_id)

        assert isinstance(entry, entities.Transaction)
        assert entry.id == entry_id
        assert entry.date == date(2025, 1, 10)
        assert entry.due_date == date(2025, 2, 9)
        assert entry.debit == Decimal("200.50")
        assert entry.credit == Decimal("0")
        assert entry.matching_key == "M1"

    def test_undated_entry_round_trips(self, temp_db):
        entry_id = temp_db.add_ledger_entry(
            customer_name="Acme", document_number="BNK-1", credit=Decimal("5")
        )

        entry = temp_db.get_ledger_entry(entry_id)

        assert entry.date is None
        assert entry.due_date is None

    def test_get_missing_entry_returns_none(self, temp_db):
        assert temp_db.get_ledger_entry(999) is None

    def test_list_preserves_insertion_order(self, temp_db):
        for number in ["SAL-3", "SAL-1", "SAL-2"]:
            temp_db.add_ledger_entry(customer_name="Acme", document_number=number)

        entries = temp_db.list_ledger_entries()

        assert [e.document_number for e in entries] == ["SAL-3", "SAL-1", "SAL-2"]

    def test_list_filters(self, temp_db):
        temp_db.add_ledger_entry(customer_name="Acme", document_number="SAL-1", sales_rep="Alice")
        temp_db.add_ledger_entry(customer_name="Beta", document_number="SAL-2", sales_rep="Bob")
        temp_db.add_ledger_entry(customer_name="Acme", document_number="SAL-3", sales_rep="Bob")

        assert len(temp_db.list_ledger_entries(customer_name="Acme")) == 2
        assert len(temp_db.list_ledger_entries(sales_rep="Bob")) == 2
        assert len(temp_db.list_ledger_entries(customer_name="Acme", sales_rep="Bob")) == 1

    def test_count_clear_and_reps(self, temp_db):
        temp_db.add_ledger_entry(customer_name="Acme", document_number="SAL-1", sales_rep="Bob")
        temp_db.add_ledger_entry(customer_name="Beta", document_number="SAL-2", sales_rep="Alice")
        temp_db.add_ledger_entry(customer_name="Gamma", document_number="SAL-3")

        assert temp_db.count_ledger_entries() == 3
        assert temp_db.list_sales_reps() == ["Alice", "Bob"]
        assert temp_db.clear_ledger() == 3
        assert temp_db.count_ledger_entries() == 0


def test_factory_uses_environment_variable(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("ARRECON_DB_PATH", str(db_path))

    db = create_sqlite_database()
    db.add_ledger_entry(customer_name="Acme", document_number="SAL-1")
    db.disconnect()

    assert db.database_url == f"sqlite:///{db_path}"
    assert db_path.exists()


class TestLedgerService:
    def test_add_entry_normalizes_blanks(self, ledger_service):
        entry_id = ledger_service.add_entry(
            customer_name="  Acme ",
            document_number=" SAL-1 ",
            sales_rep="  ",
            matching_key="",
            debit=Decimal("10"),
        )

        entry = ledger_service.get_entry(entry_id)

        assert entry.customer_name == "Acme"
        assert entry.document_number == "SAL-1"
        assert entry.sales_rep is None
        assert entry.matching_key is None

    def test_add_entry_rejects_negative_amounts(self, ledger_service):
        with pytest.raises(ValidationError, match="debit must not be negative"):
            ledger_service.add_entry(
                customer_name="Acme", document_number="SAL-1", debit=Decimal("-1")
            )

    def test_add_entry_requires_customer(self, ledger_service):
        with pytest.raises(ValidationError, match="Customer name is required"):
            ledger_service.add_entry(customer_name=" ", document_number="SAL-1")

    def test_get_missing_entry_raises(self, ledger_service):
        with pytest.raises(NotFoundError, match="Ledger entry 42 not found"):
            ledger_service.get_entry(42)

    def test_list_transactions_feeds_engine(self, ledger_service, aging_service):
        ledger_service.add_entry(
            customer_name="Acme",
            document_number="SAL-1",
            date=date(2025, 3, 1),
            debit=Decimal("100"),
        )
        ledger_service.add_entry(
            customer_name="Acme",
            document_number="BNK-1",
            date=date(2025, 3, 5),
            credit=Decimal("40"),
        )

        summaries = aging_service.build_aging(
            ledger_service.list_transactions(), as_of=date(2025, 3, 31)
        )

        assert summaries[0].grand_total == Decimal("60")
        assert summaries[0].d1_30 == Decimal("60")
