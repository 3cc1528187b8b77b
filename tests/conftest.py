"""Shared pytest fixtures for arrecon tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from arrecon.database.factories import create_sqlite_database
from arrecon.domain.aging import AgingService
from arrecon.domain.allocation import AllocationService
from arrecon.domain.entities import Transaction
from arrecon.domain.ledger import LedgerService
from arrecon.domain.ledger_import import LedgerImportService
from arrecon.domain.metrics import PeriodMetricsService
from arrecon.domain.rollups import CollectionRollupService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a LedgerImportService with a temporary database."""
    return LedgerImportService(temp_db)


@pytest.fixture
def allocation_service():
    return AllocationService()


@pytest.fixture
def aging_service():
    return AgingService()


@pytest.fixture
def metrics_service():
    return PeriodMetricsService()


@pytest.fixture
def rollup_service():
    return CollectionRollupService()


@pytest.fixture
def make_txn():
    """Return a factory for ledger transactions with string-friendly amounts."""

    def _make(
        number,
        customer="Acme",
        txn_date=None,
        debit="0",
        credit="0",
        due_date=None,
        sales_rep=None,
        matching_key=None,
    ):
        return Transaction(
            date=txn_date,
            document_number=number,
            customer_name=customer,
            debit=Decimal(debit),
            credit=Decimal(credit),
            due_date=due_date,
            sales_rep=sales_rep,
            matching_key=matching_key,
        )

    return _make


@pytest.fixture
def sample_ledger(make_txn):
    """A small two-customer ledger with one matched group each."""
    return [
        make_txn("OB-1", "Acme", date(2024, 12, 1), debit="100", sales_rep="Alice", matching_key="M1"),
        make_txn("SAL-1", "Acme", date(2025, 1, 10), debit="200", sales_rep="Alice", matching_key="M1"),
        make_txn("PAY-1", "Acme", date(2025, 2, 5), credit="250", sales_rep="Alice", matching_key="M1"),
        make_txn("SAL-2", "Acme", date(2025, 2, 20), debit="80", sales_rep="Alice"),
        make_txn("SAL-3", "Beta", date(2025, 1, 15), debit="120", sales_rep="Bob", matching_key="M2"),
        make_txn("PAY-2", "Beta", date(2025, 3, 1), credit="120", sales_rep="Bob", matching_key="M2"),
        make_txn("PAY-3", "Beta", date(2025, 3, 10), credit="30", sales_rep="Bob"),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
