"""SQLAlchemy models for the arrecon ledger store."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class LedgerEntry(Base):
    """One row of the customer ledger sheet."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    document_number = Column(String, nullable=False, default="")
    customer_name = Column(String, nullable=False)
    sales_rep = Column(String, nullable=True)
    debit = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    credit = Column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    matching_key = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("ix_ledger_customer_name", "customer_name"),
        Index("ix_ledger_matching_key", "matching_key"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
