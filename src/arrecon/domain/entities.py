"""Domain model entities for arrecon.

These are pure data classes representing ledger facts and the transient
structures derived from them (allocation fragments, aging summaries,
period metrics). Nothing here is persisted by the engine; every derived
entity is rebuilt per query from a transaction list and an as-of date.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

UNMATCHED = "Unmatched"
OPENING_BALANCE_LABEL = "OB"
ALL_SALES_REPS = "All Sales Reps"
UNKNOWN_SALES_REP = "Unknown"

ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Semantic type of a ledger row, derived from its document number."""

    SALE = "Sale"
    RETURN = "Return"
    OPENING_BALANCE = "Opening Balance"
    DISCOUNT = "Discount"
    PAYMENT = "Payment"
    RETURN_PAYMENT = "R-Payment"
    GENERIC = "Invoice/Txn"

    @property
    def is_collection(self) -> bool:
        """True for rows that count towards collected cash."""
        return self in (TransactionType.PAYMENT, TransactionType.RETURN_PAYMENT)


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction domain entity.

    A date the ledger could not parse is carried as None.
    """

    date: Optional[date]
    document_number: str
    customer_name: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    due_date: Optional[date] = None
    sales_rep: Optional[str] = None
    matching_key: Optional[str] = None
    id: Optional[int] = None

    @property
    def net_value(self) -> Decimal:
        """Cash value of the row (credit minus debit)."""
        return self.credit - self.debit

    @property
    def net_debt(self) -> Decimal:
        """Outstanding value of the row (debit minus credit)."""
        return self.debit - self.credit

    @property
    def aging_date(self) -> Optional[date]:
        """Due date, falling back to the transaction date."""
        return self.due_date if self.due_date is not None else self.date


@dataclass(frozen=True)
class AllocationFragment:
    """Portion of a payment attributed to one invoice, or left unmatched."""

    payment_index: int
    source_date: Optional[date]
    amount: Decimal
    source_type: str

    @property
    def is_unmatched(self) -> bool:
        return self.source_type == UNMATCHED

    @property
    def source_label(self) -> str:
        """Label used by source filters and breakdowns ("OB", "Jan25", "Unmatched")."""
        if self.source_type == TransactionType.OPENING_BALANCE.value:
            return OPENING_BALANCE_LABEL
        if self.is_unmatched or self.source_date is None:
            return UNMATCHED
        return self.source_date.strftime("%b%y")


@dataclass(frozen=True)
class AllocationResult:
    """Fragments per payment, keyed by the payment's position in the input list."""

    fragments: dict[int, tuple[AllocationFragment, ...]] = field(default_factory=dict)

    def __contains__(self, payment_index: object) -> bool:
        return payment_index in self.fragments

    def __len__(self) -> int:
        return len(self.fragments)

    def fragments_for(self, payment_index: int) -> tuple[AllocationFragment, ...]:
        """Return fragments for a payment, or an empty tuple if it was not allocated."""
        return self.fragments.get(payment_index, ())

    def total_allocated(self, payment_index: int) -> Decimal:
        """Return the sum of fragment amounts for a payment."""
        return sum((frag.amount for frag in self.fragments_for(payment_index)), ZERO)

    def payment_indices(self) -> list[int]:
        return sorted(self.fragments)


class AgingBucket(Enum):
    """Days-overdue classification of an outstanding amount."""

    AT_DATE = "At Date"
    D1_30 = "1-30"
    D31_60 = "31-60"
    D61_90 = "61-90"
    D91_120 = "91-120"
    OLDER = "Older"

    @classmethod
    def for_days(cls, days_overdue: int) -> "AgingBucket":
        """Return the bucket for a number of days overdue."""
        if days_overdue <= 0:
            return cls.AT_DATE
        if days_overdue <= 30:
            return cls.D1_30
        if days_overdue <= 60:
            return cls.D31_60
        if days_overdue <= 90:
            return cls.D61_90
        if days_overdue <= 120:
            return cls.D91_120
        return cls.OLDER


class AgingMode(Enum):
    """How outstanding balances are assigned to aging buckets."""

    SIMPLE = "simple"
    GROUP_AWARE = "group"


@dataclass(frozen=True)
class CustomerAgingSummary:
    """Aged outstanding balance of one customer."""

    customer_name: str
    sales_reps: frozenset[str]
    at_date: Decimal
    d1_30: Decimal
    d31_60: Decimal
    d61_90: Decimal
    d91_120: Decimal
    older: Decimal
    grand_total: Decimal

    @classmethod
    def from_buckets(
        cls,
        customer_name: str,
        sales_reps: frozenset[str],
        buckets: dict[AgingBucket, Decimal],
        grand_total: Decimal,
    ) -> "CustomerAgingSummary":
        """Build a summary from a bucket -> amount mapping."""
        return cls(
            customer_name=customer_name,
            sales_reps=sales_reps,
            at_date=buckets.get(AgingBucket.AT_DATE, ZERO),
            d1_30=buckets.get(AgingBucket.D1_30, ZERO),
            d31_60=buckets.get(AgingBucket.D31_60, ZERO),
            d61_90=buckets.get(AgingBucket.D61_90, ZERO),
            d91_120=buckets.get(AgingBucket.D91_120, ZERO),
            older=buckets.get(AgingBucket.OLDER, ZERO),
            grand_total=grand_total,
        )

    def bucket(self, aging_bucket: AgingBucket) -> Decimal:
        """Return the amount held in one bucket."""
        return {
            AgingBucket.AT_DATE: self.at_date,
            AgingBucket.D1_30: self.d1_30,
            AgingBucket.D31_60: self.d31_60,
            AgingBucket.D61_90: self.d61_90,
            AgingBucket.D91_120: self.d91_120,
            AgingBucket.OLDER: self.older,
        }[aging_bucket]

    @property
    def aged_total(self) -> Decimal:
        """Sum of all buckets (the portion of the balance that was aged)."""
        return sum((self.bucket(b) for b in AgingBucket), ZERO)


@dataclass(frozen=True)
class OpenItem:
    """A ledger row carrying an open amount in group-aware aging."""

    customer_name: str
    document_number: str
    transaction_type: TransactionType
    date: Optional[date]
    due_date: Optional[date]
    matching_key: Optional[str]
    debit: Decimal
    credit: Decimal
    remaining: Decimal
    days_overdue: Optional[int]


@dataclass(frozen=True)
class ReportFilter:
    """Faceted filter applied to transactions, collections and fragments.

    customers holds case-folded names; when it is non-empty the sales rep
    and search facets are ignored.
    """

    sales_rep: Optional[str] = None
    customers: frozenset[str] = frozenset()
    search: Optional[str] = None
    sources: frozenset[str] = frozenset()

    @property
    def has_customer_selection(self) -> bool:
        return bool(self.customers)

    @property
    def has_text_filter(self) -> bool:
        """True when a free-text search or explicit customer set is active."""
        return self.has_customer_selection or bool(self.search and self.search.strip())

    @property
    def has_source_filter(self) -> bool:
        return bool(self.sources)


@dataclass(frozen=True)
class CollectionEntry:
    """One collection row after filtering, with its attributed value."""

    payment_index: int
    date: Optional[date]
    customer_name: str
    sales_rep: Optional[str]
    value: Decimal
    breakdown: tuple[tuple[str, Decimal], ...] = ()


@dataclass(frozen=True)
class PeriodMetric:
    """Net collections for one period and its two comparison windows."""

    label: str
    start: date
    end: date
    current: Decimal
    previous: Decimal
    last_year: Decimal


@dataclass(frozen=True)
class PeriodTotals:
    """Aggregate collections over a date window."""

    start: date
    end: date
    total: Decimal
    count: int
    customers: int

    @property
    def average(self) -> Decimal:
        """Average value per collection (0 when there are none)."""
        if self.count == 0:
            return ZERO
        return self.total / self.count


@dataclass(frozen=True)
class TrendMetrics:
    """Window-over-window comparison of collection totals."""

    current: PeriodTotals
    previous: PeriodTotals
    last_year: PeriodTotals
    total_change: float
    count_change: float
    customers_change: float
    average_change: float
    total_change_last_year: float
    count_change_last_year: float
    customers_change_last_year: float
    average_change_last_year: float

    @property
    def has_last_year_data(self) -> bool:
        return self.last_year.count > 0 or self.last_year.total > 0


@dataclass(frozen=True)
class CollectionsReport:
    """Daily, weekly and monthly series plus the overall trend."""

    start: date
    end: date
    daily: tuple[PeriodMetric, ...]
    weekly: tuple[PeriodMetric, ...]
    monthly: tuple[PeriodMetric, ...]
    trend: TrendMetrics


@dataclass(frozen=True)
class CustomerCollection:
    """Collections of one customer within a window."""

    customer_name: str
    total: Decimal
    count: int
    payment_dates: tuple[date, ...]
    gap_days: Optional[int]
    breakdown: tuple[tuple[str, Decimal], ...]


@dataclass(frozen=True)
class SalesRepCollection:
    """Collections attributed to one sales rep within a window."""

    sales_rep: str
    total: Decimal
    count: int
    customer_count: int
    share_percent: float

    @property
    def average(self) -> Decimal:
        if self.count == 0:
            return ZERO
        return self.total / self.count


@dataclass(frozen=True)
class CollectionQuality:
    """How old the invoices were that collections in a window settled."""

    buckets: tuple[tuple[str, Decimal], ...]
    invoice_months: tuple[tuple[str, Decimal], ...]
    total: Decimal
