"""Transaction classification by document-number prefix."""

from arrecon.domain.entities import Transaction, TransactionType
from arrecon.domain.tolerances import MATERIAL_AMOUNT

# Checked in order; the first matching prefix wins.
PREFIX_TYPES: tuple[tuple[str, TransactionType], ...] = (
    ("SAL", TransactionType.SALE),
    ("RSAL", TransactionType.RETURN),
    ("OB", TransactionType.OPENING_BALANCE),
    ("BIL", TransactionType.DISCOUNT),
    ("JV", TransactionType.DISCOUNT),
)

BANK_RECEIPT_PREFIX = "BNK"


def classify(txn: Transaction) -> TransactionType:
    """Return the semantic type of a transaction.

    Document-number prefixes take priority. A bank receipt whose debit
    dominates is a reversed payment (R-Payment). Any other row with a
    material credit is a payment; everything else is generic.
    """
    number = (txn.document_number or "").strip().upper()

    for prefix, txn_type in PREFIX_TYPES:
        if number.startswith(prefix):
            return txn_type

    if (
        number.startswith(BANK_RECEIPT_PREFIX)
        and txn.debit > MATERIAL_AMOUNT
        and txn.debit >= txn.credit
    ):
        return TransactionType.RETURN_PAYMENT

    if txn.credit > MATERIAL_AMOUNT:
        return TransactionType.PAYMENT

    return TransactionType.GENERIC


def is_collection(txn: Transaction) -> bool:
    """True if the transaction counts towards collected cash."""
    return classify(txn).is_collection
