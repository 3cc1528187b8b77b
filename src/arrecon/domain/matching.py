"""Partitioning of transactions into reconciliation groups."""

from typing import Optional, Sequence

from arrecon.domain.entities import UNMATCHED, Transaction


def normalize_matching_key(matching_key: Optional[str]) -> Optional[str]:
    """Return the grouping key for a raw matching value.

    Keys are trimmed and lower-cased. Empty keys and the "Unmatched"
    sentinel yield None, meaning the row is not part of any group.
    """
    if matching_key is None:
        return None
    key = str(matching_key).strip().lower()
    if not key or key == UNMATCHED.lower():
        return None
    return key


def group_by_matching_key(
    transactions: Sequence[Transaction],
) -> dict[str, list[int]]:
    """Group transaction positions by normalized matching key.

    Args:
        transactions: Transaction list; positions in this list identify rows

    Returns:
        Mapping of normalized key to the positions of its transactions,
        in input order
    """
    groups: dict[str, list[int]] = {}
    for index, txn in enumerate(transactions):
        key = normalize_matching_key(txn.matching_key)
        if key is None:
            continue
        groups.setdefault(key, []).append(index)
    return groups


def find_holder(
    transactions: Sequence[Transaction], indices: Sequence[int]
) -> Optional[int]:
    """Return the position of the largest-debit row among indices.

    Ties keep the first row encountered. Returns None for an empty
    sequence.
    """
    holder: Optional[int] = None
    for index in indices:
        if holder is None or transactions[index].debit > transactions[holder].debit:
            holder = index
    return holder
