"""Monetary tolerances shared by every engine component.

Two thresholds are used: allocation arithmetic treats anything at or below
EPSILON as zero, while balance-level checks (is this row an invoice, is
this customer in debt, is this residual open) use MATERIAL_AMOUNT.
"""

from decimal import Decimal

EPSILON = Decimal("0.001")
MATERIAL_AMOUNT = Decimal("0.01")


def is_material(amount: Decimal) -> bool:
    """Return True if the absolute amount exceeds MATERIAL_AMOUNT."""
    return abs(amount) > MATERIAL_AMOUNT
