"""Utility functions for arrecon."""

from arrecon.utils.date_parser import parse_date, parse_ledger_date
from arrecon.utils.amount_parser import parse_amount, parse_optional_amount
from arrecon.utils.bhs_week import bhs_week, bhs_week_range

__all__ = [
    "parse_date",
    "parse_ledger_date",
    "parse_amount",
    "parse_optional_amount",
    "bhs_week",
    "bhs_week_range",
]
