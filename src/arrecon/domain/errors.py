"""Shared domain error messages and error types."""

from typing import Any


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or file does not exist."""


def not_a_date(field_name: str, value: Any) -> str:
    """Return message for a date argument of the wrong type."""
    return f"{field_name} must be a date, got {type(value).__name__}"


def inverted_date_range(start: Any, end: Any) -> str:
    """Return message for a window whose start is after its end."""
    return f"Start date {start} is after end date {end}"


def unknown_aging_mode(mode: Any) -> str:
    """Return message for an unsupported aging mode."""
    return f"Unknown aging mode '{mode}'. Supported modes: simple, group"


def ledger_entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Ledger entry {entry_id} not found"


def negative_amount(field_name: str, amount: Any) -> str:
    """Return message for a negative debit or credit."""
    return f"{field_name} must not be negative, got {amount}"
