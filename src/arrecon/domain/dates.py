"""Date arithmetic shared by the aging and metrics services."""

from datetime import date, datetime
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from arrecon.domain.errors import ValidationError, not_a_date


def require_date(field_name: str, value: Any) -> date:
    """Validate a caller-supplied date, normalizing datetimes to their day.

    Raises:
        ValidationError: If value is not a date or datetime
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(not_a_date(field_name, value))


def resolve_as_of(as_of: Optional[Any]) -> date:
    """Return the reference day, defaulting to today."""
    if as_of is None:
        return date.today()
    return require_date("as_of", as_of)


def days_overdue(as_of: date, due: date) -> int:
    """Whole days between a due date and the as-of day (negative if not yet due)."""
    return (as_of - due).days


def month_difference(later: date, earlier: date) -> int:
    """Calendar-month distance between two dates, ignoring the day."""
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def shift_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the end of shorter months."""
    return day + relativedelta(months=months)


def shift_years(day: date, years: int) -> date:
    """Shift a date by whole years (Feb 29 becomes Feb 28)."""
    return day + relativedelta(years=years)


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing day."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1, days=-1)
    return start, end
