"""Fixed-week calendar ("BHS weeks").

Week 1 of every year starts on January 1 and each following week starts
exactly seven days later. The last week of a year is short (one or two
days) and numbering restarts at 1 on the next January 1, so weeks never
span a year boundary. This is not ISO week numbering.
"""

from datetime import date, timedelta

WEEK_LENGTH = timedelta(days=7)


def bhs_week(day: date) -> tuple[int, int]:
    """Return (year, week) for a date."""
    start_of_year = date(day.year, 1, 1)
    return day.year, (day - start_of_year).days // 7 + 1


def bhs_week_range(year: int, week: int) -> tuple[date, date]:
    """Return the first and last day of a BHS week.

    The end is clamped to December 31 of the same year.
    """
    start = date(year, 1, 1) + (week - 1) * WEEK_LENGTH
    end = min(start + timedelta(days=6), date(year, 12, 31))
    return start, end


def next_bhs_week(year: int, week: int) -> tuple[int, int]:
    """Return the (year, week) that follows the given week."""
    next_start = date(year, 1, 1) + week * WEEK_LENGTH
    if next_start.year > year:
        return year + 1, 1
    return year, week + 1
