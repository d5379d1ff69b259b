"""Business day and tenor helpers.

Weekends only; holiday calendars are out of scope. Year tenors use
dateutil's relativedelta so that "10 years after 29 Feb" lands on 28 Feb
instead of drifting by leap days.
"""

from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta


def is_business_day(d: date) -> bool:
    """Mon-Fri. Holiday calendars deferred."""
    return d.weekday() < 5


def add_years(d: date, years: int) -> date:
    return d + relativedelta(years=years)


def exceeds_tenor(start: date, end: date, years: int) -> bool:
    """True when end falls after start + years."""
    return end > add_years(start, years)


def days_between(start: date, end: date) -> int:
    return (end - start).days
