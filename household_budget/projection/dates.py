"""
Calendar Helpers

DESIGN DECISION: Month and year steps use dateutil's relativedelta, which
clamps the day to the end of a shorter month (Jan 31 + 1 month = Feb 29 in
a leap year, Feb 28 otherwise). We never add a fixed number of days to
mean "one month".
"""

from datetime import date

from dateutil.relativedelta import relativedelta


def year_bounds(year: int) -> tuple[date, date]:
    """First and last day of a calendar year, both inclusive."""
    return date(year, 1, 1), date(year, 12, 31)


def add_calendar_months(start: date, months: int) -> date:
    """Move `months` calendar months from `start`, clamping the day."""
    return start + relativedelta(months=months)


def add_calendar_years(start: date, years: int) -> date:
    """Move `years` calendar years from `start`; Feb 29 clamps to Feb 28."""
    return start + relativedelta(years=years)


def month_label(year: int, month_index: int, fmt: str = "%b") -> str:
    """Short display label for a month, e.g. 'Mar'."""
    return date(year, month_index, 1).strftime(fmt)
