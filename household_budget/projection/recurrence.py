"""
Recurrence Rules

Each RecurrenceType maps to a pure function giving the next date of a
sequence from the current one. The expander steps from the anchor date
and stops at the year end, so termination never depends on a recurrence
count being set.

Month and year steps clamp the day to the end of a shorter month, and the
clamped day carries forward: Jan 31 -> Feb 29 -> Mar 29. A yearly sequence
anchored on Feb 29 lands on Feb 28 the following year and stays there.
"""

from datetime import date, timedelta
from typing import Callable, Optional

from household_budget.models.transaction import RecurrenceType, Transaction
from household_budget.projection.dates import add_calendar_months, add_calendar_years


class ProjectionError(Exception):
    """Base exception for projection engine errors."""
    pass


class InvalidRecurrenceInterval(ProjectionError):
    """
    A custom recurrence has a missing, zero or negative interval.

    Iterating such a rule would never advance (or would go backward),
    so the transaction cannot be expanded.
    """

    def __init__(self, transaction_id: str, interval: Optional[int]):
        self.transaction_id = transaction_id
        self.interval = interval
        super().__init__(
            f"Transaction {transaction_id} has custom recurrence with "
            f"interval {interval!r}; interval must be a positive number of days"
        )


NextDate = Callable[[date], date]


def _every_days(days: int) -> NextDate:
    def next_date(cursor: date) -> date:
        return cursor + timedelta(days=days)
    return next_date


def _monthly(cursor: date) -> date:
    return add_calendar_months(cursor, 1)


def _yearly(cursor: date) -> date:
    return add_calendar_years(cursor, 1)


_FIXED_RULES: dict[RecurrenceType, NextDate] = {
    RecurrenceType.WEEKLY: _every_days(7),
    RecurrenceType.BIWEEKLY: _every_days(14),
    RecurrenceType.MONTHLY: _monthly,
    RecurrenceType.YEARLY: _yearly,
}


def rule_for(transaction: Transaction) -> NextDate:
    """
    Get the step function for a recurring transaction.

    Raises:
        InvalidRecurrenceInterval: custom recurrence without a positive interval
        ValueError: the transaction does not recur
    """
    recurrence = transaction.recurrence

    if recurrence == RecurrenceType.CUSTOM:
        interval = transaction.recurrence_interval
        if interval is None or interval <= 0:
            raise InvalidRecurrenceInterval(transaction.id, interval)
        return _every_days(interval)

    if recurrence in _FIXED_RULES:
        return _FIXED_RULES[recurrence]

    raise ValueError(f"Transaction {transaction.id} does not recur ({recurrence.value})")
