"""
Recurrence Expander

Turns one transaction into the occurrences that fall inside a year window.

GUARANTEES:
- Occurrences are chronological and all inside [year_start, year_end]
- A non-recurring transaction yields at most one occurrence
- recurrence_count caps the whole sequence, not just the window
- The loop is bounded by year_end even with no end date and no count,
  and stops cleanly when a step would leave the supported date range
"""

from datetime import date
from typing import Iterable

import structlog

from household_budget.models.projection import ExpansionResult, ProjectionWarning
from household_budget.models.transaction import Occurrence, Transaction
from household_budget.projection.recurrence import ProjectionError, rule_for


logger = structlog.get_logger(__name__)


def expand(
    transaction: Transaction,
    year_start: date,
    year_end: date,
) -> list[Occurrence]:
    """
    Expand a transaction into its occurrences inside [year_start, year_end].

    Raises:
        InvalidRecurrenceInterval: custom recurrence with a non-positive interval
    """
    if not transaction.is_recurring:
        if year_start <= transaction.due_date <= year_end:
            return [Occurrence.from_transaction(transaction, transaction.due_date)]
        return []

    next_date = rule_for(transaction)
    hard_end = transaction.recurrence_end_date or year_end
    limit = transaction.recurrence_count

    occurrences = []
    index = 0
    cursor = transaction.anchor_date

    while cursor <= hard_end and cursor <= year_end and (limit is None or index < limit):
        if cursor >= year_start:
            occurrences.append(Occurrence.from_transaction(transaction, cursor, index))
        index += 1
        try:
            cursor = next_date(cursor)
        except (OverflowError, ValueError):
            # Stepped past date.max, so past any year end too
            break

    return occurrences


def expand_safely(
    transaction: Transaction,
    year_start: date,
    year_end: date,
) -> ExpansionResult:
    """
    Expand a transaction, turning projection errors into a warning.

    One corrupt record must not blank the rest of the year.
    """
    try:
        occurrences = expand(transaction, year_start, year_end)
    except ProjectionError as e:
        logger.warning(
            "transaction_not_projected",
            transaction_id=transaction.id,
            error_code=type(e).__name__,
            error=str(e),
        )
        return ExpansionResult(
            transaction_id=transaction.id,
            warning=ProjectionWarning(
                transaction_id=transaction.id,
                error_code=type(e).__name__,
                message=str(e),
                transaction_name=transaction.name,
            ),
        )

    return ExpansionResult(
        transaction_id=transaction.id,
        occurrences=occurrences,
    )


def expand_all(
    transactions: Iterable[Transaction],
    year_start: date,
    year_end: date,
    fail_fast: bool = False,
) -> tuple[list[Occurrence], list[ProjectionWarning]]:
    """
    Expand every transaction into one flat occurrence list.

    With fail_fast the first projection error propagates; otherwise
    failing transactions are reported in the warning list.
    """
    occurrences: list[Occurrence] = []
    warnings: list[ProjectionWarning] = []

    for transaction in transactions:
        if fail_fast:
            occurrences.extend(expand(transaction, year_start, year_end))
            continue

        result = expand_safely(transaction, year_start, year_end)
        if result.succeeded:
            occurrences.extend(result.occurrences)
        else:
            warnings.append(result.warning)

    return occurrences, warnings
