"""
Projection Aggregator

Buckets occurrences by calendar month and rolls them up into monthly and
annual figures.

DESIGN DECISION: Annual totals are the sum of the monthly totals, never a
second pass over the raw occurrences. The monthly breakdown and the annual
figures therefore agree exactly.

Occurrences dated outside the requested year break the expander's
contract. By default they are dropped and logged; with strict bounds the
aggregator raises OccurrenceOutOfRange.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from household_budget.models.projection import (
    AnnualProjection,
    MonthlyProjection,
    ProjectionWarning,
    ZERO,
)
from household_budget.models.transaction import (
    ExpenseCategory,
    Occurrence,
    TransactionKind,
)
from household_budget.projection.dates import month_label
from household_budget.projection.recurrence import ProjectionError


logger = structlog.get_logger(__name__)


class OccurrenceOutOfRange(ProjectionError):
    """An occurrence dated outside the year being aggregated."""

    def __init__(self, occurrence: Occurrence, year: int):
        self.occurrence = occurrence
        self.year = year
        super().__init__(
            f"Occurrence of transaction {occurrence.source_id} on "
            f"{occurrence.date.isoformat()} is outside {year}"
        )


class _MonthBucket:
    """Running sums for one month."""

    def __init__(self):
        self.revenue = ZERO
        self.by_category: dict[ExpenseCategory, Decimal] = defaultdict(lambda: ZERO)
        self.count = 0

    def add(self, occurrence: Occurrence) -> None:
        self.count += 1
        if occurrence.kind == TransactionKind.REVENUE:
            self.revenue += occurrence.amount
        else:
            self.by_category[occurrence.expense_category] += occurrence.amount

    @property
    def expense(self) -> Decimal:
        return sum(self.by_category.values(), ZERO)


def _bucket(
    occurrences: Iterable[Occurrence],
    year: int,
    strict: bool,
) -> dict[int, _MonthBucket]:
    buckets = {month_index: _MonthBucket() for month_index in range(1, 13)}

    for occurrence in occurrences:
        if occurrence.date.year != year:
            if strict:
                raise OccurrenceOutOfRange(occurrence, year)
            logger.warning(
                "occurrence_out_of_range_dropped",
                transaction_id=occurrence.source_id,
                date=occurrence.date.isoformat(),
                year=year,
            )
            continue
        buckets[occurrence.date.month].add(occurrence)

    return buckets


def aggregate(
    occurrences: Iterable[Occurrence],
    year: int,
    *,
    strict: bool = False,
    label_format: str = "%b",
    warnings: Optional[list[ProjectionWarning]] = None,
) -> AnnualProjection:
    """
    Aggregate occurrences into an annual projection.

    Never fails on an empty list: that yields twelve zeroed months.

    Raises:
        OccurrenceOutOfRange: only when strict and an occurrence is outside the year
    """
    buckets = _bucket(occurrences, year, strict)

    months = []
    running_balance = ZERO

    # Months must be folded in calendar order, whatever order the input had
    for month_index in range(1, 13):
        bucket = buckets[month_index]
        expense = bucket.expense
        net_balance = bucket.revenue - expense
        running_balance += net_balance

        months.append(MonthlyProjection(
            month_index=month_index,
            year=year,
            month_label=month_label(year, month_index, label_format),
            revenue_total=bucket.revenue,
            expense_total=expense,
            basic_expense_total=bucket.by_category[ExpenseCategory.BASIC],
            financing_expense_total=bucket.by_category[ExpenseCategory.FINANCING],
            eventual_expense_total=bucket.by_category[ExpenseCategory.EVENTUAL],
            uncategorized_expense_total=bucket.by_category[ExpenseCategory.NONE],
            net_balance=net_balance,
            running_balance=running_balance,
            occurrence_count=bucket.count,
        ))

    total_revenue = sum((m.revenue_total for m in months), ZERO)
    total_expense = sum((m.expense_total for m in months), ZERO)

    return AnnualProjection(
        year=year,
        total_revenue=total_revenue,
        total_expense=total_expense,
        total_basic_expense=sum((m.basic_expense_total for m in months), ZERO),
        total_financing_expense=sum((m.financing_expense_total for m in months), ZERO),
        total_eventual_expense=sum((m.eventual_expense_total for m in months), ZERO),
        total_uncategorized_expense=sum((m.uncategorized_expense_total for m in months), ZERO),
        annual_balance=sum((m.net_balance for m in months), ZERO),
        months=months,
        warnings=list(warnings or []),
    )
