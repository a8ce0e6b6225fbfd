"""
Projection Engine Entry Point

compute_annual_projection is the one function collaborators call:

    projection = compute_annual_projection(transactions, 2024)

It is a pure function of its inputs. Nothing is fetched, stored or
cached, so it can be called concurrently (one call per rendered year).
"""

from typing import Iterable, Optional

import structlog

from household_budget.config import ProjectionSettings, get_settings
from household_budget.models.projection import AnnualProjection
from household_budget.models.transaction import Transaction
from household_budget.projection.aggregator import aggregate
from household_budget.projection.dates import year_bounds
from household_budget.projection.expander import expand_all


logger = structlog.get_logger(__name__)


def compute_annual_projection(
    transactions: Iterable[Transaction],
    year: int,
    settings: Optional[ProjectionSettings] = None,
) -> AnnualProjection:
    """
    Project a set of transactions onto a calendar year.

    Transactions that cannot be expanded are reported in
    `AnnualProjection.warnings` (or raised, with fail_fast).
    """
    settings = settings or get_settings().projection
    year_start, year_end = year_bounds(year)

    occurrences, warnings = expand_all(
        transactions,
        year_start,
        year_end,
        fail_fast=settings.fail_fast,
    )

    projection = aggregate(
        occurrences,
        year,
        strict=settings.strict_year_bounds,
        label_format=settings.month_label_format,
        warnings=warnings,
    )

    logger.debug(
        "annual_projection_computed",
        year=year,
        occurrence_count=len(occurrences),
        skipped_count=len(warnings),
        annual_balance=str(projection.annual_balance),
    )
    return projection


def relevant_transactions(
    transactions: Iterable[Transaction],
    year: int,
) -> list[Transaction]:
    """
    Keep the transactions that can contribute to a year.

    Mirrors the query used when loading a year: every recurring
    transaction, plus one-off ones due on or after January 1st.
    One-off transactions due after the year are kept too; the
    expander discards them.
    """
    year_start, _ = year_bounds(year)
    return [
        t for t in transactions
        if t.is_recurring or t.due_date >= year_start
    ]
