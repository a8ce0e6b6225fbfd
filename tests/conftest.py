"""
Shared fixtures for the projection test-suite.

No external services are used: storage is in-memory.
"""

from datetime import date
from decimal import Decimal

import pytest

from household_budget.config import ProjectionSettings
from household_budget.models.transaction import (
    ExpenseCategory,
    RecurrenceType,
    Transaction,
    TransactionKind,
)


def build_transaction(**overrides) -> Transaction:
    """A one-off basic expense of 100 on 2024-03-15, with overrides."""
    fields = {
        "id": "tx-1",
        "amount": Decimal("100"),
        "kind": TransactionKind.EXPENSE,
        "expense_category": ExpenseCategory.BASIC,
        "due_date": date(2024, 3, 15),
        "recurrence": RecurrenceType.NONE,
    }
    fields.update(overrides)
    return Transaction(**fields)


@pytest.fixture
def make_transaction():
    """Factory fixture for transactions."""
    return build_transaction


@pytest.fixture
def year_2024() -> tuple[date, date]:
    return date(2024, 1, 1), date(2024, 12, 31)


@pytest.fixture
def projection_settings() -> ProjectionSettings:
    """Default policies with no waiting between fetch retries."""
    return ProjectionSettings(
        fail_fast=False,
        strict_year_bounds=False,
        month_label_format="%b",
        fetch_retry_attempts=3,
        fetch_retry_min_wait=0,
        fetch_retry_max_wait=0,
    )
