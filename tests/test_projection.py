"""
Tests for the aggregator and the compute_annual_projection entry point.

Covers the five reference scenarios plus the consistency properties:
sum consistency, bucket correctness and the running-balance fold.
"""

import pytest
from datetime import date
from decimal import Decimal

from household_budget.config import ProjectionSettings
from household_budget.models.transaction import (
    ExpenseCategory,
    Occurrence,
    RecurrenceType,
    TransactionKind,
)
from household_budget.projection import (
    InvalidRecurrenceInterval,
    OccurrenceOutOfRange,
    aggregate,
    compute_annual_projection,
    relevant_transactions,
)


ZERO = Decimal("0")


def _occurrence(on, amount, kind=TransactionKind.EXPENSE, category=ExpenseCategory.BASIC):
    return Occurrence(
        source_id="x",
        date=on,
        amount=Decimal(amount),
        kind=kind,
        expense_category=category,
    )


@pytest.fixture
def mixed_transactions(make_transaction):
    """A realistic household: salary, rent, car loan, gifts, a bad record."""
    return [
        make_transaction(
            id="salary",
            kind=TransactionKind.REVENUE,
            expense_category=ExpenseCategory.NONE,
            amount=Decimal("4250.35"),
            due_date=date(2024, 1, 5),
            recurrence=RecurrenceType.MONTHLY,
        ),
        make_transaction(
            id="rent",
            amount=Decimal("1500.10"),
            due_date=date(2023, 6, 30),
            recurrence=RecurrenceType.MONTHLY,
        ),
        make_transaction(
            id="car",
            expense_category=ExpenseCategory.FINANCING,
            amount=Decimal("389.99"),
            due_date=date(2023, 9, 15),
            recurrence=RecurrenceType.MONTHLY,
            recurrence_count=12,
        ),
        make_transaction(
            id="groceries",
            amount=Decimal("87.45"),
            due_date=date(2024, 1, 2),
            recurrence=RecurrenceType.WEEKLY,
        ),
        make_transaction(
            id="gifts",
            expense_category=ExpenseCategory.EVENTUAL,
            amount=Decimal("600.01"),
            due_date=date(2024, 12, 20),
        ),
        make_transaction(
            id="misc",
            expense_category=ExpenseCategory.NONE,
            amount=Decimal("12.30"),
            due_date=date(2024, 3, 1),
            recurrence=RecurrenceType.CUSTOM,
            recurrence_interval=45,
        ),
        make_transaction(
            id="bonus",
            kind=TransactionKind.REVENUE,
            expense_category=ExpenseCategory.NONE,
            amount=Decimal("0.10"),
            due_date=date(2022, 7, 1),
            recurrence=RecurrenceType.YEARLY,
        ),
        make_transaction(
            id="broken",
            recurrence=RecurrenceType.CUSTOM,
            recurrence_interval=0,
        ),
    ]


class TestReferenceScenarios:
    """End-to-end scenarios."""

    def test_single_basic_expense(self, make_transaction, projection_settings):
        """One basic expense of 100 on 2024-03-15."""
        projection = compute_annual_projection(
            [make_transaction()], 2024, projection_settings
        )
        march = projection.month(3)
        assert march.expense_total == Decimal("100")
        assert march.basic_expense_total == Decimal("100")
        assert projection.annual_balance == Decimal("-100")
        for month in projection.months:
            if month.month_index != 3:
                assert month.expense_total == ZERO
                assert month.revenue_total == ZERO
                assert month.net_balance == ZERO

    def test_monthly_revenue(self, make_transaction, projection_settings):
        """Monthly revenue of 1000 from 2024-01-05: twelve occurrences, 12000."""
        tx = make_transaction(
            kind=TransactionKind.REVENUE,
            expense_category=ExpenseCategory.NONE,
            amount=Decimal("1000"),
            due_date=date(2024, 1, 5),
            recurrence=RecurrenceType.MONTHLY,
        )
        projection = compute_annual_projection([tx], 2024, projection_settings)
        assert projection.total_revenue == Decimal("12000")
        assert [m.occurrence_count for m in projection.months] == [1] * 12
        assert projection.month(12).running_balance == Decimal("12000")

    def test_weekly_expense_at_year_end(self, make_transaction, projection_settings):
        """Weekly 50 from 2024-12-20: December expense total is 100."""
        tx = make_transaction(
            amount=Decimal("50"),
            due_date=date(2024, 12, 20),
            recurrence=RecurrenceType.WEEKLY,
        )
        projection = compute_annual_projection([tx], 2024, projection_settings)
        assert projection.month(12).expense_total == Decimal("100")
        assert projection.month(12).occurrence_count == 2
        assert projection.total_expense == Decimal("100")

    def test_custom_count_exhausted_in_prior_year(self, make_transaction, projection_settings):
        """Custom every 10 days, 5 times from 2024-01-01: nothing in 2025."""
        tx = make_transaction(
            due_date=date(2024, 1, 1),
            recurrence=RecurrenceType.CUSTOM,
            recurrence_interval=10,
            recurrence_count=5,
        )
        projection = compute_annual_projection([tx], 2025, projection_settings)
        assert projection.total_expense == ZERO
        assert sum(m.occurrence_count for m in projection.months) == 0

    def test_empty_transactions(self, projection_settings):
        """No transactions: twelve zeroed months."""
        projection = compute_annual_projection([], 2031, projection_settings)
        assert len(projection.months) == 12
        assert projection.annual_balance == ZERO
        assert all(m.net_balance == ZERO and m.running_balance == ZERO for m in projection.months)
        assert projection.warnings == []

    def test_weekly_expense_in_last_supported_year(self, make_transaction, projection_settings):
        """Weekly 100 from 9999-12-27: December expense total is 100, no crash."""
        tx = make_transaction(
            due_date=date(9999, 12, 27),
            recurrence=RecurrenceType.WEEKLY,
        )
        projection = compute_annual_projection([tx], 9999, projection_settings)
        assert projection.month(12).expense_total == Decimal("100")
        assert projection.warnings == []

    def test_clamped_monthly_before_end_date(self, make_transaction, projection_settings):
        """Monthly 100 from Jan 31 ending Mar 30: three occurrences, 300."""
        tx = make_transaction(
            due_date=date(2024, 1, 31),
            recurrence=RecurrenceType.MONTHLY,
            recurrence_end_date=date(2024, 3, 30),
        )
        projection = compute_annual_projection([tx], 2024, projection_settings)
        assert projection.month(3).expense_total == Decimal("100")
        assert projection.total_expense == Decimal("300")


class TestConsistencyProperties:
    """Properties that hold for any transaction set."""

    def test_sum_consistency(self, mixed_transactions, projection_settings):
        """Twelve months add up exactly to the annual figures."""
        projection = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        months = projection.months

        assert sum((m.net_balance for m in months), ZERO) == projection.annual_balance
        assert sum((m.revenue_total for m in months), ZERO) == projection.total_revenue
        assert sum((m.expense_total for m in months), ZERO) == projection.total_expense
        assert sum((m.basic_expense_total for m in months), ZERO) == projection.total_basic_expense
        assert sum((m.financing_expense_total for m in months), ZERO) == projection.total_financing_expense
        assert sum((m.eventual_expense_total for m in months), ZERO) == projection.total_eventual_expense
        assert projection.annual_balance == projection.total_revenue - projection.total_expense

    def test_expense_breakdown_adds_up(self, mixed_transactions, projection_settings):
        """Category totals, uncategorized included, add up to the expense total."""
        projection = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        for month in projection.months:
            assert month.expense_total == (
                month.basic_expense_total
                + month.financing_expense_total
                + month.eventual_expense_total
                + month.uncategorized_expense_total
            )

    def test_running_balance_fold(self, mixed_transactions, projection_settings):
        projection = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        months = projection.months
        assert months[0].running_balance == months[0].net_balance
        for previous, current in zip(months, months[1:]):
            assert current.running_balance == previous.running_balance + current.net_balance

    def test_known_totals(self, mixed_transactions, projection_settings):
        """Spot-check the mixed household against hand-computed values."""
        projection = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        assert projection.total_revenue == Decimal("4250.35") * 12 + Decimal("0.10")
        # Car loan: Sep 2023 .. Aug 2024
        assert projection.total_financing_expense == Decimal("389.99") * 8
        assert projection.month(9).financing_expense_total == ZERO
        assert projection.total_eventual_expense == Decimal("600.01")
        # Rent anchored on Jun 30 lands on Feb 29
        assert projection.month(2).basic_expense_total >= Decimal("1500.10")

    def test_bad_record_is_isolated(self, mixed_transactions, projection_settings):
        """The broken transaction is reported, the rest still projected."""
        projection = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        assert projection.skipped_transaction_ids == ["broken"]
        assert projection.warnings[0].error_code == "InvalidRecurrenceInterval"
        assert projection.total_revenue > ZERO

    def test_input_order_does_not_matter(self, mixed_transactions, projection_settings):
        forward = compute_annual_projection(mixed_transactions, 2024, projection_settings)
        backward = compute_annual_projection(
            list(reversed(mixed_transactions)), 2024, projection_settings
        )
        assert forward.months == backward.months
        assert forward.annual_balance == backward.annual_balance

    def test_fail_fast_setting(self, mixed_transactions, projection_settings):
        settings = projection_settings.model_copy(update={"fail_fast": True})
        with pytest.raises(InvalidRecurrenceInterval):
            compute_annual_projection(mixed_transactions, 2024, settings)


class TestAggregator:
    """Tests for aggregate() directly."""

    def test_bucket_by_month(self):
        """Each occurrence lands in the bucket of its own month."""
        occurrences = [
            _occurrence(date(2024, 12, 31), "5"),
            _occurrence(date(2024, 1, 1), "7"),
            _occurrence(date(2024, 1, 31), "3", kind=TransactionKind.REVENUE),
        ]
        projection = aggregate(occurrences, 2024)
        assert projection.month(1).expense_total == Decimal("7")
        assert projection.month(1).revenue_total == Decimal("3")
        assert projection.month(1).occurrence_count == 2
        assert projection.month(12).expense_total == Decimal("5")
        assert projection.month(6).occurrence_count == 0

    def test_decimal_sums_are_exact(self):
        """0.1 added ten times is exactly 1."""
        occurrences = [
            _occurrence(date(2024, 4, day), "0.1", kind=TransactionKind.REVENUE)
            for day in range(1, 11)
        ]
        projection = aggregate(occurrences, 2024)
        assert projection.total_revenue == Decimal("1.0")

    def test_missing_categories_are_zero(self):
        projection = aggregate([_occurrence(date(2024, 2, 2), "10")], 2024)
        february = projection.month(2)
        assert february.financing_expense_total == ZERO
        assert february.eventual_expense_total == ZERO
        assert february.uncategorized_expense_total == ZERO

    def test_revenue_category_is_ignored(self):
        """A revenue never counts towards an expense category."""
        projection = aggregate(
            [_occurrence(date(2024, 2, 2), "10", kind=TransactionKind.REVENUE)],
            2024,
        )
        assert projection.total_basic_expense == ZERO
        assert projection.total_revenue == Decimal("10")

    def test_out_of_range_dropped_by_default(self):
        projection = aggregate(
            [_occurrence(date(2023, 12, 31), "10"), _occurrence(date(2024, 1, 1), "1")],
            2024,
        )
        assert projection.total_expense == Decimal("1")

    def test_out_of_range_strict(self):
        with pytest.raises(OccurrenceOutOfRange) as exc_info:
            aggregate([_occurrence(date(2025, 1, 1), "10")], 2024, strict=True)
        assert exc_info.value.year == 2024

    def test_month_labels(self):
        projection = aggregate([], 2024, label_format="%B")
        assert projection.month(1).month_label == "January"
        assert projection.month(12).month_label == "December"

    def test_alert_months(self):
        occurrences = [
            _occurrence(date(2024, 1, 10), "100", kind=TransactionKind.REVENUE),
            _occurrence(date(2024, 2, 10), "30"),
            _occurrence(date(2024, 5, 10), "80"),
        ]
        projection = aggregate(occurrences, 2024)
        assert [m.month_index for m in projection.alert_months] == [2, 5]
        assert projection.month(5).running_balance == Decimal("-10")


class TestRelevantTransactions:
    """Tests for the year prefilter."""

    def test_keeps_recurring_and_current(self, make_transaction):
        old_one_off = make_transaction(id="old", due_date=date(2023, 5, 1))
        old_recurring = make_transaction(
            id="rec", due_date=date(2020, 5, 1), recurrence=RecurrenceType.MONTHLY
        )
        current = make_transaction(id="now", due_date=date(2024, 5, 1))
        kept = relevant_transactions([old_one_off, old_recurring, current], 2024)
        assert [t.id for t in kept] == ["rec", "now"]
