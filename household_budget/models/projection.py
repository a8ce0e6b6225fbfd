"""
Projection Output Models

These models are what the presentation layer (charts, KPI cards, tables)
reads. They are built fresh on every projection call.

DESIGN DECISION: All money is Decimal. Annual totals are folded from the
monthly totals, so the sum of the twelve months equals the annual figure
exactly. No float ever enters these models.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from household_budget.models.transaction import ExpenseCategory, Occurrence


ZERO = Decimal("0")


# =============================================================================
# FAILURE REPORTING
# =============================================================================

class ProjectionWarning(BaseModel):
    """
    A transaction that could not be projected.

    The presentation layer shows these as "this entry could not be
    projected" instead of failing the whole year.
    """
    model_config = ConfigDict(frozen=True)

    transaction_id: str
    error_code: str = Field(
        ...,
        description="Exception class name, e.g. InvalidRecurrenceInterval"
    )
    message: str
    transaction_name: Optional[str] = None


class ExpansionResult(BaseModel):
    """
    Outcome of expanding one transaction.

    Either occurrences (possibly none) or a warning, never both.
    """
    transaction_id: str
    occurrences: list[Occurrence] = Field(default_factory=list)
    warning: Optional[ProjectionWarning] = None

    @property
    def succeeded(self) -> bool:
        return self.warning is None


# =============================================================================
# MONTHLY AND ANNUAL PROJECTIONS
# =============================================================================

class MonthlyProjection(BaseModel):
    """Aggregated cash flow of one calendar month."""
    model_config = ConfigDict(frozen=True)

    month_index: int = Field(..., ge=1, le=12)
    year: int
    month_label: str

    revenue_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    basic_expense_total: Decimal = ZERO
    financing_expense_total: Decimal = ZERO
    eventual_expense_total: Decimal = ZERO
    uncategorized_expense_total: Decimal = ZERO

    net_balance: Decimal = ZERO
    running_balance: Decimal = ZERO

    occurrence_count: int = Field(default=0, ge=0)

    @property
    def is_negative(self) -> bool:
        """An alert month: more goes out than comes in."""
        return self.net_balance < 0

    def category_total(self, category: ExpenseCategory) -> Decimal:
        """Expense total for one category."""
        return {
            ExpenseCategory.BASIC: self.basic_expense_total,
            ExpenseCategory.FINANCING: self.financing_expense_total,
            ExpenseCategory.EVENTUAL: self.eventual_expense_total,
            ExpenseCategory.NONE: self.uncategorized_expense_total,
        }[category]


class AnnualProjection(BaseModel):
    """
    Year-level projection. This is the top-level result of the engine.

    `months` always holds twelve entries, January first.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    total_revenue: Decimal = ZERO
    total_expense: Decimal = ZERO
    total_basic_expense: Decimal = ZERO
    total_financing_expense: Decimal = ZERO
    total_eventual_expense: Decimal = ZERO
    total_uncategorized_expense: Decimal = ZERO
    annual_balance: Decimal = ZERO

    months: list[MonthlyProjection]

    warnings: list[ProjectionWarning] = Field(
        default_factory=list,
        description="Transactions that could not be projected"
    )

    @model_validator(mode='after')
    def validate_months(self) -> 'AnnualProjection':
        """Twelve months, in calendar order, all in this year."""
        if [m.month_index for m in self.months] != list(range(1, 13)):
            raise ValueError("Annual projection needs months 1 to 12 in order")
        if any(m.year != self.year for m in self.months):
            raise ValueError("Monthly projection year does not match annual year")
        return self

    @property
    def alert_months(self) -> list[MonthlyProjection]:
        """Months with a negative net balance."""
        return [m for m in self.months if m.is_negative]

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def skipped_transaction_ids(self) -> list[str]:
        return [w.transaction_id for w in self.warnings]

    def month(self, month_index: int) -> MonthlyProjection:
        """Get a month by its 1-based index."""
        if not 1 <= month_index <= 12:
            raise ValueError(f"Month index must be 1-12, got {month_index}")
        return self.months[month_index - 1]

    def category_total(self, category: ExpenseCategory) -> Decimal:
        """Annual expense total for one category."""
        return {
            ExpenseCategory.BASIC: self.total_basic_expense,
            ExpenseCategory.FINANCING: self.total_financing_expense,
            ExpenseCategory.EVENTUAL: self.total_eventual_expense,
            ExpenseCategory.NONE: self.total_uncategorized_expense,
        }[category]

    def expense_share(self, category: ExpenseCategory) -> Decimal:
        """
        Percentage (0-100) of annual expenses that fall in a category.

        Returns zero when there are no expenses at all.
        """
        if self.total_expense == 0:
            return ZERO
        return self.category_total(category) * 100 / self.total_expense
