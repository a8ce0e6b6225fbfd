"""
Transaction and Occurrence Models

A Transaction is the record the household enters once: a salary, a rent
payment, a car installment. An Occurrence is one dated materialization of
that record inside a projection window.

DESIGN DECISION: The projection engine does NOT validate business input.
Amounts are not range-checked and a custom recurrence interval is accepted
as-is here; the expander is the one that refuses to iterate on it.
Pydantic still guarantees types (a malformed date never reaches the engine).

Records coming from the hosted backend use its column names
(type, expense_group, recurrence_type). Both spellings are accepted.
"""

import datetime
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a cash flow."""
    REVENUE = "revenue"
    EXPENSE = "expense"


class ExpenseCategory(str, Enum):
    """
    Expense grouping used by the budget breakdown.

    NONE is used for revenues and for expenses nobody classified.
    """
    BASIC = "basic"              # Rent, groceries, utilities
    FINANCING = "financing"      # Loans, installments
    EVENTUAL = "eventual"        # One-off or irregular spending
    NONE = "none"


class RecurrenceType(str, Enum):
    """How often a transaction repeats."""
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"            # Every recurrence_interval days


# =============================================================================
# INPUT RECORD
# =============================================================================

class Transaction(BaseModel):
    """
    A transaction record as supplied by the caller.

    Read-only to the engine. Only the amount, kind, category and the
    recurrence fields take part in the projection; name and description
    are carried through for display.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier"
    )
    amount: Decimal = Field(
        ...,
        description="Transaction value"
    )
    kind: TransactionKind = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="Revenue or expense"
    )
    expense_category: ExpenseCategory = Field(
        default=ExpenseCategory.NONE,
        validation_alias=AliasChoices("expense_category", "expense_group"),
        description="Expense group (meaningful only for expenses)"
    )
    due_date: date = Field(
        ...,
        description="Anchor date, or first occurrence of a recurring transaction"
    )

    # Recurrence
    recurrence: RecurrenceType = Field(
        default=RecurrenceType.NONE,
        validation_alias=AliasChoices("recurrence", "recurrence_type"),
    )
    recurrence_interval: Optional[int] = Field(
        default=None,
        description="Days between occurrences (custom recurrence only)"
    )
    recurrence_start_date: Optional[date] = None
    recurrence_end_date: Optional[date] = None
    recurrence_count: Optional[int] = Field(
        default=None,
        description="Cap on total occurrences across all time"
    )

    # Display
    name: Optional[str] = Field(
        default=None,
        max_length=200,
    )
    description: Optional[str] = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        """Backend ids may be UUIDs or integers; the engine treats them as opaque."""
        if v is None:
            return v
        return str(v)

    @field_validator('expense_category', mode='before')
    @classmethod
    def null_category_is_none(cls, v):
        """The backend stores a null expense group for revenues."""
        if v is None:
            return ExpenseCategory.NONE
        return v

    @field_validator('recurrence', mode='before')
    @classmethod
    def null_recurrence_is_none(cls, v):
        if v is None:
            return RecurrenceType.NONE
        return v

    @property
    def is_recurring(self) -> bool:
        return self.recurrence != RecurrenceType.NONE

    @property
    def anchor_date(self) -> date:
        """First date of the recurrence sequence."""
        return self.recurrence_start_date or self.due_date


# =============================================================================
# EXPANDED OCCURRENCE
# =============================================================================

class Occurrence(BaseModel):
    """
    One concrete, dated materialization of a transaction.

    Created fresh by every projection call and discarded afterwards.
    """
    model_config = ConfigDict(frozen=True)

    source_id: str = Field(
        ...,
        description="ID of the originating transaction"
    )
    date: datetime.date
    amount: Decimal
    kind: TransactionKind
    expense_category: ExpenseCategory = ExpenseCategory.NONE
    sequence_index: int = Field(
        default=0,
        ge=0,
        description="Zero-based position in the source's recurrence sequence"
    )
    name: Optional[str] = None
    is_recurring: bool = False

    @classmethod
    def from_transaction(
        cls,
        transaction: Transaction,
        on: date,
        sequence_index: int = 0,
    ) -> "Occurrence":
        """Build an occurrence copying the value fields of its source."""
        return cls(
            source_id=transaction.id,
            date=on,
            amount=transaction.amount,
            kind=transaction.kind,
            expense_category=transaction.expense_category,
            sequence_index=sequence_index,
            name=transaction.name,
            is_recurring=transaction.is_recurring,
        )
