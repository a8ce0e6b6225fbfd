"""
Data Models Package

This package contains all Pydantic models used by the projection engine.
All data flowing through the engine must conform to these schemas.
"""

from household_budget.models.transaction import (
    ExpenseCategory,
    Occurrence,
    RecurrenceType,
    Transaction,
    TransactionKind,
)
from household_budget.models.projection import (
    AnnualProjection,
    ExpansionResult,
    MonthlyProjection,
    ProjectionWarning,
)
from household_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "ExpenseCategory",
    "Occurrence",
    "RecurrenceType",
    "Transaction",
    "TransactionKind",
    # Projection models
    "AnnualProjection",
    "ExpansionResult",
    "MonthlyProjection",
    "ProjectionWarning",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
