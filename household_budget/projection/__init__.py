"""Projection engine package."""

from household_budget.projection.aggregator import OccurrenceOutOfRange, aggregate
from household_budget.projection.engine import (
    compute_annual_projection,
    relevant_transactions,
)
from household_budget.projection.expander import expand, expand_all, expand_safely
from household_budget.projection.recurrence import (
    InvalidRecurrenceInterval,
    ProjectionError,
    rule_for,
)

__all__ = [
    "InvalidRecurrenceInterval",
    "OccurrenceOutOfRange",
    "ProjectionError",
    "aggregate",
    "compute_annual_projection",
    "expand",
    "expand_all",
    "expand_safely",
    "relevant_transactions",
    "rule_for",
]
