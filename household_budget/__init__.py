"""
Household Budget - Projection Engine

Expands one-off and recurring household transactions into a calendar of
cash-flow events for a year and aggregates them into monthly and annual
figures for the budgeting dashboards.

DESIGN PRINCIPLES:
1. The engine is a pure function of (transactions, year)
2. Money is Decimal end to end; annual totals equal the sum of the months
3. One bad record never blanks the whole year
4. Every projection run is auditable
5. Storage is swappable and stays outside the engine
"""

from household_budget.projection import (
    InvalidRecurrenceInterval,
    compute_annual_projection,
)

__version__ = "1.0.0"
__author__ = "Household Budget Team"

__all__ = ["InvalidRecurrenceInterval", "compute_annual_projection"]
