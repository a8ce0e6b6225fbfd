"""
Projection Orchestrator

This module ties the pure projection engine to its collaborators and
defines the end-to-end flow:

    year → load transactions → project → audit → AnnualProjection

DESIGN DECISION: The orchestrator is the only place with I/O.
The engine stays a pure function; loading, retrying and auditing
happen around it.
"""

from typing import Optional
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from household_budget.audit import AuditLogger, configure_logging, create_correlation_id
from household_budget.config import ProjectionSettings, get_settings
from household_budget.models.projection import AnnualProjection, ExpansionResult
from household_budget.models.transaction import Transaction
from household_budget.projection import (
    ProjectionError,
    compute_annual_projection,
    expand_safely,
    relevant_transactions,
)
from household_budget.projection.dates import year_bounds
from household_budget.storage import (
    AuditStorageInterface,
    InMemoryTransactionSource,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionSourceInterface,
)


class ProjectionFlow:
    """
    Orchestrates a projection run for one household.

    Flow:
    1. Request → audit which year was asked for
    2. Load → fetch the year's transactions (retried on connection errors)
    3. Project → pure engine call
    4. Report → audit skipped transactions and the final balance
    """

    def __init__(
        self,
        source: TransactionSourceInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[ProjectionSettings] = None,
    ):
        self._source = source
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().projection

    async def _load_transactions(self, year: int) -> list[Transaction]:
        """Fetch the transactions that can contribute to `year`."""
        year_start, _ = year_bounds(year)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.fetch_retry_attempts),
            wait=wait_exponential(
                multiplier=1,
                min=self._settings.fetch_retry_min_wait,
                max=self._settings.fetch_retry_max_wait,
            ),
            retry=retry_if_exception_type(StorageConnectionError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                transactions = await self._source.list_transactions(
                    due_from=year_start,
                    include_recurring=True,
                )

        # Sources are not trusted to apply the filter
        return relevant_transactions(transactions, year)

    async def project_year(
        self,
        year: int,
        correlation_id: Optional[UUID] = None,
    ) -> AnnualProjection:
        """
        Load and project a calendar year.

        Transactions that cannot be projected are audited and reported in
        the result's warnings; they do not fail the run.

        Raises:
            StorageError: the source failed (after retries)
            ProjectionError: only with fail_fast or strict year bounds
        """
        correlation_id = correlation_id or create_correlation_id()

        if self._audit_logger:
            await self._audit_logger.log_projection_requested(
                year=year,
                correlation_id=correlation_id,
            )

        try:
            transactions = await self._load_transactions(year)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_source_error(
                    source=type(self._source).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_transactions_loaded(
                year=year,
                transaction_count=len(transactions),
                correlation_id=correlation_id,
            )

        try:
            projection = compute_annual_projection(transactions, year, self._settings)
        except ProjectionError as e:
            if self._audit_logger:
                await self._audit_logger.log_projection_failed(
                    year=year,
                    error_code=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            for warning in projection.warnings:
                await self._audit_logger.log_transaction_skipped(
                    transaction_id=warning.transaction_id,
                    error_code=warning.error_code,
                    message=warning.message,
                    year=year,
                    correlation_id=correlation_id,
                )
            await self._audit_logger.log_projection_completed(
                year=year,
                annual_balance=str(projection.annual_balance),
                skipped_count=len(projection.warnings),
                correlation_id=correlation_id,
            )

        return projection

    async def project_transaction(
        self,
        transaction_id: str,
        year: int,
    ) -> ExpansionResult:
        """
        Expand a single transaction for a year.

        Lets the presentation layer explain one entry (its dates, or why
        it could not be projected) without recomputing the whole year.

        Raises:
            NotFoundError: no transaction with that ID
        """
        transaction = await self._source.get_transaction_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        year_start, year_end = year_bounds(year)
        return expand_safely(transaction, year_start, year_end)


def create_projection_flow(
    source: Optional[TransactionSourceInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> ProjectionFlow:
    """
    Factory function to create a projection flow.

    Args:
        source: Transaction source. Defaults to an empty in-memory source.
        audit_storage: Where audit events are persisted.
                       If None, audit events are only logged locally.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    return ProjectionFlow(
        source=source or InMemoryTransactionSource(),
        audit_logger=AuditLogger(audit_storage),
        settings=settings.projection,
    )
