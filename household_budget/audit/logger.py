"""
Audit Logger

DESIGN DECISION: Every projection run is logged.
This provides:
1. Traceability of which year was projected from which records
2. A record of every transaction that could not be projected
3. Debugging capability when figures look wrong

The audit logger:
- Is async to match the storage interface
- Gracefully handles failures (doesn't crash the flow if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from household_budget.models.audit import AuditEvent, AuditEventBuilder
from household_budget.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_projection_requested(
        self,
        year: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.projection_requested(
            year=year,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transactions_loaded(
        self,
        year: int,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transactions_loaded(
            year=year,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_skipped(
        self,
        transaction_id: str,
        error_code: str,
        message: str,
        year: int,
        correlation_id: UUID,
    ) -> None:
        """Log a transaction left out of a projection."""
        event = AuditEventBuilder.transaction_skipped(
            transaction_id=transaction_id,
            error_code=error_code,
            message=message,
            year=year,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_projection_completed(
        self,
        year: int,
        annual_balance: str,
        skipped_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.projection_completed(
            year=year,
            annual_balance=annual_balance,
            skipped_count=skipped_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_projection_failed(
        self,
        year: int,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.projection_failed(
            year=year,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_source_error(
        self,
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a transaction source failure."""
        event = AuditEventBuilder.source_error(
            source=source,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a projection run and pass it through
    all subsequent operations.
    """
    return uuid4()
