"""
Audit Models for the Projection Flow

Every projection run leaves a trail:
1. Which year was requested and by whom (correlation ID)
2. How many transactions the source returned
3. Which transactions could not be projected, and why
4. The resulting annual figures

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Projection lifecycle
    PROJECTION_REQUESTED = "projection_requested"
    TRANSACTIONS_LOADED = "transactions_loaded"
    TRANSACTION_SKIPPED = "transaction_skipped"
    PROJECTION_COMPLETED = "projection_completed"
    PROJECTION_FAILED = "projection_failed"

    # System events
    SOURCE_ERROR = "source_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'projection', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events of one projection run share this
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.projection_requested(2024, correlation_id)
        event = AuditEventBuilder.transaction_skipped(warning, 2024, correlation_id)
    """

    @staticmethod
    def projection_requested(
        year: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECTION_REQUESTED,
            entity_type="projection",
            entity_id=str(year),
            correlation_id=correlation_id,
            description=f"Projection requested for {year}",
            details={"year": year},
        )

    @staticmethod
    def transactions_loaded(
        year: int,
        transaction_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_LOADED,
            entity_type="projection",
            entity_id=str(year),
            correlation_id=correlation_id,
            description=f"Loaded {transaction_count} transactions for {year}",
            details={"transaction_count": transaction_count},
        )

    @staticmethod
    def transaction_skipped(
        transaction_id: str,
        error_code: str,
        message: str,
        year: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction could not be projected for {year}",
            details={"year": year},
            error_code=error_code,
            error_message=message,
        )

    @staticmethod
    def projection_completed(
        year: int,
        annual_balance: str,
        skipped_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECTION_COMPLETED,
            entity_type="projection",
            entity_id=str(year),
            correlation_id=correlation_id,
            description=f"Projection for {year} completed: balance {annual_balance}",
            details={
                "annual_balance": annual_balance,
                "skipped_count": skipped_count,
            },
        )

    @staticmethod
    def projection_failed(
        year: int,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECTION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="projection",
            entity_id=str(year),
            correlation_id=correlation_id,
            description=f"Projection for {year} failed",
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def source_error(
        source: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SOURCE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Transaction source error: {source}",
            error_message=error_message,
            details={"source": source},
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
