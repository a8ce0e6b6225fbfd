"""
Abstract Storage Interface

DESIGN DECISION: The projection engine never talks to a database.
Transactions reach it through this interface, which allows us to:
1. Plug in the hosted backend without touching the engine
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally small - only the reads the projection
flow needs, plus the append-only audit log.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

from household_budget.models.audit import AuditEvent
from household_budget.models.transaction import Transaction


class TransactionSourceInterface(ABC):
    """
    Abstract interface for reading transaction records.

    Implementations have already scoped the records to one household.
    """

    @abstractmethod
    async def list_transactions(
        self,
        due_from: Optional[date] = None,
        include_recurring: bool = True,
    ) -> list[Transaction]:
        """
        List transactions ordered by due date.

        Args:
            due_from: Only transactions due on or after this date...
            include_recurring: ...unless they recur, when this is True

        Returns:
            Matching transactions

        Raises:
            StorageConnectionError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def get_transaction_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one projection run).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
