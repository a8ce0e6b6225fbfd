"""
In-Memory Storage

Dictionary-backed implementations of the storage interfaces. Used by the
test-suite and by callers that already hold their transactions in memory.
"""

from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from household_budget.models.audit import AuditEvent
from household_budget.models.transaction import Transaction
from household_budget.storage.interface import (
    AuditStorageInterface,
    TransactionSourceInterface,
)


class InMemoryTransactionSource(TransactionSourceInterface):
    """Transaction source over a fixed collection of records."""

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._transactions: dict[str, Transaction] = {}
        for transaction in transactions:
            self.add(transaction)

    def add(self, transaction: Transaction) -> None:
        """Add or replace a transaction (keyed by id)."""
        self._transactions[transaction.id] = transaction

    async def list_transactions(
        self,
        due_from: Optional[date] = None,
        include_recurring: bool = True,
    ) -> list[Transaction]:
        results = []
        for transaction in self._transactions.values():
            if due_from is None or transaction.due_date >= due_from:
                results.append(transaction)
            elif include_recurring and transaction.is_recurring:
                results.append(transaction)

        return sorted(results, key=lambda t: t.due_date)

    async def get_transaction_by_id(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log kept in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        """Copy of all events in insertion order."""
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
