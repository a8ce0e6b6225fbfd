"""
Storage Package

Provides abstract interfaces and in-memory implementations for the
transaction source and the audit log.
"""

from household_budget.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionSourceInterface,
)
from household_budget.storage.memory import (
    InMemoryAuditStorage,
    InMemoryTransactionSource,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "TransactionSourceInterface",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryTransactionSource",
]
