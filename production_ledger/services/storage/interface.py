"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a plain key-value interface,
the same shape as browser localStorage: string keys, string values.
This allows us to:
1. Keep JSON encoding in the ledger store, not in the backend
2. Use in-memory storage for testing
3. Swap the local file backend for something else later

The interface is intentionally tiny. The ledger only ever reads a whole
collection at startup and rewrites a whole collection after a mutation.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        The write must be all-or-nothing: a reader never sees
        a partially written value.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored value could not be read."""
    pass


class StorageWriteError(StorageError):
    """Value could not be written to storage."""
    pass
