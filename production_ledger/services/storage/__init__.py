"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
Currently implements a local JSON-file backend, but designed to be swappable.
"""

from production_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from production_ledger.services.storage.local_file import (
    InMemoryStorage,
    LocalFileStorage,
)

__all__ = [
    # Interfaces
    "KeyValueStorageInterface",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "LocalFileStorage",
]
