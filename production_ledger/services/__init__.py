"""Services package."""

from production_ledger.services.storage import (
    InMemoryStorage,
    KeyValueStorageInterface,
    LocalFileStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from production_ledger.services.export import (
    ImportResult,
    backup_to_json,
    build_backup,
    entries_to_csv,
    parse_backup,
    payments_to_csv,
    restore_from_file,
)

__all__ = [
    # Storage services
    "InMemoryStorage",
    "KeyValueStorageInterface",
    "LocalFileStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Export services
    "ImportResult",
    "backup_to_json",
    "build_backup",
    "entries_to_csv",
    "parse_backup",
    "payments_to_csv",
    "restore_from_file",
]
