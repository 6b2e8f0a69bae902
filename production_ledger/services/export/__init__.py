"""
Export / Import Package

CSV export, full JSON backups, and restore from backup.
"""

from production_ledger.services.export.backup import (
    BACKUP_MIME_TYPE,
    BACKUP_VERSION,
    backup_filename,
    backup_to_json,
    build_backup,
    parse_backup,
)
from production_ledger.services.export.importer import (
    SUPPORTED_IMPORT_SUFFIXES,
    ImportResult,
    restore_from_file,
)
from production_ledger.services.export.tabular import (
    CSV_MIME_TYPE,
    PAYMENT_HEADERS,
    PRODUCTION_HEADERS,
    entries_to_csv,
    payments_csv_filename,
    payments_to_csv,
    production_csv_filename,
)

__all__ = [
    # Backup
    "BACKUP_MIME_TYPE",
    "BACKUP_VERSION",
    "backup_filename",
    "backup_to_json",
    "build_backup",
    "parse_backup",
    # Import
    "SUPPORTED_IMPORT_SUFFIXES",
    "ImportResult",
    "restore_from_file",
    # CSV
    "CSV_MIME_TYPE",
    "PAYMENT_HEADERS",
    "PRODUCTION_HEADERS",
    "entries_to_csv",
    "payments_csv_filename",
    "payments_to_csv",
    "production_csv_filename",
]
