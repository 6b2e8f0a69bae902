"""
Backup Import

Restores the ledger from an uploaded file. All-or-nothing:
1. Only .json full backups are accepted
2. The whole document is parsed and checked before anything changes
3. The user must confirm the replacement
4. Both collections are swapped together

Any failure before step 4 leaves the ledger exactly as it was.

CSV files are refused: the CSV exports carry neither record ids nor the
derived consumption column, so they cannot restore a ledger faithfully.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Union

from pydantic import BaseModel, Field

from production_ledger.ledger.confirmation import Confirm, ConfirmIntent
from production_ledger.ledger.errors import BackupFormatError, UnsupportedImportError
from production_ledger.services.export.backup import parse_backup

if TYPE_CHECKING:
    from production_ledger.ledger.store import LedgerStore


SUPPORTED_IMPORT_SUFFIXES = (".json",)


class ImportResult(BaseModel):
    """Outcome of an import attempt the user did not get an error for."""

    filename: str
    restored: bool = Field(
        ...,
        description="Was the ledger replaced?"
    )
    entry_count: int = Field(default=0, ge=0)
    payment_count: int = Field(default=0, ge=0)
    message: str


def decode_upload(content: Union[str, bytes]) -> str:
    """Uploaded bytes to text (UTF-8, BOM tolerated)."""
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise BackupFormatError(f"Backup is not UTF-8 text: {e.reason}")


def restore_from_file(
    store: "LedgerStore",
    filename: str,
    content: Union[str, bytes],
    confirm: Confirm,
) -> ImportResult:
    """
    Replace the ledger with the contents of a backup file.

    Raises:
        UnsupportedImportError: file is not a .json backup
        BackupFormatError: file could not be parsed or is incomplete
    """
    if Path(filename).suffix.lower() not in SUPPORTED_IMPORT_SUFFIXES:
        raise UnsupportedImportError(filename)

    document = parse_backup(decode_upload(content))
    entry_count = len(document.entries)
    payment_count = len(document.payments)

    if not confirm(ConfirmIntent.RESTORE_BACKUP):
        return ImportResult(
            filename=filename,
            restored=False,
            entry_count=entry_count,
            payment_count=payment_count,
            message="Restore cancelled. Your current data was not changed.",
        )

    store.replace_all(document.entries, document.payments)

    return ImportResult(
        filename=filename,
        restored=True,
        entry_count=entry_count,
        payment_count=payment_count,
        message=f"Restored {entry_count} entries and {payment_count} payments.",
    )
