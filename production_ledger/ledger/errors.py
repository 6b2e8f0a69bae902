"""Ledger exceptions."""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class PaymentRejectedError(LedgerError):
    """Payment refused; the ledger is unchanged."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Payment amount must be greater than zero (got {amount})")


class BackupFormatError(LedgerError):
    """Backup document is unparseable or missing a required container."""
    pass


class UnsupportedImportError(LedgerError):
    """Import file type is not supported."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Cannot import '{filename}': only .json full backups can be restored"
        )
