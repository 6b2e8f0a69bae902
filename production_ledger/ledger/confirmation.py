"""
Confirmation Gate

Destructive actions (deleting a record, restoring a backup) need a "yes"
from the user. The ledger never asks by itself: the caller passes in a
confirm(intent) -> bool callable, and the UI decides how to ask.
"""

from enum import Enum
from typing import Callable


class ConfirmIntent(str, Enum):
    """What the user is being asked to approve."""
    DELETE_ENTRY = "delete_entry"
    DELETE_PAYMENT = "delete_payment"
    RESTORE_BACKUP = "restore_backup"

    @property
    def prompt(self) -> str:
        return _PROMPTS[self]


_PROMPTS = {
    ConfirmIntent.DELETE_ENTRY: "Delete log?",
    ConfirmIntent.DELETE_PAYMENT: "Delete payment?",
    ConfirmIntent.RESTORE_BACKUP: "Restore from Backup? This will REPLACE current data.",
}


Confirm = Callable[[ConfirmIntent], bool]
