"""
Ledger Store

Owns the two ledger collections (production entries and payments) and
keeps them in step with the key-value storage.

GUARANTEES:
- Newest record first, by insertion (not by date)
- Derived entry fields are computed here, once, via the calculator
- Every mutation rewrites the affected collection to storage before
  returning; in-memory and persisted state never drift apart
- replace_all swaps both collections together
- Unreadable stored data loads as an empty collection, never an error;
  a record that cannot be read is skipped, the rest still load

Confirmation of destructive actions is the caller's job. By the time
delete_* or replace_all is called, the user has already said yes.
"""

import json
import threading
from typing import Iterable, Optional

from pydantic import ValidationError

from production_ledger.audit import AuditLogger
from production_ledger.config import get_settings
from production_ledger.ledger.calculator import (
    calculate_consumption_kg,
    calculate_production_weight,
    calculate_total_amount,
)
from production_ledger.ledger.errors import PaymentRejectedError
from production_ledger.models.ledger import (
    EntryDraft,
    Payment,
    PaymentDraft,
    ProductionEntry,
    new_record_id,
)
from production_ledger.services.storage import (
    KeyValueStorageInterface,
    StorageReadError,
)


class LedgerStore:
    """
    In-memory ledger backed by key-value storage.

    Create it, call load() once, then hand it to the flows.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        entries_key: Optional[str] = None,
        payments_key: Optional[str] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

        if entries_key is None or payments_key is None:
            storage_settings = get_settings().storage
            entries_key = entries_key or storage_settings.entries_key
            payments_key = payments_key or storage_settings.payments_key
        self._entries_key = entries_key
        self._payments_key = payments_key

        self._entries: list[ProductionEntry] = []
        self._payments: list[Payment] = []
        # One lock for both collections: replace_all must be atomic across them.
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def entries(self) -> tuple[ProductionEntry, ...]:
        """Snapshot of all entries, newest first."""
        with self._lock:
            return tuple(self._entries)

    @property
    def payments(self) -> tuple[Payment, ...]:
        """Snapshot of all payments, newest first."""
        with self._lock:
            return tuple(self._payments)

    def form_defaults(self) -> dict:
        """
        Values to pre-fill the production form with.

        Drum counter and rate usually carry over from one day to
        the next, so they come from the most recent entry.
        """
        with self._lock:
            latest = self._entries[0] if self._entries else None
        return {
            "running_drum": latest.running_drum if latest else 0,
            "rate_per_kg": latest.rate_per_kg if latest else 0,
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> "LedgerStore":
        """Restore both collections from storage."""
        entries = self._read_collection(self._entries_key, ProductionEntry)
        payments = self._read_collection(self._payments_key, Payment)
        with self._lock:
            self._entries = entries
            self._payments = payments
        return self

    def _read_collection(self, key: str, model: type) -> list:
        try:
            raw = self._storage.get(key)
        except StorageReadError as e:
            self._log_read_failure(key, str(e))
            return []

        if raw is None:
            return []

        try:
            items = json.loads(raw)
        except json.JSONDecodeError as e:
            self._log_read_failure(key, str(e))
            return []
        if not isinstance(items, list):
            self._log_read_failure(key, "stored value is not a JSON array")
            return []

        # Records load one by one; a single bad record costs only itself.
        records = []
        for position, item in enumerate(items):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                self._log_read_failure(
                    key,
                    f"record {position} skipped: {e.error_count()} unreadable field(s)",
                )
        return records

    def _log_read_failure(self, key: str, error_message: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_storage_read_failed(key, error_message)

    def _persist_entries(self) -> None:
        self._storage.set(
            self._entries_key,
            json.dumps([e.to_json_dict() for e in self._entries]),
        )

    def _persist_payments(self) -> None:
        self._storage.set(
            self._payments_key,
            json.dumps([p.to_json_dict() for p in self._payments]),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_entry(self, draft: EntryDraft) -> ProductionEntry:
        """Derive weight, amount and consumption, then record the entry."""
        weight = calculate_production_weight(
            draft.running_drum,
            draft.open_stock_grams,
            draft.closing_stock_grams,
            draft.production_cones,
        )
        entry = ProductionEntry(
            id=new_record_id(),
            date=draft.date,
            running_drum=draft.running_drum,
            open_stock_grams=draft.open_stock_grams,
            production_cones=draft.production_cones,
            closing_stock_grams=draft.closing_stock_grams,
            rate_per_kg=draft.rate_per_kg,
            total_amount=calculate_total_amount(weight, draft.rate_per_kg),
            production_weight=weight,
            consumption_kg=calculate_consumption_kg(
                draft.open_stock_grams,
                draft.closing_stock_grams,
            ),
        )

        with self._lock:
            self._entries.insert(0, entry)
            try:
                self._persist_entries()
            except Exception:
                self._entries.pop(0)
                raise

        if self._audit_logger:
            self._audit_logger.log_entry_added(
                entry_id=entry.id,
                entry_date=entry.date,
                weight_kg=entry.production_weight,
                amount=entry.total_amount,
            )
        return entry

    def add_payment(self, draft: PaymentDraft) -> Payment:
        """
        Record a payment.

        Raises:
            PaymentRejectedError: amount is zero or negative
        """
        if draft.amount <= 0:
            if self._audit_logger:
                self._audit_logger.log_payment_rejected(draft.amount)
            raise PaymentRejectedError(draft.amount)

        payment = Payment(
            id=new_record_id(),
            date=draft.date,
            amount=draft.amount,
            note=draft.note,
        )

        with self._lock:
            self._payments.insert(0, payment)
            try:
                self._persist_payments()
            except Exception:
                self._payments.pop(0)
                raise

        if self._audit_logger:
            self._audit_logger.log_payment_added(
                payment_id=payment.id,
                payment_date=payment.date,
                amount=payment.amount,
            )
        return payment

    def delete_entry(self, entry_id: str) -> bool:
        """
        Remove an entry by id.

        Returns False, and touches nothing, if the id is unknown.
        """
        with self._lock:
            index = _index_of(self._entries, entry_id)
            if index is None:
                return False
            removed = self._entries.pop(index)
            try:
                self._persist_entries()
            except Exception:
                self._entries.insert(index, removed)
                raise

        if self._audit_logger:
            self._audit_logger.log_entry_deleted(entry_id)
        return True

    def delete_payment(self, payment_id: str) -> bool:
        """
        Remove a payment by id.

        Returns False, and touches nothing, if the id is unknown.
        """
        with self._lock:
            index = _index_of(self._payments, payment_id)
            if index is None:
                return False
            removed = self._payments.pop(index)
            try:
                self._persist_payments()
            except Exception:
                self._payments.insert(index, removed)
                raise

        if self._audit_logger:
            self._audit_logger.log_payment_deleted(payment_id)
        return True

    def replace_all(
        self,
        entries: Iterable[ProductionEntry],
        payments: Iterable[Payment],
    ) -> None:
        """
        Replace both collections wholesale (restore from backup).

        If either write fails, both collections and both stored
        values are put back the way they were.
        """
        new_entries = list(entries)
        new_payments = list(payments)

        with self._lock:
            old_entries, old_payments = self._entries, self._payments
            self._entries, self._payments = new_entries, new_payments
            try:
                self._persist_entries()
                self._persist_payments()
            except Exception:
                self._entries, self._payments = old_entries, old_payments
                self._persist_entries()
                self._persist_payments()
                raise


def _index_of(records: list, record_id: str) -> Optional[int]:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None
