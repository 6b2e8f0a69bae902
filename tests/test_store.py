"""
Tests for LedgerStore

Every mutation must leave memory and storage in agreement, whether it
succeeds or fails.
"""

import json

import pytest

from production_ledger.ledger.errors import PaymentRejectedError
from production_ledger.ledger.store import LedgerStore
from production_ledger.models.ledger import Payment, ProductionEntry
from production_ledger.services.storage import InMemoryStorage, StorageWriteError


ENTRIES_KEY = "production_entries"
PAYMENTS_KEY = "production_payments"


class FlakyStorage(InMemoryStorage):
    """InMemoryStorage whose writes can be switched off."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    def set(self, key, value):
        if self.fail_writes:
            raise StorageWriteError(f"disk full writing {key}")
        super().set(key, value)


def stored(storage, key):
    return json.loads(storage.get(key))


class TestAddEntry:
    """Tests for LedgerStore.add_entry."""

    def test_derived_fields(self, store, entry_draft):
        """Test weight, amount and consumption are computed on add."""
        entry = store.add_entry(entry_draft())
        assert entry.production_weight == 14.5
        assert entry.total_amount == 2175.0
        assert entry.consumption_kg == 0.1
        assert entry.id

    def test_newest_first(self, store, entry_draft):
        """Test a later add goes to the front regardless of its date."""
        first = store.add_entry(entry_draft(date="2026-10-05"))
        second = store.add_entry(entry_draft(date="2026-09-01"))
        assert [e.id for e in store.entries] == [second.id, first.id]

    def test_ids_are_unique(self, store, entry_draft):
        ids = {store.add_entry(entry_draft()).id for _ in range(20)}
        assert len(ids) == 20

    def test_persisted_with_stored_field_names(self, store, storage, entry_draft):
        """Test the whole collection is written as a camelCase array."""
        entry = store.add_entry(entry_draft())
        data = stored(storage, ENTRIES_KEY)
        assert len(data) == 1
        assert data[0]["id"] == entry.id
        assert data[0]["runningDrum"] == 5
        assert data[0]["productionWeight"] == 14.5
        assert data[0]["totalAmount"] == 2175.0

    def test_write_failure_rolls_back(self, entry_draft):
        """Test a failed write leaves the ledger unchanged."""
        storage = FlakyStorage()
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        store.add_entry(entry_draft())

        storage.fail_writes = True
        with pytest.raises(StorageWriteError):
            store.add_entry(entry_draft(date="2026-10-09"))

        assert len(store.entries) == 1
        assert len(stored(storage, ENTRIES_KEY)) == 1


class TestAddPayment:
    """Tests for LedgerStore.add_payment."""

    def test_records_payment(self, store, storage, payment_draft):
        payment = store.add_payment(payment_draft(note="cash"))
        assert store.payments == (payment,)
        assert stored(storage, PAYMENTS_KEY) == [
            {"id": payment.id, "date": "2026-10-02", "amount": 500, "note": "cash"}
        ]

    @pytest.mark.parametrize("amount", [0, -1, -0.01])
    def test_non_positive_rejected(self, store, storage, payment_draft, amount):
        """Test zero and negative amounts are refused without a write."""
        with pytest.raises(PaymentRejectedError):
            store.add_payment(payment_draft(amount=amount))
        assert store.payments == ()
        assert storage.get(PAYMENTS_KEY) is None

    def test_newest_first(self, store, payment_draft):
        first = store.add_payment(payment_draft(amount=1))
        second = store.add_payment(payment_draft(amount=2))
        assert [p.id for p in store.payments] == [second.id, first.id]


class TestDelete:
    """Tests for delete_entry and delete_payment."""

    def test_delete_entry_removes_exactly_one(self, store, storage, entry_draft):
        keep = store.add_entry(entry_draft())
        drop = store.add_entry(entry_draft())
        assert store.delete_entry(drop.id) is True
        assert [e.id for e in store.entries] == [keep.id]
        assert [e["id"] for e in stored(storage, ENTRIES_KEY)] == [keep.id]

    def test_delete_unknown_entry(self, store, storage, entry_draft):
        """Test deleting an unknown id changes nothing and writes nothing."""
        store.add_entry(entry_draft())
        before = storage.get(ENTRIES_KEY)
        assert store.delete_entry("missing") is False
        assert len(store.entries) == 1
        assert storage.get(ENTRIES_KEY) == before

    def test_delete_payment(self, store, payment_draft):
        payment = store.add_payment(payment_draft())
        assert store.delete_payment(payment.id) is True
        assert store.payments == ()
        assert store.delete_payment(payment.id) is False

    def test_delete_failure_restores_position(self, entry_draft):
        storage = FlakyStorage()
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        ids = [store.add_entry(entry_draft()).id for _ in range(3)]
        order = [e.id for e in store.entries]

        storage.fail_writes = True
        with pytest.raises(StorageWriteError):
            store.delete_entry(ids[1])
        assert [e.id for e in store.entries] == order


class TestLoad:
    """Tests for LedgerStore.load."""

    def test_round_trip(self, store, storage, entry_draft, payment_draft):
        """Test a fresh store over the same storage sees the same ledger."""
        store.add_entry(entry_draft())
        store.add_payment(payment_draft(note='He said "ok"'))

        reloaded = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        assert reloaded.entries == store.entries
        assert reloaded.payments == store.payments

    def test_absent_keys_load_empty(self, store):
        assert store.entries == ()
        assert store.payments == ()

    @pytest.mark.parametrize("raw", ["not json", '{"a": 1}', '[1, "x"]'])
    def test_corrupt_data_loads_empty(self, raw):
        """Test unreadable data becomes an empty collection."""
        storage = InMemoryStorage({ENTRIES_KEY: raw, PAYMENTS_KEY: raw})
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        assert store.entries == ()
        assert store.payments == ()

    def test_bad_record_costs_only_itself(self):
        """Test one unreadable record does not discard the collection."""
        raw = json.dumps([
            {"id": "p2", "date": "2026-10-03", "amount": 20, "note": ""},
            "garbage",
            {"id": "p1", "date": "2026-10-02"},
        ])
        storage = InMemoryStorage({PAYMENTS_KEY: raw})
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        assert [p.id for p in store.payments] == ["p2", "p1"]
        assert store.payments[1].amount == 0

    def test_one_bad_collection_does_not_affect_other(self, payment_draft):
        payments = json.dumps([{"id": "p1", "date": "2026-10-02", "amount": 10, "note": ""}])
        storage = InMemoryStorage({ENTRIES_KEY: "{{", PAYMENTS_KEY: payments})
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        assert store.entries == ()
        assert [p.id for p in store.payments] == ["p1"]


class TestReplaceAll:
    """Tests for LedgerStore.replace_all."""

    def test_replaces_both_collections(self, store, storage, entry_draft, payment_draft):
        store.add_entry(entry_draft())
        store.add_payment(payment_draft())

        entry = ProductionEntry(
            id="e9", date="2025-01-01", running_drum=1, open_stock_grams=0,
            production_cones=1, closing_stock_grams=1, rate_per_kg=10,
            total_amount=12.8, production_weight=1.28, consumption_kg=-0.001,
        )
        store.replace_all([entry], [])

        assert store.entries == (entry,)
        assert store.payments == ()
        assert stored(storage, ENTRIES_KEY)[0]["id"] == "e9"
        assert stored(storage, PAYMENTS_KEY) == []

    def test_failure_keeps_old_ledger(self, entry_draft):
        storage = FlakyStorage()
        store = LedgerStore(storage, entries_key=ENTRIES_KEY, payments_key=PAYMENTS_KEY).load()
        original = store.add_entry(entry_draft())

        storage.fail_writes = True
        with pytest.raises(StorageWriteError):
            store.replace_all([], [Payment(id="p", date="2026-01-01", amount=1)])
        storage.fail_writes = False

        assert store.entries == (original,)
        assert store.payments == ()


class TestFormDefaults:
    """Tests for LedgerStore.form_defaults."""

    def test_empty_ledger(self, store):
        assert store.form_defaults() == {"running_drum": 0, "rate_per_kg": 0}

    def test_carries_over_latest_entry(self, store, entry_draft):
        store.add_entry(entry_draft(running_drum=3, rate_per_kg=120))
        store.add_entry(entry_draft(running_drum=7, rate_per_kg=155))
        assert store.form_defaults() == {"running_drum": 7, "rate_per_kg": 155}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
