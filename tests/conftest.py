"""Shared fixtures: an in-memory ledger and draft factories."""

import pytest

from production_ledger.ledger.store import LedgerStore
from production_ledger.models.ledger import EntryDraft, PaymentDraft
from production_ledger.services.storage import InMemoryStorage


ENTRIES_KEY = "production_entries"
PAYMENTS_KEY = "production_payments"


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage):
    return LedgerStore(
        storage=storage,
        entries_key=ENTRIES_KEY,
        payments_key=PAYMENTS_KEY,
    ).load()


@pytest.fixture
def entry_draft():
    """Build an EntryDraft; defaults are the worked example (14.5 kg, 2175.00)."""
    def _make(**overrides):
        fields = {
            "date": "2026-10-01",
            "running_drum": 5,
            "open_stock_grams": 200,
            "production_cones": 10,
            "closing_stock_grams": 100,
            "rate_per_kg": 150,
        }
        fields.update(overrides)
        return EntryDraft(**fields)
    return _make


@pytest.fixture
def payment_draft():
    def _make(**overrides):
        fields = {"date": "2026-10-02", "amount": 500, "note": ""}
        fields.update(overrides)
        return PaymentDraft(**fields)
    return _make
