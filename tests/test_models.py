"""
Tests for Production Ledger models

Test strategy:
1. Unit tests for individual components (models, calculator, store)
2. Flow tests with an in-memory store and a fake insight service
3. No real API calls in tests (use stubs)
"""

import datetime

import pytest
from pydantic import ValidationError

from production_ledger.models.ledger import (
    BackupDocument,
    EntryDraft,
    Payment,
    PaymentDraft,
    ProductionEntry,
    SummaryStats,
)
from production_ledger.audit import AuditLogger
from production_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


STORED_ENTRY = {
    "id": "a1",
    "date": "2026-10-01",
    "runningDrum": 5,
    "openStockGrams": 200,
    "productionCones": 10,
    "closingStockGrams": 100,
    "ratePerKg": 150,
    "totalAmount": 2175,
    "productionWeight": 14.5,
    "consumptionKg": 0.1,
}


class TestLedgerModels:
    """Tests for ledger record models."""

    def test_entry_loads_from_camel_case(self):
        """Test ProductionEntry reads the stored field names."""
        entry = ProductionEntry.model_validate(STORED_ENTRY)
        assert entry.running_drum == 5
        assert entry.production_weight == 14.5
        assert entry.period_key == "2026-10"

    def test_entry_dumps_to_camel_case(self):
        """Test ProductionEntry writes the stored field names back."""
        entry = ProductionEntry.model_validate(STORED_ENTRY)
        assert entry.to_json_dict() == STORED_ENTRY

    def test_integers_stay_integers(self):
        """Test integer counts are not turned into floats."""
        entry = ProductionEntry.model_validate(STORED_ENTRY)
        assert isinstance(entry.open_stock_grams, int)
        assert isinstance(entry.total_amount, int)

    def test_entry_is_frozen(self):
        """Test entries cannot be modified after creation."""
        entry = ProductionEntry.model_validate(STORED_ENTRY)
        with pytest.raises(ValidationError):
            entry.total_amount = 1

    def test_missing_fields_get_defaults(self):
        """Test a stored entry with missing fields still loads."""
        entry = ProductionEntry.model_validate({"date": "2026-10-01"})
        assert entry.id
        assert entry.rate_per_kg == 0
        assert entry.total_amount == 0

    def test_unknown_fields_are_kept(self):
        """Test fields this build does not know are written back unchanged."""
        data = dict(STORED_ENTRY, shift="night")
        entry = ProductionEntry.model_validate(data)
        assert entry.to_json_dict() == data

    def test_wrong_value_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            ProductionEntry.model_validate(dict(STORED_ENTRY, ratePerKg="high"))

    def test_payment_note_defaults_to_empty(self):
        """Test Payment note is optional."""
        payment = Payment.model_validate({"id": "p1", "date": "2026-10-02", "amount": 500})
        assert payment.note == ""

    def test_payment_note_whitespace_is_kept(self):
        """Test notes are stored exactly as typed."""
        payment = Payment(id="p1", date="2026-10-02", amount=500, note="  cash ")
        assert payment.note == "  cash "


class TestDraftModels:
    """Tests for form input models."""

    def test_entry_draft_accepts_date_object(self):
        """Test a date widget value becomes an ISO string."""
        draft = EntryDraft(
            date=datetime.date(2026, 3, 7),
            running_drum=1,
            open_stock_grams=0,
            production_cones=1,
            closing_stock_grams=0,
            rate_per_kg=10,
        )
        assert draft.date == "2026-03-07"

    def test_entry_draft_requires_fields(self):
        """Test missing form fields are rejected."""
        with pytest.raises(ValidationError):
            EntryDraft(date="2026-10-01", running_drum=1)

    def test_entry_draft_accepts_negative_values(self):
        """Test physical plausibility is not validated."""
        draft = EntryDraft(
            date="2026-10-01",
            running_drum=-1,
            open_stock_grams=-50,
            production_cones=0,
            closing_stock_grams=0,
            rate_per_kg=0,
        )
        assert draft.open_stock_grams == -50

    def test_payment_draft_allows_zero_amount(self):
        """Test the positive-amount rule lives in the store, not the draft."""
        draft = PaymentDraft(date="2026-10-01", amount=0)
        assert draft.amount == 0

    def test_payment_draft_requires_date(self):
        """Test an empty date is rejected."""
        with pytest.raises(ValidationError):
            PaymentDraft(date="", amount=10)


class TestDerivedModels:
    """Tests for SummaryStats and BackupDocument."""

    def test_summary_overpaid_flag(self):
        """Test negative balance means overpaid."""
        assert SummaryStats(outstanding_balance=-0.01).is_overpaid is True
        assert SummaryStats(outstanding_balance=0).is_overpaid is False

    def test_summary_serializes_camel_case(self):
        """Test SummaryStats uses the original field names."""
        data = SummaryStats(total_paid=10).to_json_dict()
        assert data["totalPaid"] == 10
        assert "outstandingBalance" in data

    def test_backup_document_field_order(self):
        """Test backup keys come out in the documented order."""
        doc = BackupDocument(export_date="2026-10-19T00:00:00.000Z")
        assert list(doc.to_json_dict()) == ["entries", "payments", "version", "exportDate"]
        assert doc.version == "1.0"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            description="Test entry added",
        )
        assert event.event_type == AuditEventType.ENTRY_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.payment_added(
            payment_id="p1",
            payment_date="2026-10-02",
            amount=500,
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "payment_added"
        assert log_dict["entity_id"] == "p1"
        assert log_dict["details"]["amount"] == 500

    def test_payment_rejected_is_warning(self):
        """Test AuditEventBuilder.payment_rejected."""
        event = AuditEventBuilder.payment_rejected(0)
        assert event.event_type == AuditEventType.PAYMENT_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.is_user_action is True

    def test_long_description_is_clipped(self):
        """Test an oversized file name cannot break event creation."""
        event = AuditEventBuilder.import_failed("x" * 2000 + ".csv", "unsupported")
        assert len(event.description) <= 500
        assert event.description.endswith("...")

    def test_storage_read_failed_is_not_user_action(self):
        """Test AuditEventBuilder.storage_read_failed."""
        event = AuditEventBuilder.storage_read_failed("production_entries", "bad json")
        assert event.entity_id == "production_entries"
        assert event.error_message == "bad json"
        assert event.is_user_action is False


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_returns_true(self):
        assert AuditLogger().log(AuditEventBuilder.entry_deleted("e1")) is True

    def test_logging_failure_is_swallowed(self):
        """Test a broken log sink never reaches the caller."""
        class BrokenLogger:
            def info(self, *args, **kwargs):
                raise OSError("disk full")

        audit_logger = AuditLogger()
        audit_logger._logger = BrokenLogger()
        assert audit_logger.log(AuditEventBuilder.entry_deleted("e1")) is False
        audit_logger.log_entry_deleted("e1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
