"""
Data Models Package

This package contains all Pydantic models used in the Production Ledger.
All data flowing through the system must conform to these schemas.
"""

from production_ledger.models.ledger import (
    BackupDocument,
    EntryDraft,
    Payment,
    PaymentDraft,
    ProductionEntry,
    SummaryStats,
)
from production_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "BackupDocument",
    "EntryDraft",
    "Payment",
    "PaymentDraft",
    "ProductionEntry",
    "SummaryStats",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
