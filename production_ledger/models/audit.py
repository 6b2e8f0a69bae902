"""
Audit Models for Production Ledger

Every significant ledger action is logged for audit purposes.
This provides:
1. Traceability of every add, delete and restore
2. Debugging information when a backup or storage read goes wrong
3. A record of destructive actions the user confirmed or cancelled

DESIGN DECISION: Audit events are append-only log lines. We never
delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


DESCRIPTION_MAX_LENGTH = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    What happened to the ledger.
    """
    # Production entries
    ENTRY_ADDED = "entry_added"
    ENTRY_DELETED = "entry_deleted"

    # Payments
    PAYMENT_ADDED = "payment_added"
    PAYMENT_REJECTED = "payment_rejected"
    PAYMENT_DELETED = "payment_deleted"

    # Human confirmation
    DELETE_CANCELLED = "delete_cancelled"
    RESTORE_CANCELLED = "restore_cancelled"

    # Export / import
    CSV_EXPORTED = "csv_exported"
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_RESTORED = "backup_restored"
    IMPORT_FAILED = "import_failed"

    # Persistence
    STORAGE_READ_FAILED = "storage_read_failed"

    # Insights
    INSIGHT_REQUESTED = "insight_requested"

    # System events
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One line of the audit trail.

    entity_id is a record id, a storage key or a file name,
    depending on entity_type.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (e.g., 'entry', 'payment', 'backup')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    @field_validator('description', mode='before')
    @classmethod
    def clip_description(cls, v):
        """Descriptions can embed user-supplied file names; clip, never fail."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[: DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    One constructor per ledger event, so call sites stay short.

    Usage:
        event = AuditEventBuilder.entry_added(entry_id, date, weight, amount)
        event = AuditEventBuilder.delete_cancelled("payment", payment_id)
    """

    @staticmethod
    def entry_added(
        entry_id: str,
        entry_date: str,
        weight_kg: float,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"Production entry added for {entry_date}: {weight_kg} kg",
            details={
                "date": entry_date,
                "production_weight": weight_kg,
                "total_amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(entry_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            description="Production entry deleted",
            is_user_action=True,
        )

    @staticmethod
    def payment_added(
        payment_id: str,
        payment_date: str,
        amount: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_ADDED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment of {amount} recorded for {payment_date}",
            details={
                "date": payment_date,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_rejected(amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="payment",
            description="Payment rejected: amount must be greater than zero",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def payment_deleted(payment_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_DELETED,
            entity_type="payment",
            entity_id=payment_id,
            description="Payment deleted",
            is_user_action=True,
        )

    @staticmethod
    def delete_cancelled(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_CANCELLED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"User cancelled deletion of {entity_type}",
            is_user_action=True,
        )

    @staticmethod
    def csv_exported(kind: str, filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type=kind,
            description=f"Exported {row_count} {kind} rows to {filename}",
            details={
                "filename": filename,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_exported(
        filename: str,
        entry_count: int,
        payment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_EXPORTED,
            entity_type="backup",
            description=f"Full backup exported to {filename}",
            details={
                "filename": filename,
                "entries": entry_count,
                "payments": payment_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_restored(
        filename: str,
        entry_count: int,
        payment_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            description=f"Ledger replaced from backup {filename}",
            details={
                "filename": filename,
                "entries": entry_count,
                "payments": payment_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def restore_cancelled(filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTORE_CANCELLED,
            entity_type="backup",
            description=f"User cancelled restore from {filename}",
            is_user_action=True,
        )

    @staticmethod
    def import_failed(filename: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            description=f"Import of {filename} failed",
            error_message=error_message,
            details={"filename": filename},
            is_user_action=True,
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Stored data for '{key}' was unreadable; starting empty",
            error_message=error_message,
        )

    @staticmethod
    def insight_requested(period_key: str, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INSIGHT_REQUESTED,
            entity_type="insight",
            description=f"AI insight requested for {period_key}",
            details={
                "period": period_key,
                "entries_sent": entry_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
        )
