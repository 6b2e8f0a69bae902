"""
Audit Logger

DESIGN DECISION: Every significant ledger action is logged.
This provides:
1. Traceability of adds, deletes and restores
2. Debugging capability when stored data turns out to be corrupt
3. A record of confirmed and cancelled destructive actions

The audit logger:
- Is synchronous, like the ledger mutations it records
- Never raises (a logging failure must not undo a ledger write)
- Writes structured JSON lines through structlog
"""

import structlog

from production_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log at the level
    matching their severity.
    """

    def __init__(self, logger_name: str = "production_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            return False

        return True

    def log_entry_added(
        self,
        entry_id: str,
        entry_date: str,
        weight_kg: float,
        amount: float,
    ) -> None:
        """Log a new production entry."""
        self.log(AuditEventBuilder.entry_added(
            entry_id=entry_id,
            entry_date=entry_date,
            weight_kg=weight_kg,
            amount=amount,
        ))

    def log_entry_deleted(self, entry_id: str) -> None:
        """Log production entry deletion."""
        self.log(AuditEventBuilder.entry_deleted(entry_id))

    def log_payment_added(
        self,
        payment_id: str,
        payment_date: str,
        amount: float,
    ) -> None:
        """Log a new payment."""
        self.log(AuditEventBuilder.payment_added(
            payment_id=payment_id,
            payment_date=payment_date,
            amount=amount,
        ))

    def log_payment_rejected(self, amount: float) -> None:
        """Log a refused payment."""
        self.log(AuditEventBuilder.payment_rejected(amount))

    def log_payment_deleted(self, payment_id: str) -> None:
        """Log payment deletion."""
        self.log(AuditEventBuilder.payment_deleted(payment_id))

    def log_delete_cancelled(self, entity_type: str, entity_id: str) -> None:
        """Log that the user backed out of a deletion."""
        self.log(AuditEventBuilder.delete_cancelled(entity_type, entity_id))

    def log_csv_exported(self, kind: str, filename: str, row_count: int) -> None:
        """Log a CSV export."""
        self.log(AuditEventBuilder.csv_exported(kind, filename, row_count))

    def log_backup_exported(
        self,
        filename: str,
        entry_count: int,
        payment_count: int,
    ) -> None:
        """Log a full backup export."""
        self.log(AuditEventBuilder.backup_exported(
            filename=filename,
            entry_count=entry_count,
            payment_count=payment_count,
        ))

    def log_backup_restored(
        self,
        filename: str,
        entry_count: int,
        payment_count: int,
    ) -> None:
        """Log a wholesale restore."""
        self.log(AuditEventBuilder.backup_restored(
            filename=filename,
            entry_count=entry_count,
            payment_count=payment_count,
        ))

    def log_restore_cancelled(self, filename: str) -> None:
        """Log that the user backed out of a restore."""
        self.log(AuditEventBuilder.restore_cancelled(filename))

    def log_import_failed(self, filename: str, error_message: str) -> None:
        """Log a rejected import file."""
        self.log(AuditEventBuilder.import_failed(filename, error_message))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        """Log unreadable persisted data."""
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_insight_requested(self, period_key: str, entry_count: int) -> None:
        """Log an AI insight request."""
        self.log(AuditEventBuilder.insight_requested(period_key, entry_count))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
        ))
