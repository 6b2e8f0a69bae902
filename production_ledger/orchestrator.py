"""
Main Orchestrator for Production Ledger

This module ties the ledger components together and defines the
flows the dashboard drives:
1. Record (form input → calculator → store)
2. Remove (confirm → delete → persist)
3. View (period filter → aggregator)
4. Export / Import (CSV, full backup, restore)
5. Insight (recent entries → external analyst → text)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is deleted or restored without a "yes" from confirm()
- A failed import never touches the ledger
- The insight request can fail without affecting anything else
- Every step is audited

The orchestrator holds no UI state (selected month, form drafts);
the presentation layer passes those in on each call.
"""

from datetime import date
from typing import Awaitable, Callable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from production_ledger.agents import FAILURE_MESSAGE, InsightAgent
from production_ledger.audit import AuditLogger
from production_ledger.config import get_settings
from production_ledger.ledger import (
    ALL_PERIODS,
    LedgerError,
    LedgerStore,
    available_periods,
    current_period_key,
    filter_by_period,
    summarize,
)
from production_ledger.ledger.confirmation import Confirm, ConfirmIntent
from production_ledger.models.ledger import (
    EntryDraft,
    Payment,
    PaymentDraft,
    ProductionEntry,
    SummaryStats,
)
from production_ledger.services.export import (
    BACKUP_MIME_TYPE,
    CSV_MIME_TYPE,
    ImportResult,
    backup_filename,
    backup_to_json,
    build_backup,
    entries_to_csv,
    payments_csv_filename,
    payments_to_csv,
    production_csv_filename,
    restore_from_file,
)
from production_ledger.services.storage import LocalFileStorage


InsightRequester = Callable[[Sequence[ProductionEntry]], Awaitable[str]]

INSIGHTS_NOT_CONFIGURED_MESSAGE = "AI insights are not configured."


class DashboardView(BaseModel):
    """Everything the dashboard shows for one selected period."""
    model_config = ConfigDict(frozen=True)

    period_key: str
    available_periods: list[str]
    entries: list[ProductionEntry]
    payments: list[Payment]
    stats: SummaryStats


class ExportFile(BaseModel):
    """A generated file, ready to be offered as a download."""
    model_config = ConfigDict(frozen=True)

    filename: str
    content: str
    mime_type: str


class LedgerFlow:
    """
    Orchestrates every ledger operation the dashboard offers.

    Deletion and restore take a confirm callable. The flow asks it
    exactly once and only proceeds on True.
    """

    def __init__(
        self,
        store: LedgerStore,
        insight_requester: Optional[InsightRequester] = None,
        audit_logger: Optional[AuditLogger] = None,
        insight_entry_limit: Optional[int] = None,
        backup_version: Optional[str] = None,
    ):
        self._store = store
        self._insight_requester = insight_requester
        self._audit_logger = audit_logger

        if insight_entry_limit is None or backup_version is None:
            app_settings = get_settings().app
            insight_entry_limit = insight_entry_limit or app_settings.insight_entry_limit
            backup_version = backup_version or app_settings.backup_version
        self._insight_entry_limit = insight_entry_limit
        self._backup_version = backup_version

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def insights_available(self) -> bool:
        return self._insight_requester is not None

    # ------------------------------------------------------------------
    # Record
    # ------------------------------------------------------------------

    def record_production(self, draft: EntryDraft) -> ProductionEntry:
        """Add a production entry (weight and amount are derived)."""
        return self._store.add_entry(draft)

    def record_payment(self, draft: PaymentDraft) -> Payment:
        """
        Add a payment.

        Raises:
            PaymentRejectedError: amount is zero or negative
        """
        return self._store.add_payment(draft)

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------

    def remove_entry(self, entry_id: str, confirm: Confirm) -> bool:
        """
        Delete a production entry after confirmation.

        Returns True only if an entry was actually removed.
        """
        if not confirm(ConfirmIntent.DELETE_ENTRY):
            if self._audit_logger:
                self._audit_logger.log_delete_cancelled("entry", entry_id)
            return False
        return self._store.delete_entry(entry_id)

    def remove_payment(self, payment_id: str, confirm: Confirm) -> bool:
        """
        Delete a payment after confirmation.

        Returns True only if a payment was actually removed.
        """
        if not confirm(ConfirmIntent.DELETE_PAYMENT):
            if self._audit_logger:
                self._audit_logger.log_delete_cancelled("payment", payment_id)
            return False
        return self._store.delete_payment(payment_id)

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def dashboard(
        self,
        period_key: Optional[str] = None,
        today: Optional[date] = None,
    ) -> DashboardView:
        """
        Filter to one period and summarize it.

        Args:
            period_key: "all" or YYYY-MM; defaults to the current month
        """
        period_key = period_key or current_period_key(today)
        all_entries = self._store.entries
        all_payments = self._store.payments

        entries = filter_by_period(all_entries, period_key)
        payments = filter_by_period(all_payments, period_key)

        return DashboardView(
            period_key=period_key,
            available_periods=available_periods(all_entries, all_payments, today),
            entries=entries,
            payments=payments,
            stats=summarize(entries, payments),
        )

    # ------------------------------------------------------------------
    # Export / Import
    # ------------------------------------------------------------------

    def export_production_csv(self, today: Optional[date] = None) -> ExportFile:
        """All production entries as CSV (not filtered by period)."""
        entries = self._store.entries
        export = ExportFile(
            filename=production_csv_filename(today),
            content=entries_to_csv(entries),
            mime_type=CSV_MIME_TYPE,
        )
        if self._audit_logger:
            self._audit_logger.log_csv_exported("entry", export.filename, len(entries))
        return export

    def export_payments_csv(self, today: Optional[date] = None) -> ExportFile:
        """All payments as CSV (not filtered by period)."""
        payments = self._store.payments
        export = ExportFile(
            filename=payments_csv_filename(today),
            content=payments_to_csv(payments),
            mime_type=CSV_MIME_TYPE,
        )
        if self._audit_logger:
            self._audit_logger.log_csv_exported("payment", export.filename, len(payments))
        return export

    def export_backup(self, today: Optional[date] = None) -> ExportFile:
        """Full ledger backup as JSON."""
        document = build_backup(
            self._store.entries,
            self._store.payments,
            version=self._backup_version,
        )
        export = ExportFile(
            filename=backup_filename(today),
            content=backup_to_json(document),
            mime_type=BACKUP_MIME_TYPE,
        )
        if self._audit_logger:
            self._audit_logger.log_backup_exported(
                filename=export.filename,
                entry_count=len(document.entries),
                payment_count=len(document.payments),
            )
        return export

    def import_file(
        self,
        filename: str,
        content: Union[str, bytes],
        confirm: Confirm,
    ) -> ImportResult:
        """
        Restore the ledger from an uploaded backup.

        Raises:
            UnsupportedImportError: not a .json file
            BackupFormatError: unparseable or incomplete backup
        In both cases the ledger is unchanged.
        """
        try:
            result = restore_from_file(self._store, filename, content, confirm)
        except LedgerError as e:
            if self._audit_logger:
                self._audit_logger.log_import_failed(filename, str(e))
            raise

        if self._audit_logger:
            if result.restored:
                self._audit_logger.log_backup_restored(
                    filename=filename,
                    entry_count=result.entry_count,
                    payment_count=result.payment_count,
                )
            else:
                self._audit_logger.log_restore_cancelled(filename)
        return result

    # ------------------------------------------------------------------
    # Insight
    # ------------------------------------------------------------------

    def insight_entries(self, period_key: str = ALL_PERIODS) -> list[ProductionEntry]:
        """The most recent entries of a period, as sent for analysis."""
        entries = filter_by_period(self._store.entries, period_key)
        return entries[: self._insight_entry_limit]

    async def request_insight(self, period_key: str = ALL_PERIODS) -> str:
        """
        Ask the external analyst about a period.

        Never raises and never changes the ledger.
        """
        if self._insight_requester is None:
            return INSIGHTS_NOT_CONFIGURED_MESSAGE

        entries = self.insight_entries(period_key)
        if self._audit_logger:
            self._audit_logger.log_insight_requested(period_key, len(entries))

        try:
            return await self._insight_requester(entries)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_external_service_error("insight", str(e))
            return FAILURE_MESSAGE


def create_app_components(
    data_dir: Optional[str] = None,
    use_insights: bool = True,
) -> LedgerFlow:
    """
    Factory function to create all application components.

    Args:
        data_dir: Where the ledger files live (default from settings)
        use_insights: Whether to set up the Gemini insight agent.
                      Without a GEMINI_API_KEY the ledger still works
                      and insight requests get a fixed message.

    Returns:
        A LedgerFlow over a loaded LedgerStore
    """
    audit_logger = AuditLogger()
    store = LedgerStore(
        storage=LocalFileStorage(data_dir),
        audit_logger=audit_logger,
    ).load()

    insight_requester = None
    if use_insights:
        try:
            insight_requester = InsightAgent()
        except Exception as e:
            # Gemini not configured - continue without it
            audit_logger.log_external_service_error("gemini", f"Insights disabled: {e}")

    return LedgerFlow(
        store=store,
        insight_requester=insight_requester,
        audit_logger=audit_logger,
    )
