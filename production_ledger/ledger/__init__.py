"""Ledger core: calculator, store, period filter and aggregator."""

from production_ledger.ledger.calculator import (
    calculate_consumption_kg,
    calculate_production_weight,
    calculate_total_amount,
)
from production_ledger.ledger.errors import (
    BackupFormatError,
    LedgerError,
    PaymentRejectedError,
    UnsupportedImportError,
)
from production_ledger.ledger.periods import (
    ALL_PERIODS,
    available_periods,
    current_period_key,
    filter_by_period,
    period_label,
)
from production_ledger.ledger.store import LedgerStore
from production_ledger.ledger.summary import summarize

__all__ = [
    # Calculator
    "calculate_consumption_kg",
    "calculate_production_weight",
    "calculate_total_amount",
    # Errors
    "BackupFormatError",
    "LedgerError",
    "PaymentRejectedError",
    "UnsupportedImportError",
    # Periods
    "ALL_PERIODS",
    "available_periods",
    "current_period_key",
    "filter_by_period",
    "period_label",
    # Store
    "LedgerStore",
    # Aggregation
    "summarize",
]
