"""
Period Filter

Records are grouped by calendar month using the YYYY-MM prefix of their
ISO date. The literal "all" selects everything.

Filtering is a string-prefix match and never re-sorts: the ledger's
newest-first insertion order is preserved.
"""

from datetime import date
from typing import Iterable, Optional, Sequence, TypeVar

from production_ledger.models.ledger import Payment, ProductionEntry

ALL_PERIODS = "all"

_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

Record = TypeVar("Record", ProductionEntry, Payment)


def current_period_key(today: Optional[date] = None) -> str:
    """YYYY-MM key of the current calendar month."""
    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


def filter_by_period(records: Sequence[Record], period_key: str) -> list[Record]:
    """
    Select the records of one month, or all of them.

    Args:
        records: Entries or payments, in ledger order
        period_key: "all" or a YYYY-MM key

    Returns:
        Matching records, relative order unchanged
    """
    if period_key == ALL_PERIODS:
        return list(records)
    return [r for r in records if r.date.startswith(period_key)]


def available_periods(
    entries: Iterable[ProductionEntry],
    payments: Iterable[Payment],
    today: Optional[date] = None,
) -> list[str]:
    """
    Months that have any activity, plus the current month.

    Returns:
        Distinct YYYY-MM keys, most recent first
    """
    months = {current_period_key(today)}
    months.update(e.date[:7] for e in entries if e.date)
    months.update(p.date[:7] for p in payments if p.date)
    return sorted(months, reverse=True)


def period_label(period_key: str) -> str:
    """
    Human label for a period key.

    "all" -> "All Time", "2026-10" -> "Oct 2026". Anything that is
    not a YYYY-MM key is returned as-is.
    """
    if period_key == ALL_PERIODS:
        return "All Time"
    try:
        year, month = period_key.split("-")
        return f"{_MONTH_ABBREVIATIONS[int(month) - 1]} {int(year)}"
    except (ValueError, IndexError):
        return period_key
