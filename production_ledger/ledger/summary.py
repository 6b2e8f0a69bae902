"""
Aggregator

Rolls a (filtered) set of entries and payments into SummaryStats.

No rounding happens here; each addend already carries its own rounding
from the calculator. math.fsum keeps the totals independent of the
order the records arrive in.
"""

import math
from typing import Iterable

from production_ledger.models.ledger import Payment, ProductionEntry, SummaryStats


def summarize(
    entries: Iterable[ProductionEntry],
    payments: Iterable[Payment],
) -> SummaryStats:
    """Aggregate entries and payments of one period."""
    entries = list(entries)
    payments = list(payments)

    total_value = math.fsum(e.total_amount for e in entries)
    total_paid = math.fsum(p.amount for p in payments)

    return SummaryStats(
        total_production=sum(e.production_cones for e in entries),
        total_weight=math.fsum(e.production_weight for e in entries),
        total_value=total_value,
        net_consumption=math.fsum(e.consumption_kg for e in entries),
        total_paid=total_paid,
        outstanding_balance=total_value - total_paid,
    )
