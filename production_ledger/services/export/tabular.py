"""
Tabular (CSV) Export

One-way export of the ledger collections to comma-separated text, in
store order (newest first). Column order is fixed.

Production fields are quoted only when they contain a comma, a quote or
a line break. The payment Note column is always wrapped in double
quotes, and every quote inside the note is doubled, so any standard CSV
parser reads the note back unchanged.
"""

import csv
import io
from datetime import date
from typing import Iterable, Optional

from production_ledger.models.ledger import Payment, ProductionEntry


PRODUCTION_HEADERS = [
    "Date",
    "Running Drum",
    "Open Stock (g)",
    "Production (cones)",
    "Closing Stock (g)",
    "Rate per Kg",
    "Weight (kg)",
    "Total Amount",
]

PAYMENT_HEADERS = ["Date", "Amount", "Note"]

CSV_MIME_TYPE = "text/csv;charset=utf-8"


def format_number(value) -> str:
    """
    Render a number the way the ledger has always written it.

    Whole floats drop the trailing ".0" (2175.0 -> "2175");
    everything else uses the shortest round-tripping form.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _write_rows(header: list[str], rows: Iterable[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def entries_to_csv(entries: Iterable[ProductionEntry]) -> str:
    """Production log as CSV text."""
    return _write_rows(
        PRODUCTION_HEADERS,
        (
            [
                e.date,
                format_number(e.running_drum),
                format_number(e.open_stock_grams),
                format_number(e.production_cones),
                format_number(e.closing_stock_grams),
                format_number(e.rate_per_kg),
                format_number(e.production_weight),
                format_number(e.total_amount),
            ]
            for e in entries
        ),
    )


def quote_field(text: str) -> str:
    """Wrap in double quotes, doubling any quote inside."""
    return '"' + text.replace('"', '""') + '"'


def payments_to_csv(payments: Iterable[Payment]) -> str:
    """Payment history as CSV text. The Note column is always quoted."""
    lines = [",".join(PAYMENT_HEADERS)]
    lines.extend(
        f"{p.date},{format_number(p.amount)},{quote_field(p.note)}"
        for p in payments
    )
    return "\n".join(lines) + "\n"


def production_csv_filename(on: Optional[date] = None) -> str:
    return f"production_logs_{(on or date.today()).isoformat()}.csv"


def payments_csv_filename(on: Optional[date] = None) -> str:
    return f"payment_history_{(on or date.today()).isoformat()}.csv"
