"""
Structured Backup

A backup is one JSON document holding the COMPLETE ledger:

    {
      "entries": [...],
      "payments": [...],
      "version": "1.0",
      "exportDate": "2026-10-19T08:30:00.000Z"
    }

CRITICAL: Exporting and then importing a backup must give back exactly
the same entries and payments, ids included. Records are written with
their stored (camelCase) field names and read back through the same
models.

Import checks presence, not compatibility: the document must be a JSON
object with an "entries" array and a "payments" array. The version tag
is carried but not interpreted.
"""

import json
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from pydantic import ValidationError

from production_ledger.ledger.errors import BackupFormatError
from production_ledger.models.ledger import BackupDocument, Payment, ProductionEntry


BACKUP_VERSION = "1.0"
BACKUP_MIME_TYPE = "application/json"


def _iso_timestamp(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_backup(
    entries: Iterable[ProductionEntry],
    payments: Iterable[Payment],
    version: str = BACKUP_VERSION,
    exported_at: Optional[datetime] = None,
) -> BackupDocument:
    """Wrap the full collections in a backup document."""
    return BackupDocument(
        entries=list(entries),
        payments=list(payments),
        version=version,
        export_date=_iso_timestamp(exported_at or datetime.now(timezone.utc)),
    )


def backup_to_json(document: BackupDocument) -> str:
    """Serialize a backup document (2-space indented JSON)."""
    return json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False)


def parse_backup(text: str) -> BackupDocument:
    """
    Parse backup JSON.

    Raises:
        BackupFormatError: not JSON, not an object, or a container is
            missing. Records themselves are loaded leniently: missing
            fields get defaults and unknown fields are kept. Only a
            record that is not an object (or a value of the wrong kind,
            such as text where a number belongs) is refused.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"Error parsing file: {e.msg}")

    if not isinstance(data, dict):
        raise BackupFormatError("Backup must be a JSON object")

    for container in ("entries", "payments"):
        if not isinstance(data.get(container), list):
            raise BackupFormatError(f"Backup is missing the '{container}' list")

    try:
        return BackupDocument(
            entries=data["entries"],
            payments=data["payments"],
            version=str(data.get("version") or BACKUP_VERSION),
            export_date=str(data.get("exportDate") or ""),
        )
    except ValidationError as e:
        raise BackupFormatError(
            f"Backup contains {e.error_count()} unreadable field(s): {e.errors()[0]['msg']}"
        )


def backup_filename(on: Optional[date] = None) -> str:
    return f"production_full_backup_{(on or date.today()).isoformat()}.json"
