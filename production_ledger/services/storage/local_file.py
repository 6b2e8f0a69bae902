"""
Local File Storage Implementation

DESIGN DECISION: Each key is stored as its own JSON file in a data
directory (e.g. data/production_entries.json) because:
1. The user can open and read their ledger without the app
2. No database setup required
3. Copying the directory is a valid backup

TRADEOFFS:
- Whole-value rewrites only (fine: the ledger rewrites a whole
  collection after every mutation anyway)
- Single writer assumed; no file locking

Writes go to a temporary file in the same directory and are moved into
place with os.replace, so a crash mid-write leaves the old value intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from production_ledger.config import get_settings
from production_ledger.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


class LocalFileStorage(KeyValueStorageInterface):
    """
    File-per-key storage in a local directory.

    The directory is created on first write.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self._data_dir = Path(data_dir or get_settings().storage.data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Could not delete {path}: {e}")


class InMemoryStorage(KeyValueStorageInterface):
    """Dictionary-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None
