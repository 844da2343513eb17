"""Local key-value file store.

A single JSON file plays the part of browser local storage: an object of
string keys to string values. The audit list lives JSON-encoded under one
key, so the file can hold other keys alongside it.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog

from clinaudit.errors import StoreError
from clinaudit.models.audit import AuditRecord, records_from_dicts, records_to_dicts

logger = structlog.get_logger()

DEFAULT_STORAGE_KEY = "audits_all_v2"


def safe_parse(text: Optional[str], fallback: Any) -> Any:
    """Parse JSON, returning ``fallback`` for missing, null or malformed input."""
    if text is None:
        return fallback
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return fallback
    return fallback if value is None else value


class LocalAuditStore:
    """Single-machine store backed by a JSON key-value file."""

    def __init__(self, path: Path, storage_key: str = DEFAULT_STORAGE_KEY):
        """Initialize local store.

        Args:
            path: Key-value file location
            storage_key: Key holding the JSON-encoded audit list
        """
        self.path = Path(path)
        self.storage_key = storage_key

    def _read_all(self) -> dict[str, Any]:
        """Read the whole key-value file."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e

        data = safe_parse(text, {})
        if not isinstance(data, dict):
            logger.warning("local_store_not_an_object", path=str(self.path))
            return {}
        return data

    def get_item(self, key: str) -> Optional[str]:
        """Return the raw string stored under ``key``."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a raw string under ``key``, keeping other keys."""
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _write_all(self, data: dict[str, Any]) -> None:
        """Write the file through a temporary file and rename."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

    def load(self) -> list[AuditRecord]:
        """Read every audit record; malformed data reads as empty."""
        items = safe_parse(self.get_item(self.storage_key), [])
        records = records_from_dicts(items)

        logger.debug("audits_loaded_local", path=str(self.path), count=len(records))
        return records

    def save_all(self, records: list[AuditRecord]) -> None:
        """Replace the stored collection."""
        self.set_item(
            self.storage_key,
            json.dumps(
                records_to_dicts(records), ensure_ascii=False, separators=(",", ":")
            ),
        )

        logger.debug("audits_saved_local", path=str(self.path), count=len(records))
