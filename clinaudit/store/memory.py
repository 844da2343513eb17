"""In-memory audit store for development and tests."""

import copy
from typing import Any, Optional

import structlog

from clinaudit.models.audit import AuditRecord, records_from_dicts, records_to_dicts

logger = structlog.get_logger()


class InMemoryAuditStore:
    """
    In-memory store holding the serialized audit list.

    Data is lost on restart. Records are kept in their stored representation
    so callers never share mutable objects with the store.
    """

    def __init__(self, items: Optional[list[Any]] = None):
        """Initialize in-memory store.

        Args:
            items: Stored representation to start from
        """
        self._items: list[Any] = copy.deepcopy(items or [])

    def load(self) -> list[AuditRecord]:
        """Read every audit record."""
        return records_from_dicts(copy.deepcopy(self._items))

    def save_all(self, records: list[AuditRecord]) -> None:
        """Replace the stored collection."""
        self._items = records_to_dicts(copy.deepcopy(records))

        logger.debug("audits_saved_memory", count=len(self._items))

    def dump(self) -> list[Any]:
        """Return a copy of the stored representation."""
        return copy.deepcopy(self._items)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._items.clear()
