"""Store interface shared by every audit store."""

from typing import Protocol

from clinaudit.models.audit import AuditRecord


class AuditStore(Protocol):
    """
    Durable copy of the audit collection.

    Stores know only two operations: read the whole list, and replace the
    whole list. There are no partial writes and no merging, so the last
    caller of ``save_all`` wins.
    """

    def load(self) -> list[AuditRecord]:
        """Read every audit record."""
        ...

    def save_all(self, records: list[AuditRecord]) -> None:
        """Replace the stored collection with ``records``."""
        ...
