"""Whole-list storage for the reference endpoint."""

from typing import Any

import structlog

from clinaudit.db.base import session_scope
from clinaudit.db.models import AuditRowModel

logger = structlog.get_logger()


class AuditRowRepository:
    """List and replace the stored audit rows."""

    def list_items(self) -> list[Any]:
        """Return every stored object in list order."""
        with session_scope() as session:
            rows = session.query(AuditRowModel).order_by(AuditRowModel.position).all()
            return [row.data for row in rows]

    def replace_all(self, items: list[Any]) -> int:
        """Replace every row inside one transaction.

        Returns:
            Number of rows written
        """
        with session_scope() as session:
            session.query(AuditRowModel).delete()
            session.add_all(
                AuditRowModel(position=i, data=item) for i, item in enumerate(items)
            )

        logger.info("audit_rows_replaced", count=len(items))
        return len(items)
