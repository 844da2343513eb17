"""SQLAlchemy models for the reference endpoint."""

from sqlalchemy import JSON, Column, Integer

from clinaudit.db.base import Base


class AuditRowModel(Base):
    """One stored audit, kept as its JSON object in list order.

    Mirrors a spreadsheet row: the endpoint never looks inside the object,
    it only lists rows and replaces all of them. Rows may hold any JSON
    value, not only objects.
    """

    __tablename__ = "audit_rows"

    position = Column(Integer, primary_key=True, autoincrement=False)
    data = Column(JSON)
