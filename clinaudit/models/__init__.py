"""Data models for ClinAudit."""

from clinaudit.models.audit import AuditRecord, Note, ReAudit, make_id
from clinaudit.models.period import current_month, is_month, is_year, month_to_label

__all__ = [
    "AuditRecord",
    "Note",
    "ReAudit",
    "make_id",
    "current_month",
    "is_month",
    "is_year",
    "month_to_label",
]
