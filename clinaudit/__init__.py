"""
ClinAudit - Clinical audit and re-audit tracker.

Records hospital clinical audits, their re-audit dates and notes, and keeps
them in a remote spreadsheet-backed store or a local file.
"""

from clinaudit.__version__ import __version__
from clinaudit.app.controller import AuditController
from clinaudit.app.state import AppState
from clinaudit.models.audit import AuditRecord, Note, ReAudit
from clinaudit.store import AuditStore, create_store

__all__ = [
    "__version__",
    "AuditRecord",
    "Note",
    "ReAudit",
    "AppState",
    "AuditController",
    "AuditStore",
    "create_store",
]
