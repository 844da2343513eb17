"""Exceptions raised by ClinAudit.

Every failure is reported to the user as-is; nothing here is retried.
"""

from typing import Any, Optional


class ClinAuditError(Exception):
    """Base exception for all ClinAudit errors."""

    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.message
        self.details = details or {}
        super().__init__(self.message)


class StoreError(ClinAuditError):
    """Raised when the store cannot be read or written.

    Covers transport failures, non-2xx responses, unparseable bodies and
    ``{"ok": false}`` envelopes from the remote endpoint.
    """

    message = "Store request failed"


class ValidationError(ClinAuditError):
    """Raised when user input fails the input-time format checks."""

    message = "Validation failed"


class AuditNotFoundError(ClinAuditError):
    """Raised when an audit id or note index does not exist."""

    message = "Audit not found"

    def __init__(self, audit_id: str, message: Optional[str] = None) -> None:
        self.audit_id = audit_id
        super().__init__(
            message or f"Audit not found: {audit_id}",
            details={"audit_id": audit_id},
        )
