"""Audit controller: validated mutations followed by a full save."""

from datetime import date
from typing import Optional

import structlog

from clinaudit.app.state import AppState
from clinaudit.errors import AuditNotFoundError, ValidationError
from clinaudit.models.audit import AuditRecord, Note, ReAudit, make_id
from clinaudit.models.period import current_month, is_month, is_year
from clinaudit.store.base import AuditStore

logger = structlog.get_logger()


class AuditController:
    """
    Applies user actions to the application state.

    Every mutation validates its input first, changes ``state.items`` in
    place, then hands the whole collection to ``store.save_all``. Nothing is
    saved when validation fails or an id is unknown.
    """

    def __init__(self, store: AuditStore, state: Optional[AppState] = None):
        """Initialize controller.

        Args:
            store: Durable copy of the collection
            state: Application state to work on (a fresh one by default)
        """
        self.store = store
        self.state = state if state is not None else AppState()

    def refresh(self) -> list[AuditRecord]:
        """Reload the collection from the store.

        Clears the year filter when no record has that year any more.
        """
        self.state.items = self.store.load()

        if self.state.filter_year and not self.state.has_year(self.state.filter_year):
            self.state.filter_year = None

        logger.info(
            "audits_refreshed",
            count=len(self.state.items),
            filter_year=self.state.filter_year,
        )
        return self.state.items

    def set_filter(self, year: Optional[str]) -> None:
        """Select the year shown by ``filtered``; ``None`` shows all years."""
        self.state.filter_year = str(year) if year else None

    def filtered(self) -> list[AuditRecord]:
        """Records visible under the active filter."""
        return self.state.filtered()

    def _get(self, audit_id: str) -> AuditRecord:
        audit = self.state.find(audit_id)
        if audit is None:
            raise AuditNotFoundError(audit_id)
        return audit

    def _get_note_index(self, audit: AuditRecord, index: int) -> int:
        if not 0 <= index < len(audit.notes):
            raise AuditNotFoundError(
                audit.id, f"Note {index} not found on audit {audit.id}"
            )
        return index

    def _save(self) -> None:
        self.store.save_all(self.state.items)

    def add_audit(
        self,
        name: str,
        year: str,
        start_period: str = "",
        reaudit_period: str = "",
    ) -> AuditRecord:
        """Create an audit with a fresh id.

        Args:
            name: Clinical audit name
            year: Audit year
            start_period: Optional start month (``YYYY-MM``)
            reaudit_period: Optional first re-audit month (``YYYY-MM``)

        Returns:
            The new record
        """
        name = (name or "").strip()
        year = str(year or "").strip()
        start_period = (start_period or "").strip()
        reaudit_period = (reaudit_period or "").strip()

        if not name or not year:
            raise ValidationError("Please enter Clinical Audit Name and Year.")
        if not is_year(year):
            raise ValidationError("Year must be like YYYY.")
        for value in (start_period, reaudit_period):
            if value and not is_month(value):
                raise ValidationError("Months must be like YYYY-MM.")

        audit = AuditRecord(
            id=make_id(),
            year=year,
            name=name,
            start_period=start_period,
        )
        if reaudit_period:
            audit.reaudits.append(ReAudit(period=reaudit_period))

        self.state.items.append(audit)
        self._save()

        logger.info("audit_added", audit_id=audit.id, year=year)
        return audit

    def add_reaudit(self, audit_id: str, period: str) -> ReAudit:
        """Append a re-audit month to an audit."""
        period = (period or "").strip()
        if not period:
            raise ValidationError("Please select a month.")
        if not is_month(period):
            raise ValidationError("Re-audit month must be like YYYY-MM.")

        audit = self._get(audit_id)
        reaudit = ReAudit(period=period)
        audit.reaudits.append(reaudit)
        self._save()

        logger.info("reaudit_added", audit_id=audit_id, period=period)
        return reaudit

    def add_note(
        self,
        audit_id: str,
        author: str,
        text: str,
        period: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Note:
        """Append a note to an audit.

        The note period defaults to the current month.
        """
        author = (author or "").strip()
        text = (text or "").strip()
        if not text or not author:
            raise ValidationError("Please enter both note and your name.")

        if period is None:
            period = current_month(today)
        period = period.strip()
        if period and not is_month(period):
            raise ValidationError("Note month must be like YYYY-MM or empty.")

        audit = self._get(audit_id)
        note = Note(author=author, text=text, period=period)
        audit.notes.append(note)
        self._save()

        logger.info("note_added", audit_id=audit_id, note_count=len(audit.notes))
        return note

    def edit_note(
        self,
        audit_id: str,
        index: int,
        author: Optional[str] = None,
        text: Optional[str] = None,
        period: Optional[str] = None,
    ) -> Note:
        """Replace fields of one note; its position is unchanged."""
        audit = self._get(audit_id)
        note = audit.notes[self._get_note_index(audit, index)]

        new_author = note.author if author is None else author.strip()
        new_text = note.text if text is None else text.strip()
        new_period = note.period if period is None else period.strip()

        if not new_text or not new_author:
            raise ValidationError("Please enter both note and your name.")
        if new_period and not is_month(new_period):
            raise ValidationError("Note month must be like YYYY-MM or empty.")

        note.author = new_author
        note.text = new_text
        note.period = new_period
        self._save()

        logger.info("note_edited", audit_id=audit_id, index=index)
        return note

    def delete_note(self, audit_id: str, index: int) -> Note:
        """Remove exactly one note from an audit."""
        audit = self._get(audit_id)
        note = audit.notes.pop(self._get_note_index(audit, index))
        self._save()

        logger.info("note_deleted", audit_id=audit_id, index=index)
        return note

    def edit_audit(
        self,
        audit_id: str,
        year: Optional[str] = None,
        name: Optional[str] = None,
        start_period: Optional[str] = None,
    ) -> AuditRecord:
        """Edit the scalar fields of an audit.

        Fields left as ``None`` keep their current value. The resulting year
        must be ``YYYY``, the name non-empty, and the start month
        ``YYYY-MM`` or empty.
        """
        audit = self._get(audit_id)

        new_year = audit.year if year is None else str(year).strip()
        new_name = audit.name if name is None else name.strip()
        new_start = audit.start_period if start_period is None else start_period.strip()

        if not is_year(new_year) or not new_name:
            raise ValidationError("Please enter a valid Year (YYYY) and Name.")
        if new_start and not is_month(new_start):
            raise ValidationError("Start Month must be like YYYY-MM or empty.")

        audit.year = new_year
        audit.name = new_name
        audit.start_period = new_start
        self._save()

        logger.info("audit_edited", audit_id=audit_id)
        return audit

    def delete_audit(self, audit_id: str) -> None:
        """Remove exactly the record with ``audit_id``."""
        self._get(audit_id)
        self.state.items = [item for item in self.state.items if item.id != audit_id]
        self._save()

        logger.info("audit_deleted", audit_id=audit_id)
