"""Application state and the table projections built from it.

Projection helpers are pure: they never reorder or mutate the list they are
given.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from clinaudit.models.audit import AuditRecord


@dataclass
class AppState:
    """In-memory audit collection and the active year filter."""

    items: list[AuditRecord] = field(default_factory=list)
    filter_year: Optional[str] = None

    def find(self, audit_id: str) -> Optional[AuditRecord]:
        """Return the record with ``audit_id``, if any."""
        for item in self.items:
            if item.id == audit_id:
                return item
        return None

    def filtered(self) -> list[AuditRecord]:
        """Records visible under the active filter."""
        return filter_by_year(self.items, self.filter_year)

    def has_year(self, year: str) -> bool:
        """Check whether any record belongs to ``year``."""
        return any(item.year == str(year) for item in self.items)


def filter_by_year(items: list[AuditRecord], year: Optional[str]) -> list[AuditRecord]:
    """Records whose year matches, in their original order.

    An empty or missing year selects every record.
    """
    if not year:
        return list(items)
    return [item for item in items if item.year == str(year)]


def _year_number(year: str) -> int:
    try:
        return int(year or 0)
    except ValueError:
        return 0


def sort_for_display(items: list[AuditRecord]) -> list[AuditRecord]:
    """Newest year first, then newest start month."""
    by_start = sorted(items, key=lambda a: a.start_period or "", reverse=True)
    return sorted(by_start, key=lambda a: _year_number(a.year), reverse=True)


def year_list(items: list[AuditRecord], today: Optional[date] = None) -> list[str]:
    """Years to offer: the current year, its neighbours, and every record year.

    Sorted newest first.
    """
    now_year = (today or date.today()).year
    years = {str(now_year - 1), str(now_year), str(now_year + 1)}
    years.update(item.year for item in items if item.year)
    return sorted(years, key=_year_number, reverse=True)


def preferred_year(
    items: list[AuditRecord],
    filter_year: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """Year pre-selected when adding an audit."""
    years = year_list(items, today)
    now_year = str((today or date.today()).year)
    if filter_year and filter_year in years:
        return filter_year
    if now_year in years:
        return now_year
    return years[0] if years else ""


def compute_stats(items: list[AuditRecord]) -> dict[str, int]:
    """Totals of audits, re-audits and notes."""
    return {
        "total_audits": len(items),
        "total_reaudits": sum(len(item.reaudits) for item in items),
        "total_notes": sum(len(item.notes) for item in items),
    }


def compute_year_stats(items: list[AuditRecord]) -> list[dict[str, Any]]:
    """Per-year counts, newest year first. Records without a year are skipped."""
    by_year: dict[str, dict[str, Any]] = {}
    for item in items:
        if not item.year:
            continue
        row = by_year.setdefault(
            item.year, {"year": item.year, "audits": 0, "reaudits": 0, "notes": 0}
        )
        row["audits"] += 1
        row["reaudits"] += len(item.reaudits)
        row["notes"] += len(item.notes)
    return sorted(by_year.values(), key=lambda row: row["year"], reverse=True)


def year_cards(
    items: list[AuditRecord], today: Optional[date] = None
) -> list[dict[str, Any]]:
    """One summary per offered year, zero-filled where there are no audits."""
    stats = {row["year"]: row for row in compute_year_stats(items)}
    return [
        stats.get(year, {"year": year, "audits": 0, "reaudits": 0, "notes": 0})
        for year in year_list(items, today)
    ]
