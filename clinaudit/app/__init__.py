"""Application state, projections, and the audit controller."""

from clinaudit.app.controller import AuditController
from clinaudit.app.state import (
    AppState,
    compute_stats,
    compute_year_stats,
    filter_by_year,
    preferred_year,
    sort_for_display,
    year_cards,
    year_list,
)

__all__ = [
    "AppState",
    "AuditController",
    "compute_stats",
    "compute_year_stats",
    "filter_by_year",
    "preferred_year",
    "sort_for_display",
    "year_cards",
    "year_list",
]
