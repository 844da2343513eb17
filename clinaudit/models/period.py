"""Year and year-month helpers.

Periods are kept as the strings the stores hold: ``YYYY`` for years and
``YYYY-MM`` for months.
"""

import re
from datetime import date
from typing import Optional

YEAR_PATTERN = re.compile(r"^\d{4}$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")


def is_year(value: str) -> bool:
    """Check that a value looks like ``YYYY``."""
    return bool(YEAR_PATTERN.match(value or ""))


def is_month(value: str) -> bool:
    """Check that a value looks like ``YYYY-MM``."""
    return bool(MONTH_PATTERN.match(value or ""))


def month_to_label(yyyymm: Optional[str]) -> str:
    """Render ``YYYY-MM`` as ``MM/YYYY``.

    Empty or malformed values give an empty label.
    """
    if not yyyymm:
        return ""
    parts = yyyymm.split("-")
    if len(parts) != 2:
        return ""
    return f"{parts[1]}/{parts[0]}"


def current_month(today: Optional[date] = None) -> str:
    """Return the current month as ``YYYY-MM``."""
    today = today or date.today()
    return f"{today.year}-{today.month:02d}"
