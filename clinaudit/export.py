"""JSON and CSV export of an audit list."""

import csv
import io
import json
from typing import Optional

from clinaudit.models.audit import AuditRecord, records_to_dicts
from clinaudit.models.period import month_to_label

CSV_COLUMNS = ["id", "year", "name", "start", "reaudits", "notes"]


def export_filename(filter_year: Optional[str], fmt: str = "json") -> str:
    """Download name for an export, e.g. ``clinical-audits-2024.json``."""
    return f"clinical-audits-{filter_year or 'all'}.{fmt}"


def to_json(records: list[AuditRecord]) -> str:
    """Render records in their stored representation, two-space indented."""
    return json.dumps(records_to_dicts(records), indent=2, ensure_ascii=False)


def to_csv(records: list[AuditRecord]) -> str:
    """Render records as CSV with one row per audit.

    Re-audits and notes are joined with ``; `` inside their cells.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    for record in records:
        writer.writerow(
            [
                record.id,
                record.year,
                record.name,
                month_to_label(record.start_period),
                "; ".join(month_to_label(r.period) for r in record.reaudits),
                "; ".join(
                    f"{n.author} ({month_to_label(n.period)}): {n.text}"
                    for n in record.notes
                ),
            ]
        )

    return buffer.getvalue()


def render(records: list[AuditRecord], fmt: str) -> str:
    """Render records in ``json`` or ``csv``."""
    if fmt == "json":
        return to_json(records)
    if fmt == "csv":
        return to_csv(records)
    raise ValueError(f"Unknown export format: {fmt}")
