"""Audit record model and its stored representation."""

import secrets
import time
from dataclasses import dataclass, field
from typing import Any


def make_id() -> str:
    """Generate a record id as ``<epoch-millis>_<random hex>``."""
    return f"{int(time.time() * 1000)}_{secrets.token_hex(6)}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _entries(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _write_back(model: Any, fields: dict[str, Any], attrs: dict[str, str]) -> Any:
    """Lay a model's edited fields over the object it was read from.

    A field that still reads back as it was loaded keeps its stored value,
    or stays absent if it was absent, so an unedited object is written out
    exactly as it came in. Objects built in code get ``fields`` as is.
    """
    if not model.loaded:
        return fields

    before = type(model).from_dict(model.raw)
    if not isinstance(model.raw, dict):
        return model.raw if model == before else fields

    data = dict(model.raw)
    for key, attr in attrs.items():
        if getattr(model, attr) != getattr(before, attr):
            data[key] = fields[key]
    return data


@dataclass
class ReAudit:
    """A follow-up review month appended to an audit's history."""

    period: str = ""

    # Stored value this entry was read from
    raw: Any = field(default=None, compare=False, repr=False)
    loaded: bool = field(default=False, compare=False, repr=False)

    def to_dict(self) -> Any:
        """Convert to stored representation."""
        return _write_back(self, {"yyyymm": self.period}, {"yyyymm": "period"})

    @classmethod
    def from_dict(cls, data: Any) -> "ReAudit":
        """Create from stored representation."""
        values = data if isinstance(data, dict) else {}
        return cls(period=_text(values.get("yyyymm")), raw=data, loaded=True)


@dataclass
class Note:
    """Free-text note left on an audit by a named author."""

    author: str = ""
    text: str = ""
    period: str = ""

    raw: Any = field(default=None, compare=False, repr=False)
    loaded: bool = field(default=False, compare=False, repr=False)

    def to_dict(self) -> Any:
        """Convert to stored representation."""
        return _write_back(
            self,
            {"user": self.author, "text": self.text, "yyyymm": self.period},
            {"user": "author", "text": "text", "yyyymm": "period"},
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Note":
        """Create from stored representation."""
        values = data if isinstance(data, dict) else {}
        return cls(
            author=_text(values.get("user")),
            text=_text(values.get("text")),
            period=_text(values.get("yyyymm")),
            raw=data,
            loaded=True,
        )


@dataclass
class AuditRecord:
    """
    A tracked clinical audit.

    Only ``id`` carries an invariant (unique within a collection). Format
    checks on year and periods happen when input is accepted, never on data
    read back from a store.

    A record read from a store remembers the stored object in ``raw``.
    Writing it back changes only the fields that were edited, so keys
    written by other clients, absent keys and odd values such as a numeric
    year all survive a load and save.
    """

    id: str = field(default_factory=make_id)
    year: str = ""
    name: str = ""
    start_period: str = ""
    reaudits: list[ReAudit] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)

    raw: Any = field(default=None, compare=False, repr=False)
    loaded: bool = field(default=False, compare=False, repr=False)

    def to_dict(self) -> Any:
        """Convert to stored representation."""
        return _write_back(
            self,
            {
                "id": self.id,
                "year": self.year,
                "name": self.name,
                "startYYYYMM": self.start_period,
                "reaudits": [r.to_dict() for r in self.reaudits],
                "notes": [n.to_dict() for n in self.notes],
            },
            {
                "id": "id",
                "year": "year",
                "name": "name",
                "startYYYYMM": "start_period",
                "reaudits": "reaudits",
                "notes": "notes",
            },
        )

    @classmethod
    def from_dict(cls, data: Any) -> "AuditRecord":
        """Create from stored representation."""
        values = data if isinstance(data, dict) else {}
        return cls(
            id=_text(values.get("id")),
            year=_text(values.get("year")),
            name=_text(values.get("name")),
            start_period=_text(values.get("startYYYYMM")),
            reaudits=[ReAudit.from_dict(r) for r in _entries(values.get("reaudits"))],
            notes=[Note.from_dict(n) for n in _entries(values.get("notes"))],
            raw=data,
            loaded=True,
        )


def records_to_dicts(records: list[AuditRecord]) -> list[Any]:
    """Serialize a collection for a store."""
    return [record.to_dict() for record in records]


def records_from_dicts(items: Any) -> list[AuditRecord]:
    """Deserialize a collection read from a store.

    Anything that is not a list reads as an empty collection. Entries that
    are not objects are kept so they are written back untouched.
    """
    if not isinstance(items, list):
        return []
    return [AuditRecord.from_dict(item) for item in items]
