"""Tests for the audit controller."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from clinaudit.app.controller import AuditController
from clinaudit.app.state import AppState
from clinaudit.errors import AuditNotFoundError, StoreError, ValidationError
from clinaudit.models.audit import AuditRecord
from clinaudit.store.memory import InMemoryAuditStore


class TestRefresh:
    """Tests for loading state from the store."""

    def test_refresh_loads_items(self, memory_store: InMemoryAuditStore) -> None:
        """Test that refresh fills state from the store."""
        controller = AuditController(memory_store)

        items = controller.refresh()

        assert [r.id for r in items] == ["1", "2", "3"]
        assert controller.state.items is items

    def test_refresh_keeps_present_filter(
        self, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that a filter on a year still present is kept."""
        controller = AuditController(memory_store, AppState(filter_year="2025"))
        controller.refresh()

        assert controller.state.filter_year == "2025"

    def test_refresh_clears_stale_filter(
        self, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that a filter on a vanished year is cleared."""
        controller = AuditController(memory_store, AppState(filter_year="2019"))
        controller.refresh()

        assert controller.state.filter_year is None

    def test_refresh_failure_propagates(self) -> None:
        """Test that load errors surface to the caller."""
        store = MagicMock()
        store.load.side_effect = StoreError("Request failed (500)")

        with pytest.raises(StoreError):
            AuditController(store).refresh()

    def test_set_filter(self, controller: AuditController) -> None:
        """Test selecting and clearing the year filter."""
        controller.set_filter("2024")
        assert [r.id for r in controller.filtered()] == ["1", "3"]

        controller.set_filter(None)
        assert len(controller.filtered()) == 3


class TestAddAudit:
    """Tests for creating audits."""

    def test_add_audit(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that a new audit is appended and saved."""
        audit = controller.add_audit("  Falls risk  ", "2025", "2025-02", "2025-08")

        assert audit.name == "Falls risk"
        assert audit.start_period == "2025-02"
        assert [r.period for r in audit.reaudits] == ["2025-08"]
        assert controller.state.items[-1] is audit
        assert [r.id for r in memory_store.load()][-1] == audit.id

    def test_add_audit_fresh_ids(self, controller: AuditController) -> None:
        """Test that each audit gets a new id."""
        a = controller.add_audit("A", "2025")
        b = controller.add_audit("B", "2025")

        assert a.id != b.id
        assert len({r.id for r in controller.state.items}) == 5

    def test_add_audit_optional_fields(self, controller: AuditController) -> None:
        """Test that start and re-audit are optional."""
        audit = controller.add_audit("A", "2025")

        assert audit.start_period == ""
        assert audit.reaudits == []
        assert audit.notes == []

    @pytest.mark.parametrize(
        "name,year,start",
        [
            ("", "2025", ""),
            ("A", "", ""),
            ("A", "25", ""),
            ("A", "2025", "02/2025"),
        ],
    )
    def test_add_audit_invalid(
        self,
        controller: AuditController,
        memory_store: InMemoryAuditStore,
        name: str,
        year: str,
        start: str,
    ) -> None:
        """Test that bad input raises and saves nothing."""
        before = memory_store.dump()

        with pytest.raises(ValidationError):
            controller.add_audit(name, year, start)

        assert memory_store.dump() == before
        assert len(controller.state.items) == 3


class TestReAudits:
    """Tests for appending re-audits."""

    def test_add_reaudit_appends(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that a re-audit is appended after existing ones."""
        controller.add_reaudit("1", "2025-03")
        controller.add_reaudit("1", "2024-12")

        periods = [r.period for r in controller.state.find("1").reaudits]
        assert periods == ["2024-09", "2025-03", "2024-12"]
        assert [r.period for r in memory_store.load()[0].reaudits] == periods

    def test_add_reaudit_requires_month(self, controller: AuditController) -> None:
        """Test that an empty or malformed month is refused."""
        with pytest.raises(ValidationError, match="select a month"):
            controller.add_reaudit("1", "  ")
        with pytest.raises(ValidationError):
            controller.add_reaudit("1", "2025")

    def test_add_reaudit_unknown_id(self, controller: AuditController) -> None:
        """Test that an unknown id raises."""
        with pytest.raises(AuditNotFoundError):
            controller.add_reaudit("nope", "2025-03")


class TestNotes:
    """Tests for note operations."""

    def test_add_note_appends(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that notes are appended in order and saved."""
        controller.add_note("3", "Dr. D", "Action plan agreed", "2024-11")

        notes = controller.state.find("3").notes
        assert [n.text for n in notes] == [
            "Data collected",
            "Presented",
            "Action plan agreed",
        ]
        assert memory_store.load()[2].notes[-1].author == "Dr. D"

    def test_add_note_default_period(self, controller: AuditController) -> None:
        """Test that the period defaults to the current month."""
        note = controller.add_note("2", "A", "T", today=date(2026, 10, 19))

        assert note.period == "2026-10"

    def test_add_note_empty_period(self, controller: AuditController) -> None:
        """Test that an explicitly empty period is kept empty."""
        note = controller.add_note("2", "A", "T", "")

        assert note.period == ""

    def test_add_note_requires_author_and_text(
        self, controller: AuditController
    ) -> None:
        """Test required note fields."""
        with pytest.raises(ValidationError):
            controller.add_note("2", "", "text")
        with pytest.raises(ValidationError):
            controller.add_note("2", "author", " ")

    def test_edit_note_in_place(self, controller: AuditController) -> None:
        """Test that editing keeps the note's position."""
        controller.edit_note("3", 0, text="Data re-collected")

        notes = controller.state.find("3").notes
        assert [n.text for n in notes] == ["Data re-collected", "Presented"]
        assert notes[0].author == "Nurse B"
        assert notes[0].period == "2024-08"

    def test_edit_note_validation(self, controller: AuditController) -> None:
        """Test that edits keep notes valid."""
        with pytest.raises(ValidationError):
            controller.edit_note("3", 0, author="")
        with pytest.raises(ValidationError):
            controller.edit_note("3", 0, period="August")

    def test_edit_note_bad_index(self, controller: AuditController) -> None:
        """Test that an out-of-range index raises."""
        with pytest.raises(AuditNotFoundError):
            controller.edit_note("3", 5, text="x")
        with pytest.raises(AuditNotFoundError):
            controller.edit_note("3", -1, text="x")

    def test_delete_note(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that exactly one note is removed."""
        removed = controller.delete_note("3", 0)

        assert removed.text == "Data collected"
        assert [n.text for n in controller.state.find("3").notes] == ["Presented"]
        assert len(memory_store.load()[2].notes) == 1


class TestEditAudit:
    """Tests for editing scalar fields."""

    def test_edit_all_fields(self, controller: AuditController) -> None:
        """Test editing year, name and start."""
        audit = controller.edit_audit(
            "2", year="2026", name="Sepsis 6", start_period=""
        )

        assert (audit.year, audit.name, audit.start_period) == ("2026", "Sepsis 6", "")

    def test_edit_keeps_unset_fields(self, controller: AuditController) -> None:
        """Test that omitted fields are unchanged."""
        audit = controller.edit_audit("1", name="Hand hygiene (ICU)")

        assert audit.year == "2024"
        assert audit.start_period == "2024-03"
        assert len(audit.reaudits) == 1

    @pytest.mark.parametrize(
        "changes",
        [{"year": "24"}, {"name": "  "}, {"start_period": "2024/03"}],
    )
    def test_edit_invalid(
        self,
        controller: AuditController,
        memory_store: InMemoryAuditStore,
        changes: dict,
    ) -> None:
        """Test that invalid edits change nothing."""
        before = memory_store.dump()

        with pytest.raises(ValidationError):
            controller.edit_audit("1", **changes)

        assert memory_store.dump() == before
        assert controller.state.find("1").name == "Hand hygiene compliance"


class TestDeleteAudit:
    """Tests for removing audits."""

    def test_delete_exactly_one(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that only the matching record is removed."""
        controller.delete_audit("2")

        assert [r.id for r in controller.state.items] == ["1", "3"]
        assert [r.id for r in memory_store.load()] == ["1", "3"]

    def test_delete_unknown_id(
        self, controller: AuditController, memory_store: InMemoryAuditStore
    ) -> None:
        """Test that an unknown id raises and saves nothing."""
        store = MagicMock(wraps=memory_store)
        controller.store = store

        with pytest.raises(AuditNotFoundError):
            controller.delete_audit("nope")

        store.save_all.assert_not_called()


class TestSaveFailure:
    """Tests for store failures during mutations."""

    def test_save_error_propagates(self) -> None:
        """Test that save errors surface to the caller."""
        store = MagicMock()
        store.load.return_value = [AuditRecord(id="1", year="2024", name="A")]
        store.save_all.side_effect = StoreError("locked")
        controller = AuditController(store)
        controller.refresh()

        with pytest.raises(StoreError, match="locked"):
            controller.add_reaudit("1", "2025-01")
        store.save_all.assert_called_once()


class TestForeignData:
    """Tests for mutations on records written by another client."""

    @pytest.fixture
    def store(self) -> InMemoryAuditStore:
        """Store holding records in a shape this client never writes."""
        return InMemoryAuditStore(
            [
                {
                    "id": "1",
                    "year": 2024,
                    "name": "A",
                    "reaudits": [{"yyyymm": "2024-05", "by": "QI"}],
                    "owner": "ward 3",
                },
                {"id": "2", "year": "2025", "name": "B"},
            ]
        )

    def test_add_reaudit_keeps_other_data(self, store: InMemoryAuditStore) -> None:
        """Test that appending touches only the re-audit list."""
        controller = AuditController(store)
        controller.refresh()

        controller.add_reaudit("1", "2024-11")

        assert store.dump() == [
            {
                "id": "1",
                "year": 2024,
                "name": "A",
                "reaudits": [{"yyyymm": "2024-05", "by": "QI"}, {"yyyymm": "2024-11"}],
                "owner": "ward 3",
            },
            {"id": "2", "year": "2025", "name": "B"},
        ]

    def test_edit_audit_writes_only_changes(self, store: InMemoryAuditStore) -> None:
        """Test that an edit rewrites the edited field alone."""
        controller = AuditController(store)
        controller.refresh()

        controller.edit_audit("2", name="B2")

        assert store.dump()[0]["year"] == 2024
        assert store.dump()[1] == {"id": "2", "year": "2025", "name": "B2"}
