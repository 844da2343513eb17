"""Test configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from clinaudit.app.controller import AuditController
from clinaudit.app.state import AppState
from clinaudit.config.settings import Settings, get_settings
from clinaudit.db import base as db_base
from clinaudit.models.audit import AuditRecord, Note, ReAudit
from clinaudit.store.local import LocalAuditStore
from clinaudit.store.memory import InMemoryAuditStore


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run each test in an empty directory with fresh settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("CLINAUDIT_STORE__BACKEND", "CLINAUDIT_STORE__ENDPOINT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(environment="test", debug=True)


@pytest.fixture
def sample_records() -> list[AuditRecord]:
    """Three audits across two years."""
    return [
        AuditRecord(
            id="1",
            year="2024",
            name="Hand hygiene compliance",
            start_period="2024-03",
            reaudits=[ReAudit(period="2024-09")],
            notes=[Note(author="Dr. A", text="Baseline done", period="2024-04")],
        ),
        AuditRecord(
            id="2",
            year="2025",
            name="Sepsis bundle",
            start_period="2025-01",
        ),
        AuditRecord(
            id="3",
            year="2024",
            name="VTE prophylaxis",
            start_period="2024-07",
            notes=[
                Note(author="Nurse B", text="Data collected", period="2024-08"),
                Note(author="Dr. C", text="Presented", period="2024-10"),
            ],
        ),
    ]


@pytest.fixture
def memory_store(sample_records: list[AuditRecord]) -> InMemoryAuditStore:
    """In-memory store seeded with the sample records."""
    store = InMemoryAuditStore()
    store.save_all(sample_records)
    return store


@pytest.fixture
def local_store(tmp_path: Path) -> LocalAuditStore:
    """Local store in a temporary directory."""
    return LocalAuditStore(tmp_path / "data" / "local_storage.json")


@pytest.fixture
def controller(memory_store: InMemoryAuditStore) -> AuditController:
    """Controller over the seeded in-memory store, already refreshed."""
    controller = AuditController(memory_store, AppState())
    controller.refresh()
    return controller


@pytest.fixture
def sqlite_engine() -> Generator[None, None, None]:
    """Point the database layer at a shared in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_base.set_engine(engine)
    db_base.init_db()
    yield
    db_base.set_engine(None)
    engine.dispose()
