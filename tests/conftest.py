# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from taskboard.core.config import Settings
from taskboard.db.session import build_engine
from taskboard.db.store import SQLRecordStore
from taskboard.main import create_app
from taskboard.models import Project, User

from .fakes import FrozenClock

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file per test."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'taskboard.sqlite3'}",
        JSON_LOGS=False,
        SEED_SAMPLE_DATA=False,
    )


@pytest.fixture()
def store(settings: Settings) -> SQLRecordStore:
    store = SQLRecordStore(build_engine(settings.DATABASE_URL))
    store.create_tables()
    return store


@pytest.fixture()
def client(settings: Settings, clock: FrozenClock):
    app = create_app(settings, clock=clock, configure_logging=False)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def records(store: SQLRecordStore) -> SimpleNamespace:
    """
    Two users, one open and one closed project, written straight to the store.

    Tests that go through HTTP share the same SQLite file through ``settings``.
    """
    created = datetime(2024, 5, 1, 9, 0, 0)
    ana = store.insert(User(name="Ana", email="ana@email.com", created_at=created))
    bruno = store.insert(User(name="Bruno", email="bruno@email.com", created_at=created))
    open_project = store.insert(Project(
        title="Website",
        description="New site",
        deadline=date(2024, 7, 1),
        status="in_progress",
        created_by=ana.id,
        created_at=created,
    ))
    closed_project = store.insert(Project(
        title="Archive",
        description="Old work",
        status="completed",
        created_by=ana.id,
        created_at=created,
    ))
    return SimpleNamespace(ana=ana, bruno=bruno, open_project=open_project, closed_project=closed_project)

