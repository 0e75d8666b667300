"""Pytest configuration and fixtures for integration tests."""

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

from kidstreak.core import db_client
from kidstreak.core.config import ResetPolicy, settings
from kidstreak.domain.create_models import KidCreate, TaskCreate
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.engine.facade import Engine
from kidstreak.services import kid_service, task_service
from kidstreak.stores.sqlite_store import SqliteStore
from tests.unit.mocks import FixedClock


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the database client at a fresh file for this test."""
    path = tmp_path / "kidstreak.db"
    monkeypatch.setattr(settings, "sqlite_db_path", str(path))
    yield path


@pytest.fixture
async def sqlite_db(db_path: Path) -> AsyncIterator[Path]:
    """Initialized schema on a temporary database, closed after the test."""
    await db_client.init_db()
    yield db_path
    await db_client.close_connection()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
async def engine(sqlite_db: Path, clock: FixedClock) -> Engine:
    return Engine(
        store=SqliteStore(),
        dates=DateAuthority("America/Chicago", clock=clock),
        reset_policy=ResetPolicy.CLEAR_DONE_AND_DEACTIVATE,
    )


@pytest.fixture
async def family(sqlite_db: Path) -> dict[str, list[str]]:
    """Two kids with two tasks each; maps kid ID to task IDs in order."""
    layout: dict[str, list[str]] = {}
    for kid_id, name in (("kid1", "Alice"), ("kid2", "Bob")):
        await kid_service.add_kid(kid=KidCreate(name=name, color="#FF6B6B"), kid_id=kid_id)
        layout[kid_id] = []
        for title in ("Brush teeth", "Make bed"):
            task = await task_service.add_task(task=TaskCreate(kid_id=kid_id, title=title, icon_value="⭐"))
            layout[kid_id].append(task.id)
    return layout
