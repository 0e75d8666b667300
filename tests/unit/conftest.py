"""Pytest configuration and fixtures for unit tests."""

import pytest

from kidstreak.core.config import ResetPolicy
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.engine.facade import Engine
from tests.unit.mocks import FixedClock, InMemoryStore, make_task


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2024-06-01 12:00 UTC (07:00 in Chicago)."""
    return FixedClock()


@pytest.fixture
def dates(clock: FixedClock) -> DateAuthority:
    return DateAuthority("America/Chicago", clock=clock)


@pytest.fixture
def store() -> InMemoryStore:
    """Two kids with two active tasks each."""
    return InMemoryStore(
        [
            make_task("t1", "kid1", order=1),
            make_task("t2", "kid1", order=2),
            make_task("t3", "kid2", order=1),
            make_task("t4", "kid2", order=2),
        ]
    )


@pytest.fixture
def engine(store: InMemoryStore, dates: DateAuthority) -> Engine:
    return Engine(store=store, dates=dates, reset_policy=ResetPolicy.CLEAR_DONE_AND_DEACTIVATE)
