"""Tests for the once-per-day task reset."""

import pytest

from kidstreak.core.config import ResetPolicy
from kidstreak.core.errors import ClockUnavailableError, PersistenceUnavailableError
from kidstreak.domain.streak import StreakState
from kidstreak.engine.daily_cycle import DailyCycleController
from kidstreak.engine.date_authority import DateAuthority
from tests.unit.mocks import FixedClock, InMemoryStore, make_task


@pytest.fixture
def done_store() -> InMemoryStore:
    """Store where every task was finished yesterday."""
    store = InMemoryStore(
        [
            make_task("t1", "kid1", is_done=True),
            make_task("t2", "kid1", is_done=True, is_active=False),
            make_task("t3", "kid2", is_done=False),
        ]
    )
    store.last_reset_date = "2024-05-31"
    return store


@pytest.mark.unit
class TestCheckAndReset:
    """Tests for DailyCycleController.check_and_reset."""

    async def test_new_day_clears_done_and_deactivates(self, done_store: InMemoryStore, dates: DateAuthority) -> None:
        """Test the default policy clears completion and deactivates every task."""
        controller = DailyCycleController(store=done_store, dates=dates)

        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert result.today == "2024-06-01"
        assert done_store.last_reset_date == "2024-06-01"
        assert all(not task.is_done for task in done_store.tasks.values())
        assert all(not task.is_active for task in done_store.tasks.values())

    async def test_clear_done_policy_keeps_active_flags(self, done_store: InMemoryStore, dates: DateAuthority) -> None:
        """Test the clear-done policy leaves active flags untouched."""
        controller = DailyCycleController(store=done_store, dates=dates, policy=ResetPolicy.CLEAR_DONE)

        await controller.check_and_reset()

        assert all(not task.is_done for task in done_store.tasks.values())
        assert done_store.tasks["t1"].is_active is True
        assert done_store.tasks["t2"].is_active is False
        assert done_store.tasks["t3"].is_active is True

    async def test_second_call_same_day_is_noop(self, done_store: InMemoryStore, dates: DateAuthority) -> None:
        """Test a reset runs at most once per calendar day."""
        controller = DailyCycleController(store=done_store, dates=dates, policy=ResetPolicy.CLEAR_DONE)
        await controller.check_and_reset()
        await done_store.set_task_fields("t1", is_done=True)

        result = await controller.check_and_reset()

        assert result.reset_performed is False
        assert result.today == "2024-06-01"
        assert done_store.tasks["t1"].is_done is True

    async def test_reset_leaves_streaks_untouched(self, done_store: InMemoryStore, dates: DateAuthority) -> None:
        """Test the reset never reads or writes streak state."""
        done_store.streaks["kid1"] = StreakState(
            kid_id="kid1", streak_count=4, last_perfect_date="2024-05-31", longest_streak=6
        )
        controller = DailyCycleController(store=done_store, dates=dates)

        await controller.check_and_reset()

        assert done_store.streaks["kid1"].streak_count == 4
        assert not {"get_streak", "put_streak"} & set(done_store.calls)

    async def test_first_run_without_reset_marker_resets(self, dates: DateAuthority) -> None:
        """Test a store that never recorded a reset is reset."""
        store = InMemoryStore([make_task("t1", is_done=True)])
        controller = DailyCycleController(store=store, dates=dates)

        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert store.tasks["t1"].is_done is False
        assert store.last_reset_date == "2024-06-01"

    async def test_empty_store_still_records_reset_date(self, dates: DateAuthority) -> None:
        """Test the marker is written even when there are no tasks."""
        store = InMemoryStore()
        controller = DailyCycleController(store=store, dates=dates)

        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert store.last_reset_date == "2024-06-01"

    async def test_clock_going_backwards_resets_again(self, done_store: InMemoryStore, dates: DateAuthority) -> None:
        """Test a marker ahead of today is treated as a different day."""
        done_store.last_reset_date = "2024-06-05"
        controller = DailyCycleController(store=done_store, dates=dates)

        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert done_store.last_reset_date == "2024-06-01"

    async def test_malformed_marker_is_replaced_by_reset(
        self, done_store: InMemoryStore, dates: DateAuthority
    ) -> None:
        """Test a stored marker that is not a calendar day triggers a reset and is overwritten."""
        done_store.last_reset_date = "yesterday"
        controller = DailyCycleController(store=done_store, dates=dates)

        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert done_store.last_reset_date == "2024-06-01"
        assert done_store.tasks["t1"].is_done is False

    async def test_next_day_resets_again(
        self, done_store: InMemoryStore, dates: DateAuthority, clock: FixedClock
    ) -> None:
        """Test crossing local midnight enables the next reset."""
        controller = DailyCycleController(store=done_store, dates=dates, policy=ResetPolicy.CLEAR_DONE)
        await controller.check_and_reset()
        await done_store.set_task_fields("t3", is_done=True)

        clock.set(2024, 6, 2, 5, 30)
        result = await controller.check_and_reset()

        assert result.reset_performed is True
        assert result.today == "2024-06-02"
        assert done_store.tasks["t3"].is_done is False

    async def test_failed_marker_write_leaves_tasks_untouched(
        self, done_store: InMemoryStore, dates: DateAuthority
    ) -> None:
        """Test a persistence failure mid-reset commits nothing."""
        done_store.fail_on.add("set_last_reset_date")
        controller = DailyCycleController(store=done_store, dates=dates)

        with pytest.raises(PersistenceUnavailableError):
            await controller.check_and_reset()

        assert done_store.last_reset_date == "2024-05-31"
        assert done_store.tasks["t1"].is_done is True
        assert done_store.tasks["t1"].is_active is True

    async def test_unreadable_marker_raises_without_reset(
        self, done_store: InMemoryStore, dates: DateAuthority
    ) -> None:
        """Test a failing marker read aborts before any task is touched."""
        done_store.fail_on.add("get_last_reset_date")
        controller = DailyCycleController(store=done_store, dates=dates)

        with pytest.raises(PersistenceUnavailableError):
            await controller.check_and_reset()

        assert "reset_all_tasks" not in done_store.calls
        assert done_store.tasks["t1"].is_done is True

    async def test_clock_failure_aborts_reset(self, done_store: InMemoryStore) -> None:
        """Test an unavailable clock aborts without touching tasks."""

        def broken_clock():
            raise RuntimeError("clock offline")

        controller = DailyCycleController(store=done_store, dates=DateAuthority("UTC", clock=broken_clock))

        with pytest.raises(ClockUnavailableError):
            await controller.check_and_reset()

        assert done_store.tasks["t1"].is_done is True
        assert done_store.last_reset_date == "2024-05-31"
