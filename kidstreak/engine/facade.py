"""Engine facade consumed by the task services and the HTTP layer."""

import asyncio
import logging
from collections import defaultdict
from typing import Any

from kidstreak.core.config import ResetPolicy, Settings
from kidstreak.core.errors import NotFoundError
from kidstreak.core.logging import log_kid_event, span
from kidstreak.domain.streak import CompletionResult, ResetResult, StreakResult
from kidstreak.domain.task import Task
from kidstreak.engine.daily_cycle import DailyCycleController
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.engine.streak_tracker import StreakTracker
from kidstreak.stores.protocols import CycleStore


logger = logging.getLogger(__name__)


class Engine:
    """Composes the date authority, daily reset and streak tracking.

    Constructed once with its store and passed explicitly to whoever needs it.
    Resets are serialised with one lock and task writes with one lock per kid,
    which gives a single writer per kid inside this process. Separate processes
    sharing a database still race with last-write-wins semantics.
    """

    def __init__(
        self,
        *,
        store: CycleStore,
        dates: DateAuthority,
        reset_policy: ResetPolicy = ResetPolicy.CLEAR_DONE_AND_DEACTIVATE,
    ) -> None:
        self.store = store
        self.dates = dates
        self.cycle = DailyCycleController(store=store, dates=dates, policy=reset_policy)
        self.streaks = StreakTracker(tasks=store, meta=store)
        self._reset_lock = asyncio.Lock()
        self._kid_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @classmethod
    def from_settings(cls, *, store: CycleStore, settings: Settings) -> "Engine":
        """Build an engine for the configured timezone and reset policy."""
        return cls(
            store=store,
            dates=DateAuthority(settings.timezone),
            reset_policy=settings.reset_policy,
        )

    async def check_and_reset(self) -> ResetResult:
        """Run the daily reset if it has not run yet today."""
        async with self._reset_lock:
            return await self.cycle.check_and_reset()

    async def record_task_completion(self, kid_id: str, task_id: str, new_is_done: bool) -> CompletionResult:
        """Write a task's done flag and update the kid's streak on a false to true transition.

        The flag and the streak are committed together, so a failure leaves the
        task as it was and a retry evaluates the transition again.

        Raises:
            NotFoundError: If the task does not exist or belongs to another kid
            ClockUnavailableError: If today cannot be determined
            PersistenceUnavailableError: If a store read or write fails
        """
        with span("engine.record_task_completion"):
            async with self._kid_locks[kid_id]:
                task = await self.store.get_task(task_id)
                if task.kid_id != kid_id:
                    msg = f"Task {task_id} does not belong to kid {kid_id}"
                    raise NotFoundError(msg)

                _, streak = await self._commit(task, {"is_done": new_is_done})

                logger.info(
                    "Recorded task completion",
                    extra={"kid_id": kid_id, "task_id": task_id, "is_done": new_is_done, "streak_updated": streak.updated},
                )
                return CompletionResult(task_id=task_id, kid_id=kid_id, is_done=new_is_done, streak=streak)

    async def update_task(self, task_id: str, changes: dict[str, Any]) -> Task:
        """Apply a partial task update under the owning kid's lock as one commit.

        ``changes`` maps task field names to new values. A done flag going from
        false to true is evaluated for the kid's streak in the same commit.

        Raises:
            NotFoundError: If the task does not exist
            ClockUnavailableError: If the done flag changes and today cannot be determined
            PersistenceUnavailableError: If a store read or write fails
        """
        with span("engine.update_task"):
            owner = (await self.store.get_task(task_id)).kid_id
            async with self._kid_locks[owner]:
                task = await self.store.get_task(task_id)
                updated, _ = await self._commit(task, changes)
                return updated

    async def _commit(self, task: Task, changes: dict[str, Any]) -> tuple[Task, StreakResult]:
        streak = StreakResult(updated=False)
        if changes.get("is_done") and not task.is_done:
            pending = task.model_copy(update=changes)
            streak = await self.streaks.evaluate_completion(task.kid_id, self.dates.today(), pending=pending)

        updated = await self.store.commit_task_update(
            task.id,
            changes=changes,
            streak=streak.streak if streak.updated else None,
        )

        if streak.updated and streak.streak is not None:
            log_kid_event(
                logger,
                "info",
                "streak_updated",
                kid_id=task.kid_id,
                today=streak.streak.last_perfect_date,
                streak_count=streak.streak.streak_count,
                longest_streak=streak.streak.longest_streak,
            )
        return updated, streak
