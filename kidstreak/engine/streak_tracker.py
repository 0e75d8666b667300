"""Perfect-day detection and per-kid streak bookkeeping."""

import logging

from kidstreak.core.logging import span
from kidstreak.domain.streak import StreakResult, StreakState
from kidstreak.domain.task import Task
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.stores.protocols import CycleMetaStore, TaskStore


logger = logging.getLogger(__name__)


def next_streak(current: StreakState, today: str) -> StreakState | None:
    """Return the streak after a perfect day on ``today``, or None if already counted.

    Transitions are keyed by the gap from the last recorded perfect day:
    0 days keeps the streak, 1 day extends it, anything else restarts at 1.
    """
    if current.last_perfect_date == today:
        return None

    gap = DateAuthority.day_diff(current.last_perfect_date, today)
    streak_count = current.streak_count + 1 if gap == 1 else 1

    return StreakState(
        kid_id=current.kid_id,
        streak_count=streak_count,
        last_perfect_date=today,
        longest_streak=max(current.longest_streak, streak_count),
    )


class StreakTracker:
    """Works out a kid's streak when their day becomes perfect.

    Evaluation never writes; the caller commits the resulting streak together
    with the task change that triggered it.
    """

    def __init__(self, *, tasks: TaskStore, meta: CycleMetaStore) -> None:
        self._tasks = tasks
        self._meta = meta

    async def is_perfect_day(self, kid_id: str, *, pending: Task | None = None) -> bool:
        """Whether the kid has at least one active task and all active tasks are done.

        ``pending`` stands in for the stored copy of the same task, so a change
        can be judged before it is written.
        """
        tasks = await self._tasks.list_tasks(kid_id)
        if pending is not None:
            tasks = [pending if task.id == pending.id else task for task in tasks]
        active = [task for task in tasks if task.is_active]
        return bool(active) and all(task.is_done for task in active)

    async def evaluate_completion(self, kid_id: str, today: str, *, pending: Task | None = None) -> StreakResult:
        """Evaluate the kid's day after a task is marked done.

        Call only on a done flag transition from false to true.

        Args:
            kid_id: Kid whose task was completed
            today: Current calendar day from the DateAuthority
            pending: The completed task as it will be stored

        Returns:
            StreakResult with updated=True and the streak to store when it changes

        Raises:
            ValueError: If ``today`` is not a YYYY-MM-DD calendar day
            PersistenceUnavailableError: If a store read fails
        """
        if not DateAuthority.is_calendar_day(today):
            msg = f"Not a calendar day: {today!r}"
            raise ValueError(msg)

        with span("streak_tracker.evaluate_completion"):
            if not await self.is_perfect_day(kid_id, pending=pending):
                return StreakResult(updated=False)

            current = await self._meta.get_streak(kid_id) or StreakState.empty(kid_id)
            updated = next_streak(current, today)
            if updated is None:
                logger.debug("Perfect day already recorded", extra={"kid_id": kid_id, "today": today})
                return StreakResult(updated=False, streak=current)
            return StreakResult(updated=True, streak=updated)
