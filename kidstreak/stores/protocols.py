"""Protocols for the stores the engine depends on.

The engine only talks to these narrow interfaces, so any storage technology
that satisfies them can back it.
"""

from typing import Any, Protocol

from kidstreak.domain.streak import StreakState
from kidstreak.domain.task import Task


class TaskStore(Protocol):
    """Reads and flag updates over task records."""

    async def list_tasks(self, kid_id: str | None = None) -> list[Task]:
        """Return tasks, optionally only those owned by one kid."""
        ...

    async def get_task(self, task_id: str) -> Task:
        """Return one task.

        Raises:
            NotFoundError: If the task does not exist
        """
        ...

    async def set_task_fields(
        self,
        task_id: str,
        *,
        is_done: bool | None = None,
        is_active: bool | None = None,
    ) -> Task:
        """Update the given flags and return the updated task."""
        ...

    async def reset_all_tasks(self, *, is_done: bool, is_active: bool | None) -> None:
        """Set flags on every task across all kids (is_active None leaves it alone)."""
        ...


class CycleMetaStore(Protocol):
    """Global reset marker and per-kid streak rows."""

    async def get_last_reset_date(self) -> str | None:
        """Return the last day a reset ran, or None if never."""
        ...

    async def set_last_reset_date(self, day: str) -> None:
        """Record the day a reset ran."""
        ...

    async def get_streak(self, kid_id: str) -> StreakState | None:
        """Return the kid's streak row, or None before the first perfect day."""
        ...

    async def put_streak(self, kid_id: str, streak: StreakState) -> None:
        """Insert or overwrite the kid's streak row."""
        ...

    async def list_streaks(self) -> list[StreakState]:
        """Return every kid's streak row."""
        ...


class CycleStore(TaskStore, CycleMetaStore, Protocol):
    """Store that commits multi-row writes (daily reset, task update with streak) atomically."""

    async def reset_cycle(self, *, today: str, is_done: bool, is_active: bool | None) -> None:
        """Reset every task and set the reset marker to ``today`` atomically."""
        ...

    async def commit_task_update(
        self,
        task_id: str,
        *,
        changes: dict[str, Any],
        streak: StreakState | None = None,
    ) -> Task:
        """Write task field ``changes`` and, if given, the kid's new streak as one commit.

        Raises:
            NotFoundError: If the task does not exist (nothing is written)
            PersistenceUnavailableError: If either write fails (nothing is written)
        """
        ...
