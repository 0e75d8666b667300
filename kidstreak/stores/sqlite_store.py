"""SQLite-backed task and cycle meta store."""

import logging
from typing import Any

from kidstreak.core import db_client
from kidstreak.core.errors import translate_db_errors
from kidstreak.core.schema import LAST_RESET_DATE_KEY
from kidstreak.domain.streak import StreakState
from kidstreak.domain.task import Task


logger = logging.getLogger(__name__)


def _task_from_row(row: dict[str, Any]) -> Task:
    return Task.model_validate(row)


def _to_row(data: dict[str, Any]) -> dict[str, Any]:
    """Store boolean flags as SQLite integers."""
    return {key: int(value) if isinstance(value, bool) else value for key, value in data.items()}


def _flag_updates(*, is_done: bool | None, is_active: bool | None) -> dict[str, int]:
    data: dict[str, bool] = {}
    if is_done is not None:
        data["is_done"] = is_done
    if is_active is not None:
        data["is_active"] = is_active
    return _to_row(data)


def _streak_row(streak: StreakState) -> dict[str, Any]:
    return streak.model_dump()


class SqliteStore:
    """Task store and cycle meta store over the shared SQLite connection."""

    async def list_tasks(self, kid_id: str | None = None) -> list[Task]:
        where = {"kid_id": kid_id} if kid_id is not None else None
        with translate_db_errors("list_tasks"):
            rows = await db_client.list_records(collection="tasks", where=where, sort="order")
        return [_task_from_row(row) for row in rows]

    async def get_task(self, task_id: str) -> Task:
        with translate_db_errors("get_task"):
            row = await db_client.get_record(collection="tasks", record_id=task_id)
        return _task_from_row(row)

    async def set_task_fields(
        self,
        task_id: str,
        *,
        is_done: bool | None = None,
        is_active: bool | None = None,
    ) -> Task:
        data = _flag_updates(is_done=is_done, is_active=is_active)
        if not data:
            return await self.get_task(task_id)
        with translate_db_errors("set_task_fields"):
            row = await db_client.update_record(collection="tasks", record_id=task_id, data=data)
        return _task_from_row(row)

    async def commit_task_update(
        self,
        task_id: str,
        *,
        changes: dict[str, Any],
        streak: StreakState | None = None,
    ) -> Task:
        if not changes and streak is None:
            return await self.get_task(task_id)
        with translate_db_errors("commit_task_update"):
            async with db_client.transaction() as conn:
                if changes:
                    cursor = await conn.execute(*db_client.build_update("tasks", task_id, _to_row(changes)))
                    if cursor.rowcount == 0:
                        msg = f"Record not found in tasks: {task_id}"
                        raise db_client.RecordNotFoundError(msg)
                if streak is not None:
                    await conn.execute(*db_client.build_insert("streaks", _streak_row(streak), upsert_key="kid_id"))
        return await self.get_task(task_id)

    async def reset_all_tasks(self, *, is_done: bool, is_active: bool | None) -> None:
        data = _flag_updates(is_done=is_done, is_active=is_active)
        set_clause = ", ".join(f"{column} = ?" for column in data)
        with translate_db_errors("reset_all_tasks"):
            async with db_client.transaction() as conn:
                await conn.execute(f"UPDATE tasks SET {set_clause}", list(data.values()))  # noqa: S608

    async def reset_cycle(self, *, today: str, is_done: bool, is_active: bool | None) -> None:
        data = _flag_updates(is_done=is_done, is_active=is_active)
        set_clause = ", ".join(f"{column} = ?" for column in data)
        marker = {"key": LAST_RESET_DATE_KEY, "value": today}
        with translate_db_errors("reset_cycle"):
            async with db_client.transaction() as conn:
                await conn.execute(f"UPDATE tasks SET {set_clause}", list(data.values()))  # noqa: S608
                await conn.execute(*db_client.build_insert("meta", marker, upsert_key="key"))
        logger.info("Committed daily reset", extra={"today": today, "is_active": is_active})

    async def get_last_reset_date(self) -> str | None:
        with translate_db_errors("get_last_reset_date"):
            row = await db_client.get_first_record(collection="meta", where={"key": LAST_RESET_DATE_KEY})
        return row["value"] if row else None

    async def set_last_reset_date(self, day: str) -> None:
        with translate_db_errors("set_last_reset_date"):
            await db_client.upsert_record(
                collection="meta",
                data={"key": LAST_RESET_DATE_KEY, "value": day},
                key="key",
            )

    async def get_streak(self, kid_id: str) -> StreakState | None:
        with translate_db_errors("get_streak"):
            row = await db_client.get_first_record(collection="streaks", where={"kid_id": kid_id})
        return StreakState.model_validate(row) if row else None

    async def list_streaks(self) -> list[StreakState]:
        with translate_db_errors("list_streaks"):
            rows = await db_client.list_records(collection="streaks", sort="kid_id")
        return [StreakState.model_validate(row) for row in rows]

    async def put_streak(self, kid_id: str, streak: StreakState) -> None:
        with translate_db_errors("put_streak"):
            await db_client.upsert_record(
                collection="streaks",
                data={**_streak_row(streak), "kid_id": kid_id},
                key="kid_id",
            )
