"""Snapshot, first-run seeding, and command dispatch for the storage API."""

import logging
from typing import Any

from pydantic import Field

from kidstreak.core import db_client
from kidstreak.core.errors import translate_db_errors
from kidstreak.core.logging import span
from kidstreak.core.schema import LAST_RESET_DATE_KEY
from kidstreak.domain.commands import (
    AddKid,
    AddTask,
    Command,
    DeleteKid,
    DeleteTask,
    ReorderTasks,
    ResetTasksIfNeeded,
    UpdateKid,
    UpdateTask,
)
from kidstreak.domain.create_models import KidCreate
from kidstreak.domain.kid import CamelModel, Kid
from kidstreak.domain.streak import StreakState
from kidstreak.domain.task import Task
from kidstreak.engine.facade import Engine
from kidstreak.services import kid_service, task_service


logger = logging.getLogger(__name__)

DEMO_KIDS: list[tuple[str, KidCreate]] = [
    ("kid1", KidCreate(name="Alice", color="#FF6B6B")),
    ("kid2", KidCreate(name="Bob", color="#4ECDC4")),
]

DEMO_TASKS: list[tuple[str, str]] = [
    ("Brush teeth", "\U0001faa5"),
    ("Make bed", "\U0001f6cf\ufe0f"),
    ("Eat breakfast", "\U0001f95e"),
    ("Pack backpack", "\U0001f392"),
    ("Walk dog", "\U0001f415"),
    ("Do homework", "\U0001f4da"),
]


class StorageSnapshot(CamelModel):
    """Everything the web client needs to render the board."""

    kids: list[Kid] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    last_reset_date: str | None = None
    streaks: list[StreakState] = Field(default_factory=list)


async def list_data(*, engine: Engine) -> StorageSnapshot:
    """Return kids, tasks, the last reset date, and all streaks."""
    with span("storage_service.list_data"):
        kids = await kid_service.list_kids()
        tasks = await task_service.list_tasks()
        return StorageSnapshot(
            kids=kids,
            tasks=tasks,
            last_reset_date=await engine.store.get_last_reset_date(),
            streaks=await engine.store.list_streaks(),
        )


async def seed_if_empty(*, engine: Engine) -> bool:
    """Insert two demo kids with six tasks each into an empty database.

    The reset marker is stamped with today so the fresh tasks are not
    immediately reset.

    Returns:
        True if demo data was inserted
    """
    with span("storage_service.seed_if_empty"):
        with translate_db_errors("seed_if_empty"):
            if await db_client.count_records(collection="kids") > 0:
                return False

        today = engine.dates.today()
        task_number = 1
        with translate_db_errors("seed_if_empty"):
            async with db_client.transaction() as conn:
                for kid_id, kid in DEMO_KIDS:
                    await conn.execute(*db_client.build_insert("kids", {"id": kid_id, **kid.model_dump(mode="json")}))
                    for order, (title, emoji) in enumerate(DEMO_TASKS, start=1):
                        task = Task(id=f"task{task_number}", kid_id=kid_id, title=title, icon_value=emoji, order=order)
                        await conn.execute(*db_client.build_insert("tasks", task.model_dump(mode="json")))
                        task_number += 1
                marker = {"key": LAST_RESET_DATE_KEY, "value": today}
                await conn.execute(*db_client.build_insert("meta", marker, upsert_key="key"))

        logger.info("Seeded demo data", extra={"kids": len(DEMO_KIDS), "tasks": task_number - 1})
        return True


async def dispatch(*, engine: Engine, command: Command) -> Any:  # noqa: PLR0911
    """Route one typed command to the service operation it names.

    Returns:
        The created/updated model, a reset result, or a success marker
    """
    with span(f"storage_service.dispatch.{command.action}"):
        match command:
            case AddKid(payload=payload):
                return await kid_service.add_kid(kid=payload)
            case UpdateKid(payload=payload):
                return await kid_service.update_kid(kid_id=payload.id, updates=payload.updates)
            case DeleteKid(payload=payload):
                await kid_service.delete_kid(kid_id=payload.id)
                return {"success": True}
            case AddTask(payload=payload):
                return await task_service.add_task(task=payload)
            case UpdateTask(payload=payload):
                return await task_service.update_task(engine=engine, task_id=payload.id, updates=payload.updates)
            case DeleteTask(payload=payload):
                await task_service.delete_task(task_id=payload.id)
                return {"success": True}
            case ReorderTasks(payload=payload):
                await task_service.reorder_tasks(kid_id=payload.kid_id, task_ids=payload.task_ids)
                return {"success": True}
            case ResetTasksIfNeeded():
                return await engine.check_and_reset()
