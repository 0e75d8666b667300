"""Task service for CRUD operations.

Changes to a task's done flag are routed through the engine so that streaks
are evaluated on every completion.
"""

import logging
import uuid
from typing import Any

from kidstreak.core import db_client
from kidstreak.core.errors import translate_db_errors
from kidstreak.core.logging import span
from kidstreak.domain.create_models import TaskCreate
from kidstreak.domain.task import Task
from kidstreak.domain.update_models import TaskUpdate
from kidstreak.engine.facade import Engine


logger = logging.getLogger(__name__)


def new_task_id() -> str:
    """Generate a fresh task ID."""
    return f"task{uuid.uuid4().hex[:12]}"


def _to_row(data: dict[str, Any]) -> dict[str, Any]:
    """Convert boolean flags to SQLite integers."""
    return {key: int(value) if isinstance(value, bool) else value for key, value in data.items()}


async def _next_order(kid_id: str) -> int:
    tasks = await db_client.list_records(collection="tasks", where={"kid_id": kid_id}, sort="-order", per_page=1)
    return tasks[0]["order"] + 1 if tasks else 1


async def add_task(*, task: TaskCreate, task_id: str | None = None) -> Task:
    """Create a new task for a kid.

    Args:
        task: Validated task payload
        task_id: Explicit ID (seeding); generated when omitted

    Returns:
        Created task

    Raises:
        NotFoundError: If the owning kid does not exist
        PersistenceUnavailableError: If the database write fails
    """
    with span("task_service.add_task"), translate_db_errors("add_task"):
        await db_client.get_record(collection="kids", record_id=task.kid_id)

        data = task.model_dump(mode="json")
        if data["order"] is None:
            data["order"] = await _next_order(task.kid_id)

        record = await db_client.create_record(
            collection="tasks",
            data=_to_row({"id": task_id or new_task_id(), **data}),
        )
    logger.info("Created task '%s' for kid %s", task.title, task.kid_id)
    return Task.model_validate(record)


async def update_task(*, engine: Engine, task_id: str, updates: TaskUpdate) -> Task:
    """Apply a partial update to a task.

    All fields go through the engine in one commit under the owning kid's lock;
    a done flag turning true also updates the kid's streak.

    Raises:
        NotFoundError: If the task does not exist
        ClockUnavailableError: If the done flag changes and today cannot be determined
        PersistenceUnavailableError: If a database write fails (nothing is saved)
    """
    with span("task_service.update_task"):
        return await engine.update_task(task_id, updates.model_dump(mode="json", exclude_none=True))


async def delete_task(*, task_id: str) -> None:
    """Delete a task.

    Raises:
        NotFoundError: If the task does not exist
    """
    with span("task_service.delete_task"), translate_db_errors("delete_task"):
        await db_client.delete_record(collection="tasks", record_id=task_id)
    logger.info("Deleted task", extra={"task_id": task_id})


async def reorder_tasks(*, kid_id: str, task_ids: list[str]) -> None:
    """Rank a kid's tasks in the given order (position i gets order i + 1).

    IDs that do not belong to the kid are ignored.
    """
    with span("task_service.reorder_tasks"), translate_db_errors("reorder_tasks"):
        owned = {record["id"] for record in await db_client.list_records(collection="tasks", where={"kid_id": kid_id})}
        async with db_client.transaction() as conn:
            for index, task_id in enumerate(task_ids):
                if task_id not in owned:
                    continue
                await conn.execute('UPDATE tasks SET "order" = ? WHERE id = ? AND kid_id = ?', (index + 1, task_id, kid_id))
    logger.info("Reordered tasks", extra={"kid_id": kid_id, "count": len(task_ids)})


async def list_tasks(*, kid_id: str | None = None) -> list[Task]:
    """List tasks in rank order, optionally for one kid."""
    where = {"kid_id": kid_id} if kid_id else None
    with span("task_service.list_tasks"), translate_db_errors("list_tasks"):
        records = await db_client.list_records(collection="tasks", where=where, sort="order")
    return [Task.model_validate(record) for record in records]
