"""Typed mutation commands accepted by the storage API.

Each command is one variant of a closed union discriminated on ``action``;
the payload of every variant is validated before it reaches a service.
"""

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from kidstreak.domain.create_models import KidCreate, TaskCreate
from kidstreak.domain.kid import CamelModel
from kidstreak.domain.update_models import KidUpdate, TaskUpdate


class KidUpdatePayload(CamelModel):
    id: str
    updates: KidUpdate


class TaskUpdatePayload(CamelModel):
    id: str
    updates: TaskUpdate


class IdPayload(CamelModel):
    id: str


class ReorderPayload(CamelModel):
    kid_id: str
    task_ids: list[str]


class AddKid(CamelModel):
    action: Literal["addKid"] = "addKid"
    payload: KidCreate


class UpdateKid(CamelModel):
    action: Literal["updateKid"] = "updateKid"
    payload: KidUpdatePayload


class DeleteKid(CamelModel):
    action: Literal["deleteKid"] = "deleteKid"
    payload: IdPayload


class AddTask(CamelModel):
    action: Literal["addTask"] = "addTask"
    payload: TaskCreate


class UpdateTask(CamelModel):
    action: Literal["updateTask"] = "updateTask"
    payload: TaskUpdatePayload


class DeleteTask(CamelModel):
    action: Literal["deleteTask"] = "deleteTask"
    payload: IdPayload


class ReorderTasks(CamelModel):
    action: Literal["reorderTasks"] = "reorderTasks"
    payload: ReorderPayload


class ResetTasksIfNeeded(CamelModel):
    action: Literal["resetTasksIfNeeded"] = "resetTasksIfNeeded"
    payload: dict[str, object] | None = None


Command = Annotated[
    AddKid | UpdateKid | DeleteKid | AddTask | UpdateTask | DeleteTask | ReorderTasks | ResetTasksIfNeeded,
    Field(discriminator="action"),
]

command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(raw: object) -> Command:
    """Validate a raw request body into a typed command."""
    return command_adapter.validate_python(raw)
