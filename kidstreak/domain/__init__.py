"""Domain models and DTOs."""

from kidstreak.domain.create_models import KidCreate, TaskCreate
from kidstreak.domain.kid import Kid
from kidstreak.domain.streak import CompletionResult, ResetResult, StreakResult, StreakState
from kidstreak.domain.task import IconType, Task
from kidstreak.domain.update_models import KidUpdate, TaskUpdate


__all__ = [
    "CompletionResult",
    "IconType",
    "Kid",
    "KidCreate",
    "KidUpdate",
    "ResetResult",
    "StreakResult",
    "StreakState",
    "Task",
    "TaskCreate",
    "TaskUpdate",
]
