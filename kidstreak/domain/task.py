"""Task domain models and enums."""

from enum import StrEnum

from pydantic import Field

from kidstreak.domain.kid import CamelModel


class IconType(StrEnum):
    """How a task icon is rendered."""

    EMOJI = "emoji"
    IMAGE = "image"


class Task(CamelModel):
    """Recurring daily task belonging to one kid."""

    id: str = Field(..., description="Unique task ID")
    kid_id: str = Field(..., description="ID of the kid who owns this task")
    title: str = Field(..., description="Task title (e.g., 'Brush teeth')")
    icon_type: IconType = Field(default=IconType.EMOJI, description="Icon kind")
    icon_value: str = Field(default="", description="Emoji character or image data URL")
    order: int = Field(default=1, description="Rank within the kid's task list")
    is_done: bool = Field(default=False, description="Completed today")
    is_active: bool = Field(default=True, description="Counts toward today's perfect day")
