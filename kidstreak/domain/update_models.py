"""Update models for database operations."""

from pydantic import field_validator

from kidstreak.domain.create_models import check_hex_color
from kidstreak.domain.kid import CamelModel
from kidstreak.domain.task import IconType


class KidUpdate(CamelModel):
    """Partial update payload for a kid."""

    name: str | None = None
    color: str | None = None
    photo_data_url: str | None = None

    @field_validator("color")
    @classmethod
    def validate_hex_color(cls, v: str | None) -> str | None:
        """Validate color when provided."""
        return None if v is None else check_hex_color(v)


class TaskUpdate(CamelModel):
    """Partial update payload for a task."""

    title: str | None = None
    icon_type: IconType | None = None
    icon_value: str | None = None
    order: int | None = None
    is_done: bool | None = None
    is_active: bool | None = None
