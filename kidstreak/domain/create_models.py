"""Pydantic models for creating records in database."""

import re

from pydantic import Field, field_validator

from kidstreak.domain.kid import CamelModel
from kidstreak.domain.task import IconType


_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def check_hex_color(value: str) -> str:
    """Validate a #RRGGBB hex color string."""
    if not _HEX_COLOR_RE.match(value):
        msg = "Color must be a hex string like #FF6B6B"
        raise ValueError(msg)
    return value


class KidCreate(CamelModel):
    """Payload for creating a kid record."""

    name: str = Field(..., min_length=1, description="Display name")
    color: str = Field(..., description="Hex display color")
    photo_data_url: str = Field(default="", description="Base64 data URL of the kid's photo")

    @field_validator("color")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        """Validate color is a #RRGGBB hex string."""
        return check_hex_color(v)


class TaskCreate(CamelModel):
    """Payload for creating a task record."""

    kid_id: str = Field(..., description="Owning kid ID")
    title: str = Field(..., min_length=1, description="Task title")
    icon_type: IconType = Field(default=IconType.EMOJI, description="Icon kind")
    icon_value: str = Field(default="", description="Emoji or image data URL")
    order: int | None = Field(default=None, description="Rank; appended after the kid's last task when omitted")
    is_done: bool = Field(default=False, description="Initial done flag")
    is_active: bool = Field(default=True, description="Initial active flag")
