"""Kid domain model."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Kid(CamelModel):
    """Kid data transfer object (identity and display only)."""

    id: str = Field(..., description="Unique kid ID")
    name: str = Field(..., description="Display name")
    color: str = Field(..., description="Hex display color (e.g., '#FF6B6B')")
    photo_data_url: str = Field(default="", description="Base64 data URL of the kid's photo")
