"""Base Pydantic models of the engine.

Parsed features, call contexts, step results and settings all derive from
the classes below. Engine models are frozen, since results and scenario
snapshots are handed to reporters and worker threads, and reject unknown
fields, so a mistyped field from an external parser fails loudly.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Immutable, strictly validated engine model."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Name and description used only for reporting."""

    name: str = Field(
        default='',
        title='Name',
        description='Short human-readable name of the element.',
    )

    description: str | None = Field(
        default=None,
        title='Description',
        description='Free text shown in reports and diagnostics.',
    )


class SettingsModel(BaseSettings):
    """Immutable settings model.

    Unknown values are ignored, so unrelated environment variables never
    break settings resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
