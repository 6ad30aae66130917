"""Base model classes for session-keeper."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..utils.date_utils import utc_now


class SessionKeeperBaseModel(BaseModel):
    """Base model with common configuration for all session-keeper models."""

    model_config = ConfigDict(
        # Keep enum objects in memory, serialize values only when needed
        use_enum_values=False,
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid',
        # Session payloads are raw bytes; keep them lossless in JSON
        ser_json_bytes='base64',
        val_json_bytes='base64',
    )


class StatsModel(SessionKeeperBaseModel):
    """Base model for statistics responses."""

    generated_at: datetime = Field(
        default_factory=utc_now,
        description="When these statistics were generated"
    )
