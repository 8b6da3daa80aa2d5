"""Resource kinds and snapshot update notifications."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(StrEnum):
    POSITIONS = "positions"
    STATIONS = "stations"
    SHAPES = "shapes"
    STOP_TIMES = "stop_times"


class SnapshotUpdate(BaseModel):
    """Published after a fetch result replaced a slot in the store."""

    model_config = ConfigDict(frozen=True)

    resource: ResourceKind
    request_id: int = Field(..., ge=1, description="Store-issued request number of the applied fetch")
    key: str | None = Field(default=None, description="Trip id for stop times")
    size: int = Field(default=0, ge=0, description="Number of records in the new snapshot")
    applied_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
