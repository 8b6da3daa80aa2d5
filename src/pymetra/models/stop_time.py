"""Scheduled stop time model."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import field_validator

from pymetra._constants import DEFAULT_TIME_ZONE
from pymetra.ingestion.normalize import safe_int, safe_str
from pymetra.models._base import MetraBaseModel
from pymetra.timefmt import format_display, is_past, relative_label


class StopTime(MetraBaseModel):
    """Scheduled arrival/departure of one trip at one stop.

    ``arrival_time`` and ``departure_time`` are kept as the raw ``HH:MM:SS``
    strings (hours may exceed 23). ``stop_sequence`` orders the rows and
    identifies them. The integer flags are carried through unchanged.
    """

    trip_id: str
    arrival_time: str = ""
    departure_time: str = ""
    stop_id: str
    stop_sequence: int
    pickup_type: int | None = None
    drop_off_type: int | None = None
    center_boarding: int | None = None
    south_boarding: int | None = None
    bikes_allowed: int | None = None
    notice: int | None = None

    @field_validator("trip_id", "stop_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("id must be non-empty")
        return text

    @field_validator("arrival_time", "departure_time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("stop_sequence", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> int:
        parsed = safe_int(value)
        if parsed is None:
            raise ValueError(f"invalid stop_sequence: {value!r}")
        return parsed

    @field_validator(
        "pickup_type",
        "drop_off_type",
        "center_boarding",
        "south_boarding",
        "bikes_allowed",
        "notice",
        mode="before",
    )
    @classmethod
    def _coerce_flag(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def scheduled_time(self) -> str:
        """Departure time, falling back to arrival for terminal stops."""
        return self.departure_time or self.arrival_time

    def display_time(self) -> str:
        return format_display(self.scheduled_time)

    def relative_label(self, now: datetime | None = None, *, tz: str = DEFAULT_TIME_ZONE) -> str:
        return relative_label(self.scheduled_time, now, tz=tz)

    def is_past(self, now: datetime | None = None, *, tz: str = DEFAULT_TIME_ZONE) -> bool:
        return is_past(self.scheduled_time, now, tz=tz)


def sort_stop_times(stop_times: Iterable[StopTime]) -> tuple[StopTime, ...]:
    """Display order: ascending ``stop_sequence``, whatever order they arrived in."""
    return tuple(sorted(stop_times, key=lambda row: row.stop_sequence))
