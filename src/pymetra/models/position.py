"""Live vehicle position model."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from pymetra.ingestion.normalize import safe_float, safe_int, safe_str
from pymetra.models._base import MetraBaseModel
from pymetra.models.line import MetraLine, matches_line


class VehiclePosition(MetraBaseModel):
    """One train in a positions snapshot.

    The feed sends GTFS-realtime entities::

        {"id": "...", "vehicle": {"trip": {...}, "vehicle": {...},
                                  "position": {...}, "timestamp": ...}}

    which are flattened here. Already-flat dicts are accepted as-is.

    Parameters
    ----------
    id : str
        Entity id of the train, unique within a snapshot.
    trip_id : str or None
        Trip the train is running.
    route_id : str or None
        Line code, e.g. ``"UP-W"``.
    latitude, longitude : float
        WGS84 degrees.
    bearing : int
        Heading in whole degrees, 0-359 clockwise from north.
    label : str or None
        Train number shown to riders.
    """

    id: str
    trip_id: str | None = None
    route_id: str | None = None
    latitude: float
    longitude: float
    bearing: int = 0
    label: str | None = None
    start_time: str | None = None
    start_date: str | None = None
    timestamp: datetime | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _flatten_entity(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        cleaned = MetraBaseModel._clean_dict(values)
        vehicle = cleaned.get("vehicle")
        if not isinstance(vehicle, dict):
            cleaned.setdefault("raw", dict(values))
            return cleaned

        flat: dict[str, Any] = {"id": cleaned.get("id")}
        trip = vehicle.get("trip")
        if isinstance(trip, dict):
            for key in ("trip_id", "route_id", "start_time", "start_date"):
                if key in trip:
                    flat[key] = trip[key]
        descriptor = vehicle.get("vehicle")
        if isinstance(descriptor, dict):
            if flat["id"] is None:
                flat["id"] = descriptor.get("id")
            if "label" in descriptor:
                flat["label"] = descriptor["label"]
        position = vehicle.get("position")
        if isinstance(position, dict):
            for key in ("latitude", "longitude", "bearing"):
                if key in position:
                    flat[key] = position[key]
        if "timestamp" in vehicle:
            flat["timestamp"] = vehicle["timestamp"]
        flat["raw"] = values.get("raw", dict(values))
        return {key: value for key, value in flat.items() if value is not None}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("vehicle position id must be non-empty")
        return text

    @field_validator("trip_id", "route_id", "label", "start_time", "start_date", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"invalid coordinate: {value!r}")
        return parsed

    @field_validator("bearing", mode="before")
    @classmethod
    def _coerce_bearing(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None else parsed % 360

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        # protobuf-to-JSON dumps of the feed wrap 64-bit ints as {"low": ..., "high": ...}
        if isinstance(value, dict):
            value = value.get("low")
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    @property
    def line(self) -> MetraLine | None:
        return MetraLine.parse(self.route_id)

    def on_line(self, line: MetraLine) -> bool:
        return matches_line(self.route_id, line)


def dedupe_positions(positions: Iterable[VehiclePosition]) -> tuple[VehiclePosition, ...]:
    """Keep one entry per vehicle id (the last one seen), in first-seen order."""
    by_id: dict[str, VehiclePosition] = {}
    for position in positions:
        by_id[position.id] = position
    return tuple(by_id.values())


def filter_positions(positions: Iterable[VehiclePosition], line: MetraLine) -> list[VehiclePosition]:
    """Positions whose route id equals *line*; everything for ``MetraLine.ALL``."""
    return [position for position in positions if position.on_line(line)]
