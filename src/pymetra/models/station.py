"""Station (GTFS stop) model."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, field_validator

from pymetra.ingestion.normalize import safe_float, safe_int, safe_str
from pymetra.models._base import MetraBaseModel
from pymetra.models.line import MetraLine

# Station pages live at /maps-schedules/train-lines/<LINE>/stations/<slug>.
# Terminals shared by several lines use a shorter path without the line.
LINE_SEGMENT_INDEX = 2


def _path_segments(url: str) -> list[str]:
    parts = urlsplit(url)
    segments = [segment for segment in parts.path.split("/") if segment]
    # Scheme-less "host/path" strings put the host in the path.
    if not parts.scheme and not parts.netloc and segments and "." in segments[0]:
        segments = segments[1:]
    return segments


def infer_line_from_url(url: str | None) -> MetraLine | None:
    """Guess the owning line from a station URL, or ``None`` when it has none."""
    if not url:
        return None
    segments = _path_segments(url)
    if len(segments) <= LINE_SEGMENT_INDEX:
        return None
    line = MetraLine.parse(segments[LINE_SEGMENT_INDEX])
    if line is MetraLine.ALL:
        return None
    return line


class Station(MetraBaseModel):
    """A stop from ``/schedule/stops``.

    Parameters
    ----------
    stop_id : str
        Unique stop id.
    stop_name : str
        Display name.
    stop_desc : str or None
        Free-form description.
    latitude, longitude : float
        WGS84 degrees (``stop_lat``/``stop_lon`` on the wire).
    stop_url : str or None
        Station page; the owning line is inferred from it.
    """

    stop_id: str
    stop_name: str = ""
    stop_desc: str | None = None
    latitude: float = Field(validation_alias=AliasChoices("stop_lat", "latitude"))
    longitude: float = Field(validation_alias=AliasChoices("stop_lon", "longitude"))
    stop_url: str | None = None
    zone_id: str | None = None
    wheelchair_boarding: int | None = None

    @field_validator("stop_id", mode="before")
    @classmethod
    def _coerce_stop_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("stop_id must be non-empty")
        return text

    @field_validator("stop_desc", "stop_url", "zone_id", mode="before")
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

    @field_validator("wheelchair_boarding", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def line(self) -> MetraLine | None:
        return infer_line_from_url(self.stop_url)

    def on_line(self, line: MetraLine) -> bool:
        """Stations without an inferable line belong to every line."""
        if line is MetraLine.ALL:
            return True
        owner = self.line
        return owner is None or owner is line


def filter_stations(stations: Iterable[Station], line: MetraLine) -> list[Station]:
    return [station for station in stations if station.on_line(line)]
