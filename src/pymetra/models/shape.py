"""Shape (polyline) points."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pymetra.ingestion.normalize import safe_float, safe_int, safe_str
from pymetra.models._base import MetraBaseModel
from pymetra.models.line import MetraLine

Coordinate = tuple[float, float]

# Longest codes first so "UP-NW_IB_1" resolves to UP-NW, not UP-N.
_LINES_BY_CODE_LENGTH: tuple[MetraLine, ...] = tuple(
    sorted(MetraLine.routes(), key=lambda line: len(line.value), reverse=True)
)


class ShapePoint(MetraBaseModel):
    """One vertex of a line's polyline."""

    shape_id: str
    latitude: float = Field(validation_alias=AliasChoices("shape_pt_lat", "latitude"))
    longitude: float = Field(validation_alias=AliasChoices("shape_pt_lon", "longitude"))
    sequence: int = Field(validation_alias=AliasChoices("shape_pt_sequence", "sequence"))

    @field_validator("shape_id", mode="before")
    @classmethod
    def _coerce_shape_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("shape_id must be non-empty")
        return text

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"invalid coordinate: {value!r}")
        return parsed

    @field_validator("sequence", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> int:
        parsed = safe_int(value)
        if parsed is None:
            raise ValueError(f"invalid shape_pt_sequence: {value!r}")
        return parsed


def shape_line(shape_id: str) -> MetraLine | None:
    """Line a shape belongs to, by prefix match on the line code."""
    upper = shape_id.upper()
    for line in _LINES_BY_CODE_LENGTH:
        if upper.startswith(line.value.upper()):
            return line
    return None


def group_shapes(points: Iterable[ShapePoint]) -> dict[str, tuple[Coordinate, ...]]:
    """Group points by shape id into polylines ordered by ascending sequence."""
    grouped: defaultdict[str, list[ShapePoint]] = defaultdict(list)
    for point in points:
        grouped[point.shape_id].append(point)
    return {
        shape_id: tuple((p.latitude, p.longitude) for p in sorted(members, key=lambda p: p.sequence))
        for shape_id, members in grouped.items()
    }


def filter_shapes(shapes: Mapping[str, tuple[Coordinate, ...]], line: MetraLine) -> dict[str, tuple[Coordinate, ...]]:
    if line is MetraLine.ALL:
        return dict(shapes)
    return {shape_id: coords for shape_id, coords in shapes.items() if shape_line(shape_id) is line}
