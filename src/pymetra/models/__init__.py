"""Data models for Metra API responses."""

from pymetra.models._base import MetraBaseModel
from pymetra.models.line import LINE_COLORS, MetraLine, line_color, matches_line
from pymetra.models.position import VehiclePosition, dedupe_positions, filter_positions
from pymetra.models.shape import ShapePoint, filter_shapes, group_shapes, shape_line
from pymetra.models.station import Station, filter_stations, infer_line_from_url
from pymetra.models.stop_time import StopTime, sort_stop_times

__all__ = [
    "LINE_COLORS",
    "MetraBaseModel",
    "MetraLine",
    "ShapePoint",
    "Station",
    "StopTime",
    "VehiclePosition",
    "dedupe_positions",
    "filter_positions",
    "filter_shapes",
    "filter_stations",
    "group_shapes",
    "infer_line_from_url",
    "line_color",
    "matches_line",
    "shape_line",
    "sort_stop_times",
]
