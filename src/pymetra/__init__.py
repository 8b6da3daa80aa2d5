"""pymetra - Async Python client and live tracker for the Metra GTFS API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymetra")
except PackageNotFoundError:
    __version__ = "0+local"
from pymetra.client import MetraClient
from pymetra.config import MetraConfig
from pymetra.exceptions import (
    InvalidTimeError,
    MetraConfigError,
    MetraDecodeError,
    MetraError,
    MetraTransportError,
)
from pymetra.models import (
    LINE_COLORS,
    MetraLine,
    ShapePoint,
    Station,
    StopTime,
    VehiclePosition,
    line_color,
)
from pymetra.scheduler import RefreshScheduler
from pymetra.selection import SelectionState
from pymetra.state.events import ResourceKind, SnapshotUpdate
from pymetra.state.store import SnapshotStore
from pymetra.timefmt import INVALID_TIME, format_display, is_past, minutes_until, relative_label, service_datetime
from pymetra.tracker import MetraTracker

__all__ = [
    "__version__",
    "INVALID_TIME",
    "InvalidTimeError",
    "LINE_COLORS",
    "MetraClient",
    "MetraConfig",
    "MetraConfigError",
    "MetraDecodeError",
    "MetraError",
    "MetraLine",
    "MetraTracker",
    "MetraTransportError",
    "RefreshScheduler",
    "ResourceKind",
    "SelectionState",
    "ShapePoint",
    "SnapshotStore",
    "SnapshotUpdate",
    "Station",
    "StopTime",
    "VehiclePosition",
    "format_display",
    "is_past",
    "line_color",
    "minutes_until",
    "relative_label",
    "service_datetime",
]
