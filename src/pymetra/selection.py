"""Selected-trip tracking and line-filtered views of the store."""

from __future__ import annotations

import asyncio
import logging

from pymetra.models.line import MetraLine
from pymetra.models.position import VehiclePosition, filter_positions
from pymetra.models.shape import Coordinate, filter_shapes
from pymetra.models.station import Station, filter_stations
from pymetra.models.stop_time import StopTime
from pymetra.scheduler import RefreshScheduler
from pymetra.state.events import SnapshotUpdate
from pymetra.state.store import SnapshotStore

_logger = logging.getLogger(__name__)


class SelectionState:
    """At most one trip under detail view, plus the current line filter.

    While a trip is selected the scheduler refreshes its stop times on every
    tick. The ``visible_*`` views are recomputed from the store on each call;
    nothing filtered is cached, so they never need invalidating.
    """

    def __init__(
        self,
        store: SnapshotStore,
        scheduler: RefreshScheduler,
        *,
        line: MetraLine = MetraLine.ALL,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._trip_id: str | None = None
        self._line = line
        scheduler.bind_selection(lambda: self._trip_id)

    @property
    def selected_trip_id(self) -> str | None:
        return self._trip_id

    @property
    def stop_times(self) -> tuple[StopTime, ...]:
        """Latest stop times of the selected trip, by ascending ``stop_sequence``."""
        return self._store.stop_times_for(self._trip_id)

    def select(self, trip_id: str) -> asyncio.Task[SnapshotUpdate | None]:
        """Select *trip_id* and fetch its stop times right away."""
        if not trip_id:
            raise ValueError("trip_id must be non-empty")
        self._trip_id = trip_id
        _logger.debug("Selected trip=%s", trip_id)
        return self._scheduler.refresh_stop_times(trip_id)

    def clear(self) -> None:
        """Drop the selection; later ticks stop refreshing stop times."""
        if self._trip_id is not None:
            _logger.debug("Cleared trip=%s", self._trip_id)
        self._trip_id = None

    @property
    def line(self) -> MetraLine:
        return self._line

    def set_line(self, line: MetraLine | str) -> None:
        resolved = line if isinstance(line, MetraLine) else MetraLine.parse(line)
        if resolved is None:
            raise ValueError(f"unknown line: {line!r}")
        self._line = resolved

    def visible_positions(self) -> list[VehiclePosition]:
        return filter_positions(self._store.positions, self._line)

    def visible_stations(self) -> list[Station]:
        return filter_stations(self._store.stations, self._line)

    def visible_shapes(self) -> dict[str, tuple[Coordinate, ...]]:
        return filter_shapes(self._store.shapes, self._line)

    def selected_position(self) -> VehiclePosition | None:
        """The live position of the train running the selected trip, if any."""
        if self._trip_id is None:
            return None
        for position in self._store.positions:
            if position.trip_id == self._trip_id:
                return position
        return None
