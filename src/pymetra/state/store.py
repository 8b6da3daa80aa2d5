"""In-memory snapshot store.

Each resource is an independent single slot, replaced wholesale by the latest
accepted fetch. There is no partial merging and no multi-resource
transaction. All writes happen on the event loop thread, so readers never
observe a half-written slot.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from itertools import count
from typing import Any

from pydantic import BaseModel, ConfigDict

from pymetra.models.position import VehiclePosition
from pymetra.models.shape import Coordinate
from pymetra.models.station import Station
from pymetra.models.stop_time import StopTime
from pymetra.state.events import ResourceKind, SnapshotUpdate
from pymetra.state.policy import should_accept_update

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SlotSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any
    request_id: int
    applied_at: datetime
    key: str | None = None


class SnapshotStore:
    """Latest accepted snapshot per resource.

    Fetchers call :meth:`begin` before issuing a request and pass the
    returned id to :meth:`apply` with the result. With ``discard_stale``
    a result whose id is older than the last applied one is dropped.
    Without it, the last completed fetch always wins.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        discard_stale: bool = True,
    ) -> None:
        self._clock = clock
        self._discard_stale = discard_stale
        self._counters: dict[ResourceKind, count[int]] = {kind: count(1) for kind in ResourceKind}
        self._slots: dict[ResourceKind, SlotSnapshot] = {}

    @property
    def discard_stale(self) -> bool:
        return self._discard_stale

    def begin(self, resource: ResourceKind) -> int:
        """Issue the next request id for *resource*."""
        return next(self._counters[resource])

    def apply(
        self,
        resource: ResourceKind,
        request_id: int,
        value: Any,
        *,
        key: str | None = None,
        size: int = 0,
    ) -> SnapshotUpdate | None:
        """Replace the slot for *resource*; ``None`` when the result was rejected."""
        current = self._slots.get(resource)
        if not should_accept_update(
            last_applied_id=current.request_id if current is not None else None,
            incoming_id=request_id,
            discard_stale=self._discard_stale,
        ):
            _logger.debug(
                "Dropping stale %s response request_id=%d (applied=%d)",
                resource,
                request_id,
                current.request_id if current is not None else 0,
            )
            return None

        now = self._clock()
        self._slots[resource] = SlotSnapshot(value=value, request_id=request_id, applied_at=now, key=key)
        return SnapshotUpdate(resource=resource, request_id=request_id, key=key, size=size, applied_at=now)

    def get(self, resource: ResourceKind) -> SlotSnapshot | None:
        return self._slots.get(resource)

    def applied_at(self, resource: ResourceKind) -> datetime | None:
        slot = self._slots.get(resource)
        return slot.applied_at if slot is not None else None

    # ------------------------------------------------------------------
    # Typed readers
    # ------------------------------------------------------------------

    @property
    def positions(self) -> tuple[VehiclePosition, ...]:
        slot = self._slots.get(ResourceKind.POSITIONS)
        return slot.value if slot is not None else ()

    @property
    def stations(self) -> tuple[Station, ...]:
        slot = self._slots.get(ResourceKind.STATIONS)
        return slot.value if slot is not None else ()

    @property
    def shapes(self) -> Mapping[str, tuple[Coordinate, ...]]:
        slot = self._slots.get(ResourceKind.SHAPES)
        return slot.value if slot is not None else {}

    def stop_times_for(self, trip_id: str | None) -> tuple[StopTime, ...]:
        """Stored stop times, only if they belong to *trip_id*."""
        slot = self._slots.get(ResourceKind.STOP_TIMES)
        if slot is None or trip_id is None or slot.key != trip_id:
            return ()
        return slot.value
