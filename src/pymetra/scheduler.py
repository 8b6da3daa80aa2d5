"""Periodic refresh of live data.

A :class:`RefreshScheduler` owns one repeating timer task. Each tick spawns
a positions fetch and, while a trip is selected, a stop-times fetch for it.
Fetches are independent tasks: a tick neither waits for nor cancels the
fetches of earlier ticks, so requests for the same resource can overlap.
Whether a late, older response may still overwrite a newer one is decided
by the :class:`~pymetra.state.store.SnapshotStore` policy.

Failures never escape a fetch task. They are logged and the previous
snapshot stays in place; the next tick is the retry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pymetra.client import MetraClient
from pymetra.exceptions import MetraConfigError, MetraError
from pymetra.models.position import dedupe_positions
from pymetra.models.shape import group_shapes
from pymetra.models.stop_time import sort_stop_times
from pymetra.state.events import ResourceKind, SnapshotUpdate
from pymetra.state.store import SnapshotStore

_logger = logging.getLogger(__name__)

UpdateListener = Callable[[SnapshotUpdate], None]


def _no_selection() -> str | None:
    return None


class RefreshScheduler:
    """Timer-driven refresher for positions and the selected trip's stop times.

    Usage::

        scheduler = RefreshScheduler(client, store, interval=30)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        client: MetraClient,
        store: SnapshotStore,
        *,
        interval: float | None = None,
        selected_trip: Callable[[], str | None] = _no_selection,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._store = store
        self._interval = interval if interval is not None else client.config.refresh_interval
        self._selected_trip = selected_trip
        self._sleep = sleep
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[SnapshotUpdate | None]] = set()
        self._listeners: list[UpdateListener] = []
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of ticks fired since construction."""
        return self._ticks

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def bind_selection(self, selected_trip: Callable[[], str | None]) -> None:
        """Set the callable consulted on each tick for the selected trip id."""
        self._selected_trip = selected_trip

    def add_listener(self, listener: UpdateListener) -> Callable[[], None]:
        """Register a callback for applied snapshots; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Timer lifecycle
    # ------------------------------------------------------------------

    def start(self, interval: float | None = None) -> None:
        """Start ticking every *interval* seconds; the first tick is immediate.

        A no-op if the timer is already running.
        """
        if self.is_running:
            return
        interval = self._interval if interval is None else interval
        if interval <= 0:
            raise MetraConfigError(f"refresh interval must be positive, got {interval}")
        self._interval = interval
        self._timer = asyncio.get_running_loop().create_task(self._run(), name="pymetra-refresh")
        _logger.debug("Refresh timer started interval=%ss", self._interval)

    def stop(self) -> None:
        """Cancel future ticks. Safe to call when not running.

        Fetches already in flight are left to complete and still write into
        the store.
        """
        timer = self._timer
        self._timer = None
        if timer is not None and not timer.done():
            timer.cancel()
            _logger.debug("Refresh timer stopped")

    async def _run(self) -> None:
        while True:
            self.tick()
            await self._sleep(self._interval)

    def tick(self) -> list[asyncio.Task[SnapshotUpdate | None]]:
        """Fire one refresh cycle and return the spawned fetch tasks."""
        self._ticks += 1
        tasks = [self.refresh_positions()]
        trip_id = self._selected_trip()
        if trip_id:
            tasks.append(self.refresh_stop_times(trip_id))
        return tasks

    # ------------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------------

    def refresh_positions(self) -> asyncio.Task[SnapshotUpdate | None]:
        return self._spawn(ResourceKind.POSITIONS, self._client.get_positions, dedupe_positions)

    def refresh_stop_times(self, trip_id: str) -> asyncio.Task[SnapshotUpdate | None]:
        return self._spawn(
            ResourceKind.STOP_TIMES,
            lambda: self._client.get_stop_times(trip_id),
            sort_stop_times,
            key=trip_id,
        )

    def refresh_static(self) -> list[asyncio.Task[SnapshotUpdate | None]]:
        """Load the station list and line shapes (done once at startup)."""
        return [
            self._spawn(ResourceKind.STATIONS, self._client.get_stations, tuple),
            self._spawn(ResourceKind.SHAPES, self._client.get_shapes, group_shapes),
        ]

    def _spawn(
        self,
        resource: ResourceKind,
        fetch: Callable[[], Awaitable[Sequence[Any]]],
        transform: Callable[[Sequence[Any]], Any],
        *,
        key: str | None = None,
    ) -> asyncio.Task[SnapshotUpdate | None]:
        request_id = self._store.begin(resource)
        task = asyncio.get_running_loop().create_task(
            self._fetch(resource, request_id, fetch, transform, key),
            name=f"pymetra-{resource}-{request_id}",
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _fetch(
        self,
        resource: ResourceKind,
        request_id: int,
        fetch: Callable[[], Awaitable[Sequence[Any]]],
        transform: Callable[[Sequence[Any]], Any],
        key: str | None,
    ) -> SnapshotUpdate | None:
        try:
            records = await fetch()
            value = transform(records)
        except MetraError as exc:
            _logger.warning("Refreshing %s failed (request_id=%d): %s", resource, request_id, exc)
            return None
        except Exception:
            _logger.exception("Unexpected error refreshing %s (request_id=%d)", resource, request_id)
            return None

        update = self._store.apply(resource, request_id, value, key=key, size=len(records))
        if update is not None:
            _logger.debug("Applied %s snapshot request_id=%d size=%d", resource, request_id, update.size)
            self._notify(update)
        return update

    def _notify(self, update: SnapshotUpdate) -> None:
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                _logger.debug("Snapshot listener failed for %s", update.resource, exc_info=True)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def drain(self) -> None:
        """Wait until every in-flight fetch has finished."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def aclose(self) -> None:
        """Stop the timer and cancel in-flight fetches."""
        timer = self._timer
        self.stop()
        pending = list(self._inflight)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if timer is not None:
            await asyncio.gather(timer, return_exceptions=True)
