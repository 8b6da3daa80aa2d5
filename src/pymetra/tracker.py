"""Ready-wired live tracker: client, store, scheduler and selection."""

from __future__ import annotations

from typing import Any

import aiohttp

from pymetra._transport import Transport
from pymetra.client import MetraClient
from pymetra.config import MetraConfig
from pymetra.scheduler import RefreshScheduler
from pymetra.selection import SelectionState
from pymetra.state.store import SnapshotStore


class MetraTracker:
    """Live tracker for presentation layers.

    Usage::

        async with MetraTracker(MetraConfig.from_env()) as tracker:
            tracker.scheduler.add_listener(redraw)
            tracker.selection.set_line("UP-W")
            tracker.selection.select(trip_id)

    Entering loads stations and shapes and starts the refresh timer. Leaving
    stops it, cancels in-flight fetches and closes the HTTP session.
    """

    def __init__(
        self,
        config: MetraConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        autostart: bool = True,
    ) -> None:
        self.config = config
        self.client = MetraClient(config, session=session, transport=transport)
        self.store = SnapshotStore(discard_stale=config.discard_stale_responses)
        self.scheduler = RefreshScheduler(self.client, self.store, interval=config.refresh_interval)
        self.selection = SelectionState(self.store, self.scheduler)
        self._autostart = autostart

    async def __aenter__(self) -> MetraTracker:
        await self.client.__aenter__()
        if self._autostart:
            self.scheduler.refresh_static()
            self.scheduler.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        try:
            await self.scheduler.aclose()
        finally:
            await self.client.__aexit__(*exc)
