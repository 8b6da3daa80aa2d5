"""High-level async client for the Metra GTFS API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import aiohttp
from pydantic import TypeAdapter, ValidationError

from pymetra._constants import POSITIONS_ENDPOINT, SHAPES_ENDPOINT, STOP_TIMES_ENDPOINT, STOPS_ENDPOINT
from pymetra._transport import HttpTransport, Transport
from pymetra.config import MetraConfig
from pymetra.exceptions import MetraDecodeError, MetraError
from pymetra.models.position import VehiclePosition
from pymetra.models.shape import ShapePoint
from pymetra.models.station import Station
from pymetra.models.stop_time import StopTime

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_POSITIONS = TypeAdapter(list[VehiclePosition])
_STATIONS = TypeAdapter(list[Station])
_SHAPES = TypeAdapter(list[ShapePoint])
_STOP_TIMES = TypeAdapter(list[StopTime])


def _decode(adapter: TypeAdapter[list[T]], body: Any, endpoint: str) -> list[T]:
    try:
        return adapter.validate_python(body)
    except ValidationError as exc:
        raise MetraDecodeError(
            f"Unexpected payload from {endpoint}: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc


class MetraClient:
    """Async client for the Metra GTFS API.

    Usage::

        async with MetraClient(config) as client:
            positions = await client.get_positions()
    """

    def __init__(
        self,
        config: MetraConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport

    @property
    def config(self) -> MetraConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MetraClient:
        if self._external_transport:
            return self
        self._config.validate()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MetraError("Client not initialized. Use 'async with MetraClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_positions(self) -> list[VehiclePosition]:
        """Live train positions (one snapshot)."""
        body = await self._require_transport().get_json(POSITIONS_ENDPOINT)
        return _decode(_POSITIONS, body, POSITIONS_ENDPOINT)

    async def get_stations(self) -> list[Station]:
        body = await self._require_transport().get_json(STOPS_ENDPOINT)
        return _decode(_STATIONS, body, STOPS_ENDPOINT)

    async def get_shapes(self) -> list[ShapePoint]:
        body = await self._require_transport().get_json(SHAPES_ENDPOINT)
        return _decode(_SHAPES, body, SHAPES_ENDPOINT)

    async def get_stop_times(self, trip_id: str) -> list[StopTime]:
        """Scheduled stop times for one trip, in the order the API sent them."""
        if not trip_id:
            raise ValueError("trip_id must be non-empty")
        endpoint = STOP_TIMES_ENDPOINT.format(trip_id=quote(trip_id, safe=""))
        body = await self._require_transport().get_json(endpoint)
        stop_times = _decode(_STOP_TIMES, body, endpoint)
        _logger.debug("Fetched %d stop times for trip=%s", len(stop_times), trip_id)
        return stop_times
