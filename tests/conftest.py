from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from pymetra.config import MetraConfig
from pymetra.exceptions import MetraTransportError

TRIP_ID = "UP-W_UW31_V3_B"
OTHER_TRIP_ID = "BNSF_BN1234_V2_A"

POSITIONS: list[dict[str, Any]] = [
    {
        "id": "415",
        "vehicle": {
            "trip": {
                "trip_id": TRIP_ID,
                "route_id": "UP-W",
                "start_time": "14:30:00",
                "start_date": "20240519",
            },
            "vehicle": {"id": "415", "label": "31"},
            "position": {"latitude": 41.8877, "longitude": -87.7905, "bearing": 270},
            "timestamp": {"low": "2024-05-19T19:35:10.000Z", "high": 0, "unsigned": False},
        },
    },
    {
        "id": "208",
        "vehicle": {
            "trip": {"trip_id": OTHER_TRIP_ID, "route_id": "BNSF"},
            "vehicle": {"id": "208", "label": "1234"},
            "position": {"latitude": 41.8300, "longitude": -87.8700, "bearing": "95"},
            "timestamp": 1716147310,
        },
    },
    {
        "id": "611",
        "vehicle": {
            "trip": {"trip_id": "UP-W_UW33_V3_B", "route_id": "UP-W"},
            "position": {"latitude": 41.9100, "longitude": -88.0100, "bearing": 90},
        },
    },
]

STATIONS: list[dict[str, Any]] = [
    {
        "stop_id": "OTC",
        "stop_name": "Chicago OTC",
        "stop_desc": "",
        "stop_lat": 41.882724,
        "stop_lon": -87.640529,
        "zone_id": "A",
        "stop_url": "https://metrarail.com/stations/ogilvie",
        "wheelchair_boarding": 1,
    },
    {
        "stop_id": "OAKPARK",
        "stop_name": "Oak Park",
        "stop_lat": "41.886843",
        "stop_lon": "-87.793652",
        "zone_id": "B",
        "stop_url": "https://metrarail.com/maps-schedules/train-lines/UP-W/stations/oak-park",
    },
    {
        "stop_id": "BERWYN",
        "stop_name": "Berwyn",
        "stop_lat": 41.831,
        "stop_lon": -87.792,
        "stop_url": "https://metrarail.com/maps-schedules/train-lines/BNSF/stations/berwyn",
    },
]

SHAPES: list[dict[str, Any]] = [
    {"shape_id": "UP-W_IB_1", "shape_pt_lat": 41.90, "shape_pt_lon": -87.80, "shape_pt_sequence": 2},
    {"shape_id": "UP-W_IB_1", "shape_pt_lat": 41.91, "shape_pt_lon": -87.90, "shape_pt_sequence": 1},
    {"shape_id": "UP-W_IB_1", "shape_pt_lat": 41.88, "shape_pt_lon": -87.64, "shape_pt_sequence": 3},
    {"shape_id": "BNSF_OB_1", "shape_pt_lat": 41.87, "shape_pt_lon": -87.63, "shape_pt_sequence": 1},
]

STOP_TIMES: list[dict[str, Any]] = [
    {
        "trip_id": TRIP_ID,
        "arrival_time": "15:02:00",
        "departure_time": "15:02:00",
        "stop_id": "OTC",
        "stop_sequence": 3,
        "pickup_type": 1,
        "drop_off_type": 0,
        "center_boarding": 0,
        "south_boarding": 0,
        "bikes_allowed": 1,
        "notice": 0,
    },
    {
        "trip_id": TRIP_ID,
        "arrival_time": "14:30:00",
        "departure_time": "14:30:00",
        "stop_id": "ELBURN",
        "stop_sequence": 1,
        "pickup_type": 0,
        "drop_off_type": 1,
        "center_boarding": 0,
        "south_boarding": 0,
        "bikes_allowed": 1,
        "notice": 0,
    },
    {
        "trip_id": TRIP_ID,
        "arrival_time": "14:48:00",
        "departure_time": "14:49:00",
        "stop_id": "OAKPARK",
        "stop_sequence": 2,
        "pickup_type": 0,
        "drop_off_type": 0,
        "center_boarding": 1,
        "south_boarding": 0,
        "bikes_allowed": 1,
        "notice": 0,
    },
]


@dataclass
class FakeMetraBackend:
    """In-memory stand-in for the HTTP transport."""

    positions: list[dict[str, Any]] = field(default_factory=lambda: list(POSITIONS))
    stations: list[dict[str, Any]] = field(default_factory=lambda: list(STATIONS))
    shapes: list[dict[str, Any]] = field(default_factory=lambda: list(SHAPES))
    stop_times: dict[str, list[dict[str, Any]]] = field(default_factory=lambda: {TRIP_ID: list(STOP_TIMES)})
    fail_endpoints: set[str] = field(default_factory=set)
    calls: dict[str, int] = field(default_factory=dict)

    def _record_call(self, endpoint: str) -> None:
        self.calls[endpoint] = self.calls.get(endpoint, 0) + 1

    async def get_json(self, endpoint: str) -> Any:
        self._record_call(endpoint)
        await asyncio.sleep(0)

        if endpoint in self.fail_endpoints:
            raise MetraTransportError(f"HTTP 503 from {endpoint}", status_code=503, endpoint=endpoint)

        if endpoint == "/positions":
            return self.positions
        if endpoint == "/schedule/stops":
            return self.stations
        if endpoint == "/schedule/shapes":
            return self.shapes
        prefix = "/schedule/stop_times/"
        if endpoint.startswith(prefix):
            return self.stop_times.get(endpoint[len(prefix):], [])

        raise AssertionError(f"Unexpected endpoint in fake backend: {endpoint}")


@pytest.fixture
def config() -> MetraConfig:
    return MetraConfig(username="api-key", password="api-secret", refresh_interval=30.0)


@pytest.fixture
def backend() -> FakeMetraBackend:
    return FakeMetraBackend()
