"""Internal constants shared across the library."""

BASE_URL = "https://gtfsapi.metrarail.com/gtfs"
USER_AGENT = "pymetra/0.1"
DEFAULT_TIME_ZONE = "America/Chicago"

#: Seconds between live position refreshes.
DEFAULT_REFRESH_INTERVAL: float = 30.0
DEFAULT_REQUEST_TIMEOUT: float = 15.0

POSITIONS_ENDPOINT = "/positions"
STOPS_ENDPOINT = "/schedule/stops"
SHAPES_ENDPOINT = "/schedule/shapes"
STOP_TIMES_ENDPOINT = "/schedule/stop_times/{trip_id}"
