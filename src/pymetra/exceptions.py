"""Custom exception hierarchy for pymetra."""

from __future__ import annotations


class MetraError(Exception):
    """Base exception for all pymetra errors."""


class MetraConfigError(MetraError):
    """Invalid or missing configuration."""


class MetraTransportError(MetraError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MetraDecodeError(MetraError):
    """Response JSON did not match the expected record shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class InvalidTimeError(MetraError, ValueError):
    """A schedule time string is not a valid ``HH:MM:SS`` wall-clock time.

    The feed encodes after-midnight service as hours past 23 (``25:10:00``).
    Those values are rejected here; see
    :func:`pymetra.timefmt.service_datetime` for the rollover-aware reading.
    """

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid schedule time: {value!r}")
