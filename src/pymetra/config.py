"""Client configuration for pymetra."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pymetra._constants import (
    BASE_URL,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TIME_ZONE,
    USER_AGENT,
)
from pymetra.exceptions import MetraConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class MetraConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        API key issued by Metra's developer portal (Basic-auth user).
    password : str
        API secret (Basic-auth password).
    base_url : str
        API base URL, without trailing slash.
    refresh_interval : float
        Seconds between live position refreshes.
    request_timeout : float
        Total timeout for a single HTTP request, in seconds.
    time_zone : str
        IANA time zone the schedule times are expressed in.
    discard_stale_responses : bool
        Drop a response when a newer request for the same resource has
        already been applied. ``False`` gives last-writer-wins.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    username: str
    password: str
    base_url: str = BASE_URL
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    time_zone: str = DEFAULT_TIME_ZONE
    discard_stale_responses: bool = True
    user_agent: str = USER_AGENT

    def validate(self) -> None:
        """Raise :class:`MetraConfigError` if the configuration is unusable."""
        if not self.username or not self.password:
            raise MetraConfigError("username and password are required")
        if self.refresh_interval <= 0:
            raise MetraConfigError(f"refresh_interval must be positive, got {self.refresh_interval}")
        if self.request_timeout <= 0:
            raise MetraConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> MetraConfig:
        """Create configuration from environment variables.

        Reads ``METRA_API_USERNAME``, ``METRA_API_PASSWORD`` and the optional
        ``METRA_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MetraConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "METRA_API_USERNAME": "username",
            "METRA_API_PASSWORD": "password",
            "METRA_BASE_URL": "base_url",
            "METRA_TIME_ZONE": "time_zone",
        }
        config_kwargs: dict[str, Any] = {"username": "", "password": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("METRA_REFRESH_INTERVAL")
        if interval_env is not None and "refresh_interval" not in overrides:
            config_kwargs["refresh_interval"] = float(interval_env)

        timeout_env = env.get("METRA_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        if "discard_stale_responses" not in overrides:
            config_kwargs["discard_stale_responses"] = _env_bool(
                env.get("METRA_DISCARD_STALE_RESPONSES"),
                True,
            )

        config_kwargs.update(overrides)
        config_kwargs["base_url"] = str(config_kwargs.get("base_url", BASE_URL)).rstrip("/")

        return cls(**config_kwargs)
