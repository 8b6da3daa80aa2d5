"""HTTP transport with Basic authentication."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Protocol

import aiohttp

from pymetra._redact import redact_for_log
from pymetra.config import MetraConfig
from pymetra.exceptions import MetraTransportError

_logger = logging.getLogger(__name__)


def basic_authorization(username: str, password: str) -> str:
    """``Authorization`` header value for HTTP Basic auth (RFC 7617, latin-1)."""
    token = base64.b64encode(f"{username}:{password}".encode("latin-1")).decode("ascii")
    return f"Basic {token}"


class Transport(Protocol):
    """Structural transport interface used by the client.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...


class HttpTransport:
    """GET-only JSON transport that signs every request with Basic auth."""

    def __init__(self, config: MetraConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._authorization = basic_authorization(config.username, config.password)
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str) -> Any:
        """GET ``base_url + endpoint`` and return the decoded JSON body."""
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
            "authorization": self._authorization,
        }
        url = f"{self._config.base_url}{endpoint}"

        _logger.debug("GET %s headers=%s", url, redact_for_log(headers))

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise MetraTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except MetraTransportError:
            raise
        except TimeoutError as exc:
            raise MetraTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise MetraTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MetraTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("Response from %s: %s", endpoint, redact_for_log(body, max_items=3))
        return body
