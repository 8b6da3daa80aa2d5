from __future__ import annotations

import pytest

from pymetra._constants import BASE_URL, DEFAULT_REFRESH_INTERVAL
from pymetra.config import MetraConfig, _env_bool
from pymetra.exceptions import MetraConfigError

_ENV_KEYS = (
    "METRA_API_USERNAME",
    "METRA_API_PASSWORD",
    "METRA_BASE_URL",
    "METRA_TIME_ZONE",
    "METRA_REFRESH_INTERVAL",
    "METRA_REQUEST_TIMEOUT",
    "METRA_DISCARD_STALE_RESPONSES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_reads_credentials_and_tuning(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METRA_API_USERNAME", "key")
    monkeypatch.setenv("METRA_API_PASSWORD", "secret")
    monkeypatch.setenv("METRA_BASE_URL", "https://example.test/gtfs/")
    monkeypatch.setenv("METRA_REFRESH_INTERVAL", "10")
    monkeypatch.setenv("METRA_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("METRA_DISCARD_STALE_RESPONSES", "off")

    config = MetraConfig.from_env()

    assert config.username == "key"
    assert config.password == "secret"
    assert config.base_url == "https://example.test/gtfs"
    assert config.refresh_interval == 10.0
    assert config.request_timeout == 2.5
    assert config.discard_stale_responses is False
    config.validate()


def test_from_env_defaults() -> None:
    config = MetraConfig.from_env()

    assert config.username == ""
    assert config.base_url == BASE_URL
    assert config.refresh_interval == DEFAULT_REFRESH_INTERVAL
    assert config.time_zone == "America/Chicago"
    assert config.discard_stale_responses is True
    with pytest.raises(MetraConfigError, match="username and password"):
        config.validate()


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("METRA_API_USERNAME", "from-env")
    monkeypatch.setenv("METRA_REFRESH_INTERVAL", "10")
    monkeypatch.setenv("METRA_DISCARD_STALE_RESPONSES", "false")

    config = MetraConfig.from_env(username="explicit", refresh_interval=45.0, discard_stale_responses=True)

    assert config.username == "explicit"
    assert config.refresh_interval == 45.0
    assert config.discard_stale_responses is True


@pytest.mark.parametrize(
    ("field", "value"),
    [("refresh_interval", 0.0), ("refresh_interval", -5.0), ("request_timeout", 0.0)],
)
def test_validate_rejects_non_positive_durations(field: str, value: float) -> None:
    config = MetraConfig(username="u", password="p", **{field: value})
    with pytest.raises(MetraConfigError, match=field):
        config.validate()


def test_config_is_frozen() -> None:
    config = MetraConfig(username="u", password="p")
    with pytest.raises(AttributeError):
        config.username = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, True), ("1", True), ("YES", True), (" on ", True), ("0", False), ("no", False), ("maybe", True)],
)
def test_env_bool(raw: str | None, expected: bool) -> None:
    assert _env_bool(raw, True) is expected
