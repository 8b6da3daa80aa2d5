"""Tests for schedule time display and relative labels."""

from __future__ import annotations

from datetime import UTC, date, datetime, time

import pytest

from pymetra.exceptions import InvalidTimeError
from pymetra.timefmt import (
    INVALID_TIME,
    NOW_LABEL,
    format_display,
    is_past,
    minutes_until,
    parse_schedule_time,
    relative_label,
    service_datetime,
)

NOW = datetime(2024, 5, 19, 14, 5, 30)


class TestFormatDisplay:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("14:05:00", "2:05 PM"),
            ("00:00:00", "12:00 AM"),
            ("12:30:15", "12:30 PM"),
            ("09:07:59", "9:07 AM"),
            ("23:59:59", "11:59 PM"),
            ("7:45:00", "7:45 AM"),
        ],
    )
    def test_valid_times(self, raw: str, expected: str) -> None:
        assert format_display(raw) == expected

    @pytest.mark.parametrize("raw", ["24:00:00", "25:10:00", "47:59:59"])
    def test_past_midnight_hours_are_invalid(self, raw: str) -> None:
        assert format_display(raw) == INVALID_TIME

    @pytest.mark.parametrize("raw", ["", "14:05", "ab:cd:ef", "14:65:00", "14:05:61", "2:05 PM", "140500"])
    def test_malformed_strings_are_invalid(self, raw: str) -> None:
        assert format_display(raw) == INVALID_TIME

    def test_lenient_layout(self) -> None:
        assert parse_schedule_time(" 7:45:00 ") == time(7, 45)
        assert format_display("07:45:00") == format_display("7:45:00")
        assert format_display("7:5:00") == INVALID_TIME

    def test_parse_raises_typed_error(self) -> None:
        with pytest.raises(InvalidTimeError) as excinfo:
            parse_schedule_time("25:00:00")
        assert excinfo.value.value == "25:00:00"
        assert isinstance(excinfo.value, ValueError)


class TestMinutesUntil:
    def test_seconds_are_ignored(self) -> None:
        # 14:05:59 and now=14:05:30 share the same minute.
        assert minutes_until("14:05:59", NOW) == 0
        assert minutes_until("14:05:00", NOW) == 0

    def test_signed_difference(self) -> None:
        assert minutes_until("14:20:00", NOW) == 15
        assert minutes_until("13:05:00", NOW) == -60

    def test_time_of_day_only(self) -> None:
        # An early-morning time reads as hours ago, not as tomorrow.
        assert minutes_until("00:10:00", NOW) == -(14 * 60 - 5)

    def test_parse_failure_returns_none(self) -> None:
        assert minutes_until("25:00:00", NOW) is None
        assert minutes_until("garbage", NOW) is None

    def test_aware_now_in_explicit_zone(self) -> None:
        now = datetime(2024, 5, 19, 8, 0, tzinfo=UTC)
        assert minutes_until("08:30:00", now, tz=UTC) == 30

    def test_aware_now_is_read_on_the_chicago_clock(self) -> None:
        # 19:05 UTC is 14:05 CDT.
        now = datetime(2024, 5, 19, 19, 5, 30, tzinfo=UTC)
        assert minutes_until("14:05:00", now) == 0
        assert minutes_until("14:20:00", now) == 15
        assert relative_label("14:05:00", now) == NOW_LABEL


class TestRelativeLabel:
    def test_now(self) -> None:
        assert relative_label("14:05:00", NOW) == "Now"

    def test_future(self) -> None:
        assert relative_label("14:06:00", NOW) == "in 1 minute"
        assert relative_label("14:10:00", NOW) == "in 5 minutes"

    def test_past(self) -> None:
        assert relative_label("14:04:00", NOW) == "1 minute ago"
        assert relative_label("14:03:00", NOW) == "2 minutes ago"

    def test_invalid(self) -> None:
        assert relative_label("24:30:00", NOW) == INVALID_TIME


class TestIsPast:
    def test_earlier_same_day(self) -> None:
        assert is_past("09:00:00", NOW) is True

    def test_later_same_day(self) -> None:
        assert is_past("18:00:00", NOW) is False

    def test_compares_seconds(self) -> None:
        assert is_past("14:05:29", NOW) is True
        assert is_past("14:05:31", NOW) is False

    def test_parse_failure_fails_open(self) -> None:
        assert is_past("25:00:00", NOW) is False
        assert is_past("", NOW) is False

    def test_aware_now_in_explicit_zone(self) -> None:
        now = datetime(2024, 5, 19, 14, 5, 30, tzinfo=UTC)
        assert is_past("14:00:00", now, tz=UTC) is True
        assert is_past("15:00:00", now, tz=UTC) is False

    def test_uses_the_chicago_date_near_midnight(self) -> None:
        # 04:30 UTC on the 20th is still 23:30 on the 19th in Chicago.
        now = datetime(2024, 5, 20, 4, 30, tzinfo=UTC)
        assert is_past("23:00:00", now) is True
        assert is_past("23:45:00", now) is False


class TestServiceDatetime:
    def test_same_day(self) -> None:
        result = service_datetime("14:05:00", date(2024, 5, 19), tz=UTC)
        assert result == datetime(2024, 5, 19, 14, 5, tzinfo=UTC)

    def test_rolls_over_past_midnight(self) -> None:
        result = service_datetime("25:10:00", date(2024, 5, 19), tz=UTC)
        assert result == datetime(2024, 5, 20, 1, 10, tzinfo=UTC)

    def test_exactly_24(self) -> None:
        result = service_datetime("24:00:00", date(2024, 12, 31), tz=UTC)
        assert result == datetime(2025, 1, 1, 0, 0, tzinfo=UTC)

    def test_malformed_raises(self) -> None:
        with pytest.raises(InvalidTimeError):
            service_datetime("25:61:00", date(2024, 5, 19), tz=UTC)
